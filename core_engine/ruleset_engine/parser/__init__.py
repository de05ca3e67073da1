"""Ruleset dump parsing."""

from ruleset_engine.parser.ruleset_parser import parse_ruleset, parse_ruleset_text

__all__ = [
    "parse_ruleset",
    "parse_ruleset_text",
]
