"""Parse and compare iptables-save ruleset snapshots."""

from ruleset_engine.diff import TableOrder, compare_rulesets
from ruleset_engine.loader import RulesetLoadError, load_ruleset
from ruleset_engine.models import DiffEvent, DiffReport, DiffSummary, EventKind, RuleSet
from ruleset_engine.parser import parse_ruleset, parse_ruleset_text

__version__ = "0.1.0"

__all__ = [
    "DiffEvent",
    "DiffReport",
    "DiffSummary",
    "EventKind",
    "RuleSet",
    "RulesetLoadError",
    "TableOrder",
    "compare_rulesets",
    "load_ruleset",
    "parse_ruleset",
    "parse_ruleset_text",
]
