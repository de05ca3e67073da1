"""Snapshot loading from files and standard input."""

from ruleset_engine.loader.snapshot_loader import (
    STDIN_PATH,
    RulesetLoadError,
    is_stdin,
    load_ruleset,
)

__all__ = [
    "STDIN_PATH",
    "RulesetLoadError",
    "is_stdin",
    "load_ruleset",
]
