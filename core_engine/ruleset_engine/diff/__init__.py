"""Deterministic diff engine for ruleset snapshots."""

from ruleset_engine.diff.ruleset_diff import TableOrder, compare_rulesets

__all__ = [
    "TableOrder",
    "compare_rulesets",
]
