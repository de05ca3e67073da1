"""Domain models for the ruleset diff engine."""

from ruleset_engine.models.report import DiffEvent, DiffReport, DiffSummary, EventKind
from ruleset_engine.models.ruleset import RuleSet

__all__ = [
    "DiffEvent",
    "DiffReport",
    "DiffSummary",
    "EventKind",
    "RuleSet",
]
