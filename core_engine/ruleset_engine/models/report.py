"""Diff report models.

The differ never produces styled text.  It emits an ordered list of
:class:`DiffEvent` objects, each tagged with an :class:`EventKind`, and the
presentation layer decides how each kind is rendered (prefix, colour, JSON).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Classification of a single line of the diff report."""

    HEADER = "HEADER"
    TABLE_ADDED = "TABLE_ADDED"
    TABLE_REMOVED = "TABLE_REMOVED"
    RULE_REMOVED = "RULE_REMOVED"
    RULE_ADDED = "RULE_ADDED"


_CHANGE_KINDS: frozenset[EventKind] = frozenset(
    {
        EventKind.TABLE_ADDED,
        EventKind.TABLE_REMOVED,
        EventKind.RULE_REMOVED,
        EventKind.RULE_ADDED,
    }
)


class DiffEvent(BaseModel):
    """One kind-tagged event of a diff report."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind = Field(..., description="What this event reports.")
    table: str = Field(..., description="Table the event belongs to.")
    text: str = Field(
        ...,
        description="Payload: the table name for header/table events, the rule text for rule events.",
    )

    @property
    def is_change(self) -> bool:
        return self.kind in _CHANGE_KINDS


class DiffSummary(BaseModel):
    """Totals over a whole diff report."""

    tables_compared: int = Field(default=0, description="Tables present in either snapshot.")
    tables_added: int = Field(default=0, description="Tables present only in the after snapshot.")
    tables_removed: int = Field(default=0, description="Tables present only in the before snapshot.")
    rules_added: int = Field(default=0, description="Rule lines reported as added.")
    rules_removed: int = Field(default=0, description="Rule lines reported as removed.")

    @property
    def total_changes(self) -> int:
        return self.tables_added + self.tables_removed + self.rules_added + self.rules_removed


class DiffReport(BaseModel):
    """Ordered events produced by comparing two ruleset snapshots."""

    tables: list[str] = Field(
        default_factory=list,
        description="Tables in the order they were visited.",
    )
    events: list[DiffEvent] = Field(
        default_factory=list,
        description="Events in emission order.",
    )

    @property
    def has_changes(self) -> bool:
        return any(event.is_change for event in self.events)

    def events_for(self, table: str) -> list[DiffEvent]:
        return [event for event in self.events if event.table == table]

    def _texts(self, kind: EventKind, table: str | None = None) -> list[str]:
        return [
            event.text
            for event in self.events
            if event.kind is kind and (table is None or event.table == table)
        ]

    @property
    def added_tables(self) -> list[str]:
        return self._texts(EventKind.TABLE_ADDED)

    @property
    def removed_tables(self) -> list[str]:
        return self._texts(EventKind.TABLE_REMOVED)

    def added_rules(self, table: str) -> list[str]:
        """Rule lines reported as added to *table*, in emission order."""
        return self._texts(EventKind.RULE_ADDED, table)

    def removed_rules(self, table: str) -> list[str]:
        """Rule lines reported as removed from *table*, in emission order."""
        return self._texts(EventKind.RULE_REMOVED, table)

    def summary(self) -> DiffSummary:
        counts = {kind: 0 for kind in EventKind}
        for event in self.events:
            counts[event.kind] += 1
        return DiffSummary(
            tables_compared=len(self.tables),
            tables_added=counts[EventKind.TABLE_ADDED],
            tables_removed=counts[EventKind.TABLE_REMOVED],
            rules_added=counts[EventKind.RULE_ADDED],
            rules_removed=counts[EventKind.RULE_REMOVED],
        )
