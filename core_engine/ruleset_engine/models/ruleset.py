"""Parsed ruleset snapshot model.

A :class:`RuleSet` is the in-memory form of one ``iptables-save`` dump: a
mapping of table name (the raw ``*filter`` / ``*nat`` delimiter line) to the
ordered rule lines recorded inside that table's section.  Rule order is kept
as it appeared in the source, but comparisons treat each table's rules as a
set of opaque strings.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class RuleSet(BaseModel):
    """Immutable snapshot of the tables and rule lines of one ruleset dump.

    ``tables`` is exposed as a read-only mapping of tuples, so neither the
    table set nor any rule sequence can change after construction.
    """

    model_config = ConfigDict(frozen=True)

    tables: Mapping[str, tuple[str, ...]] = Field(
        default_factory=dict,
        validate_default=True,
        description="Table name -> rule lines, in first-appearance order.",
    )
    source: str | None = Field(
        default=None,
        description="Where the snapshot was read from (file path or '<stdin>').",
    )

    @field_validator("tables")
    @classmethod
    def freeze_tables(cls, v: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
        """Reject blank table names (a name is the raw delimiter line) and wrap read-only."""
        for name in v:
            if not name:
                raise ValueError("Table names must be non-empty strings.")
        return MappingProxyType(dict(v))

    @field_serializer("tables")
    def dump_tables(self, tables: Mapping[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        return dict(tables)

    def table_names(self) -> list[str]:
        """Return table names in first-appearance order."""
        return list(self.tables)

    def has_table(self, table: str) -> bool:
        return table in self.tables

    def rules(self, table: str) -> tuple[str, ...]:
        """Return the rule lines recorded for *table* (empty if unknown)."""
        return self.tables.get(table, ())

    @property
    def rule_count(self) -> int:
        """Total number of rule lines across all tables."""
        return sum(len(rules) for rules in self.tables.values())

    def __contains__(self, table: object) -> bool:
        return table in self.tables

    def __len__(self) -> int:
        return len(self.tables)
