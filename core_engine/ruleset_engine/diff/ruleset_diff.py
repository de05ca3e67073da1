"""Table-by-table diff engine for ruleset snapshots.

Compares two :class:`RuleSet` snapshots and produces a :class:`DiffReport`
of kind-tagged events.  Within a table present in both snapshots, rules are
compared by membership only: position and multiplicity are ignored, and a
rule is reported only when its exact text is absent from the other side.
Rules are never matched across tables.

Table traversal order is always deterministic.  By default tables are
visited in lexicographic order; :attr:`TableOrder.APPEARANCE` follows the
order in which tables first appear in the snapshots instead.
"""

from __future__ import annotations

from enum import Enum

from ruleset_engine.models.report import DiffEvent, DiffReport, EventKind
from ruleset_engine.models.ruleset import RuleSet


class TableOrder(str, Enum):
    """Order in which tables are visited when building a report."""

    SORTED = "sorted"
    APPEARANCE = "appearance"


def _table_universe(before: RuleSet, after: RuleSet, order: TableOrder) -> list[str]:
    if order is TableOrder.SORTED:
        return sorted(set(before.tables) | set(after.tables))

    # Tables of the before snapshot first, then tables only found after.
    seen = dict.fromkeys(before.tables)
    seen.update(dict.fromkeys(after.tables))
    return list(seen)


def _rule_events(table: str, before_rules: tuple[str, ...], after_rules: tuple[str, ...]) -> list[DiffEvent]:
    before_set = set(before_rules)
    after_set = set(after_rules)

    events = [
        DiffEvent(kind=EventKind.RULE_REMOVED, table=table, text=rule)
        for rule in before_rules
        if rule not in after_set
    ]
    events.extend(
        DiffEvent(kind=EventKind.RULE_ADDED, table=table, text=rule)
        for rule in after_rules
        if rule not in before_set
    )
    return events


def compare_rulesets(
    before: RuleSet,
    after: RuleSet,
    *,
    table_order: TableOrder = TableOrder.SORTED,
) -> DiffReport:
    """Compare two snapshots table by table.

    Parameters
    ----------
    before:
        The snapshot taken before the change.
    after:
        The snapshot taken after the change.
    table_order:
        How to order tables in the report.

    Returns
    -------
    DiffReport
        For every table in either snapshot: a ``HEADER`` event, then either a
        single ``TABLE_ADDED`` / ``TABLE_REMOVED`` event (no rule-level
        comparison), or the ``RULE_REMOVED`` events in *before* order
        followed by the ``RULE_ADDED`` events in *after* order.
    """
    tables = _table_universe(before, after, table_order)
    events: list[DiffEvent] = []

    for table in tables:
        events.append(DiffEvent(kind=EventKind.HEADER, table=table, text=table))

        if not before.has_table(table):
            events.append(DiffEvent(kind=EventKind.TABLE_ADDED, table=table, text=table))
            continue

        if not after.has_table(table):
            events.append(DiffEvent(kind=EventKind.TABLE_REMOVED, table=table, text=table))
            continue

        events.extend(_rule_events(table, before.rules(table), after.rules(table)))

    return DiffReport(tables=tables, events=events)
