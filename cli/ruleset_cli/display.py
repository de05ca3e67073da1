"""Rich output formatting for the iptables-diff CLI.

The diff engine hands over kind-tagged events; everything visual (line
prefixes, colours, JSON layout) is decided here from an explicit
:class:`ReportTheme`, so nothing about presentation lives in global state.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field
from rich.console import Console, ConsoleOptions, RenderResult
from rich.segment import Segment
from rich.style import Style
from rich.text import Text

from ruleset_engine.models.report import DiffReport, DiffSummary, EventKind

# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATES: dict[EventKind, str] = {
    EventKind.HEADER: "\nComparing table {table}:",
    EventKind.TABLE_ADDED: "! Table {table} has been added",
    EventKind.TABLE_REMOVED: "! Table {table} has been removed",
    EventKind.RULE_REMOVED: "- {text}",
    EventKind.RULE_ADDED: "+ {text}",
}

_DEFAULT_STYLES: dict[EventKind, str] = {
    EventKind.HEADER: "cyan",
    EventKind.TABLE_ADDED: "yellow",
    EventKind.TABLE_REMOVED: "yellow",
    EventKind.RULE_REMOVED: "red",
    EventKind.RULE_ADDED: "green",
}


@dataclass(frozen=True)
class ReportLine:
    """One rendered report line, written to the console verbatim.

    Rich's :class:`~rich.text.Text` expands tabs and strips control
    characters; rule payloads must reach the terminal exactly as parsed, so
    the line is emitted as a single styled segment instead.
    """

    plain: str
    style: str = ""

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield Segment(self.plain, Style.parse(self.style) if self.style else None)
        yield Segment.line()


class ReportTheme(BaseModel):
    """How each kind of report event is rendered."""

    colour: bool = Field(default=True, description="Apply styles to rendered lines.")
    templates: dict[EventKind, str] = Field(
        default_factory=lambda: dict(_DEFAULT_TEMPLATES),
        description="Line template per event kind; may use {table} and {text}.",
    )
    styles: dict[EventKind, str] = Field(
        default_factory=lambda: dict(_DEFAULT_STYLES),
        description="Rich style per event kind.",
    )

    def render(self, kind: EventKind, table: str, text: str) -> ReportLine:
        """Return the styled line for one event.

        Rule text is inserted literally: brackets such as ``[0:0]`` in
        chain counters are never parsed as Rich markup, and tabs or control
        characters are kept.
        """
        line = self.templates[kind].format(table=table, text=text)
        style = self.styles.get(kind, "") if self.colour else ""
        return ReportLine(line, style)


def make_report_console(*, colour: bool) -> Console:
    """Console for the report itself, bound to *stdout*."""
    return Console(no_color=not colour, highlight=False, soft_wrap=True)


# ---------------------------------------------------------------------------
# Text report
# ---------------------------------------------------------------------------


def display_diff_report(console: Console, report: DiffReport, theme: ReportTheme | None = None) -> None:
    """Write one line per report event.

    Parameters
    ----------
    console:
        Rich console to write to.
    report:
        The diff report to render.
    theme:
        Presentation settings; the default theme mirrors classic
        ``iptables-diff`` output.
    """
    theme = theme or ReportTheme()
    for event in report.events:
        console.print(theme.render(event.kind, event.table, event.text), soft_wrap=True)


def display_summary(console: Console, summary: DiffSummary, *, colour: bool = True) -> None:
    """Render a one-line totals footer."""
    if summary.total_changes == 0:
        line = Text(f"\nNo differences across {summary.tables_compared} table(s).")
        if colour:
            line.stylize("dim")
        console.print(line, soft_wrap=True)
        return

    parts = [
        (f"{summary.tables_compared} table(s) compared", ""),
        (f"{summary.tables_added} added", "yellow"),
        (f"{summary.tables_removed} removed", "yellow"),
        (f"{summary.rules_added} rule(s) added", "green"),
        (f"{summary.rules_removed} rule(s) removed", "red"),
    ]
    line = Text("\n")
    for idx, (chunk, style) in enumerate(parts):
        if idx:
            line.append(", ")
        line.append(chunk, style=style if colour else "")
    console.print(line, soft_wrap=True)


# ---------------------------------------------------------------------------
# JSON report
# ---------------------------------------------------------------------------


def report_to_dict(report: DiffReport) -> dict[str, Any]:
    """Return a JSON-serialisable view of *report* including its summary."""
    payload = report.model_dump(mode="json")
    payload["summary"] = report.summary().model_dump(mode="json")
    payload["has_changes"] = report.has_changes
    return payload


def report_to_json(report: DiffReport) -> str:
    return json.dumps(report_to_dict(report), indent=2)
