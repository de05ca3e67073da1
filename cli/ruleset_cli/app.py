"""iptables-diff CLI application -- Typer-based interface to the diff engine.

Loads two ``iptables-save`` snapshots, compares them table by table and
prints the differences.  The report goes to *stdout* (Rich text, or JSON
with ``--json``); errors and log output go to *stderr*.

Exit codes:

* ``0`` -- report produced (or no differences with ``--exit-code``)
* ``1`` -- differences found and ``--exit-code`` was given
* ``2`` -- usage error (missing or conflicting options)
* ``3`` -- a snapshot or the configuration could not be loaded
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ruleset_cli.display import (
    ReportTheme,
    display_diff_report,
    display_summary,
    make_report_console,
    report_to_json,
)
from ruleset_cli.logging_config import configure_logging
from ruleset_engine.config import Settings, load_settings
from ruleset_engine.diff import TableOrder, compare_rulesets
from ruleset_engine.loader import RulesetLoadError, is_stdin, load_ruleset
from ruleset_engine.models import RuleSet

logger = logging.getLogger(__name__)

_EPILOG = """\
To generate the input files, use iptables-save:
before changes: iptables-save > rules-before.txt,
after changes: iptables-save > rules-after.txt.
Removed rules are shown in red, added rules in green and table changes in yellow.
"""

app = typer.Typer(
    name="iptables-diff",
    help="IPTables Rules Comparison Utility - show the differences between two iptables-save dumps.",
    add_completion=False,
)
console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_settings() -> Settings:
    try:
        return load_settings()
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=3) from exc


def _load_snapshot(label: str, path: Path, encoding: str) -> RuleSet:
    """Load one snapshot, exiting with code 3 if it cannot be read."""
    try:
        return load_ruleset(path, encoding=encoding)
    except RulesetLoadError as exc:
        console.print(f"[red]Error loading {label} rules:[/red] {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=3) from exc


# ---------------------------------------------------------------------------
# diff
# ---------------------------------------------------------------------------


@app.command(epilog=_EPILOG)
def diff(
    before: Path = typer.Option(
        ...,
        "--before",
        "-b",
        help="File containing the initial iptables rules ('-' for stdin).",
    ),
    after: Path = typer.Option(
        ...,
        "--after",
        "-a",
        help="File containing the modified iptables rules ('-' for stdin).",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable color output.",
    ),
    table_order: TableOrder | None = typer.Option(
        None,
        "--table-order",
        case_sensitive=False,
        help="Order tables alphabetically or by first appearance.",
    ),
    json_mode: bool = typer.Option(
        False,
        "--json",
        help="Emit the report as JSON on stdout instead of text.",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Print a totals line after the report.",
    ),
    exit_code: bool = typer.Option(
        False,
        "--exit-code",
        help="Exit with status 1 when the snapshots differ.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging on stderr.",
    ),
) -> None:
    """Compare two iptables-save snapshots and show the differences per table.

    Examples::

        iptables-diff --before rules-before.txt --after rules-after.txt
        iptables-save | iptables-diff -b rules-before.txt -a -
    """
    if is_stdin(before) and is_stdin(after):
        raise typer.BadParameter(
            "only one of the snapshots can be read from stdin.",
            param_hint="'--before' / '--after'",
        )

    settings = _load_settings()
    configure_logging(debug=settings.debug or verbose, structured=settings.structured_logging)

    colour = not (no_color or settings.no_color)
    order = table_order or settings.table_order

    before_rules = _load_snapshot("before", before, settings.encoding)
    after_rules = _load_snapshot("after", after, settings.encoding)

    report = compare_rulesets(before_rules, after_rules, table_order=order)
    totals = report.summary()
    logger.debug(
        "Compared %d table(s): %d change(s)",
        totals.tables_compared,
        totals.total_changes,
    )

    if json_mode:
        sys.stdout.write(report_to_json(report) + "\n")
    else:
        out = make_report_console(colour=colour)
        display_diff_report(out, report, ReportTheme(colour=colour))
        if summary:
            display_summary(out, totals, colour=colour)

    if exit_code and report.has_changes:
        raise typer.Exit(code=1)
