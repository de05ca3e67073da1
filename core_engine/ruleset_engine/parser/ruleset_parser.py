"""Parse ``iptables-save`` style dumps into :class:`RuleSet` snapshots.

The format is section-delimited and line oriented::

    # Generated by iptables-save
    *filter
    :INPUT ACCEPT [0:0]
    -A INPUT -i lo -j ACCEPT
    COMMIT

A ``*name`` line opens a table, a line starting with ``COMMIT`` closes it,
and every other non-blank, non-comment line inside an open table is recorded
verbatim (after trimming) as a rule line.  The parser is deliberately
permissive: it never rejects content, and lines outside an open table are
dropped rather than reported.

Typical usage::

    ruleset = parse_ruleset_text(Path("rules-before.txt").read_text())
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ruleset_engine.models.ruleset import RuleSet

logger = logging.getLogger(__name__)

_COMMENT_PREFIX = "#"
_TABLE_PREFIX = "*"
_COMMIT_PREFIX = "COMMIT"

# Only CR, LF and CRLF end a line; other Unicode line separators are rule text.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def parse_ruleset(lines: Iterable[str], source: str | None = None) -> RuleSet:
    """Group the rule lines of a ruleset dump by table.

    Parameters
    ----------
    lines:
        Raw text lines, with or without trailing newlines.
    source:
        Optional label recorded on the resulting :class:`RuleSet`.

    Returns
    -------
    RuleSet
        Table name -> rule lines, with tables in first-appearance order.
        A table declared more than once keeps accumulating rules.
    """
    tables: dict[str, list[str]] = {}
    current_table: str | None = None

    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIX):
            continue

        if line.startswith(_TABLE_PREFIX):
            current_table = line
            if current_table in tables:
                logger.debug("Line %d: table %s re-opened, appending to existing rules", lineno, line)
            else:
                tables[current_table] = []
        elif line.startswith(_COMMIT_PREFIX):
            current_table = None
        elif current_table is not None:
            tables[current_table].append(line)
        else:
            logger.debug("Line %d: discarding line outside any table: %r", lineno, line)

    ruleset = RuleSet(
        tables={name: tuple(rules) for name, rules in tables.items()},
        source=source,
    )
    logger.debug(
        "Parsed %d table(s), %d rule(s) from %s",
        len(ruleset),
        ruleset.rule_count,
        source or "<input>",
    )
    return ruleset


def parse_ruleset_text(text: str, source: str | None = None) -> RuleSet:
    """Parse a whole dump held in a single string.

    Unlike :meth:`str.splitlines`, form feeds, vertical tabs and Unicode
    line separators inside a rule (e.g. in a ``--comment`` string) do not
    split it.
    """
    return parse_ruleset(_LINE_BREAK.split(text), source=source)
