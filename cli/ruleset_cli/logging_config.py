"""Logging setup for the iptables-diff CLI.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed here, once, by the CLI entry point.  All log output goes to
*stderr* so the report on *stdout* stays clean.

Set ``IPTDIFF_STRUCTURED_LOGGING=true`` to emit one JSON object per line::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "DEBUG",
        "logger": "ruleset_engine.parser.ruleset_parser",
        "message": "Parsed 2 table(s), 14 rule(s) from rules-before.txt",
        "exc_info": "Traceback ..."  // present only on exceptions
    }
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from typing import Any

_TEXT_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(*, debug: bool = False, structured: bool = False) -> None:
    """Install a single stderr handler on the root logger."""
    level = logging.DEBUG if debug else logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    if structured:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)
