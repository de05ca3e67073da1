"""Load ruleset snapshots from disk or standard input.

The whole input is read into memory and the handle released before parsing
starts.  Only reading can fail; the parser accepts any text.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ruleset_engine.models.ruleset import RuleSet
from ruleset_engine.parser.ruleset_parser import parse_ruleset_text

logger = logging.getLogger(__name__)

STDIN_PATH = "-"
_STDIN_LABEL = "<stdin>"


class RulesetLoadError(Exception):
    """Raised when a ruleset snapshot cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def is_stdin(path: Path | str) -> bool:
    return str(path) == STDIN_PATH


def _read_text(path: Path | str, encoding: str) -> tuple[str, str]:
    """Return ``(text, source_label)`` for *path*."""
    if is_stdin(path):
        return sys.stdin.read(), _STDIN_LABEL

    file_path = Path(path)
    with file_path.open(encoding=encoding) as fh:
        return fh.read(), str(file_path)


def load_ruleset(path: Path | str, *, encoding: str = "utf-8") -> RuleSet:
    """Read and parse the snapshot at *path* (``-`` for standard input).

    Raises
    ------
    RulesetLoadError
        If the input is missing, is a directory, cannot be read, or is not
        valid text in *encoding*.
    """
    label = _STDIN_LABEL if is_stdin(path) else str(path)
    try:
        text, source = _read_text(path, encoding)
    except FileNotFoundError as exc:
        raise RulesetLoadError(label, "no such file") from exc
    except IsADirectoryError as exc:
        raise RulesetLoadError(label, "is a directory") from exc
    except PermissionError as exc:
        raise RulesetLoadError(label, "permission denied") from exc
    except UnicodeDecodeError as exc:
        raise RulesetLoadError(label, f"cannot decode as {encoding}: {exc.reason}") from exc
    except OSError as exc:
        raise RulesetLoadError(label, exc.strerror or str(exc)) from exc

    logger.debug("Read %d character(s) from %s", len(text), source)
    return parse_ruleset_text(text, source=source)
