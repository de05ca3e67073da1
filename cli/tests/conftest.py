"""Shared fixtures for CLI tests.

Every test runs in its own temporary working directory with the
``IPTDIFF_*`` environment cleared, so a developer's local ``.env`` or shell
configuration never leaks into assertions.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

BEFORE_DUMP = """\
# Generated by iptables-save v1.8.7
*nat
:PREROUTING ACCEPT [0:0]
-A POSTROUTING -o eth0 -j MASQUERADE
COMMIT
*filter
:INPUT ACCEPT [0:0]
-A INPUT -i lo -j ACCEPT
-A INPUT -j DROP
COMMIT
"""

AFTER_DUMP = """\
# Generated by iptables-save v1.8.7
*filter
:INPUT ACCEPT [0:0]
-A INPUT -i lo -j ACCEPT
-A INPUT -p tcp -m tcp --dport 443 -j ACCEPT
COMMIT
*raw
-A PREROUTING -j NOTRACK
COMMIT
"""


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for var in ("DEBUG", "STRUCTURED_LOGGING", "NO_COLOR", "TABLE_ORDER", "ENCODING"):
        monkeypatch.delenv(f"IPTDIFF_{var}", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # configure_logging() installs handlers on the root logger.
    root = logging.getLogger()
    for handler in list(root.handlers):
        if not type(handler).__module__.startswith("_pytest"):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture()
def before_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules-before.txt"
    path.write_text(BEFORE_DUMP, encoding="utf-8")
    return path


@pytest.fixture()
def after_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules-after.txt"
    path.write_text(AFTER_DUMP, encoding="utf-8")
    return path
