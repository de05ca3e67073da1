"""Entry point for `python -m ruleset_cli` and `iptables-diff` console script."""

from __future__ import annotations

from ruleset_cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
