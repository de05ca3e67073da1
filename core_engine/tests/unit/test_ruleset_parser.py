"""Unit tests for ruleset_engine.parser.ruleset_parser."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from ruleset_engine.models.ruleset import RuleSet
from ruleset_engine.parser.ruleset_parser import parse_ruleset, parse_ruleset_text

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

_SAVE_OUTPUT = """\
# Generated by iptables-save v1.8.7 on Mon Jan  1 00:00:00 2024
*filter
:INPUT ACCEPT [0:0]
:FORWARD DROP [0:0]
:OUTPUT ACCEPT [12:3456]
-A INPUT -i lo -j ACCEPT
-A INPUT -p tcp -m tcp --dport 22 -j ACCEPT
COMMIT
# Completed on Mon Jan  1 00:00:00 2024
*nat
:PREROUTING ACCEPT [0:0]
:POSTROUTING ACCEPT [0:0]
-A POSTROUTING -o eth0 -j MASQUERADE
COMMIT
"""


class TestParseRuleset:
    def test_groups_rules_by_table(self):
        ruleset = parse_ruleset_text(_SAVE_OUTPUT)
        assert ruleset.table_names() == ["*filter", "*nat"]
        assert ruleset.rules("*filter") == (
            ":INPUT ACCEPT [0:0]",
            ":FORWARD DROP [0:0]",
            ":OUTPUT ACCEPT [12:3456]",
            "-A INPUT -i lo -j ACCEPT",
            "-A INPUT -p tcp -m tcp --dport 22 -j ACCEPT",
        )
        assert ruleset.rules("*nat") == (
            ":PREROUTING ACCEPT [0:0]",
            ":POSTROUTING ACCEPT [0:0]",
            "-A POSTROUTING -o eth0 -j MASQUERADE",
        )

    def test_returns_ruleset(self):
        assert isinstance(parse_ruleset([]), RuleSet)

    def test_empty_input(self):
        ruleset = parse_ruleset([])
        assert len(ruleset) == 0
        assert ruleset.rule_count == 0

    def test_lines_are_trimmed(self):
        ruleset = parse_ruleset(["  *filter  \n", "\t-A INPUT -j DROP   \n", "COMMIT\n"])
        assert ruleset.table_names() == ["*filter"]
        assert ruleset.rules("*filter") == ("-A INPUT -j DROP",)

    def test_inner_whitespace_preserved(self):
        ruleset = parse_ruleset(["*filter", "-A INPUT   -j    DROP", "COMMIT"])
        assert ruleset.rules("*filter") == ("-A INPUT   -j    DROP",)

    def test_blank_and_comment_lines_skipped(self):
        lines = ["*filter", "", "   ", "# a comment", "   # indented comment", "-A INPUT -j DROP", "COMMIT"]
        ruleset = parse_ruleset(lines)
        assert ruleset.rules("*filter") == ("-A INPUT -j DROP",)

    def test_empty_table_is_recorded(self):
        ruleset = parse_ruleset(["*raw", "COMMIT"])
        assert ruleset.has_table("*raw")
        assert ruleset.rules("*raw") == ()

    def test_table_without_commit_keeps_collecting(self):
        ruleset = parse_ruleset(["*filter", "-A INPUT -j DROP", "-A OUTPUT -j ACCEPT"])
        assert ruleset.rules("*filter") == ("-A INPUT -j DROP", "-A OUTPUT -j ACCEPT")

    def test_new_table_without_commit_switches_section(self):
        ruleset = parse_ruleset(["*filter", "-A INPUT -j DROP", "*nat", "-A POSTROUTING -j MASQUERADE"])
        assert ruleset.rules("*filter") == ("-A INPUT -j DROP",)
        assert ruleset.rules("*nat") == ("-A POSTROUTING -j MASQUERADE",)

    def test_rule_order_preserved(self):
        rules = [f"-A INPUT -s 10.0.0.{i} -j DROP" for i in range(10, 0, -1)]
        ruleset = parse_ruleset(["*filter", *rules, "COMMIT"])
        assert list(ruleset.rules("*filter")) == rules

    def test_duplicate_rules_kept(self):
        ruleset = parse_ruleset(["*filter", "-A INPUT -j DROP", "-A INPUT -j DROP", "COMMIT"])
        assert ruleset.rules("*filter") == ("-A INPUT -j DROP", "-A INPUT -j DROP")

    def test_unrecognised_content_is_a_rule(self):
        ruleset = parse_ruleset(["*filter", "this is not iptables syntax", "COMMIT"])
        assert ruleset.rules("*filter") == ("this is not iptables syntax",)

    def test_commit_prefix_match(self):
        ruleset = parse_ruleset(["*filter", "-A INPUT -j DROP", "COMMIT # trailing", "-A INPUT -j ACCEPT"])
        assert ruleset.rules("*filter") == ("-A INPUT -j DROP",)

    def test_source_label_recorded(self):
        ruleset = parse_ruleset(["*filter"], source="rules-before.txt")
        assert ruleset.source == "rules-before.txt"


# ---------------------------------------------------------------------------
# Leniency -- lines outside any open table
# ---------------------------------------------------------------------------


class TestParserLeniency:
    def test_line_before_first_table_discarded(self):
        ruleset = parse_ruleset(["-A INPUT -j DROP", "*filter", "-A INPUT -j ACCEPT", "COMMIT"])
        assert ruleset.table_names() == ["*filter"]
        assert ruleset.rules("*filter") == ("-A INPUT -j ACCEPT",)

    def test_line_after_commit_not_attributed_to_stale_table(self):
        ruleset = parse_ruleset(["*filter", "-A INPUT -j ACCEPT", "COMMIT", "-A INPUT -j DROP"])
        assert ruleset.rules("*filter") == ("-A INPUT -j ACCEPT",)

    def test_no_empty_or_null_table_key(self):
        lines = ["stray before", "*filter", "-A INPUT -j ACCEPT", "COMMIT", "stray after", "COMMIT", "stray again"]
        ruleset = parse_ruleset(lines)
        assert "" not in ruleset.tables
        assert None not in ruleset.tables
        assert ruleset.table_names() == ["*filter"]

    def test_only_stray_lines(self):
        ruleset = parse_ruleset(["-A INPUT -j DROP", "COMMIT", "garbage"])
        assert len(ruleset) == 0

    def test_discarded_lines_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ruleset_engine.parser.ruleset_parser"):
            parse_ruleset(["-A INPUT -j DROP"])
        assert any("outside any table" in rec.getMessage() for rec in caplog.records)
        assert all(rec.levelno == logging.DEBUG for rec in caplog.records)


# ---------------------------------------------------------------------------
# Re-declared tables
# ---------------------------------------------------------------------------


class TestRedeclaredTables:
    def test_redeclared_table_accumulates(self):
        lines = [
            "*filter",
            "-A INPUT -j ACCEPT",
            "COMMIT",
            "*nat",
            "-A POSTROUTING -j MASQUERADE",
            "COMMIT",
            "*filter",
            "-A OUTPUT -j DROP",
            "COMMIT",
        ]
        ruleset = parse_ruleset(lines)
        assert ruleset.table_names() == ["*filter", "*nat"]
        assert ruleset.rules("*filter") == ("-A INPUT -j ACCEPT", "-A OUTPUT -j DROP")

    def test_redeclared_table_does_not_clear(self):
        ruleset = parse_ruleset(["*filter", "-A INPUT -j ACCEPT", "*filter", "COMMIT"])
        assert ruleset.rules("*filter") == ("-A INPUT -j ACCEPT",)


# ---------------------------------------------------------------------------
# parse_ruleset_text
# ---------------------------------------------------------------------------


class TestParseRulesetText:
    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_newline_conventions(self, newline):
        text = newline.join(["*filter", "-A INPUT -j DROP", "COMMIT", ""])
        ruleset = parse_ruleset_text(text)
        assert ruleset.rules("*filter") == ("-A INPUT -j DROP",)

    @pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029"])
    def test_unicode_separators_stay_inside_rule(self, separator):
        rule = f'-A INPUT -m comment --comment "x{separator}y" -j DROP'
        ruleset = parse_ruleset_text(f"*filter\n{rule}\nCOMMIT\n")
        assert ruleset.rules("*filter") == (rule,)

    def test_separator_before_star_does_not_open_table(self):
        rule = '-A INPUT -m comment --comment "a\u2028*nat" -j DROP'
        ruleset = parse_ruleset_text(f"*filter\n{rule}\nCOMMIT\n")
        assert ruleset.table_names() == ["*filter"]
        assert ruleset.rules("*filter") == (rule,)

    def test_matches_line_parser(self):
        assert parse_ruleset_text(_SAVE_OUTPUT) == parse_ruleset(_SAVE_OUTPUT.splitlines(keepends=True))

    def test_result_is_immutable(self):
        ruleset = parse_ruleset_text(_SAVE_OUTPUT)
        with pytest.raises(ValidationError):
            ruleset.source = "other"  # type: ignore[misc]
        assert isinstance(ruleset.rules("*filter"), tuple)
