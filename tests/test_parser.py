#!/usr/bin/env python3
"""
Tests for parsing single ignore lines into rules
"""

import pytest

from projignore.ignore import Comment, Empty, Rule, WithRule, parse_line, parse_lines


def rule_of(line):
    parsed = parse_line(line)
    assert isinstance(parsed, WithRule)
    return parsed.rule


@pytest.mark.parametrize("line", ["", "   ", "\t", "\n", "  \r\n"])
def test_blank_lines(line):
    """Whitespace-only lines produce no rule"""
    assert parse_line(line) == Empty()


@pytest.mark.parametrize("line", ["# comment", "#", "   # indented comment", "#*.log"])
def test_comment_lines(line):
    assert parse_line(line) == Comment()


def test_plain_pattern_is_unanchored():
    """A pattern without a slash matches at any depth"""
    assert rule_of("*.log") == Rule(pattern="**/*.log", anchored=False, dir_only=False, negation=False)


def test_surrounding_whitespace_is_trimmed():
    assert rule_of("   *.log   \n") == rule_of("*.log")


def test_negation():
    rule = rule_of("!important.log")
    assert rule.negation
    assert rule.pattern == "**/important.log"

    # Repeated markers collapse into one negation
    assert rule_of("!!important.log") == rule


def test_directory_only():
    rule = rule_of("build/")
    assert rule == Rule(pattern="**/build", anchored=False, dir_only=True, negation=False)

    rule = rule_of("!build/")
    assert rule.dir_only
    assert rule.negation


def test_leading_slash_anchors_to_root():
    """A leading slash is dropped and the pattern is not prefixed"""
    assert rule_of("/config.yml") == Rule(pattern="config.yml", anchored=True, dir_only=False, negation=False)
    assert rule_of("/target/") == Rule(pattern="target", anchored=True, dir_only=True, negation=False)


def test_inner_slash_anchors_but_keeps_prefix():
    rule = rule_of("src/*.py")
    assert rule.anchored
    assert rule.pattern == "**/src/*.py"


def test_existing_recursive_prefix_is_not_doubled():
    rule = rule_of("**/foo")
    assert rule.pattern == "**/foo"
    assert rule.anchored


def test_trailing_recursive_suffix_only_matches_contents():
    assert rule_of("docs/**").pattern == "**/docs/**/*"
    assert rule_of("/dist/**").pattern == "dist/**/*"


def test_escaped_hash_and_bang_are_literal():
    hash_rule = rule_of("\\#notes")
    assert hash_rule.pattern == "**/#notes"
    assert not hash_rule.negation

    bang_rule = rule_of("\\!important")
    assert bang_rule.pattern == "**/!important"
    assert not bang_rule.negation


def test_escaped_glob_metacharacters_are_kept():
    """The compiler needs the backslash to treat the character literally"""
    assert rule_of("\\*.txt").pattern == "**/\\*.txt"
    assert rule_of("file\\[1\\]").pattern == "**/file\\[1\\]"


def test_trailing_backslash_is_dropped():
    assert rule_of("foo\\").pattern == "**/foo"


def test_parse_lines_keeps_rules_in_order():
    rules = parse_lines([
        "# header",
        "*.log",
        "",
        "!keep.log",
        "build/",
    ])
    assert [r.pattern for r in rules] == ["**/*.log", "**/keep.log", "**/build"]
    assert [r.negation for r in rules] == [False, True, False]
