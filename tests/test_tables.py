"""Tests for pipe-delimited markdown table parsing."""

from __future__ import annotations

from research_planner.tables import parse_markdown_table, to_markdown_table


def test_minimal_table() -> None:
    assert parse_markdown_table("A|B\n-|-\n1|2") == (["A", "B"], [["1", "2"]])


def test_outer_pipes_and_whitespace_are_ignored() -> None:
    md = "| Objective | Test |\n|---|---|\n| Compare means | t-test |\n| Association | chi-square |"
    headers, rows = parse_markdown_table(md)
    assert headers == ["Objective", "Test"]
    assert rows == [["Compare means", "t-test"], ["Association", "chi-square"]]


def test_short_rows_are_padded() -> None:
    headers, rows = parse_markdown_table("| A | B | C |\n|-|-|-|\n| 1 |")
    assert rows == [["1", "", ""]]


def test_rows_wider_than_header_are_dropped() -> None:
    headers, rows = parse_markdown_table("| A | B |\n|-|-|\n| 1 | 2 | 3 |\n| 4 | 5 |")
    assert rows == [["4", "5"]]


def test_lines_without_pipes_are_skipped() -> None:
    md = "Analysis plan below.\n| A | B |\n|-|-|\nnote in between\n| 1 | 2 |"
    assert parse_markdown_table(md) == (["A", "B"], [["1", "2"]])


def test_not_a_table() -> None:
    assert parse_markdown_table("") is None
    assert parse_markdown_table("no pipes here") is None
    assert parse_markdown_table("only | one line") is None
    # header and separator but no data rows
    assert parse_markdown_table("| A | B |\n|---|---|") is None
    # every data row is too wide
    assert parse_markdown_table("| A |\n|-|\n| 1 | 2 |") is None


def test_parse_inverts_serialisation() -> None:
    headers = ["Objective", "Variables", "Statistical Test"]
    rows = [["Prevalence", "Hb level", "Proportion with 95% CI"], ["Association", "Diet, BMI", "Logistic regression"]]
    assert parse_markdown_table(to_markdown_table(headers, rows)) == (headers, rows)
