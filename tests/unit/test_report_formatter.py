"""Unit tests for text report formatting helpers."""

import pytest

from gamesmeter.utils.report_formatter import Column, TableFormatter, format_bar, format_percentage


@pytest.mark.unit
def test_column_alignment_and_truncation():
    column = Column("Title", 8)

    assert column.format_header() == "Title   "
    assert column.format_value("Ico") == "Ico     "
    assert column.format_value("Shadow of the Colossus") == "Shado..."
    assert Column("Avg", 5, ">").format_value(3.5) == "  3.5"
    assert column.format_value(None) == "-       "


@pytest.mark.unit
def test_table_render():
    table = TableFormatter([Column("Year", 4), Column("Count", 5, ">")])
    table.add_section_header("Years").add_table_header().add_separator()
    table.add_row([2001, 3]).add_summary("1 year(s)")

    assert table.total_width == 10
    assert table.render().splitlines() == [
        "=" * 10,
        "Years",
        "=" * 10,
        "Year Count",
        "-" * 10,
        "2001     3",
        "",
        "1 year(s)",
    ]


@pytest.mark.unit
def test_row_length_must_match_columns():
    table = TableFormatter([Column("A", 3)])

    with pytest.raises(ValueError):
        table.add_row([1, 2])


@pytest.mark.unit
def test_format_percentage():
    assert format_percentage(3, 4) == "75.0%"
    assert format_percentage(1, 0) == "0.0%"


@pytest.mark.unit
def test_format_bar():
    assert format_bar(5, 10, width=10) == "#####"
    assert format_bar(10, 10, width=4, char="=") == "===="
    assert format_bar(3, 0) == ""
