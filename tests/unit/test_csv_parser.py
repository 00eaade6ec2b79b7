"""Unit tests for the character-level CSV parser."""

import pytest

from gamesmeter.contexts.ingest.csv_parser import parse_csv


@pytest.mark.unit
def test_parse_headers_and_rows():
    """First row becomes the header row, the rest are data rows."""
    table = parse_csv("a,b,c\n1,2,3\n4,5,6\n")

    assert table.headers == ["a", "b", "c"]
    assert table.rows == [["1", "2", "3"], ["4", "5", "6"]]


@pytest.mark.unit
def test_trailing_newline_does_not_change_rows():
    """Text with and without a final line terminator parses to the same rows."""
    with_newline = parse_csv("id,titel\n1,Ico\n2,Okami\n")
    without_newline = parse_csv("id,titel\n1,Ico\n2,Okami")

    assert with_newline.rows == without_newline.rows
    assert with_newline.headers == without_newline.headers


@pytest.mark.unit
def test_quoted_cell_with_comma_and_escaped_quote():
    """A quoted cell keeps its commas and turns "" into a literal quote."""
    text = 'id,titel\n12,"Final Fantasy VII, ""International"" Edition"\n'
    table = parse_csv(text)

    assert table.rows == [["12", 'Final Fantasy VII, "International" Edition']]


@pytest.mark.unit
def test_quoted_cell_with_line_break():
    """Line breaks inside quotes belong to the cell."""
    table = parse_csv('id,notes\n1,"line one\nline two"\n2,plain\n')

    assert table.rows == [["1", "line one\nline two"], ["2", "plain"]]


@pytest.mark.unit
def test_crlf_and_cr_terminators():
    """\\r\\n counts as one row terminator, and a lone \\r ends a row too."""
    crlf = parse_csv("a,b\r\n1,2\r\n3,4\r\n")
    cr = parse_csv("a,b\r1,2\r3,4")

    assert crlf.rows == [["1", "2"], ["3", "4"]]
    assert cr.rows == crlf.rows


@pytest.mark.unit
def test_blank_lines_are_skipped():
    """Empty lines between rows produce no rows."""
    table = parse_csv("a,b\n\n1,2\n\n\n3,4\n")

    assert table.rows == [["1", "2"], ["3", "4"]]


@pytest.mark.unit
def test_empty_cells_are_preserved():
    """Consecutive delimiters yield empty strings, including a trailing one."""
    table = parse_csv("a,b,c\n1,,\n")

    assert table.rows == [["1", "", ""]]


@pytest.mark.unit
def test_lone_quoted_empty_cell_is_a_row():
    """A line holding only "" is a row with one empty cell, not a blank line."""
    table = parse_csv('a\n""\n')

    assert table.rows == [[""]]


@pytest.mark.unit
def test_ragged_rows_are_kept_as_is():
    """Rows shorter or longer than the header are not padded or cut."""
    table = parse_csv("a,b,c\n1\n1,2,3,4\n")

    assert table.rows == [["1"], ["1", "2", "3", "4"]]


@pytest.mark.unit
def test_unterminated_quote_swallows_rest():
    """Malformed quoting never raises; the open cell takes the remaining text."""
    table = parse_csv('a,b\n1,"open\n2,3\n')

    assert table.rows == [["1", "open\n2,3\n"]]


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "\n", "\r\n\r\n"])
def test_empty_input(text):
    """Empty or whitespace-only line input gives an empty table."""
    table = parse_csv(text)

    assert table.headers == []
    assert table.rows == []


@pytest.mark.unit
def test_header_only():
    """A lone header row gives headers and no data rows."""
    table = parse_csv("GamesMeter id,titel,jaar")

    assert table.headers == ["GamesMeter id", "titel", "jaar"]
    assert table.rows == []
