"""
CSV parsing for the Ingest context.

Turns the raw export text into a ParsedTable. The scan runs character by
character so quoted cells may contain commas, doubled quotes and line breaks.

The parser is deliberately permissive: it never raises on malformed quoting.
An unterminated quote swallows the rest of the input into the current cell.
"""

from typing import List

from gamesmeter.contexts.ingest.vote_data_structure import ParsedTable

QUOTE = '"'
DELIMITER = ","


def parse_csv(text: str) -> ParsedTable:
    """
    Parse comma-delimited, double-quoted CSV text.

    Rules:
    - A quote toggles quoted mode; inside quotes "" is a literal quote
    - Outside quotes, "," ends a cell and \\n, \\r\\n or \\r ends a row
    - The first completed row is the header row
    - Blank lines (no cells, nothing pending) are skipped
    - A last row without a line terminator is still flushed

    Args:
        text: Full CSV text

    Returns:
        ParsedTable with headers and data rows (possibly empty)
    """
    headers: List[str] = []
    rows: List[List[str]] = []
    have_headers = False

    row: List[str] = []
    current: List[str] = []
    in_quotes = False
    cell_quoted = False  # a quote was seen in the pending cell, so "" is a real empty cell

    def finish_row() -> None:
        nonlocal row, have_headers
        if not have_headers:
            headers.extend(row)
            have_headers = True
        else:
            rows.append(row)
        row = []

    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]

        if char == QUOTE:
            if in_quotes and pos + 1 < length and text[pos + 1] == QUOTE:
                current.append(QUOTE)
                pos += 2
                continue
            in_quotes = not in_quotes
            cell_quoted = True
            pos += 1
            continue

        if in_quotes:
            current.append(char)
            pos += 1
            continue

        if char == DELIMITER:
            row.append("".join(current))
            current = []
            cell_quoted = False
            pos += 1
            continue

        if char in "\r\n":
            # \r\n counts as a single terminator
            if char == "\r" and pos + 1 < length and text[pos + 1] == "\n":
                pos += 1
            pos += 1

            if not row and not current and not cell_quoted:
                continue  # blank line

            row.append("".join(current))
            current = []
            cell_quoted = False
            finish_row()
            continue

        current.append(char)
        pos += 1

    if row or current or cell_quoted:
        row.append("".join(current))
        finish_row()

    return ParsedTable(headers=headers, rows=rows)
