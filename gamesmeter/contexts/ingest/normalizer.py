"""
Row normalizer for the Ingest context.

Maps ParsedTable rows onto VoteRecord instances using the column contract.
Every cell is parsed defensively: anything missing or unparsable becomes None
for that field and never aborts the load.

Date policy: strict and locale-independent. Only ASCII YYYY-MM-DD with an optional
" HH:MM" / "THH:MM" and optional ":SS" is accepted; the result is a naive
(local) datetime. Impossible calendar values (2023-02-30) become None.
"""

import math
import re
from datetime import datetime
from typing import Dict, List, Optional

from gamesmeter.contexts.ingest.column_mapping import ColumnMapping, load_column_mapping
from gamesmeter.contexts.ingest.csv_parser import parse_csv
from gamesmeter.contexts.ingest.exceptions import DatasetLoadError
from gamesmeter.contexts.ingest.logger import _log_debug, _log_warning
from gamesmeter.contexts.ingest.vote_data_structure import ParsedTable, VoteRecord

PLACED_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})(?:[ T](\d{2}):(\d{2})(?::(\d{2}))?)?$", re.ASCII
)
# ASCII decimal notation only: "4_5" and full-width digits do not match
NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)

MISSING_COLUMN = -1


def normalize_string(value: str) -> Optional[str]:
    """Trim value; empty becomes None."""
    cleaned = value.strip()
    return cleaned if cleaned else None


def parse_number(value: str) -> Optional[float]:
    """
    Parse an ASCII decimal number, accepting a comma as decimal separator.

    Returns:
        Finite float, or None when empty, unparsable, NaN or infinite
    """
    cleaned = value.strip().replace(",", ".", 1)
    if not NUMBER_PATTERN.match(cleaned):
        return None
    number = float(cleaned)
    return number if math.isfinite(number) else None


def parse_integer(value: str) -> Optional[int]:
    """Parse a whole number (ids, years); non-integral values become None."""
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def parse_placed_date(value: str) -> Optional[datetime]:
    """
    Parse the "geplaatst" timestamp with the strict policy described above.

    Examples:
        parse_placed_date("1998-03-02")           # datetime(1998, 3, 2, 0, 0)
        parse_placed_date("2021-11-05 21:14:09")  # datetime(2021, 11, 5, 21, 14, 9)
        parse_placed_date("05-11-2021")           # None
    """
    match = PLACED_PATTERN.match(value.strip())
    if not match:
        return None

    year, month, day, hours, minutes, seconds = (int(part or 0) for part in match.groups())
    try:
        return datetime(year, month, day, hours, minutes, seconds)
    except ValueError:
        return None


def build_header_index(headers: List[str]) -> Dict[str, int]:
    """Case-insensitive, trimmed header name -> column index."""
    return {header.strip().lower(): index for index, header in enumerate(headers)}


def _cell(row: List[str], index: int) -> str:
    """Bounds-safe cell access; missing cells read as empty string."""
    if index < 0 or index >= len(row):
        return ""
    return row[index] or ""


def normalize_rows(table: ParsedTable, columns: Optional[ColumnMapping] = None) -> List[VoteRecord]:
    """
    Convert parsed rows into VoteRecords, preserving row order.

    Args:
        table: Parser output
        columns: Column contract (defaults to the configured columns.yaml)

    Returns:
        One VoteRecord per data row
    """
    if columns is None:
        columns = load_column_mapping()

    header_index = build_header_index(table.headers)
    indices = {
        field_name: header_index.get(header.strip().lower(), MISSING_COLUMN)
        for field_name, header in columns.header_names().items()
    }

    missing = [columns.header_names()[name] for name, idx in indices.items() if idx == MISSING_COLUMN]
    if missing and table.headers:
        _log_warning(f"Columns not found in export, fields will be empty: {', '.join(missing)}")

    records = []
    for row in table.rows:
        title = _cell(row, indices["title"]).strip()
        records.append(
            VoteRecord(
                id=parse_integer(_cell(row, indices["id"])),
                title=title or columns.fallback_title,
                year=parse_integer(_cell(row, indices["year"])),
                alt_title=normalize_string(_cell(row, indices["alt_title"])),
                platform=normalize_string(_cell(row, indices["platform"])),
                rating=parse_number(_cell(row, indices["rating"])),
                placed=parse_placed_date(_cell(row, indices["placed"])),
                raw=list(row),
            )
        )

    return records


def load_records(
    text: str, columns: Optional[ColumnMapping] = None, dataset_name: Optional[str] = None
) -> List[VoteRecord]:
    """
    Full ingest path: parse the CSV text, then normalize its rows.

    Args:
        text: CSV export contents
        columns: Column contract (defaults to the configured columns.yaml)
        dataset_name: Display name, used in log messages and errors

    Returns:
        Ordered list of VoteRecords

    Raises:
        DatasetLoadError: If text is not a string
    """
    if not isinstance(text, str):
        raise DatasetLoadError(
            f"Expected CSV text, got {type(text).__name__}", dataset_name=dataset_name
        )

    table = parse_csv(text)
    records = normalize_rows(table, columns)

    rated = sum(1 for record in records if record.rating is not None)
    _log_debug(
        f"Loaded {dataset_name or 'dataset'}: {len(table.headers)} columns, "
        f"{len(records)} rows, {rated} rated"
    )
    return records
