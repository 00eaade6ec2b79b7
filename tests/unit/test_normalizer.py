"""Unit tests for row normalization and scalar parsing."""

from datetime import datetime

import pytest

from gamesmeter.contexts.ingest.column_mapping import ColumnMapping
from gamesmeter.contexts.ingest.exceptions import DatasetLoadError
from gamesmeter.contexts.ingest.normalizer import (
    load_records,
    normalize_rows,
    parse_integer,
    parse_number,
    parse_placed_date,
)
from gamesmeter.contexts.ingest.vote_data_structure import ParsedTable

HEADERS = ["GamesMeter id", "titel", "jaar", "alternatieve titel", "platform", "stem", "geplaatst"]


@pytest.mark.unit
def test_normalize_known_row():
    """A literal export row maps onto the expected typed record."""
    table = ParsedTable(
        headers=HEADERS,
        rows=[["7", "Chrono Trigger", "1995", "", "Super Nintendo", "4.5", "1998-03-02"]],
    )
    [record] = normalize_rows(table, ColumnMapping())

    assert record.id == 7
    assert record.title == "Chrono Trigger"
    assert record.year == 1995
    assert record.alt_title is None
    assert record.platform == "Super Nintendo"
    assert record.rating == 4.5
    assert record.placed == datetime(1998, 3, 2, 0, 0, 0)
    assert record.raw == ["7", "Chrono Trigger", "1995", "", "Super Nintendo", "4.5", "1998-03-02"]


@pytest.mark.unit
def test_headers_matched_case_insensitively_in_any_order():
    """Columns are found by trimmed, case-insensitive header name."""
    table = ParsedTable(
        headers=[" STEM ", "Titel", "Platform", "JAAR"],
        rows=[["3,5", "Okami", "PlayStation 2", "2006"]],
    )
    [record] = normalize_rows(table, ColumnMapping())

    assert record.rating == 3.5
    assert record.title == "Okami"
    assert record.platform == "PlayStation 2"
    assert record.year == 2006
    assert record.id is None
    assert record.placed is None


@pytest.mark.unit
def test_plain_id_header_needs_column_override():
    """An export with a bare "id" header only fills ids when the contract names it."""
    table = ParsedTable(
        headers=["id", "titel", "jaar", "alternatieve titel", "platform", "stem", "geplaatst"],
        rows=[["42", "Okami", "2006", "", "PlayStation 2", "4", "2010-05-01"]],
    )

    [default] = normalize_rows(table, ColumnMapping())
    [overridden] = normalize_rows(table, ColumnMapping(id="id"))

    assert default.id is None
    assert default.title == "Okami"
    assert overridden.id == 42
    assert overridden.title == "Okami"
    assert overridden.placed == datetime(2010, 5, 1)


@pytest.mark.unit
def test_short_row_and_empty_title():
    """Missing cells read as empty and an empty title gets the placeholder."""
    table = ParsedTable(headers=HEADERS, rows=[["9", "   "]])
    [record] = normalize_rows(table, ColumnMapping())

    assert record.id == 9
    assert record.title == "Unknown title"
    assert record.rating is None
    assert record.platform is None


@pytest.mark.unit
def test_custom_fallback_title():
    """The placeholder title comes from the column mapping."""
    table = ParsedTable(headers=HEADERS, rows=[["1", ""]])
    [record] = normalize_rows(table, ColumnMapping(fallback_title="Onbekende titel"))

    assert record.title == "Onbekende titel"


@pytest.mark.unit
def test_rows_keep_export_order():
    table = ParsedTable(headers=HEADERS, rows=[["2", "B"], ["1", "A"], ["3", "C"]])
    records = normalize_rows(table, ColumnMapping())

    assert [record.title for record in records] == ["B", "A", "C"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("4.5", 4.5),
        ("4,5", 4.5),
        (" 3 ", 3.0),
        ("", None),
        ("abc", None),
        ("nan", None),
        ("inf", None),
        ("1,2,3", None),
        ("4_5", None),
        ("４.５", None),
        ("1e999", None),
        ("-2.5e1", -25.0),
    ],
)
def test_parse_number(value, expected):
    """Comma decimals are accepted; anything unparsable or non-finite is None."""
    assert parse_number(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected", [("1995", 1995), ("1995.0", 1995), ("1995.5", None), ("", None), ("x", None)]
)
def test_parse_integer(value, expected):
    assert parse_integer(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("1998-03-02", datetime(1998, 3, 2)),
        ("2021-11-05 21:14", datetime(2021, 11, 5, 21, 14)),
        ("2021-11-05T21:14:09", datetime(2021, 11, 5, 21, 14, 9)),
        (" 2021-11-05 ", datetime(2021, 11, 5)),
        ("05-11-2021", None),
        ("2023-02-30", None),
        ("2021-11-05 25:00", None),
        ("yesterday", None),
        ("２０２１-01-01", None),
        ("", None),
    ],
)
def test_parse_placed_date(value, expected):
    """Only strict ISO-like dates parse; impossible dates are None."""
    assert parse_placed_date(value) == expected


@pytest.mark.unit
def test_load_records_rejects_non_text():
    """Systemic failures raise DatasetLoadError with the dataset name."""
    with pytest.raises(DatasetLoadError) as exc_info:
        load_records(b"id,titel\n", dataset_name="stemmen.csv")

    assert exc_info.value.dataset_name == "stemmen.csv"


@pytest.mark.unit
def test_load_records_on_empty_text():
    assert load_records("", ColumnMapping()) == []


@pytest.mark.unit
def test_load_records_sample(sample_csv_text):
    """The sample export parses to one record per data row with typed fields."""
    records = load_records(sample_csv_text, ColumnMapping())

    assert len(records) == 11
    assert records[1].title == 'Final Fantasy VII, "International" Edition'
    assert records[1].alt_title == "FF7"
    assert records[1].placed == datetime(1999, 1, 10, 20, 15)
    assert records[8].rating == 4.5
    assert records[9].rating is None
    assert records[9].platform is None
    assert records[10].placed is None


@pytest.mark.unit
def test_idempotent_loading(sample_csv_text):
    """Loading identical text twice yields equal record sequences."""
    first = load_records(sample_csv_text, ColumnMapping())
    second = load_records(sample_csv_text, ColumnMapping())

    assert first == second
