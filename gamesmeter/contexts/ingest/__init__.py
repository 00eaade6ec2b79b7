"""
Ingest Context

Responsibilities:
- Parses the raw CSV export (quoted cells, embedded delimiters and newlines)
- Maps export columns onto typed VoteRecords by header name
- Parses numbers and dates defensively (unparsable values become None)

Owns: CSV tokenizing, column contract, record normalization
Never: Aggregates or interprets ratings
"""

from gamesmeter.contexts.ingest.column_mapping import ColumnMapping, load_column_mapping
from gamesmeter.contexts.ingest.csv_parser import parse_csv
from gamesmeter.contexts.ingest.exceptions import ColumnConfigError, DatasetLoadError
from gamesmeter.contexts.ingest.normalizer import load_records, normalize_rows
from gamesmeter.contexts.ingest.vote_data_structure import ParsedTable, VoteRecord

__all__ = [
    # Parsing and normalization
    "parse_csv",
    "normalize_rows",
    "load_records",
    # Column contract
    "ColumnMapping",
    "load_column_mapping",
    # Data structures
    "ParsedTable",
    "VoteRecord",
    # Errors
    "ColumnConfigError",
    "DatasetLoadError",
]
