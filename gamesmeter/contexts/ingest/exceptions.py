"""Custom exceptions for the ingest context."""

from pathlib import Path
from typing import List, Optional


class ColumnConfigError(ValueError):
    """
    Raised when the column configuration file is missing required field entries.

    Attributes:
        config_path: Path to the offending config file
        missing_fields: Field names that have no header configured
    """

    def __init__(self, config_path: Optional[Path], missing_fields: List[str]):
        self.config_path = config_path
        self.missing_fields = missing_fields

        source = str(config_path) if config_path else "column mapping"
        super().__init__(f"{source} is missing header names for: {', '.join(missing_fields)}")


class DatasetLoadError(Exception):
    """
    Raised when a CSV export cannot be turned into records as a whole.

    Per-field and per-record anomalies never raise; they normalize to None.
    This is only for systemic failures (e.g., the input is not text).

    Attributes:
        message: Error description
        dataset_name: Display name of the dataset being loaded
        original_error: The underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        dataset_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.dataset_name = dataset_name
        self.original_error = original_error

        parts = [message]
        if dataset_name:
            parts.append(f"Dataset: {dataset_name}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))
