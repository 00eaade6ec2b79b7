"""Unit tests for the column contract config."""

import pytest

from gamesmeter.contexts.ingest.column_mapping import (
    DEFAULT_COLUMNS_CONFIG,
    ColumnMapping,
    get_columns_config_path,
    load_column_mapping,
)
from gamesmeter.contexts.ingest.exceptions import ColumnConfigError


@pytest.mark.unit
def test_bundled_config_matches_defaults():
    """columns.yaml describes the standard GamesMeter export."""
    assert load_column_mapping(DEFAULT_COLUMNS_CONFIG) == ColumnMapping()


@pytest.mark.unit
def test_header_names_excludes_fallback_title():
    names = ColumnMapping().header_names()

    assert names["id"] == "GamesMeter id"
    assert names["rating"] == "stem"
    assert "fallback_title" not in names
    assert len(names) == 7


@pytest.mark.unit
def test_env_override(tmp_path, monkeypatch):
    """GAMESMETER_COLUMNS_CONFIG points at another config file."""
    config = tmp_path / "columns.yaml"
    config.write_text(
        "columns:\n"
        "  id: id\n"
        "  title: title\n"
        "  year: year\n"
        "  alt_title: alt\n"
        "  platform: system\n"
        "  rating: score\n"
        "  placed: rated_at\n"
        "fallback_title: Untitled\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GAMESMETER_COLUMNS_CONFIG", str(config))

    assert get_columns_config_path() == config
    mapping = load_column_mapping()
    assert mapping.platform == "system"
    assert mapping.rating == "score"
    assert mapping.fallback_title == "Untitled"


@pytest.mark.unit
def test_missing_fields_raise(tmp_path):
    """A config without every field raises ColumnConfigError naming the gaps."""
    config = tmp_path / "columns.yaml"
    config.write_text("columns:\n  id: id\n  title: title\n", encoding="utf-8")

    with pytest.raises(ColumnConfigError) as exc_info:
        load_column_mapping(config)

    assert "rating" in exc_info.value.missing_fields
    assert "placed" in exc_info.value.missing_fields
    assert isinstance(exc_info.value, ValueError)


@pytest.mark.unit
def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_column_mapping(tmp_path / "nope.yaml")
