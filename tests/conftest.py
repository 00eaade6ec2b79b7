"""Shared fixtures for gamesmeter tests."""

from pathlib import Path

import pytest

FIXTURES_PATH = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_outputs(tmp_path, monkeypatch):
    """Point the event log and dataset cache at a per-test temp directory."""
    monkeypatch.setenv("GAMESMETER_EVENTS_FILE", str(tmp_path / "logs" / "dataset_events.log"))
    monkeypatch.setenv("GAMESMETER_CACHE_FILE", str(tmp_path / "cache" / "last_dataset.json"))
    monkeypatch.setenv("LOGS_PATH", str(tmp_path / "logs"))
    return tmp_path


@pytest.fixture
def sample_csv_path() -> Path:
    return FIXTURES_PATH / "sample_votes.csv"


@pytest.fixture
def sample_csv_text(sample_csv_path) -> str:
    return sample_csv_path.read_text(encoding="utf-8")
