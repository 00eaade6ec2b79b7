"""Unit tests for loguru setup with provenance."""

import sys

import pytest
from loguru import logger

from gamesmeter.contexts.ingest.logger import _log_info, setup_ingest_logger


@pytest.fixture
def restore_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.mark.unit
def test_setup_ingest_logger_writes_provenance(tmp_path, restore_loguru):
    log_file = setup_ingest_logger(tmp_path / "analyze_run", source="votes.csv")
    _log_info("parsed 3 rows")
    logger.complete()

    assert log_file == tmp_path / "analyze_run" / "ingest.log"
    content = log_file.read_text(encoding="utf-8")
    assert "Input: votes.csv" in content
    assert "Working directory:" in content
    assert "[ingest] parsed 3 rows" in content
