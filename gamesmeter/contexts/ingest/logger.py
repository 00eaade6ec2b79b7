"""
Ingest context logger.

Provides logging interface for ingest context with automatic [ingest] prefix.
All ingest modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from gamesmeter.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[ingest]"


def setup_ingest_logger(log_dir: Path, source: str = "") -> Path:
    """
    Setup logger for ingest context.

    Args:
        log_dir: Directory for this ingest session
        source: Input description for provenance (e.g., the CSV path)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="ingest",
        log_dir=log_dir,
        extra_provenance={"Input": source},
    )


# Wrapper functions with automatic [ingest] prefix


def _log_info(message: str) -> None:
    """Log info message with [ingest] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [ingest] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [ingest] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
