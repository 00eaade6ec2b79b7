"""
Column contract for the GamesMeter CSV export.

The export identifies columns by (Dutch) header name. The names live in
columns.yaml next to this module and can be swapped for another file through
GAMESMETER_COLUMNS_CONFIG.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from gamesmeter.contexts.ingest.exceptions import ColumnConfigError

load_dotenv()
DEFAULT_COLUMNS_CONFIG = Path(__file__).parent / "columns.yaml"
DEFAULT_FALLBACK_TITLE = "Unknown title"


@dataclass(frozen=True)
class ColumnMapping:
    """Header name per record field, plus the placeholder for empty titles."""

    id: str = "GamesMeter id"
    title: str = "titel"
    year: str = "jaar"
    alt_title: str = "alternatieve titel"
    platform: str = "platform"
    rating: str = "stem"
    placed: str = "geplaatst"
    fallback_title: str = DEFAULT_FALLBACK_TITLE

    def header_names(self) -> Dict[str, str]:
        """Map each record field to its configured header name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "fallback_title"}


def get_columns_config_path() -> Path:
    """Resolve the column config path (GAMESMETER_COLUMNS_CONFIG or the bundled file)."""
    override = os.getenv("GAMESMETER_COLUMNS_CONFIG")
    return Path(override) if override else DEFAULT_COLUMNS_CONFIG


def load_column_mapping(config_path: Optional[Path] = None) -> ColumnMapping:
    """
    Load the column contract from YAML.

    Args:
        config_path: Optional path to a columns YAML (defaults to get_columns_config_path())

    Returns:
        ColumnMapping with every field's header name

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ColumnConfigError: If a field has no header configured
    """
    if config_path is None:
        config_path = get_columns_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"Column config not found at {config_path}")

    config = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    columns = config.get("columns") or {}

    expected = ColumnMapping().header_names()
    missing = [name for name in expected if not str(columns.get(name) or "").strip()]
    if missing:
        raise ColumnConfigError(config_path, missing)

    return ColumnMapping(
        **{name: str(columns[name]) for name in expected},
        fallback_title=str(config.get("fallback_title") or DEFAULT_FALLBACK_TITLE),
    )
