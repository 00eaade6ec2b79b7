"""
Dataset cache repository.

Keeps the last successfully loaded CSV text and its display name so it can be
replayed through the ingest path on the next start. Only one blob is ever
stored; saving replaces it.

Cache failures are never fatal: implementations log and carry on.
"""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from gamesmeter.contexts.store.logger import _log_debug, _log_warning
from gamesmeter.utils.timestamp import now_exact

load_dotenv()
DEFAULT_CACHE_FILE = "outs/cache/last_dataset.json"


@dataclass(frozen=True)
class CachedDataset:
    """The cached CSV blob."""

    name: str
    text: str
    saved_at: Optional[str] = None


class DatasetCache(ABC):
    """
    Abstract repository for the cached dataset.

    Subclasses implement load(), save() and clear().
    """

    @abstractmethod
    def load(self) -> Optional[CachedDataset]:
        """Return the cached dataset, or None when nothing (usable) is cached."""
        pass

    @abstractmethod
    def save(self, text: str, name: str) -> None:
        """Replace the cached dataset."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the cached dataset."""
        pass


class InMemoryDatasetCache(DatasetCache):
    """Process-local cache, mainly for tests and one-shot scripts."""

    def __init__(self, initial: Optional[CachedDataset] = None):
        self._dataset = initial

    def load(self) -> Optional[CachedDataset]:
        return self._dataset

    def save(self, text: str, name: str) -> None:
        self._dataset = CachedDataset(name=name, text=text, saved_at=now_exact())

    def clear(self) -> None:
        self._dataset = None


def get_cache_file() -> Path:
    """Resolve the cache file path (GAMESMETER_CACHE_FILE, read at call time)."""
    return Path(os.getenv("GAMESMETER_CACHE_FILE", DEFAULT_CACHE_FILE))


class JsonFileDatasetCache(DatasetCache):
    """
    Cache stored as a small JSON document: {"name": ..., "text": ..., "saved_at": ...}.

    Attributes:
        path: Location of the JSON file
    """

    def __init__(self, path: Path = None):
        """
        Args:
            path: Cache file location. Defaults to GAMESMETER_CACHE_FILE from environment
        """
        if path is None:
            path = get_cache_file()
        self.path = Path(path)

    def load(self) -> Optional[CachedDataset]:
        if not self.path.exists():
            return None

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # ValueError covers malformed JSON and undecodable bytes
            _log_warning(f"Unable to read cached dataset at {self.path}: {e}")
            return None

        if not isinstance(payload, dict) or not payload.get("text"):
            _log_debug(f"Cached dataset at {self.path} has no text, ignoring")
            return None

        return CachedDataset(
            name=str(payload.get("name") or ""),
            text=str(payload["text"]),
            saved_at=payload.get("saved_at"),
        )

    def save(self, text: str, name: str) -> None:
        payload = {"name": name, "text": text, "saved_at": now_exact()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload), encoding="utf-8")
        except OSError as e:
            _log_warning(f"Unable to cache dataset at {self.path}: {e}")

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            _log_warning(f"Unable to clear cached dataset at {self.path}: {e}")
