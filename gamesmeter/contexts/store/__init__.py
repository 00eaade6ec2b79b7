"""
Store Context

Responsibilities:
- Holds the current dataset and its lifecycle status (empty, ready, error)
- Memoizes derived insights until the dataset is replaced
- Caches the last successfully loaded CSV text for replay on next start

Owns: Dataset lifecycle, dataset cache repository
Never: Computes insights itself (delegates to Insights context)
"""

from gamesmeter.contexts.store.dataset_cache import (
    CachedDataset,
    DatasetCache,
    InMemoryDatasetCache,
    JsonFileDatasetCache,
)
from gamesmeter.contexts.store.insights_store import DatasetStatus, InsightsStore

__all__ = [
    "InsightsStore",
    "DatasetStatus",
    "CachedDataset",
    "DatasetCache",
    "InMemoryDatasetCache",
    "JsonFileDatasetCache",
]
