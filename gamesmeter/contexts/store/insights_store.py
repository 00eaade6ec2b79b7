"""
Insights store.

Holds the currently loaded dataset and exposes its derived insights. The
records are the single source of truth; every derived view is a pure function
of them and is memoized until the next load or reset.

Status lifecycle:
    empty --load ok--> ready
    ready/error --load ok--> ready
    any --load fails--> error   (previous records are dropped)
    any --reset--> empty
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from gamesmeter.contexts.ingest.column_mapping import ColumnMapping
from gamesmeter.contexts.ingest.normalizer import load_records
from gamesmeter.contexts.ingest.vote_data_structure import VoteRecord
from gamesmeter.contexts.insights.activity import build_activity_stats
from gamesmeter.contexts.insights.aggregations import (
    build_general_stats,
    build_highest_rated_years,
    build_trend_insight,
    build_year_summaries,
)
from gamesmeter.contexts.insights.insight_data_structures import (
    ActivityStats,
    EraPlatform,
    GamerProfile,
    GeneralStats,
    PlatformSignature,
    PlatformStats,
    TrendInsight,
    YearPlatform,
    YearSummary,
)
from gamesmeter.contexts.insights.platforms import (
    build_era_lows,
    build_era_peaks,
    build_platform_signature,
    build_platform_stats,
    build_year_platform_series,
)
from gamesmeter.contexts.insights.profile import build_gamer_profile
from gamesmeter.contexts.narrative.renderer import DEFAULT_LANGUAGE, get_renderer
from gamesmeter.contexts.store.dataset_cache import DatasetCache, InMemoryDatasetCache
from gamesmeter.contexts.store.logger import (
    _log_debug,
    _log_exception,
    _log_info,
    _log_warning,
)
from gamesmeter.utils.event_logging import log_status_change

EVENT_SOURCE = "store"


class DatasetStatus(Enum):
    """Lifecycle state of the loaded dataset."""

    EMPTY = "empty"
    READY = "ready"
    ERROR = "error"


class InsightsStore:
    """
    Current dataset plus memoized insights.

    Attributes:
        cache: Repository for the last successfully loaded CSV text
        lang: Narrative language for profile text and labels
        columns: Column contract passed to the normalizer (None = configured default)
        status: Current DatasetStatus
        file_name: Display name of the loaded dataset
    """

    def __init__(
        self,
        cache: Optional[DatasetCache] = None,
        lang: str = DEFAULT_LANGUAGE,
        columns: Optional[ColumnMapping] = None,
        record_events: bool = True,
    ):
        """
        Args:
            cache: Dataset cache repository (defaults to an in-memory cache)
            lang: Narrative language ("en" or "nl")
            columns: Column contract (defaults to columns.yaml)
            record_events: Append status changes to the dataset event log
        """
        self.cache = cache if cache is not None else InMemoryDatasetCache()
        self.renderer = get_renderer(lang)
        self.lang = lang
        self.columns = columns
        self.record_events = record_events

        self.status = DatasetStatus.EMPTY
        self.file_name: Optional[str] = None
        self._records: List[VoteRecord] = []
        self._version = 0
        self._derived: Dict[str, Any] = {}

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def load_csv_text(self, text: str, name: str) -> DatasetStatus:
        """
        Parse and normalize CSV text and make it the current dataset.

        A failure anywhere in the pipeline puts the store in ERROR and drops
        the previous dataset; it is logged, not raised.

        Args:
            text: Full CSV export text
            name: Display name (usually the file name)

        Returns:
            The resulting status
        """
        try:
            records = load_records(text, self.columns, dataset_name=name)
        except Exception:
            _log_exception(f"Failed to load dataset {name}")
            self._replace_dataset([], None)
            self._transition(DatasetStatus.ERROR, name)
            return self.status

        self._replace_dataset(records, name)
        self._transition(DatasetStatus.READY, name, record_count=len(records))
        self.cache.save(text, name)
        _log_info(f"Loaded {name}: {len(records)} records")
        return self.status

    def restore_from_cache(self) -> bool:
        """
        Replay the cached dataset through the ingest path.

        Returns:
            True when a cached dataset was restored; False otherwise (status untouched)
        """
        name = self.renderer.label("label.cached_file")
        try:
            cached = self.cache.load()
            if cached is None:
                return False
            name = cached.name or name
            records = load_records(cached.text, self.columns, dataset_name=name)
        except Exception as e:
            _log_warning(f"Unable to restore cached dataset {name}: {e}")
            return False

        self._replace_dataset(records, name)
        self._transition(DatasetStatus.READY, name, record_count=len(records), restored=True)
        _log_debug(f"Restored {name} from cache ({len(records)} records)")
        return True

    def reset(self) -> None:
        """Forget the current dataset and clear the cache."""
        previous_name = self.file_name
        self._replace_dataset([], None)
        self._transition(DatasetStatus.EMPTY, previous_name)
        self.cache.clear()

    def _replace_dataset(self, records: List[VoteRecord], name: Optional[str]) -> None:
        self._records = records
        self.file_name = name
        self._version += 1
        self._derived = {}

    def _transition(self, new_status: DatasetStatus, name: Optional[str], **extra_fields) -> None:
        old_status = self.status
        self.status = new_status
        if not self.record_events:
            return
        try:
            log_status_change(
                dataset_name=name,
                old_status=old_status.value,
                new_status=new_status.value,
                source=EVENT_SOURCE,
                version=self._version,
                **extra_fields,
            )
        except OSError as e:
            _log_warning(f"Unable to write dataset event: {e}")

    # =========================================================================
    # DERIVED VIEWS
    # =========================================================================

    @property
    def version(self) -> int:
        """Increments every time the dataset is replaced."""
        return self._version

    def _memo(self, key: str, compute: Callable[[], Any]) -> Any:
        if key not in self._derived:
            self._derived[key] = compute()
        return self._derived[key]

    @property
    def records(self) -> List[VoteRecord]:
        return list(self._records)

    @property
    def unknown_platform_label(self) -> str:
        return self.renderer.unknown_platform_label

    @property
    def year_summaries(self) -> List[YearSummary]:
        return self._memo("year_summaries", lambda: build_year_summaries(self._records))

    @property
    def stats(self) -> GeneralStats:
        return self._memo(
            "stats", lambda: build_general_stats(self._records, self.unknown_platform_label)
        )

    @property
    def trend(self) -> TrendInsight:
        return self._memo("trend", lambda: build_trend_insight(self.year_summaries))

    @property
    def trend_summary(self) -> str:
        return self.renderer.render_trend_summary(self.trend)

    @property
    def profile(self) -> GamerProfile:
        return self._memo(
            "profile",
            lambda: build_gamer_profile(self.stats, self.trend, self.year_summaries, lang=self.lang),
        )

    @property
    def highest_rated_years(self) -> List[YearSummary]:
        return self._memo(
            "highest_rated_years", lambda: build_highest_rated_years(self.year_summaries)
        )

    @property
    def platform_stats(self) -> List[PlatformStats]:
        return self._memo(
            "platform_stats",
            lambda: build_platform_stats(self._records, self.unknown_platform_label),
        )

    @property
    def platform_signature(self) -> Optional[PlatformSignature]:
        return self._memo(
            "platform_signature", lambda: build_platform_signature(self.platform_stats)
        )

    @property
    def activity(self) -> ActivityStats:
        return self._memo(
            "activity", lambda: build_activity_stats(self._records, self.unknown_platform_label)
        )

    @property
    def year_platform_series(self) -> List[YearPlatform]:
        return self._memo(
            "year_platform_series",
            lambda: build_year_platform_series(self._records, self.unknown_platform_label),
        )

    @property
    def era_peaks(self) -> List[EraPlatform]:
        return self._memo("era_peaks", lambda: build_era_peaks(self.year_platform_series))

    @property
    def era_lows(self) -> List[EraPlatform]:
        return self._memo("era_lows", lambda: build_era_lows(self.year_platform_series))
