"""
Data structures for the Insights context.

All values are built fresh by the aggregation functions and never mutated
afterwards. to_dict() gives a JSON-friendly view for the CLI.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from gamesmeter.contexts.ingest.vote_data_structure import VoteRecord


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


# Narrative keys for TrendInsight.summary
TREND_NOT_ENOUGH_DATA = "trend.not_enough_data"
TREND_SUMMARY_KEYS = {
    TrendDirection.FLAT: "trend.flat",
    TrendDirection.UP: "trend.up",
    TrendDirection.DOWN: "trend.down",
}


def _jsonable(value: Any) -> Any:
    """Recursively convert nested structures, dates and enums into JSON-friendly values."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


class _Serializable:
    """Mixin providing to_dict() for dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        # Shallow field walk; asdict() would flatten VoteRecords including raw cells
        return {name: _jsonable(getattr(self, name)) for name in self.__dataclass_fields__}


@dataclass(frozen=True)
class YearSummary(_Serializable):
    """Rating statistics for one release year."""

    year: int
    count: int
    average: float
    median: float
    min: float
    max: float
    top_games: List[VoteRecord] = field(default_factory=list)


@dataclass(frozen=True)
class PlatformCount(_Serializable):
    name: str
    count: int


@dataclass(frozen=True)
class RatingBucket(_Serializable):
    label: str
    count: int


@dataclass(frozen=True)
class GeneralStats(_Serializable):
    """Corpus-wide statistics over rated records."""

    total: int
    rated_count: int
    average: float
    median: float
    std_dev: float
    min: float
    max: float
    first_year: Optional[int]
    last_year: Optional[int]
    platform_counts: List[PlatformCount] = field(default_factory=list)
    rating_buckets: List[RatingBucket] = field(default_factory=list)


@dataclass(frozen=True)
class TrendPoint(_Serializable):
    year: int
    value: float


@dataclass(frozen=True)
class TrendInsight(_Serializable):
    """Direction of the yearly average rating over release years."""

    direction: TrendDirection
    slope: float
    points: List[TrendPoint]
    summary: str


@dataclass(frozen=True)
class DecadeAverage(_Serializable):
    decade: int
    average: float

    @property
    def label(self) -> str:
        return f"{self.decade}s"


@dataclass(frozen=True)
class ProfileFacts(_Serializable):
    """
    Structured outcome of the profile rules.

    Everything the narrative needs, with no wording attached.
    """

    generosity: str
    consistency: str
    pace: str
    average: float
    std_dev: float
    total: int
    first_year: Optional[int]
    last_year: Optional[int]
    top_platforms: List[str]
    rating_mode: Optional[str]
    best_decade: Optional[DecadeAverage]
    best_year: Optional[YearSummary]
    busiest_year: Optional[YearSummary]
    trend_direction: TrendDirection
    slope: float


@dataclass(frozen=True)
class GamerProfile(_Serializable):
    """Narrative profile plus the facts it was written from."""

    title: str
    subtitle: str
    lead: str
    description: str
    traits: List[str]
    facts: ProfileFacts


# ============================================================================
# Platform and activity structures
# ============================================================================


@dataclass(frozen=True)
class PlatformStats(_Serializable):
    name: str
    count: int
    average: float
    std_dev: float


@dataclass(frozen=True)
class PlatformSignature(_Serializable):
    """
    Headline platforms.

    most_consistent only considers platforms with enough ratings and is None
    when none qualify.
    """

    most_played: PlatformStats
    highest_average: PlatformStats
    most_consistent: Optional[PlatformStats]


@dataclass(frozen=True)
class YearPlatform(_Serializable):
    year: int
    platform: str
    count: int
    average: float


@dataclass(frozen=True)
class EraPlatform(_Serializable):
    """Dominant (or least-played) platform of one decade."""

    era: str
    decade: int
    platform: str
    average: float
    count: int


@dataclass(frozen=True)
class LabelCount(_Serializable):
    label: str
    count: int


@dataclass(frozen=True)
class RatingGap(_Serializable):
    days: int
    start: datetime
    end: datetime


@dataclass(frozen=True)
class BusiestDate(_Serializable):
    day: date
    count: int


@dataclass(frozen=True)
class BusiestYear(_Serializable):
    year: int
    count: int


@dataclass(frozen=True)
class RatingStreak(_Serializable):
    rating: float
    length: int
    start: datetime
    end: datetime


@dataclass(frozen=True)
class TasteShift(_Serializable):
    year: int
    delta: float


@dataclass(frozen=True)
class PolarizingYear(_Serializable):
    """Release year whose ratings are spread the widest."""

    year: int
    std_dev: float
    count: int


@dataclass(frozen=True)
class FranchiseCount(_Serializable):
    name: str
    count: int


@dataclass(frozen=True)
class LongestTitle(_Serializable):
    title: str
    length: int


@dataclass(frozen=True)
class PlatformPersonality(_Serializable):
    platform: str
    generosity: str
    consistency: str
    average: float
    std_dev: float


@dataclass(frozen=True)
class ActivityStats(_Serializable):
    """
    When ratings were placed, as opposed to when games were released, plus a
    few curiosities about titles and release years.

    Month and weekday counts carry phrasebook keys ("jan", "mon") as labels;
    the narrative layer turns them into words.
    """

    placed_count: int
    first_rated: Optional[VoteRecord]
    last_rated: Optional[VoteRecord]
    longest_gap: Optional[RatingGap]
    month_counts: List[LabelCount]
    weekday_counts: List[LabelCount]
    year_counts: List[LabelCount]
    busiest_weekday: Optional[LabelCount]
    quietest_weekday: Optional[LabelCount]
    busiest_date: Optional[BusiestDate]
    busiest_year: Optional[BusiestYear]
    rating_streak: Optional[RatingStreak]
    taste_shift: Optional[TasteShift]
    platform_personality: Optional[PlatformPersonality]
    most_polarizing_year: Optional[PolarizingYear]
    top_franchise: Optional[FranchiseCount]
    longest_title: Optional[LongestTitle]

