"""
Core aggregation engine for the Insights context.

Pure functions over the VoteRecord sequence. None of them raise on empty input:
they return zero-valued or None-bearing results instead.
"""

from collections import defaultdict
from typing import Dict, List, Sequence

from gamesmeter.contexts.ingest.vote_data_structure import VoteRecord
from gamesmeter.contexts.insights.insight_data_structures import (
    TREND_NOT_ENOUGH_DATA,
    TREND_SUMMARY_KEYS,
    GeneralStats,
    PlatformCount,
    RatingBucket,
    TrendDirection,
    TrendInsight,
    TrendPoint,
    YearSummary,
)
from gamesmeter.contexts.insights.statistics import (
    bucket_index,
    bucket_labels,
    linear_regression_slope,
    mean,
    median,
    std_dev,
)

DEFAULT_UNKNOWN_PLATFORM = "Unknown"
TOP_GAMES_PER_YEAR = 3
FLAT_SLOPE_THRESHOLD = 0.03


def platform_key(record: VoteRecord, unknown_label: str) -> str:
    """Platform name with None and blank values collapsed onto unknown_label."""
    name = (record.platform or "").strip()
    return name or unknown_label


def build_year_summaries(records: Sequence[VoteRecord]) -> List[YearSummary]:
    """
    Summarize ratings per release year.

    Only records with both a year and a rating take part. The top games of a
    year are sorted by rating, descending; equal ratings keep export order.

    Returns:
        One YearSummary per year, most recent year first
    """
    by_year: Dict[int, List[VoteRecord]] = defaultdict(list)
    for record in records:
        if record.year is None or record.rating is None:
            continue
        by_year[record.year].append(record)

    summaries = []
    for year, year_records in by_year.items():
        ratings = [record.rating for record in year_records]
        top_games = sorted(year_records, key=lambda record: record.rating, reverse=True)
        summaries.append(
            YearSummary(
                year=year,
                count=len(year_records),
                average=mean(ratings),
                median=median(ratings),
                min=min(ratings),
                max=max(ratings),
                top_games=top_games[:TOP_GAMES_PER_YEAR],
            )
        )

    return sorted(summaries, key=lambda summary: summary.year, reverse=True)


def build_rating_buckets(ratings: Sequence[float]) -> List[RatingBucket]:
    """Fixed 10-bucket histogram over 0.5..5.0; every bucket is present."""
    labels = bucket_labels()
    counts = [0] * len(labels)
    for rating in ratings:
        index = bucket_index(rating)
        if 0 <= index < len(counts):
            counts[index] += 1
    return [RatingBucket(label=label, count=count) for label, count in zip(labels, counts)]


def count_platforms(
    records: Sequence[VoteRecord], unknown_label: str = DEFAULT_UNKNOWN_PLATFORM
) -> List[PlatformCount]:
    """Count records per platform, most common first (ties keep first-seen order)."""
    counts: Dict[str, int] = defaultdict(int)
    for record in records:
        counts[platform_key(record, unknown_label)] += 1

    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [PlatformCount(name=name, count=count) for name, count in ordered]


def build_general_stats(
    records: Sequence[VoteRecord], unknown_platform_label: str = DEFAULT_UNKNOWN_PLATFORM
) -> GeneralStats:
    """
    Corpus-wide statistics over rated records.

    Unrated records are ignored everywhere, including the year range and
    platform counts.

    Args:
        records: Normalized records
        unknown_platform_label: Name used for records without a platform

    Returns:
        GeneralStats (all zero / None with a zeroed histogram for empty input)
    """
    rated = [record for record in records if record.rating is not None]
    ratings = [record.rating for record in rated]
    years = [record.year for record in rated if record.year is not None]

    return GeneralStats(
        total=len(rated),
        rated_count=len(ratings),
        average=mean(ratings),
        median=median(ratings),
        std_dev=std_dev(ratings),
        min=min(ratings) if ratings else 0.0,
        max=max(ratings) if ratings else 0.0,
        first_year=min(years) if years else None,
        last_year=max(years) if years else None,
        platform_counts=count_platforms(rated, unknown_platform_label),
        rating_buckets=build_rating_buckets(ratings),
    )


def build_trend_insight(year_summaries: Sequence[YearSummary]) -> TrendInsight:
    """
    Fit a line through yearly averages and classify its direction.

    |slope| < 0.03 is flat, otherwise the sign decides up or down. Fewer than
    two years gives a flat trend with the "not enough data" summary key.
    """
    points = sorted(
        (TrendPoint(year=summary.year, value=summary.average) for summary in year_summaries),
        key=lambda point: point.year,
    )

    if len(points) < 2:
        return TrendInsight(
            direction=TrendDirection.FLAT,
            slope=0.0,
            points=points,
            summary=TREND_NOT_ENOUGH_DATA,
        )

    slope = linear_regression_slope(
        [point.year for point in points], [point.value for point in points]
    )

    if abs(slope) < FLAT_SLOPE_THRESHOLD:
        direction = TrendDirection.FLAT
    elif slope > 0:
        direction = TrendDirection.UP
    else:
        direction = TrendDirection.DOWN

    return TrendInsight(
        direction=direction,
        slope=slope,
        points=points,
        summary=TREND_SUMMARY_KEYS[direction],
    )


def build_highest_rated_years(
    year_summaries: Sequence[YearSummary], min_count: int = 3, limit: int = 3
) -> List[YearSummary]:
    """Best-scoring years among those with at least min_count ratings."""
    eligible = [summary for summary in year_summaries if summary.count >= min_count]
    ranked = sorted(eligible, key=lambda summary: summary.average, reverse=True)
    return ranked[:limit]
