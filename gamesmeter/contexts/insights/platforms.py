"""
Platform breakdowns: per-platform statistics and their headline picks, the
year x platform series and the dominant / least-played platform of each decade.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from gamesmeter.contexts.ingest.vote_data_structure import VoteRecord
from gamesmeter.contexts.insights.aggregations import DEFAULT_UNKNOWN_PLATFORM, platform_key
from gamesmeter.contexts.insights.insight_data_structures import (
    EraPlatform,
    PlatformSignature,
    PlatformStats,
    YearPlatform,
)
from gamesmeter.contexts.insights.statistics import decade_of, mean, std_dev

# Ratings a platform needs before it can be called the most consistent
CONSISTENT_MIN_RATINGS = 5


def build_platform_stats(
    records: Sequence[VoteRecord], unknown_label: str = DEFAULT_UNKNOWN_PLATFORM
) -> List[PlatformStats]:
    """
    Rating count, average and spread per platform.

    Returns:
        PlatformStats for every platform with a rated record, most rated first
    """
    ratings_by_platform: Dict[str, List[float]] = defaultdict(list)
    for record in records:
        if record.rating is None:
            continue
        ratings_by_platform[platform_key(record, unknown_label)].append(record.rating)

    stats = [
        PlatformStats(name=name, count=len(ratings), average=mean(ratings), std_dev=std_dev(ratings))
        for name, ratings in ratings_by_platform.items()
    ]
    return sorted(stats, key=lambda item: item.count, reverse=True)


def build_platform_signature(platforms: Sequence[PlatformStats]) -> Optional[PlatformSignature]:
    """
    Most played, highest rated and most consistent platform.

    Args:
        platforms: Output of build_platform_stats() (most rated first)

    Returns:
        PlatformSignature, or None when there are no platforms. Ties go to the
        platform listed first.
    """
    if not platforms:
        return None

    candidates = [item for item in platforms if item.count >= CONSISTENT_MIN_RATINGS]
    return PlatformSignature(
        most_played=platforms[0],
        highest_average=max(platforms, key=lambda item: item.average),
        most_consistent=min(candidates, key=lambda item: item.std_dev) if candidates else None,
    )


def build_year_platform_series(
    records: Sequence[VoteRecord], unknown_label: str = DEFAULT_UNKNOWN_PLATFORM
) -> List[YearPlatform]:
    """Count and average rating per (release year, platform), in first-seen order."""
    groups: Dict[Tuple[int, str], List[float]] = defaultdict(list)
    for record in records:
        if record.rating is None or record.year is None:
            continue
        groups[(record.year, platform_key(record, unknown_label))].append(record.rating)

    return [
        YearPlatform(year=year, platform=platform, count=len(ratings), average=mean(ratings))
        for (year, platform), ratings in groups.items()
    ]


def _era_label(decade: int) -> str:
    """1990 -> "90's", 2000 -> "00's"."""
    return f"{str(decade)[-2:]}'s"


def _decade_platform_totals(series: Sequence[YearPlatform]) -> Dict[Tuple[int, str], Tuple[float, int]]:
    """(decade, platform) -> (rating total, rating count), count-weighted."""
    totals: Dict[Tuple[int, str], Tuple[float, int]] = {}
    for item in series:
        key = (decade_of(item.year), item.platform)
        total, count = totals.get(key, (0.0, 0))
        totals[key] = (total + item.average * item.count, count + item.count)
    return totals


def _pick_per_era(series: Sequence[YearPlatform], prefer_most: bool) -> List[EraPlatform]:
    chosen: Dict[int, EraPlatform] = {}
    for (decade, platform), (total, count) in _decade_platform_totals(series).items():
        existing = chosen.get(decade)
        better = existing is None or (
            count > existing.count if prefer_most else count < existing.count
        )
        if better:
            chosen[decade] = EraPlatform(
                era=_era_label(decade),
                decade=decade,
                platform=platform,
                average=total / max(count, 1),
                count=count,
            )
    return sorted(chosen.values(), key=lambda item: item.decade)


def build_era_peaks(series: Sequence[YearPlatform]) -> List[EraPlatform]:
    """Most-rated platform of each decade, oldest decade first."""
    return _pick_per_era(series, prefer_most=True)


def build_era_lows(series: Sequence[YearPlatform]) -> List[EraPlatform]:
    """Least-rated platform of each decade, oldest decade first."""
    return _pick_per_era(series, prefer_most=False)
