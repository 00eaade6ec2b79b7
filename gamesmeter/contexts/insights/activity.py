"""
Rating activity statistics.

Looks at when ratings were placed (the "geplaatst" timestamp) rather than at
release years: first and last rating, quiet spells, busiest days and years,
same-score streaks, plus a handful of taste and title curiosities.

Month and weekday counts are labelled with phrasebook keys ("jan", "mon");
weekdays start on Monday. Ties between equally busy dates or years go to the
one met first in export order.
"""

import math
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Sequence

from gamesmeter.contexts.ingest.vote_data_structure import VoteRecord
from gamesmeter.contexts.insights.aggregations import DEFAULT_UNKNOWN_PLATFORM
from gamesmeter.contexts.insights.insight_data_structures import (
    ActivityStats,
    BusiestDate,
    BusiestYear,
    FranchiseCount,
    LabelCount,
    LongestTitle,
    PlatformPersonality,
    PolarizingYear,
    RatingGap,
    RatingStreak,
    TasteShift,
)
from gamesmeter.contexts.insights.platforms import build_platform_stats
from gamesmeter.contexts.insights.statistics import mean, std_dev

MONTH_KEYS = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]
WEEKDAY_KEYS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

SECONDS_PER_DAY = 24 * 60 * 60

# Platform personality tiers (a touch stricter on generosity than the profile)
PERSONALITY_GENEROUS_AT = 3.7
PERSONALITY_TOUGH_AT = 2.6
PERSONALITY_STEADY_AT = 0.8
PERSONALITY_WILD_AT = 1.3

POLARIZING_MIN_RATINGS = 3

# Checked in this order; the first one found past the start of the title wins
FRANCHISE_SEPARATORS = (":", " - ", " \u2013 ", " \u2014 ", "(", "[")


def _placed_in_order(records: Sequence[VoteRecord]) -> List[VoteRecord]:
    """Records with a placement time, oldest first (ties keep export order)."""
    placed = [record for record in records if record.placed is not None]
    return sorted(placed, key=lambda record: record.placed)


def find_longest_gap(ordered: Sequence[VoteRecord]) -> Optional[RatingGap]:
    """Longest stretch between two consecutive placements."""
    longest = 0.0
    gap = None
    for previous, current in zip(ordered, ordered[1:]):
        seconds = (current.placed - previous.placed).total_seconds()
        if seconds > longest:
            longest = seconds
            gap = (previous.placed, current.placed)

    if gap is None:
        return None
    return RatingGap(days=math.floor(longest / SECONDS_PER_DAY + 0.5), start=gap[0], end=gap[1])


def count_by_month(ordered: Sequence[VoteRecord]) -> List[LabelCount]:
    counts = [0] * 12
    for record in ordered:
        counts[record.placed.month - 1] += 1
    return [LabelCount(label=label, count=count) for label, count in zip(MONTH_KEYS, counts)]


def count_by_weekday(ordered: Sequence[VoteRecord]) -> List[LabelCount]:
    counts = [0] * 7
    for record in ordered:
        counts[record.placed.weekday()] += 1
    return [LabelCount(label=label, count=count) for label, count in zip(WEEKDAY_KEYS, counts)]


def count_by_placed_year(ordered: Sequence[VoteRecord]) -> List[LabelCount]:
    counts: Dict[int, int] = defaultdict(int)
    for record in ordered:
        counts[record.placed.year] += 1
    return [LabelCount(label=str(year), count=counts[year]) for year in sorted(counts)]


def pick_busiest(counts: Sequence[LabelCount]) -> Optional[LabelCount]:
    """Highest non-zero count; ties go to the first entry."""
    best = None
    for entry in counts:
        if entry.count > 0 and (best is None or entry.count > best.count):
            best = entry
    return best


def pick_quietest(counts: Sequence[LabelCount]) -> Optional[LabelCount]:
    """Lowest non-zero count; ties go to the first entry."""
    worst = None
    for entry in counts:
        if entry.count > 0 and (worst is None or entry.count < worst.count):
            worst = entry
    return worst


def find_busiest_date(records: Sequence[VoteRecord]) -> Optional[BusiestDate]:
    """Calendar day with the most placements."""
    counts = Counter(record.placed.date() for record in records if record.placed is not None)
    if not counts:
        return None
    # most_common keeps first-seen order among equal counts
    [(day, count)] = counts.most_common(1)
    return BusiestDate(day=day, count=count)


def find_busiest_year(records: Sequence[VoteRecord]) -> Optional[BusiestYear]:
    """Calendar year with the most placements."""
    counts = Counter(record.placed.year for record in records if record.placed is not None)
    if not counts:
        return None
    [(year, count)] = counts.most_common(1)
    return BusiestYear(year=year, count=count)


def find_rating_streak(ordered: Sequence[VoteRecord]) -> Optional[RatingStreak]:
    """Longest run of consecutive placements that share the same rating."""
    rated = [record for record in ordered if record.rating is not None]
    if not rated:
        return None

    first = rated[0]
    best = RatingStreak(rating=first.rating, length=1, start=first.placed, end=first.placed)
    current_rating = first.rating
    current_length = 1
    current_start = first.placed

    for record in rated[1:]:
        if record.rating == current_rating:
            current_length += 1
            if current_length > best.length:
                best = RatingStreak(
                    rating=current_rating,
                    length=current_length,
                    start=current_start,
                    end=record.placed,
                )
        else:
            current_rating = record.rating
            current_length = 1
            current_start = record.placed

    return best


def find_taste_shift(records: Sequence[VoteRecord]) -> Optional[TasteShift]:
    """Change in average rating between the two most recent release years."""
    by_year: Dict[int, List[float]] = defaultdict(list)
    for record in records:
        if record.rating is None or record.year is None:
            continue
        by_year[record.year].append(record.rating)

    if len(by_year) < 2:
        return None

    previous_year, last_year = sorted(by_year)[-2:]
    return TasteShift(year=last_year, delta=mean(by_year[last_year]) - mean(by_year[previous_year]))


def find_platform_personality(
    records: Sequence[VoteRecord], unknown_label: str = DEFAULT_UNKNOWN_PLATFORM
) -> Optional[PlatformPersonality]:
    """Rating temperament on the platform with the most ratings."""
    platforms = build_platform_stats(records, unknown_label)
    if not platforms:
        return None

    top = platforms[0]
    if top.average >= PERSONALITY_GENEROUS_AT:
        generosity = "generous"
    elif top.average <= PERSONALITY_TOUGH_AT:
        generosity = "tough"
    else:
        generosity = "balanced"

    if top.std_dev <= PERSONALITY_STEADY_AT:
        consistency = "steady"
    elif top.std_dev >= PERSONALITY_WILD_AT:
        consistency = "wild"
    else:
        consistency = "varied"

    return PlatformPersonality(
        platform=top.name,
        generosity=generosity,
        consistency=consistency,
        average=top.average,
        std_dev=top.std_dev,
    )


def find_most_polarizing_year(records: Sequence[VoteRecord]) -> Optional[PolarizingYear]:
    """
    Release year with the widest rating spread (population std-dev).

    Years with fewer than POLARIZING_MIN_RATINGS ratings are skipped; ties go
    to the year met first in export order.
    """
    by_year: Dict[int, List[float]] = defaultdict(list)
    for record in records:
        if record.rating is None or record.year is None:
            continue
        by_year[record.year].append(record.rating)

    best = None
    for year, ratings in by_year.items():
        if len(ratings) < POLARIZING_MIN_RATINGS:
            continue
        spread = std_dev(ratings)
        if best is None or spread > best.std_dev:
            best = PolarizingYear(year=year, std_dev=spread, count=len(ratings))
    return best


def franchise_of(title: str) -> str:
    """
    Series name of a title: the part before the first separator found.

    Examples:
        franchise_of("Halo: Combat Evolved")      # "Halo"
        franchise_of("Ico")                       # "Ico"
        franchise_of("(Untitled)")                # "(Untitled)"
    """
    for separator in FRANCHISE_SEPARATORS:
        index = title.find(separator)
        if index > 0:
            return title[:index].strip()
    return title.strip()


def find_top_franchise(records: Sequence[VoteRecord]) -> Optional[FranchiseCount]:
    """Franchise with the most rows; ties go to the first one in export order."""
    counts = Counter(
        franchise_of(record.title.strip()) for record in records if record.title.strip()
    )
    if not counts:
        return None
    [(name, count)] = counts.most_common(1)
    return FranchiseCount(name=name, count=count)


def find_longest_title(records: Sequence[VoteRecord]) -> Optional[LongestTitle]:
    if not records:
        return None
    # max() returns the first of equally long titles
    longest = max(records, key=lambda record: len(record.title))
    return LongestTitle(title=longest.title, length=len(longest.title))


def build_activity_stats(
    records: Sequence[VoteRecord], unknown_label: str = DEFAULT_UNKNOWN_PLATFORM
) -> ActivityStats:
    """
    Collect all activity statistics for a record sequence.

    Args:
        records: Normalized records
        unknown_label: Name used for records without a platform

    Returns:
        ActivityStats; fields that need placements are None when there are none
    """
    ordered = _placed_in_order(records)
    weekday_counts = count_by_weekday(ordered)

    return ActivityStats(
        placed_count=len(ordered),
        first_rated=ordered[0] if ordered else None,
        last_rated=ordered[-1] if ordered else None,
        longest_gap=find_longest_gap(ordered),
        month_counts=count_by_month(ordered),
        weekday_counts=weekday_counts,
        year_counts=count_by_placed_year(ordered),
        busiest_weekday=pick_busiest(weekday_counts),
        quietest_weekday=pick_quietest(weekday_counts),
        busiest_date=find_busiest_date(records),
        busiest_year=find_busiest_year(records),
        rating_streak=find_rating_streak(ordered),
        taste_shift=find_taste_shift(records),
        platform_personality=find_platform_personality(records, unknown_label),
        most_polarizing_year=find_most_polarizing_year(records),
        top_franchise=find_top_franchise(records),
        longest_title=find_longest_title(records),
    )
