"""Unit tests for rating activity statistics."""

from datetime import date, datetime

import pytest

from gamesmeter.contexts.ingest.normalizer import load_records
from gamesmeter.contexts.ingest.vote_data_structure import VoteRecord
from gamesmeter.contexts.insights.activity import (
    build_activity_stats,
    find_busiest_date,
    find_busiest_year,
    find_longest_title,
    find_most_polarizing_year,
    find_rating_streak,
    find_taste_shift,
    find_top_franchise,
    franchise_of,
    pick_busiest,
    pick_quietest,
)
from gamesmeter.contexts.insights.insight_data_structures import (
    BusiestDate,
    BusiestYear,
    FranchiseCount,
    LabelCount,
    LongestTitle,
)


def make_record(placed=None, rating=3.0, year=2000, platform="PC", title="Game"):
    return VoteRecord(
        id=None,
        title=title,
        year=year,
        alt_title=None,
        platform=platform,
        rating=rating,
        placed=placed,
    )


@pytest.fixture
def sample_activity(sample_csv_text):
    return build_activity_stats(load_records(sample_csv_text), "Unknown")


@pytest.mark.unit
def test_activity_without_dates():
    """Records without placement dates give empty counts and no highlights."""
    activity = build_activity_stats([make_record(), make_record()])

    assert activity.placed_count == 0
    assert activity.first_rated is None
    assert activity.longest_gap is None
    assert activity.busiest_weekday is None
    assert activity.busiest_date is None
    assert activity.busiest_year is None
    assert activity.rating_streak is None
    assert sum(entry.count for entry in activity.month_counts) == 0
    assert len(activity.weekday_counts) == 7
    assert activity.weekday_counts[0].label == "mon"
    assert activity.month_counts[11].label == "dec"


@pytest.mark.unit
def test_pick_busiest_and_quietest_ignore_zero_counts():
    counts = [LabelCount("mon", 0), LabelCount("tue", 2), LabelCount("wed", 1), LabelCount("thu", 2)]

    assert pick_busiest(counts).label == "tue"
    assert pick_quietest(counts).label == "wed"
    assert pick_busiest([LabelCount("mon", 0)]) is None


@pytest.mark.unit
def test_rating_streak_skips_unrated():
    records = [
        make_record(datetime(2020, 1, 1), 4.0),
        make_record(datetime(2020, 1, 2), 4.0),
        make_record(datetime(2020, 1, 3), None),
        make_record(datetime(2020, 1, 4), 4.0),
        make_record(datetime(2020, 1, 5), 2.0),
    ]
    streak = find_rating_streak(records)

    assert streak.rating == 4.0
    assert streak.length == 3
    assert streak.start == datetime(2020, 1, 1)
    assert streak.end == datetime(2020, 1, 4)


@pytest.mark.unit
def test_taste_shift_needs_two_years():
    assert find_taste_shift([make_record(year=2000)]) is None

    shift = find_taste_shift(
        [
            make_record(year=1990, rating=2.0),
            make_record(year=2000, rating=3.0),
            make_record(year=2010, rating=4.5),
        ]
    )
    assert shift.year == 2010
    assert shift.delta == pytest.approx(1.5)


@pytest.mark.unit
def test_sample_activity_dates(sample_activity):
    assert sample_activity.placed_count == 10
    assert sample_activity.first_rated.title == "Chrono Trigger"
    assert sample_activity.last_rated.title == "Unrated Game"
    assert sample_activity.longest_gap.days == 979
    assert sample_activity.longest_gap.start == datetime(2004, 2, 15)
    assert sample_activity.busiest_date.day == date(1999, 1, 10)
    assert sample_activity.busiest_date.count == 2


@pytest.mark.unit
def test_sample_activity_counts(sample_activity):
    weekdays = {entry.label: entry.count for entry in sample_activity.weekday_counts}
    months = {entry.label: entry.count for entry in sample_activity.month_counts}

    assert weekdays == {"mon": 1, "tue": 0, "wed": 1, "thu": 1, "fri": 1, "sat": 2, "sun": 4}
    assert sample_activity.busiest_weekday.label == "sun"
    assert sample_activity.quietest_weekday.label == "mon"
    assert months["jan"] == 2
    assert months["nov"] == 2
    assert months["dec"] == 0
    assert [entry.label for entry in sample_activity.year_counts] == [
        "1998",
        "1999",
        "2001",
        "2003",
        "2004",
        "2006",
    ]


@pytest.mark.unit
def test_sample_activity_highlights(sample_activity):
    assert sample_activity.rating_streak.rating == 4.5
    assert sample_activity.rating_streak.length == 2
    assert sample_activity.taste_shift.year == 2005
    assert sample_activity.taste_shift.delta == pytest.approx(4.5 - 11 / 3)
    personality = sample_activity.platform_personality
    assert personality.platform == "PlayStation"
    assert personality.generosity == "generous"
    assert personality.consistency == "varied"


@pytest.mark.unit
def test_busiest_date_and_year_ties_follow_export_order():
    """Equally busy days (or years) resolve to the one listed first in the export."""
    records = [
        make_record(datetime(2021, 5, 2, 10, 0)),
        make_record(datetime(2020, 5, 1)),
        make_record(datetime(2021, 5, 2, 11, 0)),
        make_record(datetime(2020, 5, 1, 9, 30)),
        make_record(None),
    ]

    assert find_busiest_date(records) == BusiestDate(day=date(2021, 5, 2), count=2)
    assert find_busiest_year(records) == BusiestYear(year=2021, count=2)
    assert find_busiest_date([make_record(None)]) is None


@pytest.mark.unit
def test_most_polarizing_year_needs_three_ratings():
    records = [
        make_record(year=1990, rating=0.5),
        make_record(year=1990, rating=5.0),
        make_record(year=2000, rating=2.0),
        make_record(year=2000, rating=4.0),
        make_record(year=2000, rating=3.0),
        make_record(year=2010, rating=1.0),
        make_record(year=2010, rating=3.0),
        make_record(year=2010, rating=None),
        make_record(year=2010, rating=2.0),
    ]
    polarizing = find_most_polarizing_year(records)

    assert polarizing.year == 2000
    assert polarizing.count == 3
    assert polarizing.std_dev == pytest.approx((2 / 3) ** 0.5)
    assert find_most_polarizing_year(records[:2]) is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "title, expected",
    [
        ("Halo: Combat Evolved", "Halo"),
        ("Mega Man - The Wily Wars", "Mega Man"),
        ("Zelda – Link's Awakening", "Zelda"),
        ("Rayman (Legends)", "Rayman"),
        ("Doom [2016]", "Doom"),
        ("Star Wars (Episode I): Racer", "Star Wars (Episode I)"),
        ("(Untitled)", "(Untitled)"),
        ("Ico", "Ico"),
    ],
)
def test_franchise_of(title, expected):
    """Separators are tried in a fixed order; one at position 0 is ignored."""
    assert franchise_of(title) == expected


@pytest.mark.unit
def test_top_franchise_and_longest_title():
    records = [
        make_record(title="Ico"),
        make_record(title="Halo: Combat Evolved"),
        make_record(title="Halo 2"),
        make_record(title="Halo: Reach"),
        make_record(title="Shadow of the Colossus"),
    ]

    assert find_top_franchise(records) == FranchiseCount(name="Halo", count=2)
    assert find_longest_title(records) == LongestTitle(title="Shadow of the Colossus", length=22)
    assert find_top_franchise([]) is None
    assert find_longest_title([]) is None


@pytest.mark.unit
def test_sample_curiosities(sample_activity):
    assert sample_activity.busiest_year == BusiestYear(year=1999, count=2)
    assert sample_activity.most_polarizing_year.year == 2001
    assert sample_activity.most_polarizing_year.std_dev == pytest.approx(0.62361, abs=1e-4)
    assert sample_activity.top_franchise == FranchiseCount(name="Chrono Trigger", count=1)
    assert sample_activity.longest_title.length == 42
