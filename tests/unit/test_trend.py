"""Unit tests for trend detection over yearly averages."""

import pytest

from gamesmeter.contexts.insights.aggregations import build_trend_insight
from gamesmeter.contexts.insights.insight_data_structures import TrendDirection, YearSummary


def make_summary(year, average, count=1):
    return YearSummary(
        year=year, count=count, average=average, median=average, min=average, max=average
    )


@pytest.mark.unit
def test_two_points_slope_one_is_up():
    trend = build_trend_insight([make_summary(2021, 4.0), make_summary(2020, 3.0)])

    assert trend.slope == 1.0
    assert trend.direction is TrendDirection.UP
    assert trend.summary == "trend.up"
    assert [point.year for point in trend.points] == [2020, 2021]


@pytest.mark.unit
def test_identical_averages_are_flat():
    trend = build_trend_insight([make_summary(year, 3.5) for year in (2003, 2002, 2001)])

    assert trend.slope == 0
    assert trend.direction is TrendDirection.FLAT
    assert trend.summary == "trend.flat"


@pytest.mark.unit
def test_falling_averages_are_down():
    trend = build_trend_insight([make_summary(2010, 2.0), make_summary(2000, 4.0)])

    assert trend.slope == pytest.approx(-0.2)
    assert trend.direction is TrendDirection.DOWN


@pytest.mark.unit
def test_small_slope_counts_as_flat():
    """|slope| below 0.03 per year is flat."""
    trend = build_trend_insight([make_summary(2000, 3.0), make_summary(2010, 3.2)])

    assert trend.slope == pytest.approx(0.02)
    assert trend.direction is TrendDirection.FLAT


@pytest.mark.unit
@pytest.mark.parametrize("summaries", [[], [make_summary(1999, 4.0)]])
def test_not_enough_data(summaries):
    trend = build_trend_insight(summaries)

    assert trend.direction is TrendDirection.FLAT
    assert trend.slope == 0
    assert trend.summary == "trend.not_enough_data"
    assert len(trend.points) == len(summaries)


@pytest.mark.unit
def test_to_dict_is_json_friendly():
    trend = build_trend_insight([make_summary(2020, 3.0), make_summary(2021, 4.0)])
    data = trend.to_dict()

    assert data["direction"] == "up"
    assert data["points"] == [{"year": 2020, "value": 3.0}, {"year": 2021, "value": 4.0}]
