"""
Numeric helpers for the aggregation engine.

All helpers are total: empty input yields 0 instead of raising.
"""

import math
import statistics
from typing import List, Sequence

RATING_MIN = 0.5
RATING_MAX = 5.0
RATING_STEP = 0.5


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return statistics.fmean(values)


def median(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(statistics.median(values))


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    if not values:
        return 0.0
    return statistics.pstdev(values)


def linear_regression_slope(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Ordinary least squares slope of y against x.

    slope = sum((x - x_mean) * (y - y_mean)) / sum((x - x_mean) ** 2)

    Returns 0 when x has no spread (or the series are empty).
    """
    x_avg = mean(x)
    y_avg = mean(y)
    numerator = 0.0
    denominator = 0.0
    for x_value, y_value in zip(x, y):
        numerator += (x_value - x_avg) * (y_value - y_avg)
        denominator += (x_value - x_avg) ** 2
    return 0.0 if denominator == 0 else numerator / denominator


def bucket_labels() -> List[str]:
    """Labels of the fixed rating histogram: "0.5", "1.0", ..., "5.0"."""
    count = int(round((RATING_MAX - RATING_MIN) / RATING_STEP)) + 1
    return [f"{RATING_MIN + index * RATING_STEP:.1f}" for index in range(count)]


def bucket_index(rating: float) -> int:
    """
    Histogram bucket for a rating, rounding half up.

    Ratings off the scale map outside 0..9; callers skip those.
    """
    return math.floor((rating - RATING_MIN) / RATING_STEP + 0.5)


def decade_of(year: int) -> int:
    return (year // 10) * 10
