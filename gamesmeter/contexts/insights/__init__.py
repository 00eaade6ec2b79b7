"""
Insights Context

Responsibilities:
- Aggregates the record sequence into yearly summaries and corpus statistics
- Detects the rating trend over release years (least-squares slope)
- Classifies the gamer profile with fixed threshold rules
- Breaks ratings down by platform, decade and rating activity

Owns: All numeric aggregation, tie-break and bucketing policies
Never: Parses CSV text or chooses wording (see Narrative context)
"""

from gamesmeter.contexts.insights.activity import build_activity_stats
from gamesmeter.contexts.insights.aggregations import (
    build_general_stats,
    build_highest_rated_years,
    build_trend_insight,
    build_year_summaries,
)
from gamesmeter.contexts.insights.insight_data_structures import (
    ActivityStats,
    GamerProfile,
    GeneralStats,
    PlatformSignature,
    ProfileFacts,
    TrendDirection,
    TrendInsight,
    YearSummary,
)
from gamesmeter.contexts.insights.platforms import (
    build_era_lows,
    build_era_peaks,
    build_platform_signature,
    build_platform_stats,
    build_year_platform_series,
)
from gamesmeter.contexts.insights.profile import build_gamer_profile, classify_profile

__all__ = [
    # Core aggregations
    "build_year_summaries",
    "build_general_stats",
    "build_trend_insight",
    "build_highest_rated_years",
    # Profile
    "classify_profile",
    "build_gamer_profile",
    # Platforms and activity
    "build_platform_stats",
    "build_platform_signature",
    "build_year_platform_series",
    "build_era_peaks",
    "build_era_lows",
    "build_activity_stats",
    # Data structures
    "ActivityStats",
    "GamerProfile",
    "GeneralStats",
    "PlatformSignature",
    "ProfileFacts",
    "TrendDirection",
    "TrendInsight",
    "YearSummary",
]
