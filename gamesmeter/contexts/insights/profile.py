"""
Gamer profile classification.

classify_profile() applies fixed threshold rules to the general statistics,
the trend and the year summaries, and returns structured ProfileFacts.
build_gamer_profile() hands those facts to the Narrative context for wording.

Tie rules (all deterministic):
- best decade, best year, busiest year: first in year-summary order wins
  (year summaries are most-recent-first, so the most recent year wins)
- rating mode: the lowest rating among the most common buckets
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from dotenv import load_dotenv
from omegaconf import OmegaConf

from gamesmeter.contexts.insights.insight_data_structures import (
    DecadeAverage,
    GamerProfile,
    GeneralStats,
    ProfileFacts,
    TrendInsight,
    YearSummary,
)
from gamesmeter.contexts.insights.statistics import decade_of
from gamesmeter.contexts.narrative.renderer import get_renderer

load_dotenv()
DEFAULT_PROFILE_RULES = Path(__file__).parent / "profile_rules.yaml"


@dataclass(frozen=True)
class ProfileRules:
    generous_at: float = 3.6
    tough_at: float = 2.6
    consistent_at: float = 0.8
    wide_ranging_at: float = 1.3
    marathon_at: int = 600
    steady_at: int = 250
    best_year_min_count: int = 3
    top_platform_count: int = 3


def load_profile_rules(config_path: Optional[Path] = None) -> ProfileRules:
    """
    Load profile thresholds from YAML (GAMESMETER_PROFILE_RULES or the bundled file).

    Keys missing from the file keep their defaults.
    """
    if config_path is None:
        override = os.getenv("GAMESMETER_PROFILE_RULES")
        config_path = Path(override) if override else DEFAULT_PROFILE_RULES

    config = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    defaults = ProfileRules()

    def pick(section: str, key: str, default):
        return (config.get(section) or {}).get(key, default)

    return ProfileRules(
        generous_at=float(pick("generosity", "generous_at", defaults.generous_at)),
        tough_at=float(pick("generosity", "tough_at", defaults.tough_at)),
        consistent_at=float(pick("consistency", "consistent_at", defaults.consistent_at)),
        wide_ranging_at=float(pick("consistency", "wide_ranging_at", defaults.wide_ranging_at)),
        marathon_at=int(pick("pace", "marathon_at", defaults.marathon_at)),
        steady_at=int(pick("pace", "steady_at", defaults.steady_at)),
        best_year_min_count=int(config.get("best_year_min_count", defaults.best_year_min_count)),
        top_platform_count=int(config.get("top_platform_count", defaults.top_platform_count)),
    )


def classify_generosity(average: float, rules: ProfileRules) -> str:
    if average >= rules.generous_at:
        return "generous"
    if average <= rules.tough_at:
        return "tough"
    return "balanced"


def classify_consistency(spread: float, rules: ProfileRules) -> str:
    if spread <= rules.consistent_at:
        return "consistent"
    if spread >= rules.wide_ranging_at:
        return "wide-ranging"
    return "selective"


def classify_pace(total: int, rules: ProfileRules) -> str:
    if total >= rules.marathon_at:
        return "marathon"
    if total >= rules.steady_at:
        return "steady"
    return "curated"


def compute_best_decade(year_summaries: Sequence[YearSummary]) -> Optional[DecadeAverage]:
    """
    Decade with the highest mean of its yearly averages.

    Each year counts once regardless of how many games it has.
    """
    yearly_averages: Dict[int, List[float]] = {}
    for summary in year_summaries:
        yearly_averages.setdefault(decade_of(summary.year), []).append(summary.average)

    best = None
    for decade, averages in yearly_averages.items():
        candidate = DecadeAverage(decade=decade, average=sum(averages) / len(averages))
        if best is None or candidate.average > best.average:
            best = candidate
    return best


def compute_rating_mode(stats: GeneralStats) -> Optional[str]:
    """Label of the most common rating bucket; None when nothing is rated."""
    ranked = sorted(stats.rating_buckets, key=lambda bucket: bucket.count, reverse=True)
    if not ranked or ranked[0].count == 0:
        return None
    return ranked[0].label


def compute_best_year(
    year_summaries: Sequence[YearSummary], min_count: int = 3
) -> Optional[YearSummary]:
    eligible = [summary for summary in year_summaries if summary.count >= min_count]
    return max(eligible, key=lambda summary: summary.average, default=None)


def compute_busiest_year(year_summaries: Sequence[YearSummary]) -> Optional[YearSummary]:
    return max(year_summaries, key=lambda summary: summary.count, default=None)


def classify_profile(
    stats: GeneralStats,
    trend: TrendInsight,
    year_summaries: Sequence[YearSummary],
    rules: Optional[ProfileRules] = None,
) -> ProfileFacts:
    """
    Apply the profile rules.

    Args:
        stats: Output of build_general_stats()
        trend: Output of build_trend_insight()
        year_summaries: Output of build_year_summaries()
        rules: Thresholds (defaults to load_profile_rules())

    Returns:
        ProfileFacts with tiers, highlights and the numbers behind them
    """
    if rules is None:
        rules = load_profile_rules()

    return ProfileFacts(
        generosity=classify_generosity(stats.average, rules),
        consistency=classify_consistency(stats.std_dev, rules),
        pace=classify_pace(stats.total, rules),
        average=stats.average,
        std_dev=stats.std_dev,
        total=stats.total,
        first_year=stats.first_year,
        last_year=stats.last_year,
        top_platforms=[item.name for item in stats.platform_counts[: rules.top_platform_count]],
        rating_mode=compute_rating_mode(stats),
        best_decade=compute_best_decade(year_summaries),
        best_year=compute_best_year(year_summaries, rules.best_year_min_count),
        busiest_year=compute_busiest_year(year_summaries),
        trend_direction=trend.direction,
        slope=trend.slope,
    )


def build_gamer_profile(
    stats: GeneralStats,
    trend: TrendInsight,
    year_summaries: Sequence[YearSummary],
    lang: str = "en",
    rules: Optional[ProfileRules] = None,
) -> GamerProfile:
    """
    Classify and write the gamer profile.

    Args:
        stats: Output of build_general_stats()
        trend: Output of build_trend_insight()
        year_summaries: Output of build_year_summaries()
        lang: Narrative language ("en" or "nl")
        rules: Thresholds (defaults to load_profile_rules())

    Returns:
        GamerProfile with title, subtitle, lead, description, traits and facts
    """
    facts = classify_profile(stats, trend, year_summaries, rules)
    text = get_renderer(lang).write_gamer_profile(facts)

    return GamerProfile(
        title=text["title"],
        subtitle=text["subtitle"],
        lead=text["lead"],
        description=text["description"],
        traits=text["traits"],
        facts=facts,
    )
