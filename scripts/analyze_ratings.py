#!/usr/bin/env python3
"""
Command-line interface for analyzing a GamesMeter ratings export.

Every command takes the path of a CSV export. When the path is omitted the
dataset cached by a previous `--save` run is used instead.

Commands:
    summary   - Corpus statistics, platform counts and rating distribution
    years     - Per-release-year statistics (or the highest rated years)
    trend     - Direction of the yearly average rating
    profile   - Gamer profile narrative
    platforms - Per-platform statistics and the platform of each era
    activity  - When ratings were placed, plus title and release-year curiosities
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv

from gamesmeter.contexts.ingest.logger import setup_ingest_logger
from gamesmeter.contexts.narrative import UnsupportedLanguageError
from gamesmeter.contexts.store import (
    DatasetStatus,
    InMemoryDatasetCache,
    InsightsStore,
    JsonFileDatasetCache,
)
from gamesmeter.utils.report_formatter import Column, TableFormatter, format_bar, format_percentage
from gamesmeter.utils.timestamp import now

load_dotenv()
DEFAULT_LOGS_PATH = "outs/logs"
REPORT_WIDTH = 72

app = typer.Typer(
    add_completion=False,
    help="Analyze a GamesMeter ratings export (CSV)",
    invoke_without_command=True,
)

CSV_ARGUMENT = typer.Argument(
    None, help="Path to the CSV export (defaults to the cached dataset)", show_default=False
)
LANG_OPTION = typer.Option(None, "--lang", "-l", help="Narrative language: en or nl")
JSON_OPTION = typer.Option(False, "--json", "-j", help="Print JSON instead of a text report")
SAVE_OPTION = typer.Option(False, "--save", "-s", help="Store the input as the cached dataset")
LOG_OPTION = typer.Option(False, "--log", help="Write a detailed log under LOGS_PATH")


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(message: str) -> None:
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _load_store(
    csv_path: Optional[Path], lang: Optional[str], save: bool, log: bool = False
) -> InsightsStore:
    """
    Build an InsightsStore for the requested input.

    With a CSV path the file is loaded (and cached on disk only with --save).
    Without one, the on-disk cached dataset is restored.
    """
    if log:
        log_dir = Path(os.getenv("LOGS_PATH", DEFAULT_LOGS_PATH)) / f"analyze_{now()}"
        setup_ingest_logger(log_dir, source=str(csv_path or "cached dataset"))

    cache = JsonFileDatasetCache() if save or csv_path is None else InMemoryDatasetCache()
    try:
        store = InsightsStore(cache=cache, lang=lang) if lang else InsightsStore(cache=cache)
    except UnsupportedLanguageError as e:
        _fail(str(e))

    if csv_path is None:
        if not store.restore_from_cache():
            _fail("No cached dataset found. Pass a CSV path (use --save to cache it).")
        return store

    if not csv_path.exists():
        _fail(f"File not found: {csv_path}")

    try:
        text = csv_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Unable to read {csv_path}: {e}")

    if store.load_csv_text(text, csv_path.name) is DatasetStatus.ERROR:
        _fail(f"Unable to load {csv_path.name} (see log for details)")

    return store


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _rating(store: InsightsStore, value: Optional[float]) -> str:
    if value is None:
        return store.renderer.label("label.na")
    return store.renderer.format_rating(value)


def _period(store: InsightsStore, group: str, key: str) -> str:
    """Localized month or weekday name for an activity key ("jan", "mon")."""
    return store.renderer.label(f"{group}.{key}")


@app.command("summary")
def summary_command(
    csv_path: Optional[Path] = CSV_ARGUMENT,
    lang: Optional[str] = LANG_OPTION,
    as_json: bool = JSON_OPTION,
    save: bool = SAVE_OPTION,
    log: bool = LOG_OPTION,
):
    """
    Show corpus statistics for an export.

    Examples:\n

        $ analyze_ratings.py summary stemmen.csv          # Text report

        $ analyze_ratings.py summary stemmen.csv --save   # Report and cache the export

        $ analyze_ratings.py summary --json               # Cached dataset as JSON
    """
    store = _load_store(csv_path, lang, save, log)
    stats = store.stats

    if as_json:
        _echo_json({"file_name": store.file_name, **stats.to_dict()})
        return

    na = store.renderer.label("label.na")
    report = TableFormatter([Column("Metric", 20), Column("Value", 20, ">")], total_width=REPORT_WIDTH)
    report.add_section_header(f"Rating summary: {store.file_name}")
    report.add_table_header().add_separator()
    report.add_row(["Rated games", stats.rated_count])
    report.add_row(["Average", _rating(store, stats.average)])
    report.add_row(["Median", _rating(store, stats.median)])
    report.add_row(["Std dev", _rating(store, stats.std_dev)])
    report.add_row(["Lowest", _rating(store, stats.min)])
    report.add_row(["Highest", _rating(store, stats.max)])
    report.add_row(["First release year", stats.first_year if stats.first_year is not None else na])
    report.add_row(["Last release year", stats.last_year if stats.last_year is not None else na])
    typer.echo(report.render())

    platforms = TableFormatter(
        [Column("Platform", 30), Column("Count", 8, ">"), Column("Share", 8, ">")],
        total_width=REPORT_WIDTH,
    )
    platforms.add_blank_line().add_text("Platforms").add_separator()
    for platform in stats.platform_counts:
        platforms.add_row(
            [platform.name, platform.count, format_percentage(platform.count, stats.rated_count)]
        )
    typer.echo(platforms.render())

    largest = max((bucket.count for bucket in stats.rating_buckets), default=0)
    distribution = TableFormatter(
        [Column("Rating", 6, ">"), Column("Count", 6, ">"), Column("", 30)], total_width=REPORT_WIDTH
    )
    distribution.add_blank_line().add_text("Rating distribution").add_separator()
    for bucket in stats.rating_buckets:
        distribution.add_row([bucket.label, bucket.count, format_bar(bucket.count, largest)])
    typer.echo(distribution.render())


@app.command("years")
def years_command(
    csv_path: Optional[Path] = CSV_ARGUMENT,
    best: bool = typer.Option(
        False, "--best", "-b", help="Only the highest rated years (at least 3 ratings)"
    ),
    lang: Optional[str] = LANG_OPTION,
    as_json: bool = JSON_OPTION,
    save: bool = SAVE_OPTION,
    log: bool = LOG_OPTION,
):
    """
    Show rating statistics per release year, most recent first.

    Examples:\n

        $ analyze_ratings.py years stemmen.csv          # All years

        $ analyze_ratings.py years stemmen.csv --best   # Top 3 years by average
    """
    store = _load_store(csv_path, lang, save, log)
    summaries = store.highest_rated_years if best else store.year_summaries

    if as_json:
        _echo_json([summary.to_dict() for summary in summaries])
        return

    report = TableFormatter(
        [
            Column("Year", 6),
            Column("Count", 6, ">"),
            Column("Avg", 6, ">"),
            Column("Median", 6, ">"),
            Column("Min", 6, ">"),
            Column("Max", 6, ">"),
            Column("Top game", 30),
        ]
    )
    report.add_section_header("Highest rated years" if best else "Ratings per release year")
    report.add_table_header().add_separator()
    for summary in summaries:
        top_game = summary.top_games[0].title if summary.top_games else None
        report.add_row(
            [
                summary.year,
                summary.count,
                _rating(store, summary.average),
                _rating(store, summary.median),
                _rating(store, summary.min),
                _rating(store, summary.max),
                top_game,
            ]
        )
    report.add_summary(f"{len(summaries)} year(s)")
    typer.echo(report.render())


@app.command("trend")
def trend_command(
    csv_path: Optional[Path] = CSV_ARGUMENT,
    lang: Optional[str] = LANG_OPTION,
    as_json: bool = JSON_OPTION,
    save: bool = SAVE_OPTION,
    log: bool = LOG_OPTION,
):
    """
    Show whether the yearly average rating goes up, down or stays flat.

    Examples:\n

        $ analyze_ratings.py trend stemmen.csv

        $ analyze_ratings.py trend stemmen.csv --lang nl
    """
    store = _load_store(csv_path, lang, save, log)
    trend = store.trend

    if as_json:
        _echo_json({**trend.to_dict(), "text": store.trend_summary})
        return

    typer.secho(f"\n{store.trend_summary}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Direction: {trend.direction.value}  (slope {trend.slope:+.4f} per year)")

    if trend.points:
        largest = max(point.value for point in trend.points)
        report = TableFormatter(
            [Column("Year", 6), Column("Avg", 6, ">"), Column("", 30)], total_width=REPORT_WIDTH
        )
        report.add_blank_line().add_table_header().add_separator()
        for point in trend.points:
            report.add_row([point.year, _rating(store, point.value), format_bar(point.value, largest)])
        typer.echo(report.render())


@app.command("profile")
def profile_command(
    csv_path: Optional[Path] = CSV_ARGUMENT,
    lang: Optional[str] = LANG_OPTION,
    as_json: bool = JSON_OPTION,
    save: bool = SAVE_OPTION,
    log: bool = LOG_OPTION,
):
    """
    Write the gamer profile for an export.

    Examples:\n

        $ analyze_ratings.py profile stemmen.csv

        $ analyze_ratings.py profile stemmen.csv --lang nl --json
    """
    store = _load_store(csv_path, lang, save, log)
    profile = store.profile

    if as_json:
        _echo_json(profile.to_dict())
        return

    typer.secho(f"\n{profile.title}", fg=typer.colors.BLUE, bold=True)
    typer.echo(profile.subtitle)
    typer.echo("=" * REPORT_WIDTH)
    typer.echo(profile.lead)
    typer.echo("")
    typer.echo(profile.description)
    typer.echo("")
    for trait in profile.traits:
        typer.echo(f"  • {trait}")
    typer.echo("")


@app.command("platforms")
def platforms_command(
    csv_path: Optional[Path] = CSV_ARGUMENT,
    lang: Optional[str] = LANG_OPTION,
    as_json: bool = JSON_OPTION,
    save: bool = SAVE_OPTION,
    log: bool = LOG_OPTION,
):
    """
    Show per-platform statistics and the most and least rated platform per decade.

    Examples:\n

        $ analyze_ratings.py platforms stemmen.csv
    """
    store = _load_store(csv_path, lang, save, log)

    if as_json:
        _echo_json(
            {
                "platforms": [item.to_dict() for item in store.platform_stats],
                "signature": store.platform_signature.to_dict() if store.platform_signature else None,
                "era_peaks": [item.to_dict() for item in store.era_peaks],
                "era_lows": [item.to_dict() for item in store.era_lows],
            }
        )
        return

    report = TableFormatter(
        [Column("Platform", 30), Column("Count", 6, ">"), Column("Avg", 6, ">"), Column("Std", 6, ">")]
    )
    report.add_section_header("Ratings per platform")
    report.add_table_header().add_separator()
    for item in store.platform_stats:
        report.add_row(
            [item.name, item.count, _rating(store, item.average), _rating(store, item.std_dev)]
        )
    typer.echo(report.render())

    signature = store.platform_signature
    if signature:
        consistent = signature.most_consistent
        if consistent:
            consistent_text = f"{consistent.name} ({_rating(store, consistent.std_dev)})"
        else:
            consistent_text = store.renderer.label("label.na")
        typer.echo("")
        typer.echo(f"Most played:     {signature.most_played.name} ({signature.most_played.count})")
        typer.echo(
            f"Highest average: {signature.highest_average.name} "
            f"({_rating(store, signature.highest_average.average)})"
        )
        typer.echo(f"Most consistent: {consistent_text}")

    eras = TableFormatter(
        [Column("Era", 6), Column("Most rated", 24), Column("Least rated", 24)], total_width=REPORT_WIDTH
    )
    eras.add_blank_line().add_table_header().add_separator()
    lows = {item.decade: item for item in store.era_lows}
    for peak in store.era_peaks:
        low = lows.get(peak.decade)
        eras.add_row(
            [
                peak.era,
                f"{peak.platform} ({peak.count})",
                f"{low.platform} ({low.count})" if low else None,
            ]
        )
    typer.echo(eras.render())


@app.command("activity")
def activity_command(
    csv_path: Optional[Path] = CSV_ARGUMENT,
    lang: Optional[str] = LANG_OPTION,
    as_json: bool = JSON_OPTION,
    save: bool = SAVE_OPTION,
    log: bool = LOG_OPTION,
):
    """
    Show when ratings were placed (months, weekdays, gaps, streaks) and title curiosities.

    Examples:\n

        $ analyze_ratings.py activity stemmen.csv
    """
    store = _load_store(csv_path, lang, save, log)
    activity = store.activity

    if as_json:
        _echo_json(activity.to_dict())
        return

    typer.secho(f"\nRating activity: {store.file_name}", fg=typer.colors.BLUE, bold=True)
    typer.echo("=" * REPORT_WIDTH)
    if activity.longest_title:
        longest = activity.longest_title
        typer.echo(f"Longest title:   {longest.title} ({longest.length} chars)")
    if activity.top_franchise:
        franchise = activity.top_franchise
        typer.echo(f"Top franchise:   {franchise.name} ({franchise.count}x)")
    if activity.most_polarizing_year:
        polarizing = activity.most_polarizing_year
        typer.echo(
            f"Most polarizing: {polarizing.year} "
            f"(std {_rating(store, polarizing.std_dev)} over {polarizing.count} ratings)"
        )
    typer.echo("")
    typer.echo(f"Ratings with a date: {activity.placed_count}")

    if activity.placed_count == 0:
        typer.secho("No placement dates in this export", fg=typer.colors.YELLOW)
        return

    typer.echo(f"First rated:  {activity.first_rated.title} ({activity.first_rated.placed:%Y-%m-%d})")
    typer.echo(f"Last rated:   {activity.last_rated.title} ({activity.last_rated.placed:%Y-%m-%d})")
    if activity.longest_gap:
        gap = activity.longest_gap
        typer.echo(f"Longest gap:  {gap.days} days ({gap.start:%Y-%m-%d} to {gap.end:%Y-%m-%d})")
    if activity.busiest_date:
        typer.echo(
            f"Busiest day:  {activity.busiest_date.day:%Y-%m-%d} ({activity.busiest_date.count} ratings)"
        )
    if activity.busiest_year:
        typer.echo(f"Busiest year: {activity.busiest_year.year} ({activity.busiest_year.count} ratings)")
    if activity.busiest_weekday and activity.quietest_weekday:
        typer.echo(
            f"Weekdays:     busiest {_period(store, 'weekday', activity.busiest_weekday.label)}, "
            f"quietest {_period(store, 'weekday', activity.quietest_weekday.label)}"
        )
    if activity.rating_streak:
        streak = activity.rating_streak
        typer.echo(f"Longest streak: {streak.length}x {_rating(store, streak.rating)}")
    if activity.taste_shift:
        shift = activity.taste_shift
        typer.echo(f"Taste shift {shift.year}: {shift.delta:+.2f}")
    if activity.platform_personality:
        personality = activity.platform_personality
        generosity = store.renderer.label(f"personality.{personality.generosity}")
        consistency = store.renderer.label(f"personality.{personality.consistency}")
        typer.echo(f"{personality.platform}: {generosity}, {consistency}")

    for title, group, counts in (
        ("Per month", "month", activity.month_counts),
        ("Per weekday", "weekday", activity.weekday_counts),
    ):
        largest = max((entry.count for entry in counts), default=0)
        report = TableFormatter(
            [Column("", 5), Column("Count", 6, ">"), Column("", 30)], total_width=REPORT_WIDTH
        )
        report.add_blank_line().add_text(title).add_separator()
        for entry in counts:
            report.add_row(
                [_period(store, group, entry.label), entry.count, format_bar(entry.count, largest)]
            )
        typer.echo(report.render())


if __name__ == "__main__":
    app()
