#!/usr/bin/env python3
"""
Command-line interface for the cached dataset and the dataset event log.

The cached dataset (GAMESMETER_CACHE_FILE, default outs/cache/last_dataset.json)
holds the last successfully loaded export so analyze_ratings.py can run without
a CSV path.

Commands:
    show   - Show what is cached
    load   - Load an export and cache it
    clear  - Remove the cached dataset
    events - Show recent dataset events
"""

import json
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from gamesmeter.contexts.store import DatasetStatus, InsightsStore, JsonFileDatasetCache
from gamesmeter.utils.event_logging import get_recent_events
from gamesmeter.utils.timestamp import format_timestamp

load_dotenv()

app = typer.Typer(
    add_completion=False,
    help="Manage the cached dataset and view dataset events",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("show")
def show_command(
    relative: bool = typer.Option(
        False, "--relative", "-r", help="Show relative timestamps (e.g., '2 hours ago')"
    ),
):
    """
    Show the cached dataset name, save time and size.

    Examples:\n

        $ manage_cache.py show

        $ manage_cache.py show --relative
    """
    cache = JsonFileDatasetCache()
    cached = cache.load()

    if cached is None:
        typer.secho(f"No cached dataset at {cache.path}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    store = InsightsStore(cache=cache, record_events=False)
    restored = store.restore_from_cache()

    typer.secho(f"\n{cached.name or '(unnamed)'}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  File:     {cache.path}")
    if cached.saved_at:
        typer.echo(f"  Saved:    {format_timestamp(cached.saved_at, relative=relative)}")
    typer.echo(f"  Size:     {len(cached.text)} characters")
    if restored:
        typer.echo(f"  Records:  {len(store.records)} ({store.stats.rated_count} rated)")
    typer.echo("")


@app.command("load")
def load_command(
    csv_path: Path = typer.Argument(..., help="Path to the CSV export"),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Display name (defaults to the file name)"
    ),
):
    """
    Load an export and make it the cached dataset.

    Examples:\n

        $ manage_cache.py load stemmen.csv

        $ manage_cache.py load export.csv --name "My votes"
    """
    if not csv_path.exists():
        typer.secho(f"✗ File not found: {csv_path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        text = csv_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        typer.secho(f"✗ Unable to read {csv_path}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    store = InsightsStore(cache=JsonFileDatasetCache())
    dataset_name = name or csv_path.name

    if store.load_csv_text(text, dataset_name) is DatasetStatus.ERROR:
        typer.secho(f"✗ Failed to load {dataset_name}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(
        f"✓ Cached {dataset_name}: {len(store.records)} records ({store.stats.rated_count} rated)",
        fg=typer.colors.GREEN,
    )


@app.command("clear")
def clear_command(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """
    Remove the cached dataset.

    Examples:\n

        $ manage_cache.py clear

        $ manage_cache.py clear -y
    """
    cache = JsonFileDatasetCache()
    cached = cache.load()

    if cached is None:
        typer.secho("Nothing cached", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=0)

    if not yes and not typer.confirm(f"Remove cached dataset '{cached.name}'?"):
        typer.echo("Cancelled")
        raise typer.Exit(code=0)

    store = InsightsStore(cache=cache)
    store.restore_from_cache()
    store.reset()
    typer.secho(f"✓ Removed cached dataset '{cached.name}'", fg=typer.colors.GREEN)


@app.command("events")
def events_command(
    n: int = typer.Option(10, "--num", "-n", help="Number of recent events to show"),
    dataset: Optional[str] = typer.Option(
        None, "--dataset", "-d", help="Filter to events for this dataset"
    ),
    event_type: Optional[str] = typer.Option(
        None, "--event-type", "-e", help="Filter to events of this type"
    ),
    compact: bool = typer.Option(
        False, "--compact", "-c", help="Print one event per line (no pretty formatting)"
    ),
):
    """
    Show the last n events from the dataset event log.

    Examples:\n

        $ manage_cache.py events                      # Last 10 events

        $ manage_cache.py events -e status_change     # Last 10 status changes

        $ manage_cache.py events -n 5 -d stemmen.csv  # Last 5 events for one dataset
    """
    events = get_recent_events(n=n, dataset_name=dataset, event_type=event_type)

    if not events:
        typer.secho("No events found", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    if not compact:
        typer.secho(f"\nShowing last {len(events)} event(s):", fg=typer.colors.BLUE)
        typer.echo("")

    for event in events:
        if compact:
            typer.echo(json.dumps(event, ensure_ascii=False))
        else:
            typer.echo(json.dumps(event, indent=2, ensure_ascii=False))
            typer.echo("")


if __name__ == "__main__":
    app()
