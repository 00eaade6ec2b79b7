"""
Dataset event logging utilities for gamesmeter (Tier 2 logging).

Provides uniform interfaces for logging dataset lifecycle events to a JSON Lines
file. One event per line, so the log can be tailed and filtered by event_type
or dataset name.

For detailed within-context logging (Tier 1), use gamesmeter.utils.logger instead.

Usage:
    from gamesmeter.utils.event_logging import log_status_change, log_dataset_event

    log_status_change(
        dataset_name="stemmen.csv",
        old_status="empty",
        new_status="ready",
        source="store",
        record_count=812,
    )
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from gamesmeter.utils.timestamp import now_exact

load_dotenv()
DEFAULT_EVENTS_FILE = "outs/logs/dataset_events.log"


def get_events_file() -> Path:
    """Resolve the event log path (GAMESMETER_EVENTS_FILE, read at call time)."""
    return Path(os.getenv("GAMESMETER_EVENTS_FILE", DEFAULT_EVENTS_FILE))


def log_dataset_event(
    event_type: str, dataset_name: Optional[str], source: str, **extra_fields
) -> None:
    """
    Append an event to the dataset event log.

    Args:
        event_type: Type of event (e.g., "status_change", "cache_restored")
        dataset_name: Display name of the dataset (None when no dataset is loaded)
        source: Event source (e.g., "store", "cli")
        **extra_fields: Additional event-specific fields
    """
    events_file = get_events_file()
    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "dataset_name": dataset_name,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def log_status_change(
    dataset_name: Optional[str], old_status: str, new_status: str, source: str, **extra_fields
) -> None:
    """
    Log status change event.

    Pure logging function - does NOT change any state. Called by the store after
    it has applied the transition.
    """
    log_dataset_event(
        event_type="status_change",
        dataset_name=dataset_name,
        old_status=old_status,
        new_status=new_status,
        source=source,
        **extra_fields,
    )


def get_recent_events(
    n: int = 10, dataset_name: Optional[str] = None, event_type: Optional[str] = None
) -> List[Dict]:
    """
    Get the last n events from the dataset event log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        dataset_name: Filter to only events for this dataset (optional)
        event_type: Filter to only events of this type (optional)

    Returns:
        List of event dicts (most recent last)
    """
    events_file = get_events_file()
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if dataset_name:
        events = [e for e in events if e.get("dataset_name") == dataset_name]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
