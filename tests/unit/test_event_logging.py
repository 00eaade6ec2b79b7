"""Unit tests for the JSON Lines dataset event log."""

import pytest

from gamesmeter.utils.event_logging import (
    get_events_file,
    get_recent_events,
    log_dataset_event,
    log_status_change,
)


@pytest.mark.unit
def test_events_file_from_environment(isolated_outputs):
    assert get_events_file() == isolated_outputs / "logs" / "dataset_events.log"


@pytest.mark.unit
def test_no_log_file_means_no_events():
    assert get_recent_events() == []


@pytest.mark.unit
def test_events_are_appended_and_filtered():
    log_status_change("a.csv", "empty", "ready", source="store", record_count=3)
    log_dataset_event("cache_cleared", "a.csv", source="cli")
    log_status_change("b.csv", "ready", "error", source="store")

    events = get_recent_events()
    assert [e["event_type"] for e in events] == ["status_change", "cache_cleared", "status_change"]
    assert events[0]["record_count"] == 3
    assert "timestamp" in events[0]

    assert len(get_recent_events(dataset_name="a.csv")) == 2
    assert [e["dataset_name"] for e in get_recent_events(event_type="status_change")] == [
        "a.csv",
        "b.csv",
    ]
    assert get_recent_events(n=1)[0]["dataset_name"] == "b.csv"


@pytest.mark.unit
def test_malformed_lines_are_skipped():
    log_dataset_event("status_change", "a.csv", source="store")
    with open(get_events_file(), "a", encoding="utf-8") as f:
        f.write("not json\n")

    assert len(get_recent_events()) == 1
