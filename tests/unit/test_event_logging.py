"""Unit tests for the JSON-lines run event log."""

import json

import pytest

from cvrelay.contexts.syncing.outcomes import OutcomeKind, SyncOutcome
from cvrelay.utils.event_logging import get_recent_events, log_sync_event, log_sync_outcome


@pytest.mark.unit
def test_log_sync_event_appends_json_lines(tmp_path):
    """Test that every event is one JSON object per line."""
    events_file = tmp_path / "logs" / "sync_events.log"

    log_sync_event("run_started", "sync_1", "cli", events_file=events_file, profile="xing")
    log_sync_event("run_finished", "sync_1", "cli", events_file=events_file, remaining=0)

    lines = events_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["event_type"] == "run_started"
    assert first["profile"] == "xing"
    assert "timestamp" in first


@pytest.mark.unit
def test_log_sync_outcome(tmp_path):
    """Test that outcomes are logged with their fields."""
    events_file = tmp_path / "events.log"
    outcome = SyncOutcome(OutcomeKind.PARTIALLY_APPLIED, 2, "Dev at Acme", ("title",))

    log_sync_outcome(outcome, "sync_1", "xing", events_file=events_file)

    event = get_recent_events(events_file=events_file)[0]
    assert event["event_type"] == "entry_outcome"
    assert event["kind"] == "partially_applied"
    assert event["unresolved"] == ["title"]
    assert event["profile"] == "xing"


@pytest.mark.unit
def test_get_recent_events_filters(tmp_path):
    """Test filtering by run, type and count, skipping malformed lines."""
    events_file = tmp_path / "events.log"
    for run_id in ("sync_1", "sync_2"):
        log_sync_event("run_started", run_id, "cli", events_file=events_file)
        log_sync_event("run_finished", run_id, "cli", events_file=events_file)
    with open(events_file, "a", encoding="utf-8") as f:
        f.write("not json\n")

    assert len(get_recent_events(n=10, events_file=events_file)) == 4
    assert [e["event_type"] for e in get_recent_events(run_id="sync_2", events_file=events_file)] == [
        "run_started",
        "run_finished",
    ]
    assert len(get_recent_events(event_type="run_finished", events_file=events_file)) == 2
    assert get_recent_events(n=1, events_file=events_file)[0]["run_id"] == "sync_2"


@pytest.mark.unit
def test_get_recent_events_without_log(tmp_path):
    """Test that a missing log yields no events."""
    assert get_recent_events(events_file=tmp_path / "missing.log") == []
