"""
Run event logging utilities for cvrelay (Tier 2 logging).

Appends one JSON object per line to the sync events log so that past runs can
be inspected (which entries were applied, which timed out, where a run stopped).

For detailed within-context logging (Tier 1), use cvrelay.utils.logger instead.

Usage:
    from cvrelay.utils.event_logging import log_sync_event, log_sync_outcome

    log_sync_event(
        event_type="run_started",
        run_id="sync_20251114_183040",
        source="cli",
        profile="xing",
    )

    log_sync_outcome(outcome, run_id="sync_20251114_183040", profile="xing")
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from cvrelay.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
SYNC_EVENTS_FILE = Path(os.getenv("SYNC_EVENTS_FILE", str(LOGS_PATH / "sync_events.log")))


def log_sync_event(
    event_type: str,
    run_id: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> None:
    """
    Log an event to the sync event log.

    Events are appended in JSON Lines format (one JSON object per line). This
    enables streaming processing and easy filtering by event_type or run_id.

    Args:
        event_type: Type of event (e.g., "run_started", "entry_outcome", "run_finished")
        run_id: Identifier of the sync run
        source: Event source (e.g., "cli", "driver")
        events_file: Override for the log location (defaults to SYNC_EVENTS_FILE)
        **extra_fields: Additional event-specific fields
    """
    events_file = events_file or SYNC_EVENTS_FILE
    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "run_id": run_id,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def log_sync_outcome(
    outcome, run_id: str, profile: str, events_file: Optional[Path] = None
) -> None:
    """
    Log the outcome of one replayed entry.

    Args:
        outcome: SyncOutcome produced by the driver
        run_id: Identifier of the sync run
        profile: Surface profile name
        events_file: Override for the log location
    """
    log_sync_event(
        event_type="entry_outcome",
        run_id=run_id,
        source="driver",
        events_file=events_file,
        profile=profile,
        **outcome.to_dict(),
    )


def get_recent_events(
    n: int = 10,
    run_id: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> list[dict]:
    """
    Get the last n events from the sync log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        run_id: Filter to only events for this run (optional)
        event_type: Filter to only events of this type (optional)
        events_file: Override for the log location

    Returns:
        List of event dicts (most recent last)
    """
    events_file = events_file or SYNC_EVENTS_FILE
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

    if run_id:
        events = [e for e in events if e.get("run_id") == run_id]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
