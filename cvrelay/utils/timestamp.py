"""
Timestamp helpers for sync runs.

Run directories and run ids use a compact local timestamp, the event log uses
ISO 8601 with microseconds, and the CLI shows both back in a readable form
(absolute, or relative to now for the events listing).
"""

from datetime import datetime
from typing import Optional


def now() -> str:
    """Compact local timestamp for directory names, e.g. ``20251114_183040``."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """ISO 8601 timestamp with microseconds, used in event logs."""
    return datetime.now().isoformat()


def new_run_id(prefix: str = "sync") -> str:
    """
    Identifier shared by a run's log directory and its events.

    Args:
        prefix: Kind of run

    Returns:
        e.g. "sync_20251114_183040"
    """
    return f"{prefix}_{now()}"


def format_timestamp(iso_timestamp: str, relative: bool = False, reference: Optional[datetime] = None) -> str:
    """
    Format an event log timestamp for display.

    Args:
        iso_timestamp: ISO 8601 formatted timestamp string
        relative: If True, show relative time (e.g., "2h ago")
                 If False, show absolute time (e.g., "2025-11-13 18:45:40")
        reference: Point in time relative values are measured from (default: now)

    Returns:
        Human-readable timestamp, or the input unchanged if it is not ISO 8601

    Examples:
        format_timestamp("2025-11-13T18:45:40.572549")
        # "2025-11-13 18:45:40"
    """
    try:
        dt = datetime.fromisoformat(iso_timestamp)
    except (ValueError, TypeError):
        return iso_timestamp

    if relative:
        return _format_relative_time(dt, reference or datetime.now())
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def format_elapsed(seconds: float) -> str:
    """
    Compact run duration: "42s", "3m 05s", "1h 02m".

    Sync runs wait on remote pages for minutes; sub-second precision is noise.
    """
    total = max(int(round(seconds)), 0)
    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)

    if hours:
        return f"{hours}h {minutes:02d}m"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def _format_relative_time(dt: datetime, reference: datetime) -> str:
    diff = reference - dt
    suffix = "ago"
    if diff.total_seconds() < 0:
        diff = -diff
        suffix = "from now"

    seconds = int(diff.total_seconds())
    if seconds < 60:
        return f"{seconds}s {suffix}"
    if seconds < 3600:
        return f"{seconds // 60}m {suffix}"
    if seconds < 86400:
        return f"{seconds // 3600}h {suffix}"
    return f"{diff.days}d {suffix}"
