"""
Progress and resume arithmetic for sync runs.

Pure functions that decide which entries a run processes and where the next
run should continue. Indices are 0-based internally; the command line uses
1-based positions.

Example:
    >>> window = compute_progress(total=10, start_index=2, max_entries=3)
    >>> list(window.processed_range), window.next_start_index, window.remaining_count
    ([2, 3, 4], 5, 5)
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProgressWindow:
    """
    Entries covered by a run and the continuation point after it.

    Attributes:
        processed_range: Indices this run processes, in order
        remaining_count: Entries left after the range
        next_start_index: First index a follow-up run should process
    """

    processed_range: range
    remaining_count: int
    next_start_index: int

    @property
    def is_complete(self) -> bool:
        return self.remaining_count == 0


def compute_progress(total: int, start_index: int = 0, max_entries: Optional[int] = None) -> ProgressWindow:
    """
    Compute the window of entries to process.

    Args:
        total: Number of entries available
        start_index: First index to process (negative → 0)
        max_entries: Limit on processed entries (None or < 1 → unbounded)

    Returns:
        ProgressWindow; a start beyond total yields an empty range at total
    """
    total = max(total, 0)
    start = min(max(start_index, 0), total)

    if max_entries is None or max_entries < 1:
        end = total
    else:
        end = min(start + max_entries, total)

    return ProgressWindow(
        processed_range=range(start, end),
        remaining_count=total - end,
        next_start_index=end,
    )


def progress_after(total: int, window: ProgressWindow, processed_count: int) -> ProgressWindow:
    """
    Window actually covered when a run ends after processed_count entries.

    Used when an operator stop cuts a run short: the continuation point is the
    first index that was not processed.
    """
    processed_count = max(0, min(processed_count, len(window.processed_range)))
    start = window.processed_range.start
    end = start + processed_count
    return ProgressWindow(
        processed_range=range(start, end),
        remaining_count=max(total, 0) - end,
        next_start_index=end,
    )


def start_index_from_cli(raw: Optional[str]) -> int:
    """
    Convert a 1-based command-line position to a 0-based index.

    Missing or invalid values start from the beginning.
    """
    try:
        position = int(str(raw).strip())
    except (TypeError, ValueError):
        return 0
    return max(position - 1, 0)


def max_entries_from_cli(raw: Optional[str]) -> Optional[int]:
    """Parse the entry limit; missing, invalid or non-positive values mean unbounded."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value >= 1 else None
