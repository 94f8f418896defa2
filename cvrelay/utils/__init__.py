"""
Shared utilities for cvrelay.

Common functionality used across contexts:
- Logger setup with provenance
- JSON-lines run event log
- Timestamps and text report formatting
"""

from cvrelay.utils.timestamp import format_elapsed, format_timestamp, new_run_id, now, now_exact

__all__ = ["now", "now_exact", "new_run_id", "format_timestamp", "format_elapsed"]
