"""
Syncing context logger.

Provides logging interface for syncing context with automatic [sync] prefix.
All syncing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from cvrelay.utils.logger import setup_logger as _setup_logger
from cvrelay.utils.timestamp import format_elapsed

CONTEXT_PREFIX = "[sync]"


def setup_syncing_logger(log_dir: Path, profile: str, category: str) -> Path:
    """
    Setup logger for a sync run.

    Args:
        log_dir: Directory for this sync session
        profile: Surface profile name for provenance
        category: Replayed category for provenance

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="sync",
        log_dir=log_dir,
        extra_provenance={"Profile": profile, "Category": category},
    )


# Wrapper functions with automatic [sync] prefix


def _log_info(message: str) -> None:
    """Log info message with [sync] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [sync] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [sync] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [sync] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [sync] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level sync logging helpers


def log_entry_start(index: int, total: int, label: str) -> None:
    """Log the start of one entry (index is 0-based, shown 1-based)."""
    _log_info(f"Entry {index + 1}/{total}: {label}")


def log_field_result(field: str, strategy_name: str = None) -> None:
    """Log whether a logical field was filled and through which strategy."""
    if strategy_name:
        _log_debug(f"  {field}: filled via '{strategy_name}'")
    else:
        _log_warning(f"  {field}: no strategy matched")


def log_entry_outcome(outcome) -> None:
    """
    Log the outcome of one entry.

    Args:
        outcome: SyncOutcome produced by the driver
    """
    kind = outcome.kind.value
    if outcome.kind.name == "APPLIED":
        _log_success(f"Entry {outcome.index + 1}: {kind} ({outcome.label})")
    elif outcome.kind.name == "PARTIALLY_APPLIED":
        _log_warning(f"Entry {outcome.index + 1}: {kind}, unresolved: {', '.join(outcome.unresolved)}")
    else:
        _log_error(f"Entry {outcome.index + 1}: {kind} ({outcome.label})")
        if outcome.detail:
            _log_error(f"  Detail: {outcome.detail}")


def log_run_summary(report, elapsed_time: float) -> None:
    """Log counts by outcome kind and the continuation point."""
    counts = ", ".join(f"{kind.value}={count}" for kind, count in report.counts_by_kind().items())
    _log_info(f"Run finished in {format_elapsed(elapsed_time)}: {counts or 'nothing processed'}")
    if report.interrupted:
        _log_warning("Run interrupted by operator")
    if report.progress.remaining_count:
        _log_info(
            f"{report.progress.remaining_count} entries remaining, "
            f"continue at position {report.progress.next_start_index + 1}"
        )
