"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from cvrelay.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path, source: str = "cv") -> Path:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this parsing session
        source: CV file name recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={"Source": source},
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_parse_summary(document) -> None:
    """
    Log entry counts of a parsed CV.

    Args:
        document: CVDocument returned by the parser
    """
    _log_info(
        f"Parsed CV: {len(document.experience)} experience, "
        f"{len(document.education)} education, {len(document.skills)} skills"
    )
    if document.personal_info.name:
        _log_debug(f"Name: {document.personal_info.name}")
    if not document.experience:
        _log_warning("No experience entries recognized")
