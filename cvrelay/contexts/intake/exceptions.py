"""Custom exceptions for the intake context."""

from pathlib import Path
from typing import Optional


class DocumentReadError(Exception):
    """
    Exception raised when a CV file cannot be read.

    Parsing itself never fails; only a missing or unreadable source does.

    Attributes:
        message: Error description
        path: Path of the CV that could not be read
        original_error: The underlying OS or decoding error
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.path = path
        self.original_error = original_error

        parts = [message]
        if path:
            parts.append(f"Path: {path}")
        if original_error:
            parts.append(f"Cause: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))
