"""Custom exceptions for the syncing context."""

from pathlib import Path
from typing import Optional


class AuthenticationRequired(Exception):
    """
    Exception raised when no authenticated session can be established.

    Raised before any entry is processed: missing credentials, or a login that
    never leaves the login page.

    Attributes:
        message: Error description
        profile: Surface profile name
        missing: Environment variable names that were not set
    """

    def __init__(self, message: str, profile: Optional[str] = None, missing: tuple = ()):
        self.message = message
        self.profile = profile
        self.missing = tuple(missing)

        parts = [message]
        if profile:
            parts.append(f"Profile: {profile}")
        if self.missing:
            parts.append(f"Missing environment variables: {', '.join(self.missing)}")

        super().__init__("\n".join(parts))


class SurfaceProfileError(Exception):
    """
    Exception raised when a surface profile is missing or malformed.

    Attributes:
        message: Error description
        profile_path: YAML file that failed to load or validate
        key: Offending configuration key, if known
    """

    def __init__(
        self,
        message: str,
        profile_path: Optional[Path] = None,
        key: Optional[str] = None,
    ):
        self.message = message
        self.profile_path = profile_path
        self.key = key

        parts = [message]
        if key:
            parts.append(f"Key: {key}")
        if profile_path:
            parts.append(f"Profile file: {profile_path}")

        super().__init__("\n".join(parts))
