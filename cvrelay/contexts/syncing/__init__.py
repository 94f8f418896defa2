"""
Syncing Context

Responsibilities:
- Replays parsed CV entries onto a remote profile surface, entry by entry
- Resolves logical fields through ordered fallback locator strategies
- Bounds every wait and reports a per-entry outcome plus a resume point

Owns: Surface profiles, the sync driver, run outcomes and progress arithmetic
Never: Parses CV text or stores credentials
"""

from cvrelay.contexts.syncing.driver import SyncDriver, SyncOptions, build_field_plan
from cvrelay.contexts.syncing.exceptions import AuthenticationRequired, SurfaceProfileError
from cvrelay.contexts.syncing.locators import NOT_FOUND, LocatorRegistry, LocatorStrategy, resolve
from cvrelay.contexts.syncing.outcomes import OutcomeKind, SyncOutcome, SyncReport
from cvrelay.contexts.syncing.polling import BoundedPoll, SystemClock
from cvrelay.contexts.syncing.progress import ProgressWindow, compute_progress
from cvrelay.contexts.syncing.surface_profiles import SurfaceProfile, SurfaceProfileRegistry

__all__ = [
    # Driver
    "SyncDriver",
    "SyncOptions",
    "build_field_plan",
    # Outcomes and progress
    "OutcomeKind",
    "SyncOutcome",
    "SyncReport",
    "ProgressWindow",
    "compute_progress",
    # Locators and waiting
    "LocatorStrategy",
    "LocatorRegistry",
    "NOT_FOUND",
    "resolve",
    "BoundedPoll",
    "SystemClock",
    # Profiles
    "SurfaceProfile",
    "SurfaceProfileRegistry",
    # Errors
    "AuthenticationRequired",
    "SurfaceProfileError",
]
