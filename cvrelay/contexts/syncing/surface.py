"""
Remote surface boundary for the Syncing context.

The sync driver never talks to a browser directly. It sees the remote profile
UI only through this capability set, which the Playwright adapter implements
for real runs and tests implement with scripted fakes.
"""

from typing import Any, Callable, Optional, Protocol

from cvrelay.contexts.syncing.locators import LocatorStrategy

# Opaque element reference returned by find(); only the surface interprets it
Handle = Any


class RemoteSurface(Protocol):
    """
    Capabilities the driver needs from a remote profile UI.

    Every method may raise; the driver isolates such errors per entry.
    """

    def navigate(self, url: str) -> None:
        """Start navigating to a URL (completion is observed by polling)."""
        ...

    def find(self, strategy: LocatorStrategy) -> Optional[Handle]:
        """Return a visible, interactable element for one strategy, or None."""
        ...

    def set_value(self, handle: Handle, text: str) -> None:
        """
        Put a value into a control.

        Selects the option for dropdowns, sets the checked state for
        checkboxes ("true"/"false"), fills text otherwise.
        """
        ...

    def click(self, handle: Handle) -> None:
        ...

    def wait_for_condition(
        self, predicate: Callable[[], bool], interval: float, max_attempts: int
    ) -> bool:
        """Poll predicate until true or attempts run out; return whether it held."""
        ...

    def current_location(self) -> str:
        ...
