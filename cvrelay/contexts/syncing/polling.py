"""
Bounded polling for the Syncing context.

Every wait in a sync run goes through BoundedPoll: check a predicate, sleep,
repeat, give up after a fixed number of attempts. The only suspension point is
Clock.sleep, so tests swap in a fake clock and an operator stop (Ctrl+C)
interrupts a wait immediately.
"""

import threading
from typing import Callable, Optional, Protocol


class Clock(Protocol):
    def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    """
    Wall-clock sleeping that wakes up early when the stop event is set.

    Args:
        stop_event: Event whose setting interrupts a sleep
    """

    def __init__(self, stop_event: Optional[threading.Event] = None):
        self.stop_event = stop_event or threading.Event()

    def sleep(self, seconds: float) -> None:
        self.stop_event.wait(timeout=seconds)


class PageClock:
    """
    Sleeps through the browser page so it keeps processing events.

    Args:
        page: playwright.sync_api.Page
    """

    def __init__(self, page):
        self.page = page

    def sleep(self, seconds: float) -> None:
        self.page.wait_for_timeout(seconds * 1000)


class BoundedPoll:
    """
    Poll a predicate at a fixed interval for at most max_attempts checks.

    wait() never blocks indefinitely: it returns False when attempts run out
    or the stop event is set, True as soon as the predicate holds.

    Args:
        interval: Seconds between checks
        max_attempts: Number of predicate checks before giving up
        clock: Clock used for sleeping (SystemClock by default)
        stop_event: Operator stop signal
    """

    def __init__(
        self,
        interval: float,
        max_attempts: int,
        clock: Optional[Clock] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        self.interval = interval
        self.max_attempts = max_attempts
        self.stop_event = stop_event or threading.Event()
        self.clock = clock or SystemClock(self.stop_event)

    @property
    def ceiling(self) -> float:
        """Upper bound of the wait in seconds."""
        return self.interval * self.max_attempts

    def wait(self, predicate: Callable[[], bool]) -> bool:
        """
        Check predicate until it holds or the poll expires.

        Args:
            predicate: Zero-argument callable; exceptions propagate to the caller

        Returns:
            True if the predicate held, False on expiry or stop
        """
        for attempt in range(self.max_attempts):
            if self.stop_event.is_set():
                return False
            if predicate():
                return True
            if attempt < self.max_attempts - 1:
                self.clock.sleep(self.interval)
        return False

