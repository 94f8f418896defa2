"""
Playwright implementation of the remote surface.

Wraps a playwright.sync_api Page so the sync driver can use it through the
RemoteSurface capability set. Element handles are Playwright Locators.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from playwright.sync_api import sync_playwright

from cvrelay.contexts.syncing.locators import LocatorStrategy
from cvrelay.contexts.syncing.logger import _log_debug, _log_info
from cvrelay.contexts.syncing.polling import BoundedPoll, PageClock

DEFAULT_VIEWPORT = {"width": 1280, "height": 900}

# Ctrl+C belongs to the sync run (stop event), not to the browser
LAUNCH_SIGNAL_OPTIONS = {"handle_sigint": False}


class PlaywrightSurface:
    """
    RemoteSurface backed by a Playwright page.

    Args:
        page: playwright.sync_api.Page
        stop_event: Operator stop signal honoured by wait_for_condition
        action_timeout: Timeout in ms for single element actions
    """

    def __init__(self, page, stop_event: Optional[threading.Event] = None, action_timeout: int = 10000):
        self.page = page
        self.stop_event = stop_event or threading.Event()
        self.page.set_default_timeout(action_timeout)

    @property
    def clock(self) -> PageClock:
        return PageClock(self.page)

    def navigate(self, url: str) -> None:
        # Return once the response starts; arrival is observed by polling
        _log_debug(f"Navigating to {url}")
        self.page.goto(url, wait_until="commit")

    def find(self, strategy: LocatorStrategy):
        locator = self.page.locator(strategy.selector)
        if locator.count() <= strategy.index:
            return None
        element = locator.nth(strategy.index)
        if not element.is_visible() or not element.is_enabled():
            return None
        return element

    def set_value(self, handle, text: str) -> None:
        tag = handle.evaluate("el => el.tagName.toLowerCase()")
        input_type = (handle.get_attribute("type") or "").lower()

        if tag == "select":
            handle.select_option(text)
        elif tag == "input" and input_type in ("checkbox", "radio"):
            handle.set_checked(text.strip().lower() == "true")
        else:
            handle.click()
            handle.fill(text)

    def click(self, handle) -> None:
        handle.click()

    def wait_for_condition(self, predicate: Callable[[], bool], interval: float, max_attempts: int) -> bool:
        poll = BoundedPoll(interval, max_attempts, clock=self.clock, stop_event=self.stop_event)
        return poll.wait(predicate)

    def current_location(self) -> str:
        return self.page.url


@contextmanager
def launch_surface(
    headless: bool = False,
    slow_mo: int = 100,
    user_data_dir: Optional[Path] = None,
    stop_event: Optional[threading.Event] = None,
) -> Iterator[PlaywrightSurface]:
    """
    Start Chromium and yield a PlaywrightSurface on a fresh page.

    Args:
        headless: Run without a visible window
        slow_mo: Delay in ms between Playwright operations
        user_data_dir: Persistent browser profile; keeps cookies/session between runs
        stop_event: Operator stop signal passed to the surface

    Example:
        with launch_surface(headless=True) as surface:
            surface.navigate("https://example.com")
    """
    with sync_playwright() as playwright:
        if user_data_dir:
            _log_info(f"Launching Chromium with persistent profile {user_data_dir}")
            context = playwright.chromium.launch_persistent_context(
                user_data_dir=str(user_data_dir),
                headless=headless,
                slow_mo=slow_mo,
                viewport=DEFAULT_VIEWPORT,
                **LAUNCH_SIGNAL_OPTIONS,
            )
            browser = None
        else:
            _log_info(f"Launching Chromium (headless={headless})")
            browser = playwright.chromium.launch(headless=headless, slow_mo=slow_mo, **LAUNCH_SIGNAL_OPTIONS)
            context = browser.new_context(viewport=DEFAULT_VIEWPORT)

        try:
            page = context.pages[0] if context.pages else context.new_page()
            yield PlaywrightSurface(page, stop_event=stop_event)
        finally:
            context.close()
            if browser is not None:
                browser.close()
