"""Unit tests for launching the Playwright surface, with the browser replaced by recording fakes."""

from contextlib import nullcontext

import pytest

from cvrelay.contexts.syncing import playwright_surface
from cvrelay.contexts.syncing.playwright_surface import PlaywrightSurface, launch_surface


class RecordingPage:
    def __init__(self):
        self.url = "about:blank"
        self.default_timeout = None

    def set_default_timeout(self, timeout):
        self.default_timeout = timeout


class RecordingContext:
    def __init__(self):
        self.pages = []
        self.closed = False

    def new_page(self):
        page = RecordingPage()
        self.pages.append(page)
        return page

    def close(self):
        self.closed = True


class RecordingBrowser:
    def __init__(self):
        self.context = RecordingContext()
        self.closed = False

    def new_context(self, **kwargs):
        return self.context

    def close(self):
        self.closed = True


class RecordingChromium:
    def __init__(self):
        self.launches = []
        self.browser = RecordingBrowser()
        self.persistent_context = RecordingContext()

    def launch(self, **kwargs):
        self.launches.append(("launch", kwargs))
        return self.browser

    def launch_persistent_context(self, **kwargs):
        self.launches.append(("persistent", kwargs))
        return self.persistent_context


class RecordingPlaywright:
    def __init__(self):
        self.chromium = RecordingChromium()


@pytest.fixture
def fake_playwright(monkeypatch):
    playwright = RecordingPlaywright()
    monkeypatch.setattr(playwright_surface, "sync_playwright", lambda: nullcontext(playwright))
    return playwright


@pytest.mark.unit
def test_launch_leaves_ctrl_c_to_the_run(fake_playwright):
    """Test that the browser does not close itself on SIGINT, so a stopped run can still report."""
    with launch_surface(headless=True) as surface:
        assert isinstance(surface, PlaywrightSurface)

    kind, kwargs = fake_playwright.chromium.launches[0]
    assert kind == "launch"
    assert kwargs["handle_sigint"] is False
    assert kwargs["headless"] is True
    assert fake_playwright.chromium.browser.closed
    assert fake_playwright.chromium.browser.context.closed


@pytest.mark.unit
def test_persistent_launch_leaves_ctrl_c_to_the_run(fake_playwright, tmp_path):
    """Test the persistent-profile launch path with the same signal handling."""
    with launch_surface(user_data_dir=tmp_path / "browser") as surface:
        assert surface.page.default_timeout == 10000

    kind, kwargs = fake_playwright.chromium.launches[0]
    assert kind == "persistent"
    assert kwargs["handle_sigint"] is False
    assert kwargs["user_data_dir"] == str(tmp_path / "browser")
    assert fake_playwright.chromium.persistent_context.closed
