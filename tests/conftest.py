"""Shared fixtures: a scripted remote surface, a recording clock and a small surface profile."""

import os
from dataclasses import dataclass
from pathlib import Path

import pytest
from dotenv import load_dotenv

from cvrelay.contexts.syncing.polling import BoundedPoll
from cvrelay.contexts.syncing.surface_profiles import SurfaceProfile

load_dotenv()
FIXTURES_PATH = Path(os.getenv("CVRELAY_FIXTURES_PATH", str(Path(__file__).parent / "fixtures")))

PROFILE_URL = "https://example.test/profile/"
LOGIN_URL = "https://example.test/login"

# Every control of the test profile's forms
FORM_SELECTORS = (
    "#title",
    "#company",
    ".suggestion",
    "#location",
    "#description",
    "#start-month",
    "#start-year",
    "#current",
    "#end-month",
    "#end-year",
    "#employment",
    "#skill",
    "#about",
    "#first-name",
    "#last-name",
    "#save",
)


class FakeClock:
    """Records requested sleeps instead of sleeping."""

    def __init__(self):
        self.sleeps = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


@dataclass(frozen=True)
class FakeHandle:
    selector: str
    index: int = 0


class FakeSurface:
    """
    Scripted RemoteSurface.

    Args:
        visible: Selectors find() reports as present
        location: Initial location
        navigation_works: Whether navigate() changes the location
        redirects: Clicked selector → location afterwards
        reveals: Clicked selector → selectors that become visible
        failing: Selectors whose find() raises
        rejecting: Selectors whose set_value() raises
        click_hooks: Clicked selector → callable run after the click
    """

    def __init__(
        self,
        visible=FORM_SELECTORS,
        location=PROFILE_URL,
        navigation_works=True,
        redirects=None,
        reveals=None,
        failing=(),
        rejecting=(),
        click_hooks=None,
    ):
        self.visible = set(visible)
        self.location = location
        self.navigation_works = navigation_works
        self.redirects = {"#save": PROFILE_URL} if redirects is None else dict(redirects)
        self.reveals = dict(reveals or {})
        self.failing = set(failing)
        self.rejecting = set(rejecting)
        self.click_hooks = dict(click_hooks or {})
        self.clock = FakeClock()

        self.navigations = []
        self.filled = []
        self.clicks = []

    @property
    def values(self) -> dict:
        """Last value put into each selector."""
        return dict(self.filled)

    def navigate(self, url):
        self.navigations.append(url)
        if self.navigation_works:
            self.location = url

    def find(self, strategy):
        if strategy.selector in self.failing:
            raise RuntimeError(f"selector engine failed on {strategy.selector}")
        if strategy.selector in self.visible:
            return FakeHandle(strategy.selector, strategy.index)
        return None

    def set_value(self, handle, text):
        if handle.selector in self.rejecting:
            raise RuntimeError(f"{handle.selector} is read-only")
        self.filled.append((handle.selector, text))

    def click(self, handle):
        self.clicks.append(handle.selector)
        self.visible.update(self.reveals.get(handle.selector, ()))
        if handle.selector in self.redirects:
            self.location = self.redirects[handle.selector]
        if handle.selector in self.click_hooks:
            self.click_hooks[handle.selector]()

    def wait_for_condition(self, predicate, interval, max_attempts):
        return BoundedPoll(interval, max_attempts, clock=self.clock).wait(predicate)

    def current_location(self):
        return self.location


def build_profile_data() -> dict:
    """Profile dict for a fictional site with experience, skills, about and intro forms."""
    return {
        "name": "testsite",
        "polling": {
            "interval": 1,
            "navigation_attempts": 3,
            "save_attempts": 4,
            "login_attempts": 3,
            "settle": 0,
            "ui_delay": 0.5,
        },
        "login": {
            "url": LOGIN_URL,
            "username": ["#username"],
            "password": ["#password"],
            "submit": ["#sign-in"],
            "email_env": "TESTSITE_EMAIL",
            "password_env": "TESTSITE_PASSWORD",
            "login_markers": ["/login"],
            "consent": [{"name": "cookie banner", "selector": "#accept-cookies"}],
        },
        "categories": {
            "experience": {
                "form_url": "https://example.test/profile/add/position",
                "form_marker": "/add/position",
                "edit_markers": ["/add/"],
                "read_marker": "/profile",
                "description_bullet": "• ",
                "max_description_length": 200,
                "save": [{"name": "save button", "selector": "#save"}],
                "fields": {
                    "title": [
                        {"name": "title id", "selector": "#title"},
                        {"name": "title label", "selector": "input[aria-label='Title']"},
                    ],
                    "company": {"strategies": ["#company"], "suggestion": [".suggestion"]},
                    "location": ["#location"],
                    "description": {"strategies": ["#description"], "reveal": ["#add-description"]},
                    "start_month": "#start-month",
                    "start_year": "#start-year",
                    "currently_working": "#current",
                    "end_month": "#end-month",
                    "end_year": "#end-year",
                    "employment": "#employment",
                },
                "defaults": {"employment": "freelance"},
            },
            "skills": {
                "form_url": "https://example.test/profile/add/skill",
                "form_marker": "/add/skill",
                "edit_markers": ["/add/"],
                "save": "#save",
                "fields": {"skill": "#skill"},
            },
            "summary": {
                "form_url": "https://example.test/profile/edit/about",
                "form_marker": "/edit/about",
                "edit_markers": ["/edit/"],
                "max_description_length": 40,
                "save": "#save",
                "fields": {"summary": "#about"},
            },
            "intro": {
                "form_url": "https://example.test/profile/edit/intro",
                "form_marker": "/edit/intro",
                "edit_markers": ["/edit/"],
                "save": "#save",
                "fields": {"first_name": "#first-name", "last_name": "#last-name"},
            },
        },
    }


@pytest.fixture
def profile_data():
    return build_profile_data()


@pytest.fixture
def profile(profile_data):
    return SurfaceProfile.from_dict(profile_data)


@pytest.fixture
def make_surface():
    """Factory for FakeSurface instances (keyword arguments as in FakeSurface)."""
    return FakeSurface


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sample_cv_path():
    return FIXTURES_PATH / "sample_cv.md"
