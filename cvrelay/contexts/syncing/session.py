"""
Login session handling for sync runs.

Establishes an authenticated session on the remote surface before the driver
runs. Credentials come from the environment (.env via python-dotenv); the
surface profile only names the variables. Failure here is fatal for the run.
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv

from cvrelay.contexts.syncing.exceptions import AuthenticationRequired
from cvrelay.contexts.syncing.locators import resolve
from cvrelay.contexts.syncing.logger import _log_debug, _log_info, _log_success
from cvrelay.contexts.syncing.surface import RemoteSurface
from cvrelay.contexts.syncing.surface_profiles import LoginSpec, SurfaceProfile

load_dotenv()


def read_credentials(profile: SurfaceProfile, environ: Optional[Mapping[str, str]] = None) -> tuple[str, str]:
    """
    Look up the profile's credential variables.

    Args:
        profile: Surface profile with a login block
        environ: Environment mapping (defaults to os.environ)

    Returns:
        (email, password)

    Raises:
        AuthenticationRequired: If either variable is unset or empty
    """
    environ = os.environ if environ is None else environ
    login = profile.login

    missing = [name for name in (login.email_env, login.password_env) if not environ.get(name)]
    if missing:
        raise AuthenticationRequired("Credentials not configured", profile=profile.name, missing=missing)

    return environ[login.email_env], environ[login.password_env]


def on_login_page(location: str, login: LoginSpec) -> bool:
    return any(marker in location for marker in login.login_markers)


def establish_session(surface: RemoteSurface, profile: SurfaceProfile, environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Log in on the surface unless a session already exists.

    Opens the login page, accepts the cookie banner when one is shown, fills
    the credentials and waits until the surface leaves the login page.

    Args:
        surface: RemoteSurface to log in on
        profile: Surface profile with login selectors and markers
        environ: Environment mapping for credentials (defaults to os.environ)

    Raises:
        AuthenticationRequired: Missing credentials, no login form, or the
            login never leaves the login page
    """
    login = profile.login
    if login is None:
        _log_info(f"Profile '{profile.name}' has no login block, using the existing session")
        return

    polling = profile.polling
    surface.navigate(login.url)

    form_shown = surface.wait_for_condition(
        lambda: bool(resolve(surface, login.username)), polling.interval, polling.navigation_attempts
    )
    if not form_shown:
        # A persistent browser profile redirects straight past the login page
        if not on_login_page(surface.current_location(), login):
            _log_success("Already logged in")
            return
        raise AuthenticationRequired("Login form did not appear", profile=profile.name)

    email, password = read_credentials(profile, environ)

    consent = resolve(surface, login.consent)
    if consent:
        _log_debug(f"Accepting cookies via '{consent.strategy.name}'")
        surface.click(consent.handle)

    for strategies, value in ((login.username, email), (login.password, password)):
        field = resolve(surface, strategies)
        if not field:
            raise AuthenticationRequired("Login form is incomplete", profile=profile.name)
        surface.set_value(field.handle, value)

    submit = resolve(surface, login.submit)
    if not submit:
        raise AuthenticationRequired("Login submit control not found", profile=profile.name)
    surface.click(submit.handle)

    _log_info("Waiting for login to complete (solve any verification in the browser)")
    left_login = surface.wait_for_condition(
        lambda: not on_login_page(surface.current_location(), login),
        polling.interval,
        polling.login_attempts,
    )
    if not left_login:
        raise AuthenticationRequired("Login did not complete", profile=profile.name)

    _log_success(f"Logged in to {profile.name}")
