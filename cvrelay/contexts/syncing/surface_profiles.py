"""
Surface profiles for the Syncing context.

A surface profile describes one remote profile site: how to log in, how long
to wait, and for every replayable category the form URL, URL markers and the
ordered locator strategies of each logical field. Profiles are YAML files
loaded with OmegaConf, so values may use interpolation (${base_url}) and the
oc.env resolver for per-user values.

Site-specific selectors live only in these files; the driver is generic.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from cvrelay.contexts.syncing.exceptions import SurfaceProfileError
from cvrelay.contexts.syncing.locators import LocatorRegistry, LocatorStrategy

load_dotenv()
SURFACE_PROFILES_PATH = Path(
    os.getenv("SURFACE_PROFILES_PATH", str(Path(__file__).parent / "profiles"))
)

MONTH_FORMATS = ("number", "name")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _strategies(raw, where: str, path: Optional[Path]) -> tuple[LocatorStrategy, ...]:
    """Build an ordered strategy tuple from a string, a mapping or a list of either."""
    if raw is None:
        return ()
    if isinstance(raw, (str, Mapping)):
        raw = [raw]
    try:
        return tuple(LocatorStrategy.from_config(item, position) for position, item in enumerate(raw))
    except (KeyError, TypeError, ValueError) as e:
        raise SurfaceProfileError(f"Invalid locator strategy: {e}", profile_path=path, key=where) from e


def _require(data: Mapping, key: str, where: str, path: Optional[Path]) -> Any:
    value = data.get(key)
    if value in (None, "", [], {}):
        raise SurfaceProfileError("Missing required value", profile_path=path, key=f"{where}.{key}")
    return value


@dataclass(frozen=True)
class FieldSpec:
    """
    Locator configuration of one logical field.

    Attributes:
        name: Logical field name ("title", "company", ...)
        strategies: Ordered strategies locating the control
        reveal: Controls clicked when the field is not found (e.g. "add
            description"), after which resolution is tried once more
        suggestion: Typeahead entries clicked after typing the value
    """

    name: str
    strategies: tuple[LocatorStrategy, ...]
    reveal: tuple[LocatorStrategy, ...] = ()
    suggestion: tuple[LocatorStrategy, ...] = ()


@dataclass(frozen=True)
class CategorySpec:
    """
    Form description for one replayable category.

    Attributes:
        name: One of REPLAY_CATEGORIES ("experience", "skills", "summary", ...)
        form_url: URL that opens an empty entry form
        form_marker: Substring of the location once the form is shown
        edit_markers: Substrings present while still on an edit view
        read_marker: Substring required on the read view after saving
        fields: Logical field name → FieldSpec, in profile order
        save: Strategies locating the save control
        defaults: Fallback values for fields the entry leaves empty
        description_bullet: Prefix for every description line
        max_description_length: Description is cut to this many characters
        month_format: "number" (9) or "name" (September) for month controls
    """

    name: str
    form_url: str
    form_marker: str
    fields: Dict[str, FieldSpec]
    save: tuple[LocatorStrategy, ...]
    edit_markers: tuple[str, ...] = ()
    read_marker: Optional[str] = None
    defaults: Dict[str, str] = field(default_factory=dict)
    description_bullet: str = ""
    max_description_length: Optional[int] = None
    month_format: str = "number"

    def locators(self) -> LocatorRegistry:
        """LocatorRegistry over all fields plus the "save" control."""
        registry = {name: spec.strategies for name, spec in self.fields.items()}
        registry["save"] = self.save
        return LocatorRegistry(registry)

    def format_month(self, month: int) -> str:
        if self.month_format == "name":
            return MONTH_NAMES[month - 1]
        return str(month)

    @classmethod
    def from_dict(cls, name: str, data: Mapping, path: Optional[Path] = None) -> "CategorySpec":
        where = f"categories.{name}"

        raw_fields = _require(data, "fields", where, path)
        fields = {}
        for field_name, raw in raw_fields.items():
            # A field may be given as just its strategies
            if not isinstance(raw, Mapping) or "strategies" not in raw:
                raw = {"strategies": raw}
            strategies = _strategies(raw["strategies"], f"{where}.fields.{field_name}", path)
            if not strategies:
                raise SurfaceProfileError(
                    "Field has no strategies", profile_path=path, key=f"{where}.fields.{field_name}"
                )
            fields[field_name] = FieldSpec(
                name=field_name,
                strategies=strategies,
                reveal=_strategies(raw.get("reveal"), f"{where}.fields.{field_name}.reveal", path),
                suggestion=_strategies(raw.get("suggestion"), f"{where}.fields.{field_name}.suggestion", path),
            )

        month_format = str(data.get("month_format", "number"))
        if month_format not in MONTH_FORMATS:
            raise SurfaceProfileError(
                f"month_format must be one of {MONTH_FORMATS}", profile_path=path, key=f"{where}.month_format"
            )

        max_length = data.get("max_description_length")

        return cls(
            name=name,
            form_url=str(_require(data, "form_url", where, path)),
            form_marker=str(_require(data, "form_marker", where, path)),
            fields=fields,
            save=_strategies(_require(data, "save", where, path), f"{where}.save", path),
            edit_markers=tuple(str(marker) for marker in data.get("edit_markers") or ()),
            read_marker=data.get("read_marker") or None,
            defaults={key: str(value) for key, value in (data.get("defaults") or {}).items()},
            description_bullet=str(data.get("description_bullet") or ""),
            max_description_length=int(max_length) if max_length else None,
            month_format=month_format,
        )


@dataclass(frozen=True)
class LoginSpec:
    """
    Login page description.

    Credentials are never stored in profiles: email_env and password_env
    name the environment variables that hold them.
    """

    url: str
    username: tuple[LocatorStrategy, ...]
    password: tuple[LocatorStrategy, ...]
    submit: tuple[LocatorStrategy, ...]
    email_env: str
    password_env: str
    login_markers: tuple[str, ...] = ()
    consent: tuple[LocatorStrategy, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping, path: Optional[Path] = None) -> "LoginSpec":
        return cls(
            url=str(_require(data, "url", "login", path)),
            username=_strategies(_require(data, "username", "login", path), "login.username", path),
            password=_strategies(_require(data, "password", "login", path), "login.password", path),
            submit=_strategies(_require(data, "submit", "login", path), "login.submit", path),
            email_env=str(_require(data, "email_env", "login", path)),
            password_env=str(_require(data, "password_env", "login", path)),
            login_markers=tuple(str(marker) for marker in data.get("login_markers") or ()),
            consent=_strategies(data.get("consent"), "login.consent", path),
        )


@dataclass(frozen=True)
class PollingSpec:
    """
    Wait budgets in seconds/attempts.

    Defaults match a 2s poll with a two-minute save ceiling.
    """

    interval: float = 2.0
    navigation_attempts: int = 15
    save_attempts: int = 60
    login_attempts: int = 30
    settle: float = 2.0
    ui_delay: float = 1.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "PollingSpec":
        data = data or {}
        defaults = cls()
        return cls(
            interval=float(data.get("interval", defaults.interval)),
            navigation_attempts=int(data.get("navigation_attempts", defaults.navigation_attempts)),
            save_attempts=int(data.get("save_attempts", defaults.save_attempts)),
            login_attempts=int(data.get("login_attempts", defaults.login_attempts)),
            settle=float(data.get("settle", defaults.settle)),
            ui_delay=float(data.get("ui_delay", defaults.ui_delay)),
        )


@dataclass(frozen=True)
class SurfaceProfile:
    """
    Complete description of one remote profile site.

    Factory methods:
        from_dict(data) - Build from a resolved config dict
        SurfaceProfileRegistry.get_profile(name) - Load a bundled/user YAML profile
    """

    name: str
    categories: Dict[str, CategorySpec]
    polling: PollingSpec = field(default_factory=PollingSpec)
    login: Optional[LoginSpec] = None
    source_path: Optional[Path] = None

    def category(self, name: str) -> CategorySpec:
        """
        Raises:
            SurfaceProfileError: If the profile cannot replay this category
        """
        if name not in self.categories:
            raise SurfaceProfileError(
                f"Profile '{self.name}' has no '{name}' category "
                f"(available: {', '.join(self.categories) or 'none'})",
                profile_path=self.source_path,
                key=f"categories.{name}",
            )
        return self.categories[name]

    @classmethod
    def from_dict(cls, data: Mapping, path: Optional[Path] = None) -> "SurfaceProfile":
        """
        Validate and build a profile from a plain dict.

        Raises:
            SurfaceProfileError: If required keys are missing or malformed
        """
        if not isinstance(data, Mapping):
            raise SurfaceProfileError("Profile must be a mapping", profile_path=path)

        raw_categories = _require(data, "categories", "profile", path)
        categories = {
            name: CategorySpec.from_dict(name, raw, path) for name, raw in raw_categories.items()
        }

        login = data.get("login")
        return cls(
            name=str(_require(data, "name", "profile", path)),
            categories=categories,
            polling=PollingSpec.from_dict(data.get("polling")),
            login=LoginSpec.from_dict(login, path) if login else None,
            source_path=path,
        )


class SurfaceProfileRegistry:
    """
    Registry for loading and caching surface profiles.

    Profiles are stored as {profiles_path}/{name}.yaml. A name that points
    to an existing YAML file is loaded from that path instead.
    """

    def __init__(self, profiles_path: Path = None):
        """
        Initialize the surface profile registry.

        Args:
            profiles_path: Directory of profile YAML files. Defaults to
                           SURFACE_PROFILES_PATH from environment
        """
        if profiles_path is None:
            profiles_path = SURFACE_PROFILES_PATH

        self.profiles_path = Path(profiles_path)
        self._cache: Dict[str, SurfaceProfile] = {}

    def get_profile(self, name: str) -> SurfaceProfile:
        """
        Get a profile by name, loading and caching it if necessary.

        Args:
            name: Profile name (e.g., 'xing') or path to a YAML file

        Returns:
            Validated SurfaceProfile

        Raises:
            SurfaceProfileError: If the file is missing, unreadable or invalid
        """
        if name in self._cache:
            return self._cache[name]

        profile_path = self.get_profile_path(name)

        if not profile_path.exists():
            raise SurfaceProfileError(
                f"Surface profile '{name}' not found "
                f"(available: {', '.join(self.available_profiles()) or 'none'})",
                profile_path=profile_path,
            )

        try:
            config = OmegaConf.load(profile_path)
            config_dict = OmegaConf.to_container(config, resolve=True)
        except Exception as e:
            raise SurfaceProfileError(f"Could not load profile: {e}", profile_path=profile_path) from e

        profile = SurfaceProfile.from_dict(config_dict, profile_path)
        self._cache[name] = profile
        return profile

    def get_profile_path(self, name: str) -> Path:
        """
        Get the file path for a profile.

        Args:
            name: Profile name or explicit YAML path

        Returns:
            Path to the profile's YAML file
        """
        candidate = Path(name)
        if candidate.suffix in (".yaml", ".yml") and candidate.exists():
            return candidate
        return self.profiles_path / f"{name}.yaml"

    def available_profiles(self) -> list[str]:
        """Names of the profiles found in profiles_path, sorted."""
        if not self.profiles_path.is_dir():
            return []
        return sorted(path.stem for path in self.profiles_path.glob("*.yaml"))

    def clear_cache(self):
        """Clear the profile cache."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        """
        Check if a profile is in the cache.

        Args:
            name: Profile name

        Returns:
            True if cached, False otherwise
        """
        return name in self._cache
