"""
Locator resolution for the Syncing context.

A logical field ("title", "company", "save", ...) maps to an ordered tuple of
named strategies. Resolution tries them in order and returns the first element
the surface reports as present and interactable. Not finding a field is a
normal outcome, represented by the falsy NOT_FOUND sentinel.

Example:
    registry = LocatorRegistry({"title": (LocatorStrategy("id", "input[id*='title']"),)})
    resolution = registry.resolve(surface, "title")
    if resolution:
        surface.set_value(resolution.handle, "Engineer")
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from cvrelay.contexts.syncing.logger import _log_debug


@dataclass(frozen=True)
class LocatorStrategy:
    """
    One way of finding an element.

    Attributes:
        name: Human-readable label used in logs ("data-testid", "label fallback")
        selector: Surface-specific selector (CSS for the Playwright surface)
        index: Which of several matches to take (0 = first)
    """

    name: str
    selector: str
    index: int = 0

    @classmethod
    def from_config(cls, raw: Union[str, Mapping[str, Any]], position: int = 0) -> "LocatorStrategy":
        """
        Build a strategy from a profile entry.

        A plain string is a selector; a mapping may carry name/selector/index.
        """
        if isinstance(raw, str):
            return cls(name=f"strategy {position + 1}", selector=raw)
        return cls(
            name=str(raw.get("name") or f"strategy {position + 1}"),
            selector=str(raw["selector"]),
            index=int(raw.get("index", 0)),
        )


@dataclass(frozen=True)
class Resolution:
    """A found element together with the strategy that found it."""

    handle: Any
    strategy: LocatorStrategy

    def __bool__(self) -> bool:
        return True


class _NotFound:
    """Falsy sentinel for a field no strategy could locate."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def resolve(surface, strategies: Iterable[LocatorStrategy]) -> Union[Resolution, _NotFound]:
    """
    Try strategies in order; the first match wins.

    Errors raised by the surface while probing one strategy count as "no
    match" for that strategy only.

    Args:
        surface: RemoteSurface to search
        strategies: Ordered strategies for one logical field

    Returns:
        Resolution for the first matching strategy, else NOT_FOUND
    """
    for strategy in strategies:
        try:
            handle = surface.find(strategy)
        except Exception as e:
            _log_debug(f"Strategy '{strategy.name}' ({strategy.selector}) raised: {e}")
            continue

        if handle is not None:
            _log_debug(f"Resolved via '{strategy.name}' ({strategy.selector})")
            return Resolution(handle=handle, strategy=strategy)

    return NOT_FOUND


class LocatorRegistry:
    """
    Logical field name → ordered strategies.

    Built from a surface profile category; unknown fields resolve to NOT_FOUND.
    """

    def __init__(self, fields: Mapping[str, Iterable[LocatorStrategy]]):
        self._fields = {name: tuple(strategies) for name, strategies in fields.items()}

    def strategies_for(self, field: str) -> tuple[LocatorStrategy, ...]:
        return self._fields.get(field, ())

    def knows(self, field: str) -> bool:
        return field in self._fields

    def resolve(self, surface, field: str) -> Union[Resolution, _NotFound]:
        return resolve(surface, self.strategies_for(field))
