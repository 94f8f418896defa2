"""Unit tests for ordered locator resolution."""

import pytest

from cvrelay.contexts.syncing.locators import (
    NOT_FOUND,
    LocatorRegistry,
    LocatorStrategy,
    Resolution,
    resolve,
)

PRIMARY = LocatorStrategy("data-testid", "[data-testid='title']")
FALLBACK = LocatorStrategy("label", "input[aria-label='Title']")


@pytest.mark.unit
def test_first_matching_strategy_wins(make_surface):
    """Test that the earliest present strategy is used."""
    surface = make_surface(visible=[PRIMARY.selector, FALLBACK.selector])

    resolution = resolve(surface, (PRIMARY, FALLBACK))

    assert isinstance(resolution, Resolution)
    assert resolution.strategy == PRIMARY
    assert resolution.handle.selector == PRIMARY.selector


@pytest.mark.unit
def test_fallback_strategy(make_surface):
    """Test that a later strategy resolves when earlier ones find nothing."""
    surface = make_surface(visible=[FALLBACK.selector])

    resolution = resolve(surface, (PRIMARY, FALLBACK))

    assert resolution.strategy.name == "label"


@pytest.mark.unit
def test_surface_error_skips_only_that_strategy(make_surface):
    """Test that a raising strategy counts as no match for that strategy."""
    surface = make_surface(visible=[PRIMARY.selector, FALLBACK.selector], failing=[PRIMARY.selector])

    assert resolve(surface, (PRIMARY, FALLBACK)).strategy == FALLBACK


@pytest.mark.unit
def test_not_found_sentinel(make_surface):
    """Test that nothing found yields the falsy NOT_FOUND singleton."""
    surface = make_surface(visible=[])

    result = resolve(surface, (PRIMARY, FALLBACK))

    assert result is NOT_FOUND
    assert not result
    assert repr(result) == "NOT_FOUND"
    assert resolve(surface, ()) is NOT_FOUND


@pytest.mark.unit
def test_strategy_from_config():
    """Test building strategies from plain selectors and mappings."""
    assert LocatorStrategy.from_config("#title", 1) == LocatorStrategy("strategy 2", "#title")
    assert LocatorStrategy.from_config({"name": "second input", "selector": "input", "index": 1}) == (
        LocatorStrategy("second input", "input", 1)
    )
    with pytest.raises(KeyError):
        LocatorStrategy.from_config({"name": "no selector"})


@pytest.mark.unit
def test_locator_registry(make_surface):
    """Test logical field lookup."""
    registry = LocatorRegistry({"title": [PRIMARY, FALLBACK]})
    surface = make_surface(visible=[FALLBACK.selector])

    assert registry.knows("title")
    assert not registry.knows("company")
    assert registry.strategies_for("title") == (PRIMARY, FALLBACK)
    assert registry.strategies_for("company") == ()
    assert registry.resolve(surface, "title").strategy == FALLBACK
    assert registry.resolve(surface, "company") is NOT_FOUND


@pytest.mark.unit
def test_category_locators_include_save(profile):
    """Test the registry built from a profile category."""
    registry = profile.category("experience").locators()

    assert registry.knows("save")
    assert [strategy.name for strategy in registry.strategies_for("title")] == ["title id", "title label"]
