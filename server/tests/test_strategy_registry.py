"""Tests for the strategy registry."""

import pytest

from poster_search.services.search.base import SearchStrategy
from poster_search.services.search.registry import (
    _clear_strategies,
    get_strategy,
    list_strategies,
    register_strategy,
)


class FakeStrategy(SearchStrategy):
    """Fake strategy for testing."""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def search(self, db, context):
        return []


@pytest.fixture
def clean_registry():
    """Empty the registry for the test, then restore the built-in strategies."""
    from poster_search.services.search import register_default_strategies

    _clear_strategies()
    yield
    _clear_strategies()
    register_default_strategies()


@pytest.mark.usefixtures("clean_registry")
class TestStrategyRegistry:
    def test_register_and_get(self):
        strategy = FakeStrategy("test_strategy")
        register_strategy(strategy)
        assert get_strategy("test_strategy") is strategy

    def test_get_unknown_returns_none(self):
        assert get_strategy("nonexistent") is None

    def test_list_keeps_registration_order(self):
        first = FakeStrategy("first")
        second = FakeStrategy("second")
        register_strategy(first)
        register_strategy(second)
        assert list_strategies() == [first, second]

    def test_register_overwrites_same_name(self):
        register_strategy(FakeStrategy("dup"))
        replacement = FakeStrategy("dup")
        register_strategy(replacement)
        assert list_strategies() == [replacement]


def test_builtin_strategies_registered_on_import():
    names = [strategy.name for strategy in list_strategies()]
    assert names[0] == "artist_city_year"
    assert names[-1] == "city"
    assert len(names) == 7
