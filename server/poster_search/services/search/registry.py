"""Strategy registry: the ordered list of search interpretations."""

from poster_search.services.search.base import SearchStrategy

_strategies: dict[str, SearchStrategy] = {}


def register_strategy(strategy: SearchStrategy) -> None:
    """Register a strategy by name. Registration order is evaluation order."""
    _strategies[strategy.name] = strategy


def get_strategy(name: str) -> SearchStrategy | None:
    """Get a registered strategy by name."""
    return _strategies.get(name)


def list_strategies() -> list[SearchStrategy]:
    """Get all registered strategies in evaluation order."""
    return list(_strategies.values())


def _clear_strategies() -> None:
    """Clear all registered strategies (for testing only)."""
    _strategies.clear()
