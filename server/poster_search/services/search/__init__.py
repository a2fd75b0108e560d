from poster_search.services.search.orchestrator import fuzzy_poster_search
from poster_search.services.search.registry import list_strategies, register_strategy
from poster_search.services.search.strategies import DEFAULT_STRATEGIES


def register_default_strategies() -> None:
    """Register the built-in strategies in evaluation order."""
    for strategy_cls in DEFAULT_STRATEGIES:
        register_strategy(strategy_cls())


register_default_strategies()

__all__ = ["fuzzy_poster_search", "list_strategies", "register_default_strategies"]
