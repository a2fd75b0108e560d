"""Search orchestrator: turns one free-text query into a ranked list of poster IDs.

Pipeline:
1. Validate and trim the raw input (too short -> no results, no queries)
2. Build a SearchContext (stop words removed, date extracted)
3. Try each registered strategy in order; the first non-empty result wins
4. Otherwise run the complex or single-term fallback search
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from poster_search.services.search.base import SearchContext, SearchStrategy
from poster_search.services.search.constants import DEFAULT_SIMILARITY_THRESHOLD
from poster_search.services.search.fallback import (
    execute_complex_search,
    execute_single_term_search,
)
from poster_search.services.search.registry import list_strategies
from poster_search.services.search.sanitizer import validate_and_clean_search_term

logger = logging.getLogger(__name__)


def fuzzy_poster_search(
    db: Session,
    search_term: str | None,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    strategies: Iterable[SearchStrategy] | None = None,
) -> list[int]:
    """Return poster IDs matching a free-text query, best first, without duplicates.

    Invalid input (None, blank, one character) returns an empty list.
    Database errors propagate to the caller.
    """
    cleaned = validate_and_clean_search_term(search_term)
    if cleaned is None:
        logger.debug(f"Ignoring unsearchable term {search_term!r}")
        return []

    context = SearchContext.from_term(cleaned, similarity_threshold)

    for strategy in strategies if strategies is not None else list_strategies():
        results = strategy.attempt(db, context)
        if results:
            logger.info(f"Poster search {cleaned!r}: {len(results)} results via {strategy.name}")
            return results

    results = run_fallback_search(db, context)
    logger.info(f"Poster search {cleaned!r}: {len(results)} results via fallback")
    return results


def run_fallback_search(db: Session, context: SearchContext) -> list[int]:
    """Complex search for long, venue-like or dated queries; single-term otherwise."""
    tokens = context.matching_tokens

    if len(tokens) >= 3 or context.is_venue_search or context.date_info.has_date:
        results = execute_complex_search(
            db,
            context.term,
            context.date_info,
            tokens,
            context.term_for_matching,
            context.similarity_threshold,
        )
    else:
        results = execute_single_term_search(db, context.term, context.similarity_threshold)
    return list(dict.fromkeys(results))
