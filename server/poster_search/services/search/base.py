"""Abstract base for poster search strategies.

Each strategy recognises one shape of query ("artist city year", "A OR B",
"AC/DC", ...) and runs the strict queries for it. The orchestrator tries the
registered strategies in order and stops at the first one with results.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from poster_search.services.search.classifiers import (
    DateInfo,
    extract_date_info,
    is_likely_venue_search,
)
from poster_search.services.search.constants import DEFAULT_SIMILARITY_THRESHOLD
from poster_search.services.search.sanitizer import filter_stop_words

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchContext:
    """Everything derived from one validated query, computed once per search."""

    # Trimmed input with stop words intact ("Phish OR Widespread Panic")
    cleaned_term: str
    # Stop words and one-letter tokens removed ("Phish Widespread Panic")
    term: str
    date_info: DateInfo
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD

    @classmethod
    def from_term(
        cls, cleaned_term: str, similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    ) -> SearchContext:
        term = filter_stop_words(cleaned_term)
        return cls(
            cleaned_term=cleaned_term,
            term=term,
            date_info=extract_date_info(term),
            similarity_threshold=similarity_threshold,
        )

    @property
    def tokens(self) -> list[str]:
        return self.term.split()

    @property
    def term_for_matching(self) -> str:
        """The query with any date removed, or the whole query if nothing else is left."""
        if self.date_info.has_date and self.date_info.search_without_date:
            return self.date_info.search_without_date
        return self.term

    @property
    def matching_tokens(self) -> list[str]:
        return self.term_for_matching.split()

    @property
    def is_venue_search(self) -> bool:
        return is_likely_venue_search(self.term_for_matching)


class SearchStrategy(ABC):
    """Abstract base for one query interpretation."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs, e.g. 'artist_city'."""

    def applies_to(self, context: SearchContext) -> bool:
        """Cheap lexical pre-check; no database access."""
        return True

    @abstractmethod
    def search(self, db: Session, context: SearchContext) -> list[int]:
        """Run the strategy's queries. May contain duplicates; errors propagate."""

    def attempt(self, db: Session, context: SearchContext) -> list[int]:
        """Run the strategy if it applies and return de-duplicated poster IDs.

        Template method: subclasses implement applies_to() and search().
        An empty list means "not handled here, try the next strategy".
        """
        if not self.applies_to(context):
            return []
        results = self.search(db, context)
        if results:
            logger.debug(f"{self.name}: {len(results)} candidate rows for {context.term!r}")
        return list(dict.fromkeys(results))
