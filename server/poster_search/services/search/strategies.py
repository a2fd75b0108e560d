"""Concrete search strategies, one per recognised query shape."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from poster_search.services.search import queries
from poster_search.services.search.base import SearchContext, SearchStrategy
from poster_search.services.search.classifiers import (
    collapse_whitespace,
    extract_year,
    find_multi_word_cities,
    has_special_characters,
    is_abbreviation,
)
from poster_search.services.search.generators import (
    generate_artist_city_combinations,
    generate_artist_city_splits,
    generate_query_variants,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Letters only: "Grateful Dead Seattle", "Phish Los Angeles"
ARTIST_CITY_PATTERN = re.compile(r"^([a-z]+)\s+((?:[a-z]+\s+)*[a-z]+)$", re.IGNORECASE)

# "Phish 2023", "Grateful Dead 1977"
ARTIST_YEAR_PATTERN = re.compile(r"^([a-z\s]+)\s+((?:19|20)\d{2})$", re.IGNORECASE)

OR_SEPARATOR = re.compile(r"\s+or\s+", re.IGNORECASE)


class ArtistCityYearStrategy(SearchStrategy):
    """Queries like "Phish New York 2024": strict artist AND city AND year."""

    @property
    def name(self) -> str:
        return "artist_city_year"

    def applies_to(self, context: SearchContext) -> bool:
        info = context.date_info
        return (
            info.year is not None
            and not info.is_date_range
            and len(info.search_without_date.split()) >= 2
        )

    def search(self, db: Session, context: SearchContext) -> list[int]:
        year = context.date_info.year
        for combo in generate_artist_city_combinations(context.date_info.search_without_date):
            if not combo.is_searchable():
                continue
            results = queries.search_for_artist_with_city_and_year(
                db, combo.artist, combo.city, year
            )
            if results:
                logger.debug(f"Matched artist {combo.artist!r} in {combo.city!r} in {year}")
                return results
        return []


class ArtistCityStrategy(SearchStrategy):
    """Queries like "Grateful Dead Seattle": strict artist AND city."""

    @property
    def name(self) -> str:
        return "artist_city"

    def applies_to(self, context: SearchContext) -> bool:
        if context.date_info.is_date_range or _standalone_city(context.term):
            return False
        return bool(ARTIST_CITY_PATTERN.match(context.term))

    def search(self, db: Session, context: SearchContext) -> list[int]:
        for split in generate_artist_city_splits(context.term, context.tokens):
            if not split.is_searchable():
                continue
            results = queries.search_for_artist_with_city(db, split.artist, split.city)
            if results:
                logger.debug(f"Matched artist {split.artist!r} in {split.city!r}")
                return results
        return []


class ArtistYearStrategy(SearchStrategy):
    """Queries like "Phish 2023": strict artist AND year."""

    @property
    def name(self) -> str:
        return "artist_year"

    def applies_to(self, context: SearchContext) -> bool:
        return bool(ARTIST_YEAR_PATTERN.match(context.term))

    def search(self, db: Session, context: SearchContext) -> list[int]:
        year, artist = extract_year(context.term)
        if year is None or len(artist) < 2:
            return []
        return queries.search_for_artist_with_year(db, artist, year)


class MultiArtistStrategy(SearchStrategy):
    """Queries like "Phish OR Widespread Panic": union of single-artist searches."""

    @property
    def name(self) -> str:
        return "multi_artist"

    def applies_to(self, context: SearchContext) -> bool:
        return bool(OR_SEPARATOR.search(context.cleaned_term))

    def search(self, db: Session, context: SearchContext) -> list[int]:
        artists = [
            name.strip() for name in OR_SEPARATOR.split(context.cleaned_term) if name.strip()
        ]
        if len(artists) < 2:
            return []

        # One session, so the per-artist queries run sequentially
        results: list[int] = []
        for artist in artists:
            matches = queries.search_for_single_artist(db, artist, context.similarity_threshold)
            logger.debug(f"OR search: {len(matches)} posters for {artist!r}")
            results.extend(matches)
        return results


class SpecialCharacterStrategy(SearchStrategy):
    """Queries like "AC/DC", "P!nk", "ACDC": punctuated names and all-caps abbreviations.

    Every spelling variant is ranked; a poster keeps its best priority.
    """

    @property
    def name(self) -> str:
        return "special_character"

    def applies_to(self, context: SearchContext) -> bool:
        term = context.cleaned_term
        return has_special_characters(term) or is_abbreviation(term)

    def search(self, db: Session, context: SearchContext) -> list[int]:
        best: dict[int, int] = {}
        for variant in generate_query_variants(context.cleaned_term):
            for poster_id, priority in queries.rank_special_character_matches(db, variant):
                best[poster_id] = min(priority, best.get(poster_id, priority))
        return sorted(best, key=best.__getitem__)


class DatePatternStrategy(SearchStrategy):
    """Queries like "phish 6/30/2024", "Phish 12/31", "Phish from June 2025 to August 2025".

    Artist plus a date range, a full date or a month/day. A full date that
    finds nothing widens to the artist and year.
    """

    @property
    def name(self) -> str:
        return "date_pattern"

    def applies_to(self, context: SearchContext) -> bool:
        info = context.date_info
        return info.has_date and len(info.search_without_date) >= 2

    def search(self, db: Session, context: SearchContext) -> list[int]:
        info = context.date_info
        artist = info.search_without_date

        if info.is_date_range:
            return queries.search_for_artist_in_date_range(
                db, artist, info.start_date, info.end_date
            )

        if info.is_full_date:
            results = queries.search_for_artist_on_date(db, artist, info.as_date())
            if results:
                return results
        elif info.month is not None and info.day is not None:
            return queries.search_for_artist_on_month_day(db, artist, info.month, info.day)

        if info.year is not None:
            return queries.search_for_artist_with_year(db, artist, info.year)
        return []


def _standalone_city(term: str) -> str | None:
    lower_term = term.lower()
    for city in find_multi_word_cities(term):
        if len(collapse_whitespace(lower_term.replace(city, " ", 1))) <= 1:
            return city
    return None


class CityStrategy(SearchStrategy):
    """Queries like "San Francisco": a query that is just a multi-word city."""

    @property
    def name(self) -> str:
        return "city"

    def applies_to(self, context: SearchContext) -> bool:
        return _standalone_city(context.term) is not None

    def search(self, db: Session, context: SearchContext) -> list[int]:
        return queries.search_for_city(db, context.term, context.similarity_threshold)


DEFAULT_STRATEGIES: tuple[type[SearchStrategy], ...] = (
    ArtistCityYearStrategy,
    ArtistCityStrategy,
    ArtistYearStrategy,
    MultiArtistStrategy,
    SpecialCharacterStrategy,
    DatePatternStrategy,
    CityStrategy,
)
