"""Strict and specialised trigram queries behind the search strategies.

Each function takes one resolved interpretation of the query (an artist and
a city, an artist and a year, ...) and returns matching poster IDs. An empty
list means "nothing matched this interpretation". Database errors propagate.
"""

import datetime
import logging
import re

from sqlalchemy import case, extract, func, or_, select
from sqlalchemy.orm import Session

from poster_search.models import Artist, Event, Poster, PosterStatus, Venue
from poster_search.models.associations import poster_artists, poster_events
from poster_search.services.search.constants import (
    CITY_RESULT_LIMIT,
    CITY_SIMILARITY_FLOOR,
    CITY_THRESHOLD_REDUCTION,
    CLOSE_ARTIST_SIMILARITY,
    DEFAULT_SIMILARITY_THRESHOLD,
    SINGLE_ARTIST_RESULT_LIMIT,
    SPECIAL_CHARACTER_RESULT_LIMIT,
    SPECIAL_CHARACTER_SIMILARITY_THRESHOLD,
    STRICT_RESULT_LIMIT,
    STRICT_SIMILARITY_THRESHOLD,
)
from poster_search.services.search.sql import greatest, strip_punctuation, trigram_similarity

logger = logging.getLogger(__name__)

_NON_WORD_RUN = re.compile(r"[\W_]+")


def is_active_poster():
    return Poster.status == PosterStatus.ACTIVE.value


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _artist_matches(artist: str, threshold: float):
    return or_(
        Artist.name.icontains(artist, autoescape=True),
        trigram_similarity(Artist.name, artist) > threshold,
    )


def _city_matches(city: str, threshold: float):
    return or_(
        Venue.city.icontains(city, autoescape=True),
        trigram_similarity(Venue.city, city) >= threshold,
    )


def _strict_artist_search(
    db: Session,
    artist: str,
    *criteria,
    join_venue: bool = False,
    limit: int = STRICT_RESULT_LIMIT,
) -> list[int]:
    """Posters whose artist AND event satisfy every criterion, best artist match first."""
    score = func.max(trigram_similarity(Artist.name, artist)).label("score")
    stmt = (
        select(Poster.id, score)
        .select_from(Poster)
        .join(poster_artists, poster_artists.c.poster_id == Poster.id)
        .join(Artist, Artist.id == poster_artists.c.artist_id)
        .join(poster_events, poster_events.c.poster_id == Poster.id)
        .join(Event, Event.id == poster_events.c.event_id)
    )
    if join_venue:
        stmt = stmt.join(Venue, Venue.id == Event.venue_id)

    stmt = (
        stmt.where(is_active_poster(), *criteria)
        .group_by(Poster.id)
        .order_by(score.desc(), Poster.id)
        .limit(limit)
    )
    return [row.id for row in db.execute(stmt)]


def search_for_artist_with_city_and_year(
    db: Session,
    artist: str,
    city: str,
    year: int,
    similarity_threshold: float = STRICT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters matching artist AND city AND event year, e.g. "Phish New York 2024"."""
    logger.debug(f"Strict artist+city+year search: {artist!r} in {city!r} in {year}")
    return _strict_artist_search(
        db,
        artist,
        _artist_matches(artist, similarity_threshold),
        _city_matches(city, similarity_threshold),
        extract("year", Event.date) == year,
        join_venue=True,
    )


def search_for_artist_with_city(
    db: Session,
    artist: str,
    city: str,
    similarity_threshold: float = STRICT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters matching artist AND city, e.g. "Grateful Dead Seattle"."""
    logger.debug(f"Strict artist+city search: {artist!r} in {city!r}")
    return _strict_artist_search(
        db,
        artist,
        _artist_matches(artist, similarity_threshold),
        _city_matches(city, similarity_threshold),
        join_venue=True,
    )


def search_for_artist_with_year(
    db: Session,
    artist: str,
    year: int,
    similarity_threshold: float = STRICT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters matching artist AND event year, e.g. "Phish 2023"."""
    logger.debug(f"Strict artist+year search: {artist!r} in {year}")
    return _strict_artist_search(
        db,
        artist,
        _artist_matches(artist, similarity_threshold),
        extract("year", Event.date) == year,
    )


def search_for_artist_on_date(
    db: Session,
    artist: str,
    event_date: datetime.date,
    similarity_threshold: float = STRICT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters matching artist AND the exact event date, e.g. "phish 6/30/2024"."""
    logger.debug(f"Strict artist+date search: {artist!r} on {event_date.isoformat()}")
    return _strict_artist_search(
        db,
        artist,
        _artist_matches(artist, similarity_threshold),
        Event.date == event_date,
    )


def search_for_artist_on_month_day(
    db: Session,
    artist: str,
    month: int,
    day: int,
    similarity_threshold: float = STRICT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters matching artist AND month/day in any year, e.g. "Phish 12/31"."""
    logger.debug(f"Strict artist+month/day search: {artist!r} on {month}/{day}")
    return _strict_artist_search(
        db,
        artist,
        _artist_matches(artist, similarity_threshold),
        extract("month", Event.date) == month,
        extract("day", Event.date) == day,
    )


def search_for_artist_in_date_range(
    db: Session,
    artist: str,
    start_date: datetime.date,
    end_date: datetime.date,
    similarity_threshold: float = STRICT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters matching artist AND an event between two dates (inclusive)."""
    logger.debug(
        f"Strict artist+range search: {artist!r} from {start_date.isoformat()} "
        f"to {end_date.isoformat()}"
    )
    return _strict_artist_search(
        db,
        artist,
        _artist_matches(artist, similarity_threshold),
        Event.date.between(start_date, end_date),
    )


def search_for_single_artist(
    db: Session,
    artist: str,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters for one artist name; used per name by "A OR B" searches.

    Matches the artist name, the poster title or the description. Name hits
    rank first, then title hits, then close name matches.
    """
    name_similarity = trigram_similarity(Artist.name, artist)
    name_contains = Artist.name.icontains(artist, autoescape=True)
    title_contains = Poster.title.icontains(artist, autoescape=True)
    priority = func.min(
        case(
            (name_contains, 1),
            (title_contains, 2),
            (name_similarity > CLOSE_ARTIST_SIMILARITY, 3),
            else_=4,
        )
    ).label("priority")
    score = func.max(func.coalesce(name_similarity, 0.0)).label("score")

    stmt = (
        select(Poster.id, priority, score)
        .select_from(Poster)
        .outerjoin(poster_artists, poster_artists.c.poster_id == Poster.id)
        .outerjoin(Artist, Artist.id == poster_artists.c.artist_id)
        .where(
            is_active_poster(),
            or_(
                name_contains,
                name_similarity > similarity_threshold,
                title_contains,
                trigram_similarity(Poster.title, artist) > similarity_threshold,
                Poster.description.icontains(artist, autoescape=True),
            ),
        )
        .group_by(Poster.id)
        .order_by(priority, score.desc(), Poster.id)
        .limit(SINGLE_ARTIST_RESULT_LIMIT)
    )
    return [row.id for row in db.execute(stmt)]


def rank_special_character_matches(db: Session, search_term: str) -> list[tuple[int, int]]:
    """Match names like "AC/DC", "P!nk" or "R.E.M." and return (poster_id, match_priority).

    Priority 1 is an exact artist name, ignoring case and punctuation ("acdc"
    finds "AC/DC"), 2 an artist-name substring, 3 any other hit (wildcard
    pattern, title/description mention, similarity of the spaced-out variant).
    """
    lower_term = search_term.lower()
    stripped = _NON_WORD_RUN.sub("", lower_term)
    if not stripped:
        # Nothing but punctuation; the wildcard pattern would match every row
        return []

    # Separators become wildcards on purpose: "ac-dc" -> "%ac%dc%"
    wildcard = f"%{_NON_WORD_RUN.sub('%', lower_term)}%"
    spaced = _NON_WORD_RUN.sub(" ", search_term).strip()

    artist_name = func.lower(Artist.name)
    exact_name = or_(artist_name == lower_term, strip_punctuation(artist_name) == stripped)
    name_contains = Artist.name.icontains(lower_term, autoescape=True)
    match_priority = func.min(
        case(
            (exact_name, 1),
            (name_contains, 2),
            else_=3,
        )
    ).label("match_priority")

    stmt = (
        select(Poster.id, match_priority)
        .select_from(Poster)
        .outerjoin(poster_artists, poster_artists.c.poster_id == Poster.id)
        .outerjoin(Artist, Artist.id == poster_artists.c.artist_id)
        .where(
            is_active_poster(),
            or_(
                exact_name,
                name_contains,
                Artist.name.ilike(wildcard),
                Artist.name.icontains(stripped, autoescape=True),
                trigram_similarity(Artist.name, spaced) >= SPECIAL_CHARACTER_SIMILARITY_THRESHOLD,
                Poster.title.icontains(lower_term, autoescape=True),
                Poster.description.icontains(lower_term, autoescape=True),
            ),
        )
        .group_by(Poster.id)
        .order_by(match_priority, Poster.id)
        .limit(SPECIAL_CHARACTER_RESULT_LIMIT)
    )
    return [(row.id, row.match_priority) for row in db.execute(stmt)]


def search_with_special_characters(db: Session, search_term: str) -> list[int]:
    return [poster_id for poster_id, _ in rank_special_character_matches(db, search_term)]


def search_for_city(
    db: Session,
    city_name: str,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Posters for events in a city, tuned for multi-word names like "San Francisco"."""
    threshold = similarity_threshold
    if " " in city_name:
        threshold = max(CITY_SIMILARITY_FLOOR, similarity_threshold - CITY_THRESHOLD_REDUCTION)

    # "new york" -> "%new%york%"
    pattern = "%" + "%".join(_escape_like(word) for word in city_name.lower().split()) + "%"

    city_similarity = trigram_similarity(Venue.city, city_name)
    city_state_similarity = trigram_similarity(
        Venue.city + " " + func.coalesce(Venue.state, ""), city_name
    )
    pattern_match = Venue.city.ilike(pattern, escape="\\")
    score = func.max(
        greatest(
            city_similarity,
            case((pattern_match, 0.95), else_=0.0),
            city_state_similarity,
        )
    ).label("score")

    stmt = (
        select(Poster.id, score)
        .select_from(Poster)
        .join(poster_events, poster_events.c.poster_id == Poster.id)
        .join(Event, Event.id == poster_events.c.event_id)
        .join(Venue, Venue.id == Event.venue_id)
        .where(
            is_active_poster(),
            or_(
                city_similarity >= threshold,
                pattern_match,
                city_state_similarity >= threshold,
            ),
        )
        .group_by(Poster.id)
        .order_by(score.desc(), Poster.id)
        .limit(CITY_RESULT_LIMIT)
    )
    return [row.id for row in db.execute(stmt)]
