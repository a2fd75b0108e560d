"""Broad scored searches used when no specific interpretation matched.

The complex search scores every poster against artist, venue and event
signals at once and ranks by a combined score. The single-term search is a
plain "best field wins" similarity search for one or two word queries.
"""

import logging

from sqlalchemy import and_, case, extract, false, func, literal_column, or_, select
from sqlalchemy.orm import Session

from poster_search.models import Artist, Event, Poster, Venue
from poster_search.models.associations import poster_artists, poster_events
from poster_search.services.search.classifiers import DateInfo, is_likely_venue_search
from poster_search.services.search.constants import (
    ARTIST_NAME_ONLY_THRESHOLD,
    ARTIST_SIMILARITY_THRESHOLD,
    COMPLEX_RESULT_LIMIT,
    DEFAULT_SIMILARITY_THRESHOLD,
    SINGLE_TERM_RESULT_LIMIT,
    VENUE_SIMILARITY_THRESHOLD,
)
from poster_search.services.search.generators import (
    generate_potential_artist_terms,
    generate_potential_venue_terms,
)
from poster_search.services.search.queries import is_active_poster
from poster_search.services.search.sql import greatest, max_similarity, trigram_similarity

logger = logging.getLogger(__name__)

_NO_MATCH = literal_column("0")


def _flag(condition):
    if condition is None:
        return _NO_MATCH
    return case((condition, 1), else_=0)


def _poster_similarity(term: str):
    return greatest(
        trigram_similarity(Poster.title, term),
        trigram_similarity(Poster.description, term),
    )


def execute_complex_search(
    db: Session,
    term_to_use: str,
    date_info: DateInfo,
    search_terms: list[str],
    term_for_matching: str,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Scored multi-signal search for long, venue-like or dated queries."""
    is_venue_search = is_likely_venue_search(term_for_matching)
    # "Flying Lotus": two words that do not mention a venue are probably one artist
    is_artist_name_only = len(search_terms) == 2 and not is_venue_search

    artist_terms = generate_potential_artist_terms(term_for_matching, search_terms, is_venue_search)
    venue_terms = generate_potential_venue_terms(term_for_matching, search_terms)

    logger.debug(
        f"Complex search for {term_to_use!r}: artist terms {artist_terms}, "
        f"venue terms {venue_terms}, date {date_info}"
    )

    return execute_complex_search_query(
        db,
        term_to_use=term_to_use,
        term_for_matching=term_for_matching,
        date_info=date_info,
        artist_terms=artist_terms,
        venue_terms=venue_terms or [term_for_matching],
        search_terms=search_terms,
        is_venue_search=is_venue_search,
        is_artist_name_only=is_artist_name_only,
        similarity_threshold=similarity_threshold,
    )


def execute_complex_search_query(
    db: Session,
    *,
    term_to_use: str,
    term_for_matching: str,
    date_info: DateInfo,
    artist_terms: list[str],
    venue_terms: list[str],
    search_terms: list[str],
    is_venue_search: bool,
    is_artist_name_only: bool,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    artist_threshold: float = ARTIST_SIMILARITY_THRESHOLD,
    venue_threshold: float = VENUE_SIMILARITY_THRESHOLD,
) -> list[int]:
    lower_term = term_for_matching.lower()
    year, month, day = date_info.year, date_info.month, date_info.day
    is_date_range = date_info.is_date_range
    if is_date_range:
        # The range replaces the year/month/day flags
        year = month = day = None

    # Per-poster best artist score
    artist_parts = [
        trigram_similarity(Artist.name, term_for_matching),
        max_similarity(Artist.name, artist_terms),
    ]
    if is_artist_name_only:
        artist_parts.append(case((func.lower(Artist.name) == lower_term, 1.0), else_=0.0))
    artist_scores = (
        select(
            poster_artists.c.poster_id.label("poster_id"),
            func.max(greatest(*artist_parts)).label("artist_similarity"),
        )
        .select_from(poster_artists)
        .join(Artist, Artist.id == poster_artists.c.artist_id)
        .group_by(poster_artists.c.poster_id)
        .subquery("artist_scores")
    )

    # Per-poster best venue score plus "the venue name/city is the query"
    venue_similarity = greatest(
        max_similarity(Venue.name, venue_terms),
        max_similarity(Venue.city, venue_terms),
        max_similarity(func.coalesce(Venue.state, ""), venue_terms),
        max_similarity(Venue.country, venue_terms),
    )
    exact_venue = or_(
        Venue.name.icontains(term_for_matching, autoescape=True),
        Venue.city.icontains(term_for_matching, autoescape=True),
    )
    venue_scores = (
        select(
            poster_events.c.poster_id.label("poster_id"),
            func.max(venue_similarity).label("venue_similarity"),
            func.max(_flag(exact_venue)).label("exact_venue_match"),
        )
        .select_from(poster_events)
        .join(Event, Event.id == poster_events.c.event_id)
        .join(Venue, Venue.id == Event.venue_id)
        .group_by(poster_events.c.poster_id)
        .subquery("venue_scores")
    )

    # Per-poster event score and date flags
    year_match = extract("year", Event.date) == year if year else None
    month_match = extract("month", Event.date) == month if month else None
    day_match = extract("day", Event.date) == day if day else None
    month_day_match = and_(month_match, day_match) if month and day else None
    exact_date_match = Event.date == date_info.as_date() if date_info.is_full_date else None
    range_match = (
        Event.date.between(date_info.start_date, date_info.end_date) if is_date_range else None
    )

    event_parts = [trigram_similarity(Event.name, term_to_use)]
    if year_match is not None:
        event_parts.append(case((year_match, 1.0), else_=0.0))
    if month_match is not None:
        event_parts.append(case((month_match, 0.9), else_=0.0))
    if day_match is not None:
        event_parts.append(case((day_match, 0.9), else_=0.0))
    if range_match is not None:
        event_parts.append(case((range_match, 1.0), else_=0.0))

    event_scores = (
        select(
            poster_events.c.poster_id.label("poster_id"),
            func.max(greatest(*event_parts)).label("event_similarity"),
            func.max(_flag(year_match)).label("year_match"),
            func.max(_flag(month_match)).label("month_match"),
            func.max(_flag(day_match)).label("day_match"),
            func.max(_flag(month_day_match)).label("month_day_match"),
            func.max(_flag(exact_date_match)).label("exact_date_match"),
            func.max(_flag(range_match)).label("range_match"),
        )
        .select_from(poster_events)
        .join(Event, Event.id == poster_events.c.event_id)
        .group_by(poster_events.c.poster_id)
        .subquery("event_scores")
    )

    a = func.coalesce(artist_scores.c.artist_similarity, 0.0)
    v = func.coalesce(venue_scores.c.venue_similarity, 0.0)
    exact_v = func.coalesce(venue_scores.c.exact_venue_match, 0)
    e = func.coalesce(event_scores.c.event_similarity, 0.0)
    ym = func.coalesce(event_scores.c.year_match, 0)
    mm = func.coalesce(event_scores.c.month_match, 0)
    dm = func.coalesce(event_scores.c.day_match, 0)
    mdm = func.coalesce(event_scores.c.month_day_match, 0)
    edm = func.coalesce(event_scores.c.exact_date_match, 0)
    rm = func.coalesce(event_scores.c.range_match, 0)
    poster_similarity = _poster_similarity(term_to_use)

    is_month_day = bool(month and day)
    is_artist_year = bool(year and not month and not day)
    is_multi_term_venue = len(search_terms) > 1 and is_venue_search

    # (applies, condition, combined score when the condition holds)
    branches = [
        (is_month_day, and_(a >= artist_threshold, mdm == 1), literal_column("3.0")),
        (date_info.is_full_date, edm == 1, literal_column("3.0")),
        (is_artist_year, and_(a >= artist_threshold, ym == 1), a * 2.5),
        (is_date_range, and_(a >= artist_threshold, rm == 1), a * 2.5),
        (is_venue_search, exact_v == 1, greatest(v, exact_v) * 2.0),
        (is_artist_name_only, a >= ARTIST_NAME_ONLY_THRESHOLD, a * 2.0),
        (
            is_multi_term_venue,
            and_(a >= artist_threshold, v >= venue_threshold),
            (a + v) * 1.5,
        ),
    ]
    active = [(condition, score) for applies, condition, score in branches if applies]

    fallback_score = greatest(
        a * 1.2,
        v,
        exact_v * 1.5,
        e * (1.5 if date_info.has_date else 1.0),
        poster_similarity * 0.8,
    )
    combined_score = case(*active, else_=fallback_score) if active else fallback_score
    overall_score = greatest(poster_similarity, combined_score)

    date_conditions = []
    if year:
        date_conditions.append(ym == 1)
    if month:
        date_conditions.append(mm == 1)
    if day:
        date_conditions.append(dm == 1)
    if is_date_range:
        date_conditions.append(rm == 1)

    all_terms_conditions = [condition for condition, _ in active]
    if date_conditions:
        all_terms_conditions.append(and_(*date_conditions))
    matches_all_terms = or_(*all_terms_conditions) if all_terms_conditions else false()

    # Multi-term venue queries must satisfy a branch; a date match alone only affects ordering
    where_conditions = [condition for condition, _ in active]
    if not is_multi_term_venue:
        where_conditions.append(
            or_(poster_similarity >= similarity_threshold, combined_score >= artist_threshold)
        )

    order_by = []
    if date_info.has_date:
        artist_date_conditions = [a >= artist_threshold, *date_conditions]
        order_by.extend(
            [
                edm.desc(),
                _flag(and_(*artist_date_conditions)).desc(),
                mdm.desc(),
            ]
        )
    order_by.extend([_flag(matches_all_terms).desc(), overall_score.desc(), Poster.id])

    stmt = (
        select(Poster.id)
        .select_from(Poster)
        .outerjoin(artist_scores, artist_scores.c.poster_id == Poster.id)
        .outerjoin(venue_scores, venue_scores.c.poster_id == Poster.id)
        .outerjoin(event_scores, event_scores.c.poster_id == Poster.id)
        .where(is_active_poster(), or_(*where_conditions))
        .order_by(*order_by)
        .limit(COMPLEX_RESULT_LIMIT)
    )
    return list(db.scalars(stmt))


def execute_single_term_search(
    db: Session,
    term_to_use: str,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    artist_threshold: float = ARTIST_SIMILARITY_THRESHOLD,
) -> list[int]:
    """Best-field similarity search for short queries like "Lotus"."""
    poster_similarity = _poster_similarity(term_to_use)
    artist_similarity = func.coalesce(trigram_similarity(Artist.name, term_to_use), 0.0)
    event_similarity = func.coalesce(
        greatest(
            trigram_similarity(Event.name, term_to_use),
            trigram_similarity(Venue.name, term_to_use),
            trigram_similarity(Venue.city, term_to_use),
            trigram_similarity(func.coalesce(Venue.state, ""), term_to_use),
            trigram_similarity(Venue.country, term_to_use),
        ),
        0.0,
    )
    score = func.max(greatest(poster_similarity, artist_similarity, event_similarity)).label(
        "score"
    )

    stmt = (
        select(Poster.id, score)
        .select_from(Poster)
        .outerjoin(poster_artists, poster_artists.c.poster_id == Poster.id)
        .outerjoin(Artist, Artist.id == poster_artists.c.artist_id)
        .outerjoin(poster_events, poster_events.c.poster_id == Poster.id)
        .outerjoin(Event, Event.id == poster_events.c.event_id)
        .outerjoin(Venue, Venue.id == Event.venue_id)
        .where(
            is_active_poster(),
            or_(
                poster_similarity >= similarity_threshold,
                artist_similarity >= artist_threshold,
                event_similarity >= similarity_threshold,
            ),
        )
        .group_by(Poster.id)
        .order_by(score.desc(), Poster.id)
        .limit(SINGLE_TERM_RESULT_LIMIT)
    )
    return [row.id for row in db.execute(stmt)]
