from poster_search.models.artist import Artist
from poster_search.models.associations import poster_artists, poster_events
from poster_search.models.base import Base
from poster_search.models.event import Event
from poster_search.models.poster import Poster, PosterStatus
from poster_search.models.venue import Venue

__all__ = [
    "Base",
    "Poster",
    "PosterStatus",
    "Artist",
    "Event",
    "Venue",
    "poster_artists",
    "poster_events",
]
