"""Many-to-many link tables between posters and the artists/events they feature."""

from sqlalchemy import Column, ForeignKey, Integer, Table, UniqueConstraint

from poster_search.models.base import Base

poster_artists = Table(
    "poster_artists",
    Base.metadata,
    Column("id", Integer, primary_key=True),
    Column("poster_id", ForeignKey("posters.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("artist_id", ForeignKey("artists.id", ondelete="CASCADE"), nullable=False, index=True),
    UniqueConstraint("poster_id", "artist_id", name="uq_poster_artist"),
)

poster_events = Table(
    "poster_events",
    Base.metadata,
    Column("id", Integer, primary_key=True),
    Column("poster_id", ForeignKey("posters.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("event_id", ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
    UniqueConstraint("poster_id", "event_id", name="uq_poster_event"),
)
