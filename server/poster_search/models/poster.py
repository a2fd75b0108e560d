from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from poster_search.core.time import utcnow
from poster_search.models.associations import poster_artists, poster_events
from poster_search.models.base import Base


class PosterStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    ARCHIVED = "ARCHIVED"


class Poster(Base):
    __tablename__ = "posters"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=PosterStatus.ACTIVE.value, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    artists: Mapped[list["Artist"]] = relationship(
        "Artist", secondary=poster_artists, back_populates="posters"
    )
    events: Mapped[list["Event"]] = relationship(
        "Event", secondary=poster_events, back_populates="posters"
    )
