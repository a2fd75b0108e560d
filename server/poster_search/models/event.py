import datetime

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from poster_search.models.associations import poster_events
from poster_search.models.base import Base


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    date: Mapped[datetime.date] = mapped_column(Date, index=True)
    venue_id: Mapped[int] = mapped_column(ForeignKey("venues.id"))

    venue: Mapped["Venue"] = relationship("Venue", back_populates="events")
    posters: Mapped[list["Poster"]] = relationship(
        "Poster", secondary=poster_events, back_populates="events"
    )
