from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from poster_search.models.base import Base


class Venue(Base):
    __tablename__ = "venues"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(100), index=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str] = mapped_column(String(100), default="USA")

    events: Mapped[list["Event"]] = relationship("Event", back_populates="venue")
