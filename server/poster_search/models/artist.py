from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from poster_search.models.associations import poster_artists
from poster_search.models.base import Base


class Artist(Base):
    __tablename__ = "artists"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)

    posters: Mapped[list["Poster"]] = relationship(
        "Poster", secondary=poster_artists, back_populates="artists"
    )
