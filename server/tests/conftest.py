"""Pytest configuration and fixtures for poster search tests."""

import datetime
import re
from collections.abc import Generator
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from poster_search.api.deps import get_db
from poster_search.main import app
from poster_search.models import Artist, Base, Event, Poster, PosterStatus, Venue

# Use SQLite in-memory for tests (fast, isolated)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_WORD_PATTERN = re.compile(r"[^\W_]+")


def _trigrams(text: str) -> set[str]:
    grams = set()
    for word in _WORD_PATTERN.findall(text.lower()):
        padded = f"  {word} "
        grams.update(padded[i : i + 3] for i in range(len(padded) - 2))
    return grams


def trigram_similarity(a: str | None, b: str | None) -> float | None:
    """Same scoring as pg_trgm's similarity(): shared trigrams over all trigrams."""
    if a is None or b is None:
        return None
    grams_a, grams_b = _trigrams(a), _trigrams(b)
    if not grams_a or not grams_b:
        return 0.0
    return len(grams_a & grams_b) / len(grams_a | grams_b)


@event.listens_for(engine, "connect")
def _register_similarity(dbapi_connection, connection_record):
    dbapi_connection.create_function("similarity", 2, trigram_similarity, deterministic=True)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session here, let the db fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@dataclass
class Catalog:
    """Poster IDs of the seeded catalog, by name."""

    phish_msg: int
    phish_red_rocks: int
    phish_draft: int
    dead_seattle: int
    dead_golden_gate: int
    panic_bowl: int
    acdc: int
    lotus: int
    flying_lotus: int
    pearl_jam: int


def _add_poster(
    db: Session,
    title: str,
    artists: list[Artist],
    events: list[Event],
    description: str | None = None,
    status: PosterStatus = PosterStatus.ACTIVE,
) -> Poster:
    poster = Poster(title=title, description=description, status=status.value)
    poster.artists.extend(artists)
    poster.events.extend(events)
    db.add(poster)
    return poster


@pytest.fixture
def catalog(db: Session) -> Catalog:
    """A small catalog: a handful of artists, venues in distinct cities, one poster per show."""
    phish = Artist(name="Phish")
    dead = Artist(name="Grateful Dead")
    panic = Artist(name="Widespread Panic")
    acdc = Artist(name="AC/DC")
    lotus = Artist(name="Lotus")
    flying_lotus = Artist(name="Flying Lotus")
    pearl_jam = Artist(name="Pearl Jam")
    chili_peppers = Artist(name="Red Hot Chili Peppers")
    db.add_all([phish, dead, panic, acdc, lotus, flying_lotus, pearl_jam, chili_peppers])

    msg = Venue(name="Madison Square Garden", city="New York", state="NY")
    red_rocks = Venue(name="Red Rocks Amphitheatre", city="Morrison", state="CO")
    bowl = Venue(name="Hollywood Bowl", city="Los Angeles", state="CA")
    showbox = Venue(name="The Showbox", city="Seattle", state="WA")
    golden_gate = Venue(name="Golden Gate Park", city="San Francisco", state="CA")
    db.add_all([msg, red_rocks, bowl, showbox, golden_gate])

    def show(name: str, date: datetime.date, venue: Venue) -> Event:
        e = Event(name=name, date=date, venue=venue)
        db.add(e)
        return e

    phish_msg_show = show("Phish Summer Tour", datetime.date(2024, 6, 30), msg)
    phish_rr_show = show("Phish Colorado Run", datetime.date(2023, 8, 5), red_rocks)
    dead_seattle_show = show("Grateful Dead Live", datetime.date(1977, 5, 1), showbox)
    dead_gg_show = show("Summer of Love Free Show", datetime.date(1967, 9, 12), golden_gate)
    panic_show = show("Widespread Panic Fall Tour", datetime.date(2022, 10, 15), bowl)
    acdc_show = show("Back in Black Tour", datetime.date(1980, 8, 2), msg)
    lotus_show = show("Winter Run", datetime.date(2023, 12, 29), showbox)
    flying_lotus_show = show("Flamagra Live", datetime.date(2019, 5, 24), bowl)
    pearl_jam_show = show("Ten Club Benefit", datetime.date(2023, 4, 2), golden_gate)

    posters = dict(
        phish_msg=_add_poster(db, "Phish MSG 2024", [phish], [phish_msg_show]),
        phish_red_rocks=_add_poster(
            db, "Phish Colorado 2023", [phish], [phish_rr_show], "Screen print, edition of 300"
        ),
        phish_draft=_add_poster(
            db, "Phish Test Print", [phish], [phish_msg_show], status=PosterStatus.DRAFT
        ),
        dead_seattle=_add_poster(db, "Grateful Dead Showbox", [dead], [dead_seattle_show]),
        dead_golden_gate=_add_poster(db, "Grateful Dead Golden Gate", [dead], [dead_gg_show]),
        panic_bowl=_add_poster(db, "Widespread Panic Hollywood", [panic], [panic_show]),
        acdc=_add_poster(db, "AC/DC Back in Black", [acdc], [acdc_show]),
        lotus=_add_poster(db, "Lotus Winter Run", [lotus], [lotus_show]),
        flying_lotus=_add_poster(db, "Flying Lotus Flamagra", [flying_lotus], [flying_lotus_show]),
        pearl_jam=_add_poster(db, "Pearl Jam Ten Club", [pearl_jam], [pearl_jam_show]),
    )
    db.commit()

    return Catalog(**{name: poster.id for name, poster in posters.items()})
