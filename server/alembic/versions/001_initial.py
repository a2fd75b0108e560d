"""Initial poster catalog schema with trigram indexes

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# (index name, table, column) for the pg_trgm GIN indexes behind similarity() lookups
TRIGRAM_INDEXES = [
    ("ix_artists_name_trgm", "artists", "name"),
    ("ix_venues_name_trgm", "venues", "name"),
    ("ix_venues_city_trgm", "venues", "city"),
    ("ix_events_name_trgm", "events", "name"),
    ("ix_posters_title_trgm", "posters", "title"),
    ("ix_posters_description_trgm", "posters", "description"),
]


def _is_postgresql() -> bool:
    return op.get_bind().dialect.name == "postgresql"


def upgrade() -> None:
    if _is_postgresql():
        op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")

    # Posters table
    op.create_table(
        "posters",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_posters_status"), "posters", ["status"])

    # Artists table
    op.create_table(
        "artists",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_artists_name"), "artists", ["name"])

    # Venues table
    op.create_table(
        "venues",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=False, server_default="USA"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_venues_city"), "venues", ["city"])

    # Events table
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("venue_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["venue_id"], ["venues.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_events_date"), "events", ["date"])

    # Poster <-> artist links
    op.create_table(
        "poster_artists",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("poster_id", sa.Integer(), nullable=False),
        sa.Column("artist_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["poster_id"], ["posters.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("poster_id", "artist_id", name="uq_poster_artist"),
    )
    op.create_index(op.f("ix_poster_artists_poster_id"), "poster_artists", ["poster_id"])
    op.create_index(op.f("ix_poster_artists_artist_id"), "poster_artists", ["artist_id"])

    # Poster <-> event links
    op.create_table(
        "poster_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("poster_id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["poster_id"], ["posters.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("poster_id", "event_id", name="uq_poster_event"),
    )
    op.create_index(op.f("ix_poster_events_poster_id"), "poster_events", ["poster_id"])
    op.create_index(op.f("ix_poster_events_event_id"), "poster_events", ["event_id"])

    if _is_postgresql():
        # Searches compare lower(column), so index the same expression
        for index_name, table, column in TRIGRAM_INDEXES:
            op.execute(
                f"CREATE INDEX {index_name} ON {table} "
                f"USING gin (lower({column}) gin_trgm_ops)"
            )


def downgrade() -> None:
    if _is_postgresql():
        for index_name, _table, _column in TRIGRAM_INDEXES:
            op.execute(f"DROP INDEX IF EXISTS {index_name}")

    op.drop_index(op.f("ix_poster_events_event_id"), table_name="poster_events")
    op.drop_index(op.f("ix_poster_events_poster_id"), table_name="poster_events")
    op.drop_table("poster_events")
    op.drop_index(op.f("ix_poster_artists_artist_id"), table_name="poster_artists")
    op.drop_index(op.f("ix_poster_artists_poster_id"), table_name="poster_artists")
    op.drop_table("poster_artists")
    op.drop_index(op.f("ix_events_date"), table_name="events")
    op.drop_table("events")
    op.drop_index(op.f("ix_venues_city"), table_name="venues")
    op.drop_table("venues")
    op.drop_index(op.f("ix_artists_name"), table_name="artists")
    op.drop_table("artists")
    op.drop_index(op.f("ix_posters_status"), table_name="posters")
    op.drop_table("posters")
