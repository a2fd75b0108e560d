"""Check that PostgreSQL's pg_trgm extension is usable by poster search.

Usage:
    python -m poster_search.scripts.verify_trgm
    python -m poster_search.scripts.verify_trgm --install
"""

import argparse
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from poster_search.db.session import SessionLocal


def verify_trgm(install: bool = False) -> float:
    """Return similarity('grateful dead', 'grateful dead'), installing pg_trgm first if asked."""
    db = SessionLocal()
    try:
        if install:
            db.execute(text("CREATE EXTENSION IF NOT EXISTS pg_trgm"))
            db.commit()
        return db.execute(text("SELECT similarity('grateful dead', 'grateful dead')")).scalar_one()
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Verify the pg_trgm extension")
    parser.add_argument(
        "--install",
        action="store_true",
        help="Run CREATE EXTENSION IF NOT EXISTS pg_trgm before checking",
    )
    args = parser.parse_args()

    try:
        score = verify_trgm(install=args.install)
    except SQLAlchemyError as e:
        print(f"Error: pg_trgm is not available: {e}", file=sys.stderr)
        print("Run with --install (requires CREATE privilege on the database).", file=sys.stderr)
        sys.exit(1)

    print(f"pg_trgm OK: similarity('grateful dead', 'grateful dead') = {score}")


if __name__ == "__main__":
    main()
