"""Prepare the configured database for local development.

Usage:
    python -m askboard.scripts.ensure_db                     # create DB (Postgres) and tables
    python -m askboard.scripts.ensure_db --reset             # drop and recreate every table
    python -m askboard.scripts.ensure_db --seed-profile alice --role admin
"""
from __future__ import annotations

import argparse
import logging
import sys

import psycopg
from psycopg import sql
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

from askboard.core.settings import settings
from askboard.db.session import SessionLocal, create_tables, drop_tables
from askboard.models import Profile
from askboard.models.profile import ROLE_USER

logger = logging.getLogger(__name__)


def ensure_postgres_database(db_url: str) -> bool:
    """Create the target Postgres database if missing; return True when created."""
    url = make_url(db_url)
    target_db = url.database or "postgres"
    admin_url = url.set(drivername="postgresql", database="postgres").render_as_string(
        hide_password=False
    )

    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is not None:
            logger.info("Database %s already exists", target_db)
            return False
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
    logger.info("Created database %s", target_db)
    return True


def seed_profile(user_id: str, role: str = ROLE_USER, username: str | None = None) -> Profile:
    """Insert or update a profile row, standing in for the identity service."""
    with SessionLocal() as db:
        profile = db.get(Profile, user_id)
        if profile is None:
            profile = Profile(id=user_id, username=username or user_id, role=role)
            db.add(profile)
        else:
            profile.role = role
        db.commit()
    logger.info("Profile %s has role %s", user_id, role)
    return profile


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database is usable")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first.")
    parser.add_argument("--seed-profile", metavar="USER_ID", default=None)
    parser.add_argument("--role", default=ROLE_USER, help="Role for --seed-profile.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[ensure_db] %(message)s")
    db_url = settings.database_url_sync
    try:
        if make_url(db_url).get_backend_name() == "postgresql":
            ensure_postgres_database(db_url)
        if args.reset:
            drop_tables()
        create_tables()
        if args.seed_profile:
            seed_profile(args.seed_profile, args.role)
    except (psycopg.Error, SQLAlchemyError) as exc:
        logger.error("ERROR: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
