"""Engine and session factory for the board database."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from askboard.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base for questions, ledger rows, comments and profiles."""


# Models register their tables on Base.metadata at import time.
import askboard.models  # noqa: E402,F401


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for ``url``.

    SQLite connections may be used from FastAPI's worker threads and need
    foreign keys switched on for ``question_upvote``'s cascade delete.
    """
    connect_args: dict[str, Any] = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    new_engine = create_engine(url, pool_pre_ping=True, echo=echo, connect_args=connect_args)

    if new_engine.dialect.name == "sqlite":

        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(settings.database_url_sync, echo=settings.sql_debug)

# Services return ORM rows after committing; keep their loaded state.
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session."""
    with SessionLocal() as db:
        yield db


def create_tables() -> None:
    """Create all tables directly, bypassing Alembic (local development only)."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    Base.metadata.drop_all(bind=engine)
