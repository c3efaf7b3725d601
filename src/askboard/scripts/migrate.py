# src/askboard/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from askboard.core.settings import settings

_PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..", "..", "..")


def run_upgrade_head() -> None:
    """Apply every Alembic migration up to head."""
    cfg = Config(os.path.join(_PROJECT_ROOT, "alembic.ini"))
    # Inject sync URL for Alembic (psycopg driver)
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    script_location = os.path.join(_PROJECT_ROOT, "migrations")
    cfg.set_main_option("script_location", os.path.abspath(script_location))
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
