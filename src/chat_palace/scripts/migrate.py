# src/chat_palace/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from chat_palace.core.settings import settings

PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..", "..", "..")


def run_upgrade_head() -> None:
    """Apply every Alembic revision up to head on the configured database."""
    cfg = Config(os.path.join(PROJECT_ROOT, "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", settings.effective_database_url)
    script_location = os.path.join(PROJECT_ROOT, "migrations")
    cfg.set_main_option("script_location", os.path.abspath(script_location))
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
