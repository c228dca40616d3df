# src/neoboard/scripts/migrate.py
"""Apply Alembic migrations to the configured database."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from neoboard.core.logging import configure_logging
from neoboard.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def alembic_config() -> Config:
    """Return an Alembic config pointed at the project's migrations folder."""
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    return cfg


def run_upgrade(revision: str = "head") -> None:
    logger.info("Upgrading database to %s", revision)
    command.upgrade(alembic_config(), revision)


def run_downgrade(revision: str) -> None:
    logger.info("Downgrading database to %s", revision)
    command.downgrade(alembic_config(), revision)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run NeoBoard database migrations")
    parser.add_argument("action", choices=["upgrade", "downgrade"], nargs="?", default="upgrade")
    parser.add_argument("revision", nargs="?", default=None)
    args = parser.parse_args()

    configure_logging(settings.log_level)
    if args.action == "upgrade":
        run_upgrade(args.revision or "head")
    else:
        run_downgrade(args.revision or "-1")


if __name__ == "__main__":
    main()
