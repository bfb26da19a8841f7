#!/usr/bin/env python3
"""Apply Alembic migrations to the Stagelink database."""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from stagelink.config import Settings
from stagelink.util.logging import setup_logging
from stagelink.util.observability import configure_logfire

ROOT = Path(__file__).resolve().parent.parent


def main() -> int:
    """Upgrade to head; the database URL is read by migrations/env.py."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    try:
        logfire.info("Starting database migrations")

        alembic_cfg = Config(str(ROOT / "alembic.ini"))
        command.upgrade(alembic_cfg, "head")

        logfire.info("Database migrations completed successfully")
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container doesn't start with a broken schema
        raise


if __name__ == "__main__":
    sys.exit(main())
