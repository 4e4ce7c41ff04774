#!/usr/bin/env python3
"""Database bootstrap: run Alembic migrations before the API starts.

- Wait for the database to accept connections.
- Always run `alembic upgrade head`.
- If migrations fail, fail fast (don't start with an unknown schema).
"""

import os
import sys
import time
import logging

from sqlalchemy import create_engine, text

from core.config import settings
from core.logging import setup_logging

logger = logging.getLogger(__name__)


def check_db_ready() -> bool:
    """Check if database is ready"""
    try:
        engine = create_engine(settings.database_url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        engine.dispose()
        return True
    except Exception:
        return False


def alembic_upgrade_head() -> None:
    """Apply all pending migrations."""
    from alembic import command
    from alembic.config import Config

    here = os.path.dirname(os.path.abspath(__file__))
    command.upgrade(Config(os.path.join(here, "alembic.ini")), "head")


def main(max_wait_s: int = 60) -> int:
    setup_logging()

    waited = 0
    while not check_db_ready():
        if waited >= max_wait_s:
            logger.error(f"Database not ready after {max_wait_s}s")
            return 1
        time.sleep(2)
        waited += 2

    try:
        alembic_upgrade_head()
    except Exception as e:
        logger.error(f"Alembic upgrade failed: {e}", exc_info=True)
        return 1

    logger.info("Database migrations applied")
    return 0


if __name__ == "__main__":
    sys.exit(main())
