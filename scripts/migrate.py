#!/usr/bin/env python3
"""
Apply pending database migrations for the moderation API.

Requires the ``migrations`` extra (yoyo-migrations).
"""

import logging
import sys

from pathlib import Path

from yoyo import get_backend
from yoyo import read_migrations

from moderation_api.config.database import get_database_settings
from moderation_api.config.database import get_migration_database_url

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def main() -> int:
    """Apply every migration not yet recorded by yoyo."""
    backend = get_backend(
        get_migration_database_url(),
        migration_table=get_database_settings().migration_table,
    )
    migrations = read_migrations(str(MIGRATIONS_DIR))

    with backend.lock():
        pending = backend.to_apply(migrations)
        if not pending:
            logger.info("Database schema is up to date")
            return 0

        logger.info(f"Applying {len(pending)} migration(s)")
        backend.apply_migrations(pending)

    logger.info("Migrations applied")
    return 0


if __name__ == "__main__":
    sys.exit(main())
