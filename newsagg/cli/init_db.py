"""Database initialization.

Creates all tables and indexes; safe to run repeatedly.

Usage:
    newsagg-init-db [--database-url URL]
"""

import argparse
import asyncio
import sys
from typing import Optional

from newsagg.adapters.database import DatabaseManager
from newsagg.core.config import settings
from newsagg.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def init_database(database_url: Optional[str] = None) -> list[str]:
    """Initialize database with schema.

    Returns:
        Names of the tables present afterwards
    """
    logger.info("Starting database initialization...")
    logger.info(f"Database URL: {database_url or settings.database_url}")

    db_manager = DatabaseManager(database_url)

    try:
        await db_manager.connect()
        await db_manager.initialize_schema()

        conn = await db_manager.get_connection()
        cursor = await conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
        )
        tables = [row[0] for row in await cursor.fetchall()]
        await cursor.close()

        logger.info("Created tables:")
        for table in tables:
            logger.info(f"  - {table}")

        logger.info("Database initialization complete!")
        return tables

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise
    finally:
        await db_manager.disconnect()


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Initialize the news aggregator database")
    parser.add_argument("--database-url", help="Database URL (default from settings)")
    args = parser.parse_args(argv)

    setup_logging()

    try:
        asyncio.run(init_database(args.database_url))
        sys.exit(0)
    except Exception as e:
        logger.error(f"Initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
