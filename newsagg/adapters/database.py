"""Database connection management and initialization.

This module provides async database connection management using aiosqlite
and includes the SQL schema for all tables with proper indexes.
"""

from pathlib import Path
from typing import Optional

import aiosqlite

from newsagg.core.config import settings
from newsagg.core.exceptions import DatabaseError
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)


# SQL Schema Definitions
CREATE_SOURCES_TABLE = """
CREATE TABLE IF NOT EXISTS sources (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    display_name TEXT,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMP NOT NULL
);
"""

CREATE_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    slug TEXT UNIQUE NOT NULL,
    created_at TIMESTAMP NOT NULL
);
"""

CREATE_ARTICLES_TABLE = """
CREATE TABLE IF NOT EXISTS articles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT,
    summary TEXT,
    url TEXT UNIQUE NOT NULL,
    image_url TEXT,
    published_at TIMESTAMP NOT NULL,
    author TEXT,
    source_id INTEGER NOT NULL,
    category_id INTEGER NOT NULL,
    external_id TEXT UNIQUE,
    created_at TIMESTAMP NOT NULL,
    FOREIGN KEY (source_id) REFERENCES sources(id) ON DELETE CASCADE,
    FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE CASCADE
);
"""

CREATE_ARTICLES_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_articles_published ON articles(published_at);",
    "CREATE INDEX IF NOT EXISTS idx_articles_source_category ON articles(source_id, category_id);",
    "CREATE INDEX IF NOT EXISTS idx_articles_title ON articles(title);",
    "CREATE INDEX IF NOT EXISTS idx_articles_author ON articles(author);",
    "CREATE INDEX IF NOT EXISTS idx_articles_created ON articles(created_at);",
]


class DatabaseManager:
    """Manages database connections and initialization.

    This class provides async context manager support for database connections
    and handles schema initialization with proper error handling.
    """

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database manager.

        Args:
            database_url: SQLite database URL or path. If None, uses settings.database_url
        """
        self.database_url = database_url or settings.database_url
        # Extract file path from sqlite:/// URL
        if self.database_url.startswith("sqlite:///"):
            self.db_path = self.database_url.replace("sqlite:///", "")
        else:
            self.db_path = self.database_url

        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> aiosqlite.Connection:
        """Establish database connection.

        Returns:
            Active database connection

        Raises:
            DatabaseError: If connection fails
        """
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            self._connection = await aiosqlite.connect(self.db_path, timeout=30.0)

            await self._connection.execute("PRAGMA foreign_keys = ON;")
            if self.db_path != ":memory:":
                # WAL lets the status report read while a run writes
                await self._connection.execute("PRAGMA journal_mode = WAL;")
                await self._connection.execute("PRAGMA synchronous = NORMAL;")
            await self._connection.commit()

            logger.info(f"Connected to database: {self.db_path}")
            return self._connection

        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise DatabaseError(f"Database connection failed: {e}") from e

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            try:
                await self._connection.close()
                logger.info("Database connection closed")
            except Exception as e:
                logger.error(f"Error closing database connection: {e}")
            finally:
                self._connection = None

    async def initialize_schema(self) -> None:
        """Initialize database schema with all tables and indexes.

        Creates all required tables and indexes if they don't exist.
        This is idempotent and safe to call multiple times.

        Raises:
            DatabaseError: If schema initialization fails
        """
        connection = await self.get_connection()

        try:
            logger.info("Initializing database schema...")

            for table_sql in (CREATE_SOURCES_TABLE, CREATE_CATEGORIES_TABLE, CREATE_ARTICLES_TABLE):
                await connection.execute(table_sql)
            for index_sql in CREATE_ARTICLES_INDEXES:
                await connection.execute(index_sql)

            await connection.commit()
            logger.info("Database schema initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database schema: {e}")
            raise DatabaseError(f"Schema initialization failed: {e}") from e

    async def get_connection(self) -> aiosqlite.Connection:
        """Get active database connection, connecting on first use."""
        if not self._connection:
            await self.connect()

        if not self._connection:
            raise DatabaseError("No active database connection")

        return self._connection

    async def __aenter__(self) -> aiosqlite.Connection:
        """Async context manager entry."""
        connection = await self.connect()
        await self.initialize_schema()
        return connection

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        """Async context manager exit."""
        await self.disconnect()
