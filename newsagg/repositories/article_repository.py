"""SQLite implementation of ArticleStore.

This module provides the concrete implementation of article storage
using SQLite with aiosqlite for async operations.
"""

import asyncio
import re
from contextlib import asynccontextmanager
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, AsyncIterator, Optional

import aiosqlite

from newsagg.core.constants import SOURCE_DISPLAY_NAMES
from newsagg.core.exceptions import ArticleRepositoryError, DuplicateArticleError
from newsagg.models.domain import Category, NormalizedArticle, Source, StoredArticle
from newsagg.repositories.base import ArticleStore
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)

ARTICLE_COLUMNS = """
    id, title, content, summary, url, image_url, published_at, author,
    source_id, category_id, external_id, created_at
"""

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase slug with runs of other characters collapsed to "-"."""
    return _SLUG_RE.sub("-", name.strip().lower()).strip("-")


def category_display_name(name: str) -> str:
    name = name.strip()
    return name[:1].upper() + name[1:]


def source_display_name(identifier: str) -> str:
    """Known display name for a source, else its capitalized identifier."""
    return SOURCE_DISPLAY_NAMES.get(identifier) or category_display_name(identifier)


def to_db_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with second precision; lexically sortable."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="seconds")


class SQLiteArticleStore(ArticleStore):
    """SQLite implementation of ArticleStore.

    Provides async operations for storing and retrieving articles, sources
    and categories. Writes made inside ``transaction()`` are committed
    together; writes made outside one are committed immediately.
    """

    def __init__(self, connection: aiosqlite.Connection):
        """Initialize repository with database connection.

        Args:
            connection: Active aiosqlite connection with the schema applied
        """
        self.connection = connection
        self._write_lock = asyncio.Lock()
        self._in_transaction = False

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self._write_lock:
            self._in_transaction = True
            try:
                yield
            except BaseException:
                await self.connection.rollback()
                raise
            else:
                await self.connection.commit()
            finally:
                self._in_transaction = False

    async def _commit_unless_in_transaction(self) -> None:
        if not self._in_transaction:
            await self.connection.commit()

    async def find_article_by_url(self, url: str) -> Optional[StoredArticle]:
        return await self._fetch_one_article("url = ?", (url,))

    async def find_article_by_external_id(self, external_id: str) -> Optional[StoredArticle]:
        return await self._fetch_one_article("external_id = ?", (external_id,))

    async def find_articles_published_on(self, day: date) -> list[StoredArticle]:
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        try:
            cursor = await self.connection.execute(
                f"""
                SELECT {ARTICLE_COLUMNS}
                FROM articles
                WHERE published_at >= ? AND published_at < ?
                ORDER BY id
                """,
                (to_db_timestamp(start), to_db_timestamp(end)),
            )
            rows = await cursor.fetchall()
            await cursor.close()
            return [self._row_to_article(row) for row in rows]

        except Exception as e:
            logger.error(f"Failed to list articles published on {day}: {e}")
            raise ArticleRepositoryError(f"Failed to list articles by day: {e}") from e

    async def get_or_create_source(self, identifier: str, display_name: str = "") -> Source:
        try:
            await self.connection.execute(
                """
                INSERT OR IGNORE INTO sources (name, display_name, is_active, created_at)
                VALUES (?, ?, TRUE, ?)
                """,
                (
                    identifier,
                    display_name or source_display_name(identifier),
                    to_db_timestamp(datetime.now(timezone.utc)),
                ),
            )
            await self._commit_unless_in_transaction()

            cursor = await self.connection.execute(
                "SELECT id, name, display_name, is_active FROM sources WHERE name = ?",
                (identifier,),
            )
            row = await cursor.fetchone()
            await cursor.close()

        except Exception as e:
            logger.error(f"Failed to get or create source {identifier}: {e}")
            raise ArticleRepositoryError(f"Failed to get or create source: {e}") from e

        if row is None:
            raise ArticleRepositoryError(f"Source {identifier} missing after insert")
        return Source(id=row[0], name=row[1], display_name=row[2], is_active=bool(row[3]))

    async def get_or_create_category(self, name: str) -> Category:
        slug = slugify(name)
        if not slug:
            raise ArticleRepositoryError(f"Category name {name!r} has no usable slug")

        try:
            await self.connection.execute(
                """
                INSERT OR IGNORE INTO categories (name, slug, created_at)
                VALUES (?, ?, ?)
                """,
                (category_display_name(name), slug, to_db_timestamp(datetime.now(timezone.utc))),
            )
            await self._commit_unless_in_transaction()

            cursor = await self.connection.execute(
                "SELECT id, name, slug FROM categories WHERE slug = ?",
                (slug,),
            )
            row = await cursor.fetchone()
            await cursor.close()

        except Exception as e:
            logger.error(f"Failed to get or create category {name}: {e}")
            raise ArticleRepositoryError(f"Failed to get or create category: {e}") from e

        if row is None:
            raise ArticleRepositoryError(f"Category {slug} missing after insert")
        return Category(id=row[0], name=row[1], slug=row[2])

    async def create_article(
        self,
        article: NormalizedArticle,
        source_id: int,
        category_id: int,
    ) -> StoredArticle:
        if not isinstance(article.published_at, datetime):
            raise ArticleRepositoryError(
                f"Article {article.url!r} has no parsed publication time"
            )

        created_at = datetime.now(timezone.utc)
        try:
            cursor = await self.connection.execute(
                """
                INSERT INTO articles
                (title, content, summary, url, image_url, published_at, author,
                 source_id, category_id, external_id, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    article.title,
                    article.content,
                    article.summary,
                    article.url,
                    article.image_url,
                    to_db_timestamp(article.published_at),
                    article.author,
                    source_id,
                    category_id,
                    article.external_id or None,
                    to_db_timestamp(created_at),
                ),
            )
            article_id = cursor.lastrowid
            await cursor.close()
            await self._commit_unless_in_transaction()

        except aiosqlite.IntegrityError as e:
            logger.debug(f"Article already exists or constraint violation: {e}")
            raise DuplicateArticleError(f"Article already stored: {article.url}") from e
        except Exception as e:
            logger.error(f"Failed to create article: {e}")
            raise ArticleRepositoryError(f"Failed to create article: {e}") from e

        logger.debug(f"Created article: {article_id}")
        return StoredArticle(
            id=article_id,
            title=article.title,
            content=article.content,
            summary=article.summary,
            url=article.url,
            image_url=article.image_url,
            published_at=article.published_at,
            author=article.author,
            source_id=source_id,
            category_id=category_id,
            external_id=article.external_id or None,
            created_at=created_at,
        )

    async def count_articles(self, since: Optional[datetime] = None) -> int:
        try:
            if since:
                cursor = await self.connection.execute(
                    "SELECT COUNT(*) FROM articles WHERE created_at >= ?",
                    (to_db_timestamp(since),),
                )
            else:
                cursor = await self.connection.execute("SELECT COUNT(*) FROM articles")

            row = await cursor.fetchone()
            await cursor.close()
            return row[0] if row else 0

        except Exception as e:
            logger.error(f"Failed to count articles: {e}")
            raise ArticleRepositoryError(f"Failed to count articles: {e}") from e

    async def count_sources(self, active_only: bool = False) -> int:
        query = "SELECT COUNT(*) FROM sources"
        if active_only:
            query += " WHERE is_active = TRUE"
        try:
            cursor = await self.connection.execute(query)
            row = await cursor.fetchone()
            await cursor.close()
            return row[0] if row else 0

        except Exception as e:
            logger.error(f"Failed to count sources: {e}")
            raise ArticleRepositoryError(f"Failed to count sources: {e}") from e

    async def source_breakdown(self, since: datetime) -> list[dict[str, Any]]:
        try:
            cursor = await self.connection.execute(
                """
                SELECT s.name, s.display_name, s.is_active,
                       COUNT(a.id) AS total_articles,
                       COUNT(CASE WHEN a.created_at >= ? THEN 1 END) AS recent_articles
                FROM sources s
                JOIN articles a ON a.source_id = s.id
                GROUP BY s.id, s.name, s.display_name, s.is_active
                ORDER BY recent_articles DESC, s.name
                """,
                (to_db_timestamp(since),),
            )
            rows = await cursor.fetchall()
            await cursor.close()

        except Exception as e:
            logger.error(f"Failed to build source breakdown: {e}")
            raise ArticleRepositoryError(f"Failed to build source breakdown: {e}") from e

        return [
            {
                "source_name": row[0],
                "display_name": row[1],
                "is_active": bool(row[2]),
                "total_articles": row[3],
                "recent_articles": row[4],
            }
            for row in rows
        ]

    async def recent_articles(self, limit: int = 5) -> list[dict[str, Any]]:
        try:
            cursor = await self.connection.execute(
                """
                SELECT a.title, s.display_name, c.name, a.created_at
                FROM articles a
                LEFT JOIN sources s ON a.source_id = s.id
                LEFT JOIN categories c ON a.category_id = c.id
                ORDER BY a.created_at DESC, a.id DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()
            await cursor.close()

        except Exception as e:
            logger.error(f"Failed to list recent articles: {e}")
            raise ArticleRepositoryError(f"Failed to list recent articles: {e}") from e

        return [
            {
                "title": row[0],
                "source": row[1] or "Unknown",
                "category": row[2] or "Uncategorized",
                "created_at": datetime.fromisoformat(row[3]),
            }
            for row in rows
        ]

    async def _fetch_one_article(self, where: str, params: tuple[Any, ...]) -> Optional[StoredArticle]:
        try:
            cursor = await self.connection.execute(
                f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE {where}",
                params,
            )
            row = await cursor.fetchone()
            await cursor.close()

        except Exception as e:
            logger.error(f"Failed to get article where {where} {params}: {e}")
            raise ArticleRepositoryError(f"Failed to get article: {e}") from e

        return self._row_to_article(row) if row else None

    def _row_to_article(self, row: tuple) -> StoredArticle:  # type: ignore[type-arg]
        """Convert database row to StoredArticle object."""
        return StoredArticle(
            id=row[0],
            title=row[1],
            content=row[2],
            summary=row[3],
            url=row[4],
            image_url=row[5],
            published_at=datetime.fromisoformat(row[6]),
            author=row[7],
            source_id=row[8],
            category_id=row[9],
            external_id=row[10],
            created_at=datetime.fromisoformat(row[11]),
        )
