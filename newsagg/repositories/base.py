"""Storage contract consumed by the aggregation pipeline.

This module defines the abstract base class the pipeline writes through. The
``url`` and ``external_id`` uniqueness enforced by implementations is the
authoritative duplicate backstop when concurrent runs race past the
in-memory duplicate detector.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import date, datetime
from typing import Any, Optional

from newsagg.models.domain import Category, NormalizedArticle, Source, StoredArticle


class ArticleStore(ABC):
    """Repository interface for sources, categories and articles."""

    @abstractmethod
    async def find_article_by_url(self, url: str) -> Optional[StoredArticle]:
        """Retrieve article by URL.

        Args:
            url: Article URL

        Returns:
            Article if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_article_by_external_id(self, external_id: str) -> Optional[StoredArticle]:
        """Retrieve article by provider-assigned or derived external id."""
        pass

    @abstractmethod
    async def find_articles_published_on(self, day: date) -> list[StoredArticle]:
        """All stored articles published on the given UTC calendar day."""
        pass

    @abstractmethod
    async def get_or_create_source(self, identifier: str, display_name: str) -> Source:
        """Return the source named ``identifier``, creating it on first use."""
        pass

    @abstractmethod
    async def get_or_create_category(self, name: str) -> Category:
        """Return the category for ``name``, creating it on first use."""
        pass

    @abstractmethod
    async def create_article(
        self,
        article: NormalizedArticle,
        source_id: int,
        category_id: int,
    ) -> StoredArticle:
        """Persist a new article.

        Raises:
            DuplicateArticleError: If the URL or external id already exists
        """
        pass

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Group writes so they are committed together or not at all."""
        pass

    @abstractmethod
    async def count_articles(self, since: Optional[datetime] = None) -> int:
        """Count stored articles, optionally only those created since ``since``."""
        pass

    @abstractmethod
    async def count_sources(self, active_only: bool = False) -> int:
        """Count known sources."""
        pass

    @abstractmethod
    async def source_breakdown(self, since: datetime) -> list[dict[str, Any]]:
        """Per-source totals and counts of articles created since ``since``."""
        pass

    @abstractmethod
    async def recent_articles(self, limit: int = 5) -> list[dict[str, Any]]:
        """Most recently stored articles with their source and category names."""
        pass
