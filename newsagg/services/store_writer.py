"""Persists accepted articles.

Each article is written atomically together with its source and category:
either the whole triple is created or nothing is. Articles rejected by the
store's uniqueness constraints are counted as duplicates, not failures.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from newsagg.core.constants import FALLBACK_CATEGORY, SOURCE_DISPLAY_NAMES
from newsagg.core.exceptions import DuplicateArticleError, NewsAggregatorError
from newsagg.models.domain import NormalizedArticle, StoredArticle
from newsagg.repositories.base import ArticleStore
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class StoreReport:
    """Outcome of one ``store_articles`` call."""

    stored: list[StoredArticle] = field(default_factory=list)
    duplicates: int = 0
    failed: int = 0


class StoreWriter:
    """Writes normalized articles through an ``ArticleStore``."""

    def __init__(
        self,
        store: ArticleStore,
        display_names: Mapping[str, str] = SOURCE_DISPLAY_NAMES,
    ):
        self.store = store
        self.display_names = display_names

    async def store_article(self, article: NormalizedArticle) -> StoredArticle:
        """Resolve source and category and insert the article in one transaction.

        Raises:
            DuplicateArticleError: If the URL or external id is already stored
            ArticleRepositoryError: On any other storage failure
        """
        async with self.store.transaction():
            source = await self.store.get_or_create_source(
                article.source_identifier,
                article.source_display_name
                or self.display_names.get(article.source_identifier, ""),
            )
            category = await self.store.get_or_create_category(article.category or FALLBACK_CATEGORY)
            return await self.store.create_article(article, source.id, category.id)

    async def store_articles(self, articles: Iterable[NormalizedArticle]) -> StoreReport:
        """Store every article, skipping duplicates and logging failures."""
        report = StoreReport()
        for article in articles:
            try:
                report.stored.append(await self.store_article(article))
            except DuplicateArticleError:
                logger.debug(f"Store rejected duplicate article: {article.url}")
                report.duplicates += 1
            except NewsAggregatorError as e:
                logger.error(f"Failed to store article {article.url}: {e}")
                report.failed += 1

        logger.info(
            f"Stored {len(report.stored)} articles "
            f"(duplicates={report.duplicates}, failed={report.failed})"
        )
        return report
