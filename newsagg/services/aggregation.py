"""Aggregation orchestrator.

Fans out over the registered source adapters, isolates per-source failures
and runs every fetched record through normalize, sanitize, categorize and
duplicate filtering. Sources are fetched concurrently; the order of the
concatenated result across sources carries no meaning.
"""

import asyncio
from collections.abc import Sequence
from typing import Optional

from newsagg.adapters.news_sources.base import NewsSourceAdapter
from newsagg.core.exceptions import ExternalApiError, UnknownSourceError
from newsagg.models.domain import (
    AggregationFilters,
    AggregationOutcome,
    NormalizedArticle,
    SourceStats,
)
from newsagg.repositories.base import ArticleStore
from newsagg.services.categorizer import Categorizer
from newsagg.services.duplicate_detector import DuplicateDetector
from newsagg.services.normalizer import normalize_article
from newsagg.services.resilient_fetcher import ResilientFetcher
from newsagg.services.sanitizer import sanitize_article
from newsagg.services.validator import is_valid
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)


class AggregationService:
    """Service for aggregating news from every registered source.

    Attributes:
        adapters: Registered adapters keyed by source identifier
        fetcher: Resilient fetcher used for provider calls
        categorizer: Keyword categorizer
        duplicate_detector: Lookup against already-stored articles
    """

    def __init__(
        self,
        adapters: Sequence[NewsSourceAdapter],
        fetcher: ResilientFetcher,
        store: ArticleStore,
        categorizer: Optional[Categorizer] = None,
        duplicate_detector: Optional[DuplicateDetector] = None,
    ):
        """Initialize the aggregation service.

        Args:
            adapters: Source adapters; identifiers must be unique
            fetcher: Resilient fetcher
            store: Article store consulted for duplicates
            categorizer: Categorizer (default keyword table)
            duplicate_detector: Duplicate detector (default over ``store``)
        """
        self.adapters: dict[str, NewsSourceAdapter] = {}
        for adapter in adapters:
            if adapter.source_identifier in self.adapters:
                raise ValueError(f"Duplicate news source: {adapter.source_identifier}")
            self.adapters[adapter.source_identifier] = adapter

        self.fetcher = fetcher
        self.categorizer = categorizer or Categorizer()
        self.duplicate_detector = duplicate_detector or DuplicateDetector(store)

        logger.info(f"Initialized AggregationService with sources: {', '.join(self.adapters)}")

    @property
    def source_ids(self) -> list[str]:
        return list(self.adapters)

    def get_adapter(self, source_id: str) -> NewsSourceAdapter:
        """Registered adapter for ``source_id``.

        Raises:
            UnknownSourceError: If no adapter is registered under that id
        """
        try:
            return self.adapters[source_id]
        except KeyError:
            raise UnknownSourceError(source_id) from None

    async def aggregate_all(self, filters: AggregationFilters) -> list[NormalizedArticle]:
        """Surviving articles from every configured source.

        Unconfigured sources are skipped and failing sources are logged;
        neither aborts the run.
        """
        outcome = await self.collect(filters)
        return outcome.articles

    async def aggregate_one(
        self,
        source_id: str,
        filters: AggregationFilters,
    ) -> list[NormalizedArticle]:
        """Surviving articles from a single source.

        Raises:
            UnknownSourceError: If ``source_id`` is not registered
            ExternalApiError: If the source is unconfigured or every attempt
                failed
        """
        outcome = await self.collect(filters, source_id=source_id)
        return outcome.articles

    async def collect(
        self,
        filters: AggregationFilters,
        source_id: Optional[str] = None,
    ) -> AggregationOutcome:
        """Run the pipeline and report per-source statistics.

        With ``source_id`` only that source runs and its errors propagate;
        without it every configured source runs and failures are isolated.
        """
        if source_id is not None:
            adapter = self.get_adapter(source_id)
            articles, stats = await self._run_source(adapter, filters)
            return AggregationOutcome(
                articles=self._drop_batch_repeats(articles),
                by_source={source_id: stats},
            )

        by_source: dict[str, SourceStats] = {}
        configured: list[NewsSourceAdapter] = []
        for adapter in self.adapters.values():
            if not adapter.is_configured():
                logger.warning(
                    f"News source {adapter.source_identifier} is not properly configured, skipping"
                )
                by_source[adapter.source_identifier] = SourceStats(skipped=True)
                continue
            configured.append(adapter)

        results = await asyncio.gather(
            *(self._run_source(adapter, filters) for adapter in configured),
            return_exceptions=True,
        )

        collected: list[NormalizedArticle] = []
        for adapter, result in zip(configured, results, strict=True):
            source = adapter.source_identifier
            if isinstance(result, ExternalApiError):
                logger.error(
                    f"Failed to aggregate articles from {source}: {result}",
                    extra={"error_context": result.context()},
                )
                by_source[source] = SourceStats(error=str(result))
                continue
            if isinstance(result, Exception):
                logger.error(f"Failed to aggregate articles from {source}: {result}", exc_info=result)
                by_source[source] = SourceStats(error=str(result))
                continue
            if isinstance(result, BaseException):
                raise result

            articles, stats = result
            by_source[source] = stats
            collected.extend(articles)

        return AggregationOutcome(
            articles=self._drop_batch_repeats(collected),
            by_source=by_source,
        )

    async def process_article(self, article: NormalizedArticle) -> Optional[NormalizedArticle]:
        """Normalize, sanitize and categorize one record.

        Returns:
            The processed record, or None if it is dropped as invalid or as a
            duplicate of a stored article
        """
        processed = sanitize_article(normalize_article(article))
        if not is_valid(processed):
            # Sanitizing can clear a URL that was present but unsafe
            logger.debug(f"Dropping article with unusable fields: {article.url!r}")
            return None

        processed = self.categorizer.categorize(processed)

        duplicate = await self.duplicate_detector.find_duplicate(processed)
        if duplicate is not None:
            logger.debug(f"Dropping duplicate of stored article {duplicate.id}: {processed.title!r}")
            return None
        return processed

    async def _run_source(
        self,
        adapter: NewsSourceAdapter,
        filters: AggregationFilters,
    ) -> tuple[list[NormalizedArticle], SourceStats]:
        source = adapter.source_identifier
        fetched = await self.fetcher.fetch(adapter, filters)

        accepted: list[NormalizedArticle] = []
        dropped = 0
        for article in fetched:
            processed = await self.process_article(article)
            if processed is None:
                dropped += 1
            else:
                accepted.append(processed)

        logger.info(
            f"Successfully aggregated {len(accepted)} articles from {source} "
            f"(fetched={len(fetched)}, dropped={dropped})"
        )
        return accepted, SourceStats(
            fetched=len(fetched),
            dropped=dropped,
            accepted=len(accepted),
        )

    @staticmethod
    def _drop_batch_repeats(articles: list[NormalizedArticle]) -> list[NormalizedArticle]:
        """Drop records repeating the URL or external id of an earlier one."""
        seen_urls: set[str] = set()
        seen_ids: set[str] = set()
        unique = []
        for article in articles:
            if article.url in seen_urls or article.external_id in seen_ids:
                logger.debug(f"Dropping repeated article within run: {article.url}")
                continue
            seen_urls.add(article.url)
            seen_ids.add(article.external_id)
            unique.append(article)
        return unique
