"""Aggregation runs as seen by an external scheduler.

``run_aggregation`` performs one run: collect articles from one or all
sources, then store the accepted ones. ``AggregationJob`` wraps it the way a
queue worker would: every attempt has a hard wall-clock budget, and failed
attempts are retried a bounded number of times after a fixed delay. This is
independent of the per-request retries made by the fetcher.

A run abandoned on timeout is not rolled back; articles it already stored
remain.
"""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Optional

from newsagg.adapters.database import DatabaseManager
from newsagg.adapters.http import HttpTransport
from newsagg.core.config import settings
from newsagg.core.exceptions import AggregationTimeoutError, UnknownSourceError
from newsagg.dependencies import build_aggregation_service
from newsagg.models.domain import AggregationFilters, AggregationRunResult
from newsagg.repositories.article_repository import SQLiteArticleStore
from newsagg.services.aggregation import AggregationService
from newsagg.services.store_writer import StoreWriter
from newsagg.utils.logging import LogContext, get_logger
from newsagg.utils.retry import RetryState

logger = get_logger(__name__)

Runner = Callable[[AggregationFilters, Optional[str]], Awaitable[AggregationRunResult]]


async def execute_run(
    service: AggregationService,
    filters: AggregationFilters,
    source_id: Optional[str] = None,
    writer: Optional[StoreWriter] = None,
) -> AggregationRunResult:
    """Collect articles with ``service`` and store them with ``writer``.

    Raises:
        UnknownSourceError: If ``source_id`` is not registered
        ExternalApiError: If the single requested source failed
    """
    started_at = datetime.now(timezone.utc)
    start = time.monotonic()

    outcome = await service.collect(filters, source_id=source_id)

    stored_count = 0
    duplicates_rejected = 0
    if writer is not None:
        report = await writer.store_articles(outcome.articles)
        stored_count = len(report.stored)
        duplicates_rejected = report.duplicates

    result = AggregationRunResult(
        accepted_count=len(outcome.articles),
        source_counts={
            source: stats.accepted
            for source, stats in outcome.by_source.items()
            if not stats.skipped and stats.error is None
        },
        stored_count=stored_count,
        duplicates_rejected=duplicates_rejected,
        errors={
            source: stats.error
            for source, stats in outcome.by_source.items()
            if stats.error is not None
        },
        duration_seconds=time.monotonic() - start,
        started_at=started_at,
        articles=outcome.articles,
    )

    logger.info(
        f"Aggregation run complete: accepted={result.accepted_count}, "
        f"stored={result.stored_count}, sources={result.source_counts}, "
        f"duration={result.duration_seconds:.2f}s"
    )
    return result


async def run_aggregation(
    filters: Optional[AggregationFilters] = None,
    source_id: Optional[str] = None,
    store_results: bool = True,
    database_url: Optional[str] = None,
) -> AggregationRunResult:
    """Run one aggregation against the configured database and providers.

    Args:
        filters: Generic filters (default: configured default limit)
        source_id: Single source to run, or None for all sources
        store_results: Whether accepted articles are persisted
        database_url: Database override (default from settings)

    Returns:
        Run summary with accepted and per-source counts
    """
    filters = filters or AggregationFilters(limit=settings.aggregation_default_limit)

    async with DatabaseManager(database_url) as connection, HttpTransport() as transport:
        store = SQLiteArticleStore(connection)
        service = build_aggregation_service(store, transport)
        writer = StoreWriter(store) if store_results else None
        return await execute_run(service, filters, source_id=source_id, writer=writer)


class AggregationJob:
    """Whole-run retry wrapper used by schedulers and the CLI.

    Attributes:
        timeout: Wall-clock budget of one attempt in seconds
        tries: Maximum number of attempts
        backoff: Fixed delay between attempts in seconds
        state: Current state of the job
        attempts: Number of attempts made so far
    """

    def __init__(
        self,
        filters: Optional[AggregationFilters] = None,
        source_id: Optional[str] = None,
        timeout: float | None = None,
        tries: int | None = None,
        backoff: float | None = None,
        runner: Optional[Runner] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.filters = filters or AggregationFilters(limit=settings.aggregation_default_limit)
        self.source_id = source_id
        self.timeout = timeout if timeout is not None else settings.aggregation_run_timeout
        self.tries = tries if tries is not None else settings.aggregation_run_tries
        self.backoff = backoff if backoff is not None else settings.aggregation_run_backoff
        self.runner: Runner = runner or run_aggregation
        self._sleep = sleep

        if self.tries < 1:
            raise ValueError("tries must be at least 1")

        self.state = RetryState.IDLE
        self.attempts = 0
        self.run_id = uuid.uuid4().hex[:12]

    async def handle(self) -> AggregationRunResult:
        """Run the job, retrying failed attempts.

        Raises:
            UnknownSourceError: At once, without retrying
            AggregationTimeoutError: If the last attempt ran out of time
            Exception: The last attempt's error once every attempt failed
        """
        with LogContext(run_id=self.run_id):
            logger.info(
                f"Starting aggregation job for {self.source_id or 'all sources'} "
                f"(timeout={self.timeout}s, tries={self.tries})"
            )

            while True:
                self.attempts += 1
                self.state = RetryState.ATTEMPTING
                try:
                    result = await self._attempt()
                except UnknownSourceError as e:
                    self.failed(e)
                    raise
                except Exception as e:
                    if self.attempts >= self.tries:
                        self.failed(e)
                        raise
                    logger.warning(
                        f"Aggregation attempt {self.attempts}/{self.tries} failed: {e}. "
                        f"Retrying in {self.backoff}s..."
                    )
                    await self._sleep(self.backoff)
                else:
                    self.state = RetryState.SUCCEEDED
                    return result

    async def _attempt(self) -> AggregationRunResult:
        try:
            return await asyncio.wait_for(
                self.runner(self.filters, self.source_id),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise AggregationTimeoutError(
                f"Aggregation run exceeded {self.timeout}s budget"
            ) from e

    def failed(self, error: BaseException) -> None:
        """Record a permanent failure of the job."""
        self.state = RetryState.FAILED
        logger.error(
            f"Aggregation job failed permanently after {self.attempts} attempt(s): {error}",
            exc_info=error,
        )
