"""Unit tests for aggregation runs and the whole-run retry job."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsagg.core.config import settings
from newsagg.core.exceptions import AggregationTimeoutError, ExternalApiError, UnknownSourceError
from newsagg.jobs.aggregation_job import AggregationJob, execute_run, run_aggregation
from newsagg.models.domain import (
    AggregationFilters,
    AggregationOutcome,
    AggregationRunResult,
    SourceStats,
)
from newsagg.services.store_writer import StoreReport
from newsagg.utils.retry import RetryState


def run_result(accepted: int = 1) -> AggregationRunResult:
    return AggregationRunResult(accepted_count=accepted, source_counts={"newsapi": accepted})


@pytest.mark.asyncio
async def test_execute_run_reports_counts(make_article):
    articles = [make_article(url="https://e.com/1"), make_article(url="https://e.com/2")]
    service = MagicMock()
    service.collect = AsyncMock(
        return_value=AggregationOutcome(
            articles=articles,
            by_source={
                "newsapi": SourceStats(fetched=3, dropped=1, accepted=2),
                "guardian": SourceStats(error="guardian returned HTTP 500"),
                "nytimes": SourceStats(skipped=True),
            },
        )
    )
    writer = MagicMock()
    writer.store_articles = AsyncMock(return_value=StoreReport(stored=[MagicMock()], duplicates=1))

    result = await execute_run(service, AggregationFilters(), writer=writer)

    assert result.accepted_count == 2
    assert result.source_counts == {"newsapi": 2}
    assert result.errors == {"guardian": "guardian returned HTTP 500"}
    assert result.stored_count == 1
    assert result.duplicates_rejected == 1
    writer.store_articles.assert_awaited_once_with(articles)


@pytest.mark.asyncio
async def test_execute_run_without_writer_stores_nothing():
    service = MagicMock()
    service.collect = AsyncMock(return_value=AggregationOutcome())

    result = await execute_run(service, AggregationFilters(), source_id="newsapi")

    assert result.stored_count == 0
    service.collect.assert_awaited_once_with(AggregationFilters(), source_id="newsapi")


@pytest.mark.asyncio
async def test_job_succeeds_first_attempt():
    runner = AsyncMock(return_value=run_result())
    job = AggregationJob(runner=runner, timeout=5, tries=3, backoff=60, sleep=AsyncMock())

    result = await job.handle()

    assert result.accepted_count == 1
    assert job.state is RetryState.SUCCEEDED
    assert job.attempts == 1
    runner.assert_awaited_once_with(job.filters, None)


@pytest.mark.asyncio
async def test_job_retries_with_fixed_backoff():
    sleep = AsyncMock()
    runner = AsyncMock(
        side_effect=[
            ExternalApiError("down", source="newsapi", status_code=502),
            ExternalApiError("still down", source="newsapi", status_code=502),
            run_result(),
        ]
    )
    job = AggregationJob(source_id="newsapi", runner=runner, timeout=5, tries=3, backoff=60, sleep=sleep)

    await job.handle()

    assert job.attempts == 3
    assert [call.args[0] for call in sleep.await_args_list] == [60, 60]


@pytest.mark.asyncio
async def test_job_gives_up_after_tries():
    runner = AsyncMock(side_effect=ExternalApiError("down", source="newsapi"))
    job = AggregationJob(runner=runner, timeout=5, tries=2, backoff=1, sleep=AsyncMock())

    with pytest.raises(ExternalApiError):
        await job.handle()

    assert job.state is RetryState.FAILED
    assert runner.await_count == 2


@pytest.mark.asyncio
async def test_unknown_source_is_not_retried():
    runner = AsyncMock(side_effect=UnknownSourceError("delta"))
    sleep = AsyncMock()
    job = AggregationJob(source_id="delta", runner=runner, timeout=5, tries=3, sleep=sleep)

    with pytest.raises(UnknownSourceError):
        await job.handle()

    assert runner.await_count == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_attempt_exceeding_budget_times_out():
    async def slow_runner(filters, source_id):
        await asyncio.sleep(10)

    job = AggregationJob(runner=slow_runner, timeout=0.01, tries=2, backoff=0, sleep=AsyncMock())

    with pytest.raises(AggregationTimeoutError):
        await job.handle()

    assert job.attempts == 2
    assert job.state is RetryState.FAILED


def test_job_rejects_zero_tries():
    with pytest.raises(ValueError):
        AggregationJob(tries=0)


@pytest.mark.asyncio
async def test_run_aggregation_skips_unconfigured_sources(monkeypatch):
    for key in ("newsapi_api_key", "guardian_api_key", "nytimes_api_key"):
        monkeypatch.setattr(settings, key, "")

    result = await run_aggregation(AggregationFilters(limit=5), database_url=":memory:")

    assert result.accepted_count == 0
    assert result.source_counts == {}
    assert result.errors == {}
