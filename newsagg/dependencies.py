"""Factories wiring the pipeline together.

This module builds adapters, the fetcher and the aggregation service from
settings so that the job and the CLI share one composition, while tests can
pass their own collaborators.
"""

from typing import Optional

from newsagg.adapters.cache import InMemoryTTLCache, ResponseCache
from newsagg.adapters.http import HttpTransport
from newsagg.adapters.news_sources import (
    GuardianAdapter,
    NewsApiAdapter,
    NewsSourceAdapter,
    NYTimesAdapter,
)
from newsagg.repositories.base import ArticleStore
from newsagg.services.aggregation import AggregationService
from newsagg.services.categorizer import Categorizer
from newsagg.services.resilient_fetcher import ResilientFetcher
from newsagg.utils.retry import RetryPolicy

# Process-wide response cache shared by every run in this process
_response_cache: InMemoryTTLCache = InMemoryTTLCache()


def get_response_cache() -> InMemoryTTLCache:
    """Get the shared response cache."""
    return _response_cache


def build_adapters() -> list[NewsSourceAdapter]:
    """Adapters for every supported provider, configured from settings."""
    return [
        NewsApiAdapter(),
        GuardianAdapter(),
        NYTimesAdapter(),
    ]


def build_fetcher(
    transport: HttpTransport,
    cache: Optional[ResponseCache] = None,
    retry_policy: Optional[RetryPolicy] = None,
) -> ResilientFetcher:
    """Get a resilient fetcher over ``transport``."""
    return ResilientFetcher(
        transport=transport,
        cache=cache if cache is not None else get_response_cache(),
        retry_policy=retry_policy,
    )


def build_aggregation_service(
    store: ArticleStore,
    transport: HttpTransport,
    adapters: Optional[list[NewsSourceAdapter]] = None,
    cache: Optional[ResponseCache] = None,
    categorizer: Optional[Categorizer] = None,
) -> AggregationService:
    """Get a fully wired aggregation service.

    Args:
        store: Article store used for duplicate lookups
        transport: HTTP transport for provider calls
        adapters: Source adapters (default: every supported provider)
        cache: Response cache (default: the shared process cache)
        categorizer: Categorizer (default keyword table)

    Returns:
        Configured aggregation service
    """
    return AggregationService(
        adapters=adapters if adapters is not None else build_adapters(),
        fetcher=build_fetcher(transport, cache),
        store=store,
        categorizer=categorizer,
    )
