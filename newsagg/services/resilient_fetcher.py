"""Resilient provider fetches.

Wraps an adapter's network call with a response cache, a per-request
timeout and bounded retry with linear backoff. Successful responses are
transformed and validated before they are cached, so a cache hit returns
exactly what a fresh fetch would.
"""

from typing import Any, Optional

import httpx

from newsagg.adapters.cache import InMemoryTTLCache, ResponseCache, make_cache_key
from newsagg.adapters.http import HttpResponse, HttpTransport
from newsagg.adapters.news_sources.base import NewsSourceAdapter
from newsagg.core.config import settings
from newsagg.core.exceptions import ExternalApiError
from newsagg.models.domain import AggregationFilters, NormalizedArticle
from newsagg.services.validator import validate_articles
from newsagg.utils.logging import get_logger
from newsagg.utils.retry import RetryPolicy

logger = get_logger(__name__)

# Upper bound on the provider body kept on an ExternalApiError
MAX_ERROR_BODY_CHARS = 2000


class ResilientFetcher:
    """Fetches and transforms provider articles with caching and retries.

    Attributes:
        transport: HTTP transport used for provider calls
        cache: Shared response cache
        retry_policy: Retry policy applied to each provider call
        cache_ttl: Lifetime of cached results in seconds
    """

    def __init__(
        self,
        transport: HttpTransport,
        cache: Optional[ResponseCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        cache_ttl: float | None = None,
    ) -> None:
        self.transport = transport
        self.cache: ResponseCache = cache if cache is not None else InMemoryTTLCache()
        self.retry_policy = retry_policy or RetryPolicy()
        self.cache_ttl = cache_ttl if cache_ttl is not None else settings.news_cache_ttl

    async def fetch(
        self,
        adapter: NewsSourceAdapter,
        filters: AggregationFilters,
    ) -> list[NormalizedArticle]:
        """Fetch validated articles from one provider.

        Args:
            adapter: Provider adapter
            filters: Generic aggregation filters

        Returns:
            Transformed records that passed validation

        Raises:
            ExternalApiError: If the adapter is not configured, or every
                attempt failed
        """
        source = adapter.source_identifier
        if not adapter.is_configured():
            raise ExternalApiError(f"News source {source} is not configured", source=source)

        cache_key = make_cache_key(source, filters)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {source}: {cache_key}")
            return list(cached)

        params = adapter.build_request_parameters(filters)
        url = adapter.request_url(params)
        query = adapter.query_parameters(params)

        response = await self.retry_policy.run(
            self._request,
            adapter,
            url,
            query,
            name=f"{source} fetch",
            retry_on=(ExternalApiError,),
        )

        raw_articles = adapter.extract_raw_list(response.json())
        articles = validate_articles(self._transform_all(adapter, raw_articles))
        logger.info(
            f"Fetched {len(articles)} valid articles from {source} "
            f"({len(raw_articles)} raw)"
        )

        self.cache.put(cache_key, tuple(articles), self.cache_ttl)
        return articles

    async def _request(
        self,
        adapter: NewsSourceAdapter,
        url: str,
        query: dict[str, Any],
    ) -> HttpResponse:
        """One provider call; any failure is an ExternalApiError."""
        source = adapter.source_identifier
        try:
            response = await self.transport.get(url, params=query, timeout=adapter.timeout)
        except httpx.HTTPError as e:
            raise ExternalApiError(
                f"Request to {source} failed: {e.__class__.__name__}: {e}",
                source=source,
            ) from e

        if not response.is_success:
            raise ExternalApiError(
                f"{source} returned HTTP {response.status_code}",
                source=source,
                status_code=response.status_code,
                body=response.body[:MAX_ERROR_BODY_CHARS],
            )
        return response

    def _transform_all(
        self,
        adapter: NewsSourceAdapter,
        raw_articles: list[dict[str, Any]],
    ) -> list[NormalizedArticle]:
        articles = []
        for raw in raw_articles:
            try:
                articles.append(adapter.transform_one(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed {adapter.source_identifier} record: {e}")
        return articles
