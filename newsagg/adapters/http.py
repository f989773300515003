"""Async HTTP transport used to call news providers.

Wraps a pooled ``httpx.AsyncClient`` behind a single "GET with timeout and
query params" operation so the rest of the pipeline never touches httpx
response objects directly.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from newsagg.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status code and body of a completed request."""

    status_code: int
    body: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Optional[Any]:
        """Decode the body as JSON, or None if it is not valid JSON."""
        try:
            return json.loads(self.body)
        except (TypeError, ValueError):
            return None


class HttpTransport:
    """Async GET transport with connection pooling.

    Attributes:
        timeout: Default request timeout in seconds
        client: Async HTTP client
    """

    def __init__(
        self,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: Default timeout in seconds (default from settings)
            client: Preconfigured client, mainly for tests
        """
        self.timeout = timeout or settings.news_fetch_timeout
        self.client = client or httpx.AsyncClient(
            timeout=self.timeout,
            limits=httpx.Limits(
                max_connections=10,
                max_keepalive_connections=5,
            ),
            headers={"Accept": "application/json"},
        )

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Perform a GET request.

        Non-2xx statuses are returned, not raised.

        Raises:
            httpx.HTTPError: On transport failures such as timeouts or
                connection errors
        """
        response = await self.client.get(url, params=params, timeout=timeout or self.timeout)
        logger.debug(f"GET {response.request.url} -> {response.status_code}")
        return HttpResponse(status_code=response.status_code, body=response.text)

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self.client.aclose()
        logger.info("HttpTransport closed")

    async def __aenter__(self) -> "HttpTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
