"""Base news source adapter interface.

This module defines the abstract base class for all news source adapters,
providing a consistent interface for turning generic filters into provider
requests and provider payloads into ``NormalizedArticle`` records. The
network call itself is made by the resilient fetcher.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from newsagg.core.config import settings
from newsagg.core.constants import DEFAULT_PAGE_SIZE
from newsagg.models.domain import AggregationFilters, NormalizedArticle

# Request parameters with this prefix steer endpoint selection and are never
# sent upstream
INTERNAL_PARAM_PREFIX = "_"


class NewsSourceAdapter(ABC):
    """Abstract base class for news source adapters.

    All provider implementations must inherit from this class and implement
    the request-building and payload-mapping hooks.

    Attributes:
        source_identifier: Stable key for the provider (e.g. "newsapi")
        display_name: Human-readable provider name
        base_url: Provider API base URL
        api_key: Provider API key
        timeout: Request timeout in seconds
        rate_limit_per_hour: Provider hourly request quota
    """

    source_identifier: str = ""
    display_name: str = ""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        timeout: float | None = None,
        rate_limit_per_hour: int = 1000,
    ) -> None:
        """Initialize the news source adapter.

        Args:
            base_url: Provider API base URL
            api_key: Provider API key; adapters without one are skipped
            timeout: Request timeout in seconds (default from settings)
            rate_limit_per_hour: Provider hourly request quota
        """
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout or settings.news_fetch_timeout
        self.rate_limit_per_hour = rate_limit_per_hour

    def is_configured(self) -> bool:
        """Whether the adapter has both a base URL and an API key."""
        return bool(self.base_url) and bool(self.api_key)

    @abstractmethod
    def build_request_parameters(self, filters: AggregationFilters) -> dict[str, Any]:
        """Map generic filters onto provider query parameters.

        Args:
            filters: Generic aggregation filters

        Returns:
            Provider parameters, possibly including internal ``_``-prefixed
            keys used by ``get_endpoint``
        """
        pass

    @abstractmethod
    def get_endpoint(self, params: dict[str, Any]) -> str:
        """Endpoint path (relative to ``base_url``) for the given parameters."""
        pass

    @abstractmethod
    def extract_raw_list(self, body: Any) -> list[dict[str, Any]]:
        """Locate the article array inside the provider envelope.

        A missing or malformed envelope yields an empty list.
        """
        pass

    @abstractmethod
    def transform_one(self, raw: dict[str, Any]) -> NormalizedArticle:
        """Map one provider record into the common schema."""
        pass

    @abstractmethod
    def get_available_categories(self) -> list[str]:
        """Provider category vocabulary accepted by the ``category`` filter."""
        pass

    def supports_category(self, category: Optional[str]) -> bool:
        """Whether ``category`` may be sent upstream."""
        return bool(category) and category in self.get_available_categories()

    def request_url(self, params: dict[str, Any]) -> str:
        """Absolute URL for a request built from ``params``."""
        return f"{self.base_url.rstrip('/')}/{self.get_endpoint(params).lstrip('/')}"

    def query_parameters(self, params: dict[str, Any]) -> dict[str, Any]:
        """Parameters to put on the wire, without internal markers."""
        return {
            key: value
            for key, value in params.items()
            if not key.startswith(INTERNAL_PARAM_PREFIX) and value is not None
        }

    def get_rate_limit_info(self) -> dict[str, int]:
        """Basic rate limit information; remaining calls are not tracked."""
        return {
            "requests_per_hour": self.rate_limit_per_hour,
            "remaining": self.rate_limit_per_hour,
        }

    def _page_size(self, filters: AggregationFilters, default: int = DEFAULT_PAGE_SIZE) -> int:
        return filters.limit or default

    @staticmethod
    def _as_datetime(value: date | datetime) -> datetime:
        """Promote a date filter to a UTC datetime."""
        if isinstance(value, datetime):
            return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    @staticmethod
    def _as_date(value: date | datetime) -> date:
        return value.date() if isinstance(value, datetime) else value

    @staticmethod
    def _dict(value: Any) -> dict[str, Any]:
        """``value`` if it is a mapping, else an empty dict."""
        return value if isinstance(value, dict) else {}

    @staticmethod
    def _records(value: Any) -> list[dict[str, Any]]:
        """Keep only the mapping entries of a would-be list of records."""
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self.source_identifier!r}, configured={self.is_configured()})"
