"""NewsAPI.org adapter.

API docs: https://newsapi.org/docs

Browsing uses ``top-headlines`` (country + category); free-text search uses
``everything``, which rejects ``country`` and ``category``.
"""

from typing import Any, Optional

from newsagg.adapters.news_sources.base import NewsSourceAdapter
from newsagg.core.config import settings
from newsagg.core.constants import NewsSource
from newsagg.models.domain import AggregationFilters, NormalizedArticle
from newsagg.utils.hashing import md5_hex

# NewsAPI replaces withdrawn articles with this placeholder
REMOVED_PLACEHOLDER = "[Removed]"


class NewsApiAdapter(NewsSourceAdapter):
    """Adapter for NewsAPI.org headlines and search."""

    source_identifier = NewsSource.NEWSAPI.value
    display_name = "NewsAPI.org"

    CATEGORIES = [
        "business",
        "entertainment",
        "general",
        "health",
        "science",
        "sports",
        "technology",
    ]

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url if base_url is not None else settings.newsapi_base_url,
            api_key=api_key if api_key is not None else settings.newsapi_api_key,
            timeout=timeout,
            rate_limit_per_hour=settings.newsapi_rate_limit_per_hour,
        )

    def get_available_categories(self) -> list[str]:
        return list(self.CATEGORIES)

    def get_endpoint(self, params: dict[str, Any]) -> str:
        return "everything" if params.get("q") else "top-headlines"

    def build_request_parameters(self, filters: AggregationFilters) -> dict[str, Any]:
        params: dict[str, Any] = {
            "apiKey": self.api_key,
            "pageSize": self._page_size(filters),
            "page": filters.page or 1,
        }

        if filters.q:
            # Search endpoint: country and category are not accepted
            params["q"] = filters.q
        else:
            params["country"] = filters.country or "us"
            if self.supports_category(filters.category):
                params["category"] = filters.category

        if filters.from_date:
            params["from"] = self._as_datetime(filters.from_date).isoformat()
        if filters.to_date:
            params["to"] = self._as_datetime(filters.to_date).isoformat()

        return params

    def extract_raw_list(self, body: Any) -> list[dict[str, Any]]:
        return self._records(self._dict(body).get("articles"))

    def transform_one(self, raw: dict[str, Any]) -> NormalizedArticle:
        title = raw.get("title") or ""
        if title == REMOVED_PLACEHOLDER:
            title = ""
        description = raw.get("description")
        if description == REMOVED_PLACEHOLDER:
            description = None
        url = raw.get("url") or ""

        return NormalizedArticle(
            title=title,
            content=raw.get("content") or description or "",
            summary=description or "",
            url=url,
            image_url=raw.get("urlToImage") or None,
            published_at=raw.get("publishedAt") or None,
            author=raw.get("author") or None,
            source_identifier=self.source_identifier,
            source_display_name=self._dict(raw.get("source")).get("name") or self.display_name,
            external_id=md5_hex(url) if url else "",
        )
