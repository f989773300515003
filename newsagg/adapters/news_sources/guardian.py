"""Guardian Open Platform adapter.

API docs: https://open-platform.theguardian.com/documentation/
"""

import re
from typing import Any, Optional

from newsagg.adapters.news_sources.base import NewsSourceAdapter
from newsagg.core.config import settings
from newsagg.core.constants import NewsSource
from newsagg.models.domain import AggregationFilters, NormalizedArticle
from newsagg.utils.hashing import md5_hex

MAX_PAGE_SIZE = 50
SUMMARY_LENGTH = 200

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def extract_summary(body_text: str, length: int = SUMMARY_LENGTH) -> str:
    """First ``length`` characters of the body, cut back to a word boundary."""
    if not body_text:
        return ""

    summary = _WHITESPACE_RE.sub(" ", _TAG_RE.sub("", body_text))
    if len(summary) > length:
        summary = summary[:length]
        last_space = summary.rfind(" ")
        if last_space != -1:
            summary = summary[:last_space]
        summary += "..."

    return summary.strip()


class GuardianAdapter(NewsSourceAdapter):
    """Adapter for the Guardian content search API."""

    source_identifier = NewsSource.GUARDIAN.value
    display_name = "The Guardian"

    SECTIONS = [
        "world",
        "politics",
        "business",
        "technology",
        "environment",
        "science",
        "sport",
        "culture",
        "lifestyle",
        "opinion",
        "education",
        "media",
        "society",
    ]

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url if base_url is not None else settings.guardian_base_url,
            api_key=api_key if api_key is not None else settings.guardian_api_key,
            timeout=timeout,
            rate_limit_per_hour=settings.guardian_rate_limit_per_hour,
        )

    def get_available_categories(self) -> list[str]:
        return list(self.SECTIONS)

    def get_endpoint(self, params: dict[str, Any]) -> str:
        # Search and section browsing share one endpoint
        return "search"

    def build_request_parameters(self, filters: AggregationFilters) -> dict[str, Any]:
        params: dict[str, Any] = {
            "api-key": self.api_key,
            "page-size": min(self._page_size(filters), MAX_PAGE_SIZE),
            "page": filters.page or 1,
            "show-fields": "headline,byline,thumbnail,bodyText,publication,short-url",
            "show-tags": "contributor",
            "order-by": "newest",
        }

        if self.supports_category(filters.category):
            params["section"] = filters.category
        if filters.q:
            params["q"] = filters.q
        if filters.from_date:
            params["from-date"] = self._as_date(filters.from_date).isoformat()
        if filters.to_date:
            params["to-date"] = self._as_date(filters.to_date).isoformat()

        return params

    def extract_raw_list(self, body: Any) -> list[dict[str, Any]]:
        response = self._dict(self._dict(body).get("response"))
        return self._records(response.get("results"))

    def transform_one(self, raw: dict[str, Any]) -> NormalizedArticle:
        fields = self._dict(raw.get("fields"))
        body_text = fields.get("bodyText") or ""
        url = raw.get("webUrl") or ""

        return NormalizedArticle(
            title=fields.get("headline") or raw.get("webTitle") or "",
            content=body_text,
            summary=extract_summary(body_text),
            url=url,
            image_url=fields.get("thumbnail") or None,
            published_at=raw.get("webPublicationDate") or None,
            author=self._contributor(raw) or fields.get("byline") or None,
            source_identifier=self.source_identifier,
            source_display_name=self.display_name,
            external_id=raw.get("id") or (md5_hex(url) if url else ""),
            provider_category=raw.get("sectionName") or None,
        )

    def _contributor(self, raw: dict[str, Any]) -> Optional[str]:
        """Name of the first contributor tag, if any."""
        for tag in self._records(raw.get("tags")):
            if tag.get("type") == "contributor" and tag.get("webTitle"):
                return tag["webTitle"]
        return None
