"""New York Times adapter.

Two APIs sit behind this adapter and return different shapes:

- Article Search (``search/v2/articlesearch.json``) for free-text queries,
  envelope ``response.docs``.
- Top Stories (``topstories/v2/<section>.json``) for browsing, envelope
  ``results``.

A query always wins over a section when both are given.
"""

import re
from typing import Any, Optional
from urllib.parse import urljoin

from newsagg.adapters.news_sources.base import NewsSourceAdapter
from newsagg.core.config import settings
from newsagg.core.constants import NewsSource
from newsagg.models.domain import AggregationFilters, NormalizedArticle
from newsagg.utils.hashing import md5_hex

SEARCH_ENDPOINT = "search/v2/articlesearch.json"
HOME_ENDPOINT = "topstories/v2/home.json"

# Top Stories image formats, most preferred first
TOP_STORY_IMAGE_FORMATS = ("superJumbo", "Super Jumbo", "jumbo")

# Article Search returns image paths relative to the site root
STATIC_BASE_URL = "https://www.nytimes.com/"

_BY_PREFIX_RE = re.compile(r"^By\s+", re.IGNORECASE)


def author_from_byline(byline: Optional[str]) -> Optional[str]:
    """First author named in a byline such as "By A and B"."""
    if not byline:
        return None

    author = _BY_PREFIX_RE.sub("", byline.strip())
    author = author.split(" and ")[0].strip()
    return author or None


class NYTimesAdapter(NewsSourceAdapter):
    """Adapter for the New York Times Top Stories and Article Search APIs."""

    source_identifier = NewsSource.NYTIMES.value
    display_name = "The New York Times"

    SECTIONS = [
        "arts",
        "automobiles",
        "books",
        "business",
        "fashion",
        "food",
        "health",
        "home",
        "insider",
        "magazine",
        "movies",
        "nyregion",
        "obituaries",
        "opinion",
        "politics",
        "realestate",
        "science",
        "sports",
        "sundayreview",
        "technology",
        "theater",
        "travel",
        "upshot",
        "us",
        "world",
    ]

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url if base_url is not None else settings.nytimes_base_url,
            api_key=api_key if api_key is not None else settings.nytimes_api_key,
            timeout=timeout,
            rate_limit_per_hour=settings.nytimes_rate_limit_per_hour,
        )

    def get_available_categories(self) -> list[str]:
        return list(self.SECTIONS)

    def get_endpoint(self, params: dict[str, Any]) -> str:
        if params.get("_use_search"):
            return SEARCH_ENDPOINT
        if params.get("_section"):
            return f"topstories/v2/{params['_section']}.json"
        return HOME_ENDPOINT

    def build_request_parameters(self, filters: AggregationFilters) -> dict[str, Any]:
        params: dict[str, Any] = {"api-key": self.api_key}

        if filters.q:
            params["_use_search"] = True
            params["q"] = filters.q
            if filters.from_date:
                params["begin_date"] = self._as_date(filters.from_date).strftime("%Y%m%d")
            if filters.to_date:
                params["end_date"] = self._as_date(filters.to_date).strftime("%Y%m%d")
            # Article Search pages are 0-based
            params["page"] = filters.page or 0
        elif self.supports_category(filters.category):
            params["_section"] = filters.category

        return params

    def extract_raw_list(self, body: Any) -> list[dict[str, Any]]:
        envelope = self._dict(body)
        response = self._dict(envelope.get("response"))
        if "docs" in response:
            return self._records(response.get("docs"))
        return self._records(envelope.get("results"))

    def transform_one(self, raw: dict[str, Any]) -> NormalizedArticle:
        if "web_url" in raw:
            return self._transform_search_doc(raw)
        return self._transform_top_story(raw)

    def _transform_search_doc(self, raw: dict[str, Any]) -> NormalizedArticle:
        url = raw.get("web_url") or ""
        headline = self._dict(raw.get("headline"))
        byline = self._dict(raw.get("byline"))

        return NormalizedArticle(
            title=headline.get("main") or "",
            content=raw.get("lead_paragraph") or "",
            summary=raw.get("abstract") or raw.get("snippet") or "",
            url=url,
            image_url=self._search_image(raw),
            published_at=raw.get("pub_date") or None,
            author=author_from_byline(byline.get("original")),
            source_identifier=self.source_identifier,
            source_display_name=self.display_name,
            external_id=raw.get("_id") or (md5_hex(url) if url else ""),
            provider_category=raw.get("section_name") or None,
        )

    def _transform_top_story(self, raw: dict[str, Any]) -> NormalizedArticle:
        url = raw.get("url") or raw.get("short_url") or ""

        return NormalizedArticle(
            title=raw.get("title") or "",
            content=raw.get("abstract") or "",
            summary=raw.get("abstract") or "",
            url=url,
            image_url=self._top_story_image(raw),
            published_at=raw.get("published_date") or None,
            author=author_from_byline(raw.get("byline")),
            source_identifier=self.source_identifier,
            source_display_name=self.display_name,
            external_id=md5_hex(url) if url else "",
            provider_category=raw.get("section") or None,
        )

    def _top_story_image(self, raw: dict[str, Any]) -> Optional[str]:
        """Largest known image format, else none."""
        multimedia = self._records(raw.get("multimedia"))
        for image_format in TOP_STORY_IMAGE_FORMATS:
            for media in multimedia:
                if media.get("format") == image_format and media.get("url"):
                    return media["url"]
        return None

    def _search_image(self, raw: dict[str, Any]) -> Optional[str]:
        """First image-typed multimedia entry, resolved to an absolute URL."""
        for media in self._records(raw.get("multimedia")):
            if media.get("type") == "image" and media.get("url"):
                return urljoin(STATIC_BASE_URL, media["url"])
        return None
