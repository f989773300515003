"""Pytest configuration and shared fixtures.

This module provides common fixtures for all tests, including an in-memory
database, a fake news source adapter and article factories.
"""

from datetime import datetime, timezone
from typing import Any

import pytest

from newsagg.adapters.database import DatabaseManager
from newsagg.adapters.news_sources.base import NewsSourceAdapter
from newsagg.models.domain import AggregationFilters, NormalizedArticle
from newsagg.repositories import SQLiteArticleStore


class FakeAdapter(NewsSourceAdapter):
    """Adapter over a plain ``{"items": [...]}`` envelope."""

    def __init__(
        self,
        source_identifier: str = "fake",
        api_key: str | None = "test-key",
        base_url: str = "https://api.example.com/v1/",
    ) -> None:
        super().__init__(base_url=base_url, api_key=api_key, timeout=5.0)
        self.source_identifier = source_identifier
        self.display_name = source_identifier.title()

    def get_available_categories(self) -> list[str]:
        return ["technology", "business"]

    def get_endpoint(self, params: dict[str, Any]) -> str:
        return "items"

    def build_request_parameters(self, filters: AggregationFilters) -> dict[str, Any]:
        params: dict[str, Any] = {"key": self.api_key, "size": self._page_size(filters)}
        if filters.q:
            params["q"] = filters.q
        return params

    def extract_raw_list(self, body: Any) -> list[dict[str, Any]]:
        return self._records(self._dict(body).get("items"))

    def transform_one(self, raw: dict[str, Any]) -> NormalizedArticle:
        return NormalizedArticle(
            title=raw["title"],
            content=raw.get("content"),
            url=raw.get("url", ""),
            published_at=raw.get("published_at"),
            author=raw.get("author"),
            source_identifier=self.source_identifier,
            external_id=raw.get("id", ""),
        )


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    """Configured fake adapter."""
    return FakeAdapter()


@pytest.fixture
def make_adapter():
    """Factory for fake adapters with a given identifier or API key."""
    return FakeAdapter


@pytest.fixture
async def db_connection():
    """Create in-memory database connection for testing."""
    db_manager = DatabaseManager(":memory:")
    conn = await db_manager.connect()
    await db_manager.initialize_schema()
    yield conn
    await db_manager.disconnect()


@pytest.fixture
def store(db_connection) -> SQLiteArticleStore:
    """Article store over the in-memory database."""
    return SQLiteArticleStore(db_connection)


@pytest.fixture
def make_article():
    """Factory for processed articles ready to be stored."""

    def _make(**overrides: Any) -> NormalizedArticle:
        values: dict[str, Any] = {
            "title": "Test Article",
            "content": "<p>Test content</p>",
            "summary": "Test summary",
            "url": "https://example.com/articles/1",
            "published_at": datetime(2023, 1, 1, 12, 0, tzinfo=timezone.utc),
            "author": "Test Author",
            "source_identifier": "newsapi",
            "external_id": "ext-1",
            "category": "technology",
        }
        values.update(overrides)
        return NormalizedArticle(**values)

    return _make
