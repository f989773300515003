"""Unit tests for the NewsAPI.org adapter."""

from datetime import date

import pytest

from newsagg.adapters.news_sources import NewsApiAdapter
from newsagg.models.domain import AggregationFilters
from newsagg.utils.hashing import md5_hex


@pytest.fixture
def adapter() -> NewsApiAdapter:
    return NewsApiAdapter(api_key="key", base_url="https://newsapi.org/v2/")


def test_is_configured_requires_key_and_url():
    assert NewsApiAdapter(api_key="key", base_url="https://newsapi.org/v2/").is_configured()
    assert not NewsApiAdapter(api_key="", base_url="https://newsapi.org/v2/").is_configured()
    assert not NewsApiAdapter(api_key="key", base_url="").is_configured()


def test_browse_parameters_use_top_headlines(adapter):
    params = adapter.build_request_parameters(AggregationFilters(limit=10, category="business"))

    assert adapter.get_endpoint(params) == "top-headlines"
    assert adapter.request_url(params) == "https://newsapi.org/v2/top-headlines"
    assert params["country"] == "us"
    assert params["category"] == "business"
    assert params["pageSize"] == 10
    assert params["page"] == 1


def test_unknown_category_is_dropped(adapter):
    params = adapter.build_request_parameters(AggregationFilters(category="gardening"))

    assert "category" not in params


def test_query_takes_precedence_over_category(adapter):
    params = adapter.build_request_parameters(
        AggregationFilters(q="climate", category="science", **{"from": date(2023, 1, 1)})
    )

    assert adapter.get_endpoint(params) == "everything"
    assert params["q"] == "climate"
    assert "category" not in params
    assert "country" not in params
    assert params["from"].startswith("2023-01-01T00:00:00")


def test_extract_raw_list_handles_malformed_envelopes(adapter):
    assert adapter.extract_raw_list({"articles": [{"title": "a"}, "junk"]}) == [{"title": "a"}]
    assert adapter.extract_raw_list({"status": "error"}) == []
    assert adapter.extract_raw_list(None) == []
    assert adapter.extract_raw_list({"articles": "nope"}) == []


def test_transform_one_maps_fields(adapter):
    raw = {
        "source": {"id": "bbc-news", "name": "BBC News"},
        "author": "By Jane Doe",
        "title": "Markets rally",
        "description": "Stocks rose.",
        "url": "https://bbc.co.uk/news/1",
        "urlToImage": "https://bbc.co.uk/img.jpg",
        "publishedAt": "2023-01-01T12:00:00Z",
        "content": None,
    }

    article = adapter.transform_one(raw)

    assert article.title == "Markets rally"
    assert article.content == "Stocks rose."
    assert article.summary == "Stocks rose."
    assert article.image_url == "https://bbc.co.uk/img.jpg"
    assert article.published_at == "2023-01-01T12:00:00Z"
    assert article.source_identifier == "newsapi"
    assert article.source_display_name == "BBC News"
    assert article.external_id == md5_hex("https://bbc.co.uk/news/1")


def test_removed_placeholder_title_is_cleared(adapter):
    article = adapter.transform_one({"title": "[Removed]", "url": "https://removed.com"})

    assert article.title == ""


def test_rate_limit_info_uses_provider_quota(adapter):
    info = adapter.get_rate_limit_info()

    assert info["requests_per_hour"] == adapter.rate_limit_per_hour
    assert info["remaining"] == adapter.rate_limit_per_hour


def test_default_page_size(adapter):
    assert adapter.build_request_parameters(AggregationFilters())["pageSize"] == 20
