"""Unit tests for domain models."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from newsagg.models.domain import AggregationFilters, NormalizedArticle


def test_filters_accept_short_date_aliases():
    filters = AggregationFilters(**{"from": date(2023, 1, 1), "to": date(2023, 1, 2)})

    assert filters.from_date == date(2023, 1, 1)
    assert filters.to_date == date(2023, 1, 2)
    assert filters.cache_payload() == {"from": "2023-01-01", "to": "2023-01-02"}


def test_filters_reject_non_positive_limit():
    with pytest.raises(ValidationError):
        AggregationFilters(limit=0)


def test_article_is_immutable():
    article = NormalizedArticle(title="t", source_identifier="newsapi")

    with pytest.raises(ValidationError):
        article.title = "changed"


def test_published_date_only_for_parsed_timestamps():
    raw = NormalizedArticle(title="t", source_identifier="x", published_at="2023-01-01")
    parsed = raw.model_copy(
        update={"published_at": datetime(2023, 1, 1, 8, 0, tzinfo=timezone.utc)}
    )

    assert raw.published_date is None
    assert parsed.published_date == date(2023, 1, 1)
