"""Unit tests for SQLiteArticleStore.

Tests the SQLite implementation of article storage and retrieval.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from newsagg.core.exceptions import ArticleRepositoryError, DuplicateArticleError
from newsagg.repositories.article_repository import slugify, source_display_name


async def create(store, article):
    source = await store.get_or_create_source(article.source_identifier, "")
    category = await store.get_or_create_category(article.category or "general")
    return await store.create_article(article, source.id, category.id)


def test_slugify():
    assert slugify("Technology") == "technology"
    assert slugify("  Science & Tech ") == "science-tech"
    assert slugify("U.S. News!") == "u-s-news"


def test_source_display_name_fallbacks():
    assert source_display_name("guardian") == "The Guardian"
    assert source_display_name("reuters") == "Reuters"


@pytest.mark.asyncio
async def test_get_or_create_source_is_idempotent(store):
    first = await store.get_or_create_source("newsapi", "NewsAPI.org")
    second = await store.get_or_create_source("newsapi", "Something Else")

    assert first.id == second.id
    assert second.display_name == "NewsAPI.org"
    assert await store.count_sources() == 1


@pytest.mark.asyncio
async def test_get_or_create_category_keys_on_slug(store):
    first = await store.get_or_create_category("technology")
    second = await store.get_or_create_category("Technology")

    assert first.id == second.id
    assert first.name == "Technology"
    assert first.slug == "technology"


@pytest.mark.asyncio
async def test_category_without_slug_is_rejected(store):
    with pytest.raises(ArticleRepositoryError):
        await store.get_or_create_category("!!!")


@pytest.mark.asyncio
async def test_create_and_find_article(store, make_article):
    article = make_article()

    created = await create(store, article)
    by_url = await store.find_article_by_url(article.url)
    by_external_id = await store.find_article_by_external_id(article.external_id)

    assert by_url is not None
    assert by_url.id == created.id
    assert by_url.title == "Test Article"
    assert by_url.published_at == datetime(2023, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert by_external_id is not None
    assert by_external_id.id == created.id
    assert await store.find_article_by_url("https://missing.example.com") is None


@pytest.mark.asyncio
async def test_unique_url_and_external_id(store, make_article):
    await create(store, make_article(url="https://e.com/1", external_id="x"))

    with pytest.raises(DuplicateArticleError):
        await create(store, make_article(url="https://e.com/1", external_id="y"))
    with pytest.raises(DuplicateArticleError):
        await create(store, make_article(url="https://e.com/2", external_id="x"))


@pytest.mark.asyncio
async def test_unparsed_published_at_is_rejected(store, make_article):
    with pytest.raises(ArticleRepositoryError):
        await create(store, make_article(published_at="2023-01-01"))


@pytest.mark.asyncio
async def test_find_articles_published_on_uses_utc_day(store, make_article):
    await create(store, make_article(url="https://e.com/1", external_id="1",
                                     published_at=datetime(2023, 1, 1, 0, 0, tzinfo=timezone.utc)))
    await create(store, make_article(url="https://e.com/2", external_id="2",
                                     published_at=datetime(2023, 1, 1, 23, 59, tzinfo=timezone.utc)))
    await create(store, make_article(url="https://e.com/3", external_id="3",
                                     published_at=datetime(2023, 1, 2, 0, 0, tzinfo=timezone.utc)))
    # 21:00 in New York on Jan 1st is Jan 2nd in UTC
    await create(store, make_article(url="https://e.com/4", external_id="4",
                                     published_at=datetime(2023, 1, 1, 21, 0,
                                                           tzinfo=timezone(timedelta(hours=-5)))))

    same_day = await store.find_articles_published_on(date(2023, 1, 1))

    assert [article.url for article in same_day] == ["https://e.com/1", "https://e.com/2"]


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(store, make_article):
    with pytest.raises(RuntimeError):
        async with store.transaction():
            await store.get_or_create_source("guardian", "The Guardian")
            raise RuntimeError("abort")

    assert await store.count_sources() == 0


@pytest.mark.asyncio
async def test_status_queries(store, make_article):
    await create(store, make_article(url="https://e.com/1", external_id="1", title="One"))
    await create(store, make_article(url="https://e.com/2", external_id="2", title="Two",
                                     source_identifier="guardian", category="world"))

    since = datetime.now(timezone.utc) - timedelta(hours=1)
    breakdown = await store.source_breakdown(since)
    recent = await store.recent_articles(limit=5)

    assert await store.count_articles() == 2
    assert await store.count_articles(since=since) == 2
    assert await store.count_articles(since=datetime.now(timezone.utc) + timedelta(hours=1)) == 0
    assert {row["source_name"]: row["recent_articles"] for row in breakdown} == {
        "newsapi": 1,
        "guardian": 1,
    }
    assert [row["title"] for row in recent] == ["Two", "One"]
    assert recent[0]["source"] == "The Guardian"
    assert recent[0]["category"] == "World"
