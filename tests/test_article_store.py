from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from config.settings import StorageSettings
from core import ArticleFilter, ArticleStatus
from storage import InMemoryArticleStore, SqliteArticleStore, get_article_store
from tests.conftest import make_article
from utils.exceptions import ConfigurationError, DuplicateSlugError


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path):
    if request.param == "memory":
        backend = InMemoryArticleStore()
    else:
        backend = SqliteArticleStore(str(tmp_path / "articles.db"))
    await backend.connect()
    yield backend
    await backend.disconnect()


@pytest.mark.asyncio
async def test_save_assigns_id_and_provenance(store) -> None:
    article_id = await store.save_article(
        make_article("edge-computing"),
        origin_topic="Edge Computing",
        contributing_sources=["google_trends", "unsplash"],
    )

    found = await store.find_by_slug("edge-computing")
    assert found is not None
    assert found.id == article_id
    assert found.provenance.origin_topic == "Edge Computing"
    assert found.provenance.contributing_sources == ["google_trends", "unsplash"]


@pytest.mark.asyncio
async def test_duplicate_slug_is_rejected(store) -> None:
    await store.save_article(make_article("quantum-computing"))

    with pytest.raises(DuplicateSlugError) as excinfo:
        await store.save_article(make_article("quantum-computing", title="Another Take"))

    assert excinfo.value.slug == "quantum-computing"
    listing = await store.list_articles()
    assert listing.total_count == 1


@pytest.mark.asyncio
async def test_find_missing_slug_returns_none(store) -> None:
    assert await store.find_by_slug("nope") is None


@pytest.mark.asyncio
async def test_listing_is_newest_first_and_paginated(store) -> None:
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    for day in range(5):
        await store.save_article(make_article(f"article-{day}", published_at=base + timedelta(days=day)))

    first = await store.list_articles(page=1, page_size=2)
    third = await store.list_articles(page=3, page_size=2)

    assert [a.slug for a in first.items] == ["article-4", "article-3"]
    assert first.total_count == 5
    assert first.total_pages == 3
    assert [a.slug for a in third.items] == ["article-0"]
    assert first.to_payload()["totalPages"] == 3


@pytest.mark.asyncio
async def test_filters_by_status_tag_and_search(store) -> None:
    now = datetime.now(timezone.utc)
    await store.save_article(make_article("a", tags=["Cloud", "Gaming"], published_at=now))
    await store.save_article(make_article("b", tags=["cloud"], status=ArticleStatus.DRAFT))
    await store.save_article(
        make_article("c", tags=["Energy"], published_at=now, content="<p>Green hydrogen electrolysers</p>")
    )

    published = await store.list_articles(filter=ArticleFilter(status=ArticleStatus.PUBLISHED))
    tagged = await store.list_articles(filter=ArticleFilter(tag="CLOUD"))
    searched = await store.list_articles(filter=ArticleFilter(search="hydrogen"))

    assert sorted(a.slug for a in published.items) == ["a", "c"]
    assert sorted(a.slug for a in tagged.items) == ["a", "b"]
    assert [a.slug for a in searched.items] == ["c"]


@pytest.mark.asyncio
async def test_counters_increment_and_persist(store) -> None:
    await store.save_article(make_article("counted"))

    assert await store.increment_view_count("counted") == 1
    assert await store.increment_view_count("counted") == 2
    assert await store.increment_like_count("counted") == 1
    assert await store.increment_view_count("missing") is None

    found = await store.find_by_slug("counted")
    assert found.view_count == 2
    assert found.like_count == 1


@pytest.mark.asyncio
async def test_status_change_tracks_published_at(store) -> None:
    await store.save_article(make_article("draft-one", status=ArticleStatus.DRAFT))

    published = await store.update_status("draft-one", ArticleStatus.PUBLISHED)
    assert published.status == ArticleStatus.PUBLISHED
    assert published.published_at is not None

    reloaded = await store.find_by_slug("draft-one")
    assert reloaded.status == ArticleStatus.PUBLISHED
    assert reloaded.published_at is not None

    drafted = await store.update_status("draft-one", ArticleStatus.DRAFT)
    assert drafted.published_at is None
    assert await store.update_status("missing", ArticleStatus.ARCHIVED) is None


@pytest.mark.asyncio
async def test_list_all_walks_every_page(store) -> None:
    for index in range(7):
        await store.save_article(make_article(f"bulk-{index}"))

    items = await store.list_all(batch_size=3)

    assert len(items) == 7
    assert len({a.slug for a in items}) == 7


@pytest.mark.asyncio
async def test_sqlite_store_survives_reconnect(tmp_path) -> None:
    path = str(tmp_path / "persist.db")
    first = SqliteArticleStore(path)
    await first.connect()
    await first.save_article(make_article("kept", tags=["Persisted"]))
    await first.disconnect()

    second = SqliteArticleStore(path)
    await second.connect()
    found = await second.find_by_slug("kept")
    await second.disconnect()

    assert found is not None
    assert found.tags == ["Persisted"]


def test_store_factory() -> None:
    assert isinstance(get_article_store(StorageSettings(backend="memory")), InMemoryArticleStore)
    assert isinstance(get_article_store(StorageSettings(backend="sqlite", sqlite_path=":memory:")), SqliteArticleStore)
    with pytest.raises(ConfigurationError):
        get_article_store(StorageSettings(backend="mongodb"))
