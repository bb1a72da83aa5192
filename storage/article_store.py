"""
Article Store
Persistence gateway for generated articles: in-memory and SQLite backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import asyncio
import json
import logging
import sqlite3
import threading
import uuid

from config.settings import StorageSettings
from core import ArticleFilter, ArticleListing, ArticleStatus, GeneratedArticle, utcnow
from utils.exceptions import ConfigurationError, DuplicateSlugError, PersistenceFailure


logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    value = _as_utc(value)
    return value.isoformat(timespec="microseconds") if value else None


def _sort_key(article: GeneratedArticle) -> datetime:
    return _as_utc(article.published_at or article.created_at)


def _matches(article: GeneratedArticle, flt: ArticleFilter) -> bool:
    if flt.status is not None and article.status != flt.status:
        return False
    if flt.tag:
        wanted = flt.tag.casefold()
        if not any(tag.casefold() == wanted for tag in article.tags):
            return False
    if flt.search:
        needle = flt.search.casefold()
        haystack = " ".join([article.title, article.excerpt, article.content]).casefold()
        if needle not in haystack:
            return False
    if flt.published_since is not None:
        published = _as_utc(article.published_at)
        if published is None or published < _as_utc(flt.published_since):
            return False
    return True


def _prepare_for_save(
    article: GeneratedArticle,
    origin_topic: Optional[str],
    contributing_sources: Optional[Sequence[str]],
) -> GeneratedArticle:
    provenance = article.provenance.model_copy(
        update={
            "origin_topic": origin_topic if origin_topic is not None else article.provenance.origin_topic,
            "contributing_sources": list(
                contributing_sources if contributing_sources is not None else article.provenance.contributing_sources
            ),
        }
    )
    now = utcnow()
    return article.model_copy(
        update={
            "id": article.id or uuid.uuid4().hex,
            "provenance": provenance,
            "updated_at": now,
        }
    )


class BaseArticleStore(ABC):
    """
    Article store interface.

    Slug uniqueness is enforced by the backend and is the only guard
    against concurrent duplicate writes.
    """

    @abstractmethod
    async def connect(self) -> None:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def save_article(
        self,
        article: GeneratedArticle,
        origin_topic: Optional[str] = None,
        contributing_sources: Optional[Sequence[str]] = None,
    ) -> str:
        """
        Persist a new article and return its id.

        Raises:
            DuplicateSlugError: an article with the same slug exists
        """
        pass

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Optional[GeneratedArticle]:
        pass

    @abstractmethod
    async def list_articles(
        self,
        page: int = 1,
        page_size: int = 10,
        filter: Optional[ArticleFilter] = None,
    ) -> ArticleListing:
        """Newest first (published_at, falling back to created_at)."""
        pass

    @abstractmethod
    async def increment_view_count(self, slug: str) -> Optional[int]:
        pass

    @abstractmethod
    async def increment_like_count(self, slug: str) -> Optional[int]:
        pass

    @abstractmethod
    async def update_status(self, slug: str, status: ArticleStatus) -> Optional[GeneratedArticle]:
        pass

    async def list_all(self, filter: Optional[ArticleFilter] = None, batch_size: int = 200) -> List[GeneratedArticle]:
        """Every matching article, newest first."""
        items: List[GeneratedArticle] = []
        page = 1
        while True:
            listing = await self.list_articles(page=page, page_size=batch_size, filter=filter)
            items.extend(listing.items)
            if page >= listing.total_pages or not listing.items:
                return items
            page += 1


class InMemoryArticleStore(BaseArticleStore):
    """Process-local store, used for dry runs and tests."""

    def __init__(self):
        self._by_id: Dict[str, GeneratedArticle] = {}
        self._slug_index: Dict[str, str] = {}
        self._lock = asyncio.Lock()
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def save_article(self, article, origin_topic=None, contributing_sources=None) -> str:
        async with self._lock:
            if article.slug in self._slug_index:
                raise DuplicateSlugError(article.slug)
            stored = _prepare_for_save(article, origin_topic, contributing_sources)
            self._by_id[stored.id] = stored
            self._slug_index[stored.slug] = stored.id
            return stored.id

    async def find_by_slug(self, slug: str) -> Optional[GeneratedArticle]:
        async with self._lock:
            article_id = self._slug_index.get(slug)
            return self._by_id.get(article_id) if article_id else None

    async def list_articles(self, page: int = 1, page_size: int = 10, filter: Optional[ArticleFilter] = None) -> ArticleListing:
        page = max(1, int(page))
        page_size = max(1, int(page_size))
        flt = filter or ArticleFilter()
        async with self._lock:
            matched = [a for a in self._by_id.values() if _matches(a, flt)]
        matched.sort(key=_sort_key, reverse=True)
        start = (page - 1) * page_size
        return ArticleListing(
            items=matched[start:start + page_size],
            total_count=len(matched),
            page=page,
            page_size=page_size,
        )

    async def _bump(self, slug: str, field: str) -> Optional[int]:
        async with self._lock:
            article_id = self._slug_index.get(slug)
            if article_id is None:
                return None
            article = self._by_id[article_id]
            value = getattr(article, field) + 1
            self._by_id[article_id] = article.model_copy(update={field: value})
            return value

    async def increment_view_count(self, slug: str) -> Optional[int]:
        return await self._bump(slug, "view_count")

    async def increment_like_count(self, slug: str) -> Optional[int]:
        return await self._bump(slug, "like_count")

    async def update_status(self, slug: str, status: ArticleStatus) -> Optional[GeneratedArticle]:
        async with self._lock:
            article_id = self._slug_index.get(slug)
            if article_id is None:
                return None
            updated = self._by_id[article_id].with_status(status)
            self._by_id[article_id] = updated
            return updated


_SCHEMA = """
CREATE TABLE IF NOT EXISTS articles (
    id TEXT PRIMARY KEY,
    slug TEXT NOT NULL,
    title TEXT NOT NULL,
    excerpt TEXT,
    content TEXT NOT NULL,
    tags TEXT NOT NULL,
    status TEXT NOT NULL,
    origin_topic TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    published_at TEXT,
    view_count INTEGER NOT NULL DEFAULT 0,
    like_count INTEGER NOT NULL DEFAULT 0,
    payload TEXT NOT NULL
)
"""

_INDEXES = (
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_articles_slug ON articles(slug)",
    "CREATE INDEX IF NOT EXISTS idx_articles_status ON articles(status)",
    "CREATE INDEX IF NOT EXISTS idx_articles_published_at ON articles(published_at)",
)


class SqliteArticleStore(BaseArticleStore):
    """
    SQLite-backed store.

    The full article is kept as JSON in ``payload``; counters, status and
    timestamps live in their own columns and win over the payload on read.
    Blocking calls run in a worker thread.
    """

    def __init__(self, db_path: str = "./data/articles.db", timeout: float = 30.0):
        self.db_path = db_path
        self.timeout = timeout
        self._connection: Optional[sqlite3.Connection] = None
        self._db_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(
                self.db_path,
                timeout=self.timeout,
                check_same_thread=False,
            )
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA journal_mode=WAL")
            self._connection.execute(f"PRAGMA busy_timeout={int(self.timeout * 1000)}")
        return self._connection

    async def _run(self, func, *args):
        def _locked():
            with self._db_lock:
                return func(*args)
        try:
            return await asyncio.to_thread(_locked)
        except sqlite3.Error as e:
            raise PersistenceFailure(f"SQLite operation failed: {e}", {"db_path": self.db_path}) from e

    def _init_db(self) -> None:
        conn = self._get_connection()
        with conn:
            conn.execute(_SCHEMA)
            for statement in _INDEXES:
                conn.execute(statement)

    async def connect(self) -> None:
        await self._run(self._init_db)
        logger.info(f"Article store ready: {self.db_path}")

    def _close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    async def disconnect(self) -> None:
        await self._run(self._close)

    @staticmethod
    def _row_to_article(row: sqlite3.Row) -> GeneratedArticle:
        data: Dict[str, Any] = json.loads(row["payload"])
        data.update(
            {
                "id": row["id"],
                "status": row["status"],
                "updated_at": row["updated_at"],
                "published_at": row["published_at"],
                "view_count": row["view_count"],
                "like_count": row["like_count"],
            }
        )
        return GeneratedArticle.model_validate(data)

    def _insert(self, article: GeneratedArticle) -> str:
        conn = self._get_connection()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO articles (
                        id, slug, title, excerpt, content, tags, status, origin_topic,
                        created_at, updated_at, published_at, view_count, like_count, payload
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        article.id,
                        article.slug,
                        article.title,
                        article.excerpt,
                        article.content,
                        json.dumps([tag.casefold() for tag in article.tags]),
                        article.status.value,
                        article.provenance.origin_topic,
                        _iso(article.created_at),
                        _iso(article.updated_at),
                        _iso(article.published_at),
                        article.view_count,
                        article.like_count,
                        article.model_dump_json(),
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateSlugError(article.slug) from e
        return article.id

    async def save_article(self, article, origin_topic=None, contributing_sources=None) -> str:
        stored = _prepare_for_save(article, origin_topic, contributing_sources)
        return await self._run(self._insert, stored)

    def _select_by_slug(self, slug: str) -> Optional[GeneratedArticle]:
        row = self._get_connection().execute(
            "SELECT * FROM articles WHERE slug = ?", (slug,)
        ).fetchone()
        return self._row_to_article(row) if row else None

    async def find_by_slug(self, slug: str) -> Optional[GeneratedArticle]:
        return await self._run(self._select_by_slug, slug)

    @staticmethod
    def _where(flt: ArticleFilter):
        clauses: List[str] = []
        params: List[Any] = []
        if flt.status is not None:
            clauses.append("status = ?")
            params.append(flt.status.value)
        if flt.tag:
            clauses.append("EXISTS (SELECT 1 FROM json_each(articles.tags) WHERE json_each.value = ?)")
            params.append(flt.tag.casefold())
        if flt.search:
            like = f"%{flt.search}%"
            clauses.append("(title LIKE ? OR excerpt LIKE ? OR content LIKE ?)")
            params.extend([like, like, like])
        if flt.published_since is not None:
            clauses.append("published_at IS NOT NULL AND published_at >= ?")
            params.append(_iso(flt.published_since))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    def _select_page(self, page: int, page_size: int, flt: ArticleFilter) -> ArticleListing:
        conn = self._get_connection()
        where, params = self._where(flt)
        total = conn.execute(f"SELECT COUNT(*) FROM articles {where}", params).fetchone()[0]
        rows = conn.execute(
            f"SELECT * FROM articles {where} "
            "ORDER BY COALESCE(published_at, created_at) DESC, created_at DESC LIMIT ? OFFSET ?",
            [*params, page_size, (page - 1) * page_size],
        ).fetchall()
        return ArticleListing(
            items=[self._row_to_article(row) for row in rows],
            total_count=int(total),
            page=page,
            page_size=page_size,
        )

    async def list_articles(self, page: int = 1, page_size: int = 10, filter: Optional[ArticleFilter] = None) -> ArticleListing:
        return await self._run(self._select_page, max(1, int(page)), max(1, int(page_size)), filter or ArticleFilter())

    def _bump(self, slug: str, column: str) -> Optional[int]:
        conn = self._get_connection()
        with conn:
            cursor = conn.execute(
                f"UPDATE articles SET {column} = {column} + 1 WHERE slug = ?", (slug,)
            )
            if cursor.rowcount == 0:
                return None
            row = conn.execute(f"SELECT {column} FROM articles WHERE slug = ?", (slug,)).fetchone()
        return int(row[0])

    async def increment_view_count(self, slug: str) -> Optional[int]:
        return await self._run(self._bump, slug, "view_count")

    async def increment_like_count(self, slug: str) -> Optional[int]:
        return await self._run(self._bump, slug, "like_count")

    def _set_status(self, slug: str, status: ArticleStatus) -> Optional[GeneratedArticle]:
        current = self._select_by_slug(slug)
        if current is None:
            return None
        updated = current.with_status(status)
        conn = self._get_connection()
        with conn:
            conn.execute(
                "UPDATE articles SET status = ?, published_at = ?, updated_at = ? WHERE slug = ?",
                (updated.status.value, _iso(updated.published_at), _iso(updated.updated_at), slug),
            )
        return updated

    async def update_status(self, slug: str, status: ArticleStatus) -> Optional[GeneratedArticle]:
        return await self._run(self._set_status, slug, status)


def get_article_store(settings: Optional[StorageSettings] = None) -> BaseArticleStore:
    """
    Build the configured store.

    Args:
        settings: StorageSettings (defaults to STORAGE_* env)
    """
    if settings is None:
        from config import get_storage_settings
        settings = get_storage_settings()

    backend = (settings.backend or "sqlite").strip().lower()
    if backend == "memory":
        return InMemoryArticleStore()
    if backend == "sqlite":
        return SqliteArticleStore(settings.sqlite_path)
    raise ConfigurationError(f"Unsupported storage backend: {backend}", {"backend": backend})
