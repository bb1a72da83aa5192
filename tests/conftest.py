"""Shared fakes for workflow tests: model, trend/media sources, settings."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import pytest

from config.settings import (
    GoogleTrendsSettings,
    LLMSettings,
    SchedulerSettings,
    Settings,
    StorageSettings,
    TwitterSettings,
    UnsplashSettings,
    WorkflowSettings,
    YouTubeSettings,
)
from core import ArticleStatus, GeneratedArticle, OpenGraphFields, SearchMetaFields
from intelligence.llm import BaseLLM, LLMResponse, Message, MessageRole
from intelligence.prompts import META_SYSTEM_PROMPT
from models import TrendingTopic, TrendSource
from scrapers import BaseScraper, TrendScraper


DEFAULT_BODY = (
    "<h1>Deep Dive</h1>\n"
    "<p>Developers are adopting new tooling quickly and the tooling keeps improving.</p>\n"
    "[IMAGE_PLACEHOLDER_1]\n"
    "<h2>Community reaction</h2>\n"
    "<p>Teams report faster delivery with tooling that writes boilerplate.</p>\n"
    "[TWEET_PLACEHOLDER_1]\n"
    "<p>Watch the walkthrough below.</p>\n"
    "[VIDEO_PLACEHOLDER_1]\n"
    "<h2>Conclusion</h2><p>Tooling matters.</p>"
)

DEFAULT_META = (
    '{"title": "AI Code Generation Explained", "metaDescription": "How AI writes code.", '
    '"keywords": "ai, code, generation", "slug": "ai-code-generation-explained", '
    '"excerpt": "A look at AI code generation."}'
)


class FakeLLM(BaseLLM):
    """Answers body prompts with ``body`` and metadata prompts with ``meta``."""

    def __init__(
        self,
        body: str = DEFAULT_BODY,
        meta: str = DEFAULT_META,
        body_error: Optional[Exception] = None,
        meta_error: Optional[Exception] = None,
        timeout: float = 5.0,
    ):
        super().__init__(model="fake-model", timeout=timeout)
        self.body = body
        self.meta = meta
        self.body_error = body_error
        self.meta_error = meta_error
        self.calls: List[Dict[str, Any]] = []

    @property
    def provider(self) -> str:
        return "fake"

    async def acomplete(self, messages: List[Message], **kwargs) -> LLMResponse:
        system = next((m.content for m in messages if m.role == MessageRole.SYSTEM), "")
        is_meta = system == META_SYSTEM_PROMPT
        self.calls.append({"kind": "meta" if is_meta else "body", "prompt": messages[-1].content, **kwargs})
        error = self.meta_error if is_meta else self.body_error
        if error is not None:
            raise error
        return LLMResponse(content=self.meta if is_meta else self.body, model=self.model)


class FakeTrendSource(TrendScraper):
    def __init__(self, name: str, topics: List[TrendingTopic], delay: float = 0.0, error: Optional[Exception] = None):
        super().__init__(settings=Settings())
        self._name = name
        self.topics = topics
        self.delay = delay
        self.error = error
        self.regions: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def _search(self, query: str, max_results: int) -> List[TrendingTopic]:
        self.regions.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.topics)

    async def fetch_trends(self, region: str, max_results: Optional[int] = None) -> List[TrendingTopic]:
        # bypass the safe wrapper so timeouts and errors reach the aggregator
        return await self._search(region, max_results or 10)


class FakeMediaSource(BaseScraper):
    def __init__(
        self,
        name: str,
        items: Optional[List[Any]] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
        raw: bool = False,
    ):
        super().__init__(settings=Settings())
        self._name = name
        self.items = items or []
        self.delay = delay
        self.error = error
        self.raw = raw
        self.queries: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def _search(self, query: str, max_results: int) -> List[Any]:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.items)

    async def search(self, query: str, max_results: Optional[int] = None) -> List[Any]:
        if self.raw:
            return await self._search(query, max_results or 10)
        return await super().search(query, max_results)


def make_topic(keyword: str, volume: int = 0, source: TrendSource = TrendSource.GOOGLE_TRENDS, **kwargs) -> TrendingTopic:
    return TrendingTopic(keyword=keyword, volume=volume, source=source, **kwargs)


def make_settings(**overrides: Any) -> Settings:
    parts: Dict[str, Any] = {
        "google_trends": GoogleTrendsSettings(),
        "twitter": TwitterSettings(bearer_token="test-bearer"),
        "unsplash": UnsplashSettings(access_key="test-unsplash"),
        "youtube": YouTubeSettings(api_key="test-youtube"),
        "llm": LLMSettings(),
        "storage": StorageSettings(backend="memory"),
        "workflow": WorkflowSettings(source_timeout_sec=1.0, site_url="https://trendwise.test"),
        "scheduler": SchedulerSettings(),
    }
    parts.update(overrides)
    return Settings(**parts)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def topic_factory() -> Callable[..., TrendingTopic]:
    return make_topic


def make_article(
    slug: str,
    *,
    title: str = "",
    tags: Optional[List[str]] = None,
    status: ArticleStatus = ArticleStatus.PUBLISHED,
    published_at: Optional[datetime] = None,
    content: str = "<p>Body</p>",
) -> GeneratedArticle:
    title = title or slug.replace("-", " ").title()
    return GeneratedArticle(
        title=title,
        slug=slug,
        excerpt=f"About {title}",
        content=content,
        tags=list(tags or []),
        open_graph=OpenGraphFields(title=title, description="d", image="https://img.example.com/x.jpg"),
        search_meta=SearchMetaFields(title=title, description="d", keywords="k", author="TrendWise AI"),
        status=status,
        published_at=published_at,
    )
