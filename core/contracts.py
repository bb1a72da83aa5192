"""Canonical data contracts for the content-generation workflow."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleStatus(str, Enum):
    """Lifecycle status of a persisted article."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class WorkflowPhase(str, Enum):
    """Orchestrator run state."""

    IDLE = "idle"
    COLLECTING_TOPICS = "collecting_topics"
    PROCESSING_TOPICS = "processing_topics"
    DONE = "done"


class OpenGraphFields(BaseModel):
    title: str
    description: str
    image: str
    type: str = "article"
    url: Optional[str] = None


class SearchMetaFields(BaseModel):
    title: str
    description: str
    keywords: str
    author: str
    robots: str = "index, follow"


class InlineImageRef(BaseModel):
    url: str
    alt: str = ""
    caption: str = ""
    position: int


class EmbeddedPostRef(BaseModel):
    id: str
    permalink: str = ""
    position: int


class EmbeddedVideoRef(BaseModel):
    url: str
    title: str = ""
    position: int


class EmbeddedMediaManifest(BaseModel):
    """Positions + references of every media item embedded in content."""

    featured_image: str = ""
    inline_images: List[InlineImageRef] = Field(default_factory=list)
    embedded_posts: List[EmbeddedPostRef] = Field(default_factory=list)
    embedded_videos: List[EmbeddedVideoRef] = Field(default_factory=list)


class Provenance(BaseModel):
    origin_topic: str = ""
    generation_method: str = ""
    contributing_sources: List[str] = Field(default_factory=list)


class GeneratedArticle(BaseModel):
    """The persisted article entity."""

    id: Optional[str] = None
    title: str
    slug: str
    meta_description: str = ""
    excerpt: str = ""
    content: str
    tags: List[str] = Field(default_factory=list)
    estimated_read_minutes: int = Field(default=1, ge=1)
    open_graph: OpenGraphFields
    search_meta: SearchMetaFields
    embedded_media: EmbeddedMediaManifest = Field(default_factory=EmbeddedMediaManifest)
    status: ArticleStatus = ArticleStatus.DRAFT
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    published_at: Optional[datetime] = None
    view_count: int = Field(default=0, ge=0)
    like_count: int = Field(default=0, ge=0)
    provenance: Provenance = Field(default_factory=Provenance)

    @field_validator("slug")
    @classmethod
    def _non_empty_slug(cls, value: str) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("slug is required")
        return text

    def with_status(self, status: ArticleStatus, *, now: Optional[datetime] = None) -> "GeneratedArticle":
        """Copy with status applied; published_at is set only while published."""
        ts = now or utcnow()
        published_at = None
        if status == ArticleStatus.PUBLISHED:
            published_at = self.published_at or ts
        return self.model_copy(update={"status": status, "published_at": published_at, "updated_at": ts})


class WorkflowConfig(BaseModel):
    """Options accepted by the interactive and scheduled triggers."""

    model_config = ConfigDict(populate_by_name=True)

    max_topics_per_run: int = Field(default=3, ge=1, alias="maxTopicsPerRun")
    target_word_count: int = Field(default=1500, ge=100, alias="targetWordCount")
    include_images: bool = Field(default=True, alias="includeImages")
    include_tweets: bool = Field(default=True, alias="includeTweets")
    include_videos: bool = Field(default=True, alias="includeVideos")
    auto_publish: bool = Field(default=True, alias="autoPublish")
    regions: List[str] = Field(default_factory=lambda: ["US"])

    @model_validator(mode="before")
    @classmethod
    def _legacy_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        payload = dict(data)
        if "maxTopics" in payload and "maxTopicsPerRun" not in payload:
            payload["maxTopicsPerRun"] = payload.pop("maxTopics")
        if "wordCount" in payload and "targetWordCount" not in payload:
            payload["targetWordCount"] = payload.pop("wordCount")
        return payload

    @field_validator("regions", mode="before")
    @classmethod
    def _normalize_regions(cls, value: Any) -> List[str]:
        if value is None:
            return ["US"]
        if isinstance(value, str):
            value = value.split(",")
        regions = [str(item or "").strip().upper() for item in value if str(item or "").strip()]
        return regions or ["US"]


class GeneratedArticleRef(BaseModel):
    id: str
    title: str
    slug: str
    topic: str


class WorkflowRunResult(BaseModel):
    """Run summary returned to the caller."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    articles_generated: int = Field(default=0, alias="articlesGenerated")
    errors: List[str] = Field(default_factory=list)
    generated_articles: List[GeneratedArticleRef] = Field(default_factory=list, alias="generatedArticles")
    skipped_topics: List[str] = Field(default_factory=list, alias="skippedTopics")

    def record(self, ref: GeneratedArticleRef) -> None:
        self.generated_articles.append(ref)
        self.articles_generated += 1

    def skip(self, topic: str) -> None:
        """Topic already has an article; not an error."""
        self.skipped_topics.append(topic)

    def finalize(self) -> "WorkflowRunResult":
        self.success = self.articles_generated > 0
        return self


class RecentArticle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    slug: str
    published_at: Optional[datetime] = Field(None, alias="publishedAt")
    view_count: int = Field(default=0, alias="views")


class WorkflowStats(BaseModel):
    """Read-only statistics over published articles."""

    model_config = ConfigDict(populate_by_name=True)

    total_articles: int = Field(default=0, alias="totalArticles")
    articles_this_week: int = Field(default=0, alias="articlesThisWeek")
    popular_tags: List[str] = Field(default_factory=list, alias="popularTags")
    recent_articles: List[RecentArticle] = Field(default_factory=list, alias="recentArticles")


class ArticleFilter(BaseModel):
    status: Optional[ArticleStatus] = None
    tag: Optional[str] = None
    search: Optional[str] = None
    published_since: Optional[datetime] = None


class ArticleListing(BaseModel):
    items: List[GeneratedArticle] = Field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size

    def to_payload(self) -> Dict[str, Any]:
        return {
            "articles": [item.model_dump(mode="json") for item in self.items],
            "total": self.total_count,
            "page": self.page,
            "limit": self.page_size,
            "totalPages": self.total_pages,
        }
