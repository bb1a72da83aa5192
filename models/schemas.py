"""
Data Models / Schemas
Records produced by the source adapters.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class TrendSource(str, Enum):
    """Trend-producing sources, declared in tie-break priority order"""
    GOOGLE_TRENDS = "google_trends"
    TWITTER = "twitter"
    CATALOG = "catalog"
    MANUAL = "manual"

    @property
    def priority(self) -> int:
        return list(TrendSource).index(self)


class SourceType(str, Enum):
    """Media-producing sources"""
    UNSPLASH = "unsplash"
    TWITTER = "twitter"
    YOUTUBE = "youtube"
    GOOGLE_NEWS = "google_news"


class TrendingTopic(BaseModel):
    """A trending topic signal, produced per aggregation cycle"""
    keyword: str = Field(..., description="Topic keyword/phrase")
    category: str = Field(default="General", description="Category label")
    volume: int = Field(default=0, ge=0, description="Search/tweet volume")
    source: TrendSource = Field(..., description="Producing source")
    related_keywords: List[str] = Field(default_factory=list, description="Related queries")
    region: Optional[str] = Field(None, description="Region code")


class ImageItem(BaseModel):
    """Image search result"""
    url: str
    alt_text: str = ""
    source_name: str = ""
    attribution: Optional[str] = Field(None, description="Photographer / credit line")


class SocialPostItem(BaseModel):
    """Social post search result"""
    id: str
    text: str
    author_name: str = "Unknown"
    permalink: str = ""
    engagement_score: int = Field(default=0, ge=0)


class VideoItem(BaseModel):
    """Video search result"""
    id: str
    title: str
    url: str
    thumbnail_url: str = ""
    duration_label: str = "Unknown"
    view_count: int = Field(default=0, ge=0)


class BackgroundArticle(BaseModel):
    """Background article search result"""
    title: str
    url: str
    excerpt: str = ""
    source_name: str = ""
    published_at: Optional[datetime] = None


class MediaBundle(BaseModel):
    """Media collected for one topic"""
    images: List[ImageItem] = Field(default_factory=list)
    social_posts: List[SocialPostItem] = Field(default_factory=list)
    videos: List[VideoItem] = Field(default_factory=list)
    background_articles: List[BackgroundArticle] = Field(default_factory=list)

    def summary(self) -> dict:
        return {
            "images": len(self.images),
            "social_posts": len(self.social_posts),
            "videos": len(self.videos),
            "background_articles": len(self.background_articles),
        }


class FeatureToggles(BaseModel):
    """Per-run media category switches"""
    include_images: bool = True
    include_tweets: bool = True
    include_videos: bool = True
