"""
Settings Configuration
Pydantic-based configuration for sources, model, storage and scheduling.
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class GoogleTrendsSettings(BaseSettings):
    """Google Trends daily RSS feed"""
    enabled: bool = Field(default=True, description="Use Google Trends as a trend source")
    feed_url: str = Field(default="https://trends.google.com/trending/rss", description="Daily trends RSS endpoint")
    max_results: int = Field(default=10, description="Maximum trends per region")

    class Config:
        env_prefix = "GOOGLE_TRENDS_"


class TwitterSettings(BaseSettings):
    """Twitter/X API"""
    bearer_token: Optional[str] = Field(default=None, description="Twitter Bearer Token")
    trends_enabled: bool = Field(default=True, description="Use Twitter trends as a trend source")
    trends_woeid: int = Field(default=1, description="Yahoo WOEID for trends (1 = worldwide)")
    max_trends: int = Field(default=10, description="Maximum trends per call")
    max_results: int = Field(default=10, description="Maximum posts per search")

    class Config:
        env_prefix = "TWITTER_"


class UnsplashSettings(BaseSettings):
    """Unsplash image search"""
    access_key: Optional[str] = Field(default=None, description="Unsplash Access Key")
    max_results: int = Field(default=5, description="Maximum images per search")
    orientation: str = Field(default="landscape", description="Image orientation filter")

    class Config:
        env_prefix = "UNSPLASH_"


class YouTubeSettings(BaseSettings):
    """YouTube Data API v3"""
    api_key: Optional[str] = Field(default=None, description="YouTube Data API key")
    max_results: int = Field(default=5, description="Maximum videos per search")

    class Config:
        env_prefix = "YOUTUBE_"


class NewsSettings(BaseSettings):
    """Background article search (Google News RSS)"""
    feed_url: str = Field(default="https://news.google.com/rss/search", description="News search RSS endpoint")
    language: str = Field(default="en-US", description="hl parameter")
    max_results: int = Field(default=5, description="Maximum background articles")

    class Config:
        env_prefix = "NEWS_"


class GeneralSettings(BaseSettings):
    """Shared HTTP behaviour"""
    request_timeout: float = Field(default=12.0, description="Per-request timeout (seconds)")
    user_agent: str = Field(default="TrendWise/1.0 (+https://trendwise.example)", description="User Agent")


class LLMSettings(BaseSettings):
    """Generative model"""
    provider: str = Field(default="openai", description="LLM provider: openai, anthropic, deepseek, gemini")
    model_name: Optional[str] = Field(default=None, description="Model name (provider default when empty)")
    temperature: float = Field(default=0.7, description="Body generation temperature")
    max_tokens: int = Field(default=3000, description="Body generation output tokens")
    meta_temperature: float = Field(default=0.5, description="Metadata generation temperature")
    meta_max_tokens: int = Field(default=500, description="Metadata generation output tokens")
    timeout: float = Field(default=120.0, description="Per-call timeout (seconds)")

    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API Key")
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API Key")
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API Key")

    class Config:
        env_prefix = "LLM_"


class StorageSettings(BaseSettings):
    """Article store"""
    backend: str = Field(default="sqlite", description="Article store backend: sqlite, memory")
    sqlite_path: str = Field(default="./data/articles.db", description="SQLite database file")

    class Config:
        env_prefix = "STORAGE_"


class WorkflowSettings(BaseSettings):
    """Workflow defaults"""
    max_topics_per_run: int = Field(default=3, description="Topics processed per run")
    target_word_count: int = Field(default=1500, description="Minimum body length")
    regions: List[str] = Field(default_factory=lambda: ["US"], description="Trend regions")
    source_timeout_sec: float = Field(default=15.0, description="Timeout per trend/media adapter call")
    default_featured_image: str = Field(
        default="https://images.pexels.com/photos/8386440/pexels-photo-8386440.jpeg",
        description="Featured image when no image was collected",
    )
    author_name: str = Field(default="TrendWise AI", description="Meta author")
    site_url: str = Field(default="https://trendwise.example", description="Public site root for Open Graph URLs")

    class Config:
        env_prefix = "WORKFLOW_"


class SchedulerSettings(BaseSettings):
    """Recurring triggers"""
    content_interval_hours: float = Field(default=6.0, description="Content-generation cadence")
    report_at: str = Field(default="09:00", description="Daily report time HH:MM")
    report_tz: str = Field(default="UTC", description="Timezone for report_at")
    max_topics_per_run: int = Field(default=3, description="Topics per scheduled run")
    target_word_count: int = Field(default=1200, description="Body length for scheduled runs")
    include_videos: bool = Field(default=False, description="Collect videos on scheduled runs")
    run_with_server: bool = Field(default=False, description="Start the scheduler inside the HTTP server")

    class Config:
        env_prefix = "SCHEDULER_"


class Settings(BaseSettings):
    """Top-level settings aggregate"""

    google_trends: GoogleTrendsSettings = Field(default_factory=GoogleTrendsSettings)
    twitter: TwitterSettings = Field(default_factory=TwitterSettings)
    unsplash: UnsplashSettings = Field(default_factory=UnsplashSettings)
    youtube: YouTubeSettings = Field(default_factory=YouTubeSettings)
    news: NewsSettings = Field(default_factory=NewsSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings after applying an optional .env file (default config/.env)."""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            google_trends=GoogleTrendsSettings(),
            twitter=TwitterSettings(),
            unsplash=UnsplashSettings(),
            youtube=YouTubeSettings(),
            news=NewsSettings(),
            general=GeneralSettings(),
            llm=LLMSettings(),
            storage=StorageSettings(),
            workflow=WorkflowSettings(),
            scheduler=SchedulerSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings singleton"""
    return Settings.load_from_env_file()


def get_llm_settings() -> LLMSettings:
    return get_settings().llm


def get_storage_settings() -> StorageSettings:
    return get_settings().storage


def get_workflow_settings() -> WorkflowSettings:
    return get_settings().workflow


def get_scheduler_settings() -> SchedulerSettings:
    return get_settings().scheduler
