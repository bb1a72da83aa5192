"""
Media Collector
Concurrent per-topic fan-out to the image, social, video and news sources.
"""
import asyncio
from typing import Any, Awaitable, List, Optional, Tuple
import logging

from config import get_settings
from config.settings import Settings
from models import FeatureToggles, MediaBundle
from scrapers import (
    BaseScraper,
    GoogleNewsScraper,
    TwitterSearchScraper,
    UnsplashScraper,
    YouTubeScraper,
)


logger = logging.getLogger(__name__)


class MediaCollector:
    """
    Media collector.

    One call per enabled category, run together; each is bounded by its own
    timeout and a failing category degrades to an empty list. Background
    articles have no toggle.
    """

    def __init__(
        self,
        image_source: Optional[BaseScraper] = None,
        social_source: Optional[BaseScraper] = None,
        video_source: Optional[BaseScraper] = None,
        news_source: Optional[BaseScraper] = None,
        source_timeout_sec: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.image_source = image_source or UnsplashScraper(self.settings)
        self.social_source = social_source or TwitterSearchScraper(self.settings)
        self.video_source = video_source or YouTubeScraper(self.settings)
        self.news_source = news_source or GoogleNewsScraper(self.settings)
        timeout = source_timeout_sec or self.settings.workflow.source_timeout_sec
        self.source_timeout_sec = max(1.0, float(timeout))

    async def _run_source_task(self, category: str, task_coro: Awaitable[List[Any]]) -> List[Any]:
        try:
            return list(await asyncio.wait_for(task_coro, timeout=self.source_timeout_sec) or [])
        except Exception as exc:
            logger.warning(f"{category} collection skipped: {exc!r}")
            return []

    async def collect(self, topic_keyword: str, toggles: Optional[FeatureToggles] = None) -> MediaBundle:
        toggles = toggles or FeatureToggles()
        jobs: List[Tuple[str, Awaitable[List[Any]]]] = []
        if toggles.include_images:
            jobs.append(("images", self.image_source.search(topic_keyword)))
        if toggles.include_tweets:
            jobs.append(("social_posts", self.social_source.search(topic_keyword)))
        if toggles.include_videos:
            jobs.append(("videos", self.video_source.search(topic_keyword)))
        jobs.append(("background_articles", self.news_source.search(topic_keyword)))

        results = await asyncio.gather(
            *(self._run_source_task(name, coro) for name, coro in jobs)
        )
        bundle = MediaBundle(**{name: items for (name, _), items in zip(jobs, results)})
        logger.info(f"Collected media for '{topic_keyword}': {bundle.summary()}")
        return bundle

    async def close(self):
        for source in (self.image_source, self.social_source, self.video_source, self.news_source):
            await source.close()
