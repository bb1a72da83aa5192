"""
Topic Aggregator
Merge trend signals from every configured trend source into one ranked list.
"""
import asyncio
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from config import get_settings
from config.settings import Settings
from models import TrendingTopic
from processing import normalize_keyword
from scrapers import GoogleTrendsScraper, TrendScraper, TwitterTrendsScraper


logger = logging.getLogger(__name__)


def rank_key(topic: TrendingTopic) -> Tuple[int, int, str]:
    """Volume desc, then source priority, then keyword (case-insensitive)."""
    return (-int(topic.volume), topic.source.priority, topic.keyword.casefold())


def merge_topics(batches: Sequence[Sequence[TrendingTopic]]) -> List[TrendingTopic]:
    """
    Dedupe on the normalized keyword.

    The first occurrence wins for keyword, category, source and related
    keywords; the volume is the maximum seen across duplicates.
    """
    merged: Dict[str, TrendingTopic] = {}
    for batch in batches:
        for topic in batch:
            key = normalize_keyword(topic.keyword)
            if not key:
                continue
            seen = merged.get(key)
            if seen is None:
                merged[key] = topic
            elif topic.volume > seen.volume:
                merged[key] = seen.model_copy(update={"volume": topic.volume})
    return sorted(merged.values(), key=rank_key)


class TopicAggregator:
    """
    Trend aggregator.

    Each (source, region) call runs concurrently under its own timeout; a
    failing or slow source contributes nothing and never fails the call.
    """

    def __init__(
        self,
        sources: Optional[Sequence[TrendScraper]] = None,
        source_timeout_sec: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        if sources is None:
            sources = [
                GoogleTrendsScraper(self.settings),
                TwitterTrendsScraper(self.settings),
            ]
        self._sources: List[TrendScraper] = list(sources)
        timeout = source_timeout_sec or self.settings.workflow.source_timeout_sec
        self.source_timeout_sec = max(1.0, float(timeout))

    @property
    def sources(self) -> List[TrendScraper]:
        return list(self._sources)

    async def _run_source_task(self, source: TrendScraper, region: str) -> List[TrendingTopic]:
        try:
            return await asyncio.wait_for(
                source.fetch_trends(region),
                timeout=self.source_timeout_sec,
            )
        except Exception as exc:
            logger.warning(f"{source.name} ({region}) skipped: {exc!r}")
            return []

    async def aggregate(self, regions: Sequence[str], limit: int) -> List[TrendingTopic]:
        """
        Collect, dedupe and rank trending topics.

        Args:
            regions: region codes, e.g. ["US", "GB"]
            limit: maximum topics returned

        Returns:
            At most ``limit`` topics; empty only when no source produced anything
        """
        regions = [str(r).strip().upper() for r in regions if str(r).strip()] or ["US"]
        jobs = [(source, region) for source in self._sources for region in regions]
        if not jobs:
            logger.warning("No trend sources configured")
            return []

        batches = await asyncio.gather(
            *(self._run_source_task(source, region) for source, region in jobs)
        )
        ranked = merge_topics(batches)
        selected = ranked[: max(0, int(limit))]
        logger.info(
            f"Aggregated {len(ranked)} unique topics from {len(jobs)} source calls; "
            f"selected {len(selected)}"
        )
        return selected

    async def close(self):
        for source in self._sources:
            await source.close()
