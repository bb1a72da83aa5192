"""
Workflow Orchestrator
Topics in, persisted articles out: aggregate -> dedup -> collect -> synthesize -> save.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence
import logging
import random

from aggregator import MediaCollector, TopicAggregator
from config import get_settings
from config.settings import Settings
from core import (
    ArticleStatus,
    GeneratedArticleRef,
    WorkflowConfig,
    WorkflowPhase,
    WorkflowRunResult,
    WorkflowStats,
)
from intelligence import ContentSynthesizer, random_topic, topic_for_category
from models import FeatureToggles, MediaBundle, SourceType, TrendingTopic, TrendSource
from storage import BaseArticleStore
from utils.exceptions import DuplicateSlugError

from .dedup import DedupGate
from .stats import compute_stats


logger = logging.getLogger(__name__)


def contributing_sources(topic: TrendingTopic, bundle: MediaBundle) -> List[str]:
    sources = [topic.source.value]
    if bundle.images:
        sources.append(SourceType.UNSPLASH.value)
    if bundle.social_posts:
        sources.append(SourceType.TWITTER.value)
    if bundle.videos:
        sources.append(SourceType.YOUTUBE.value)
    if bundle.background_articles:
        sources.append(SourceType.GOOGLE_NEWS.value)
    return sources


class WorkflowOrchestrator:
    """
    Runs the content workflow.

    Topics are processed one after another; a failure on one topic is
    recorded and the run moves on. None of the public run methods raise.
    """

    def __init__(
        self,
        store: BaseArticleStore,
        aggregator: Optional[TopicAggregator] = None,
        collector: Optional[MediaCollector] = None,
        synthesizer: Optional[ContentSynthesizer] = None,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.aggregator = aggregator or TopicAggregator(settings=self.settings)
        self.collector = collector or MediaCollector(settings=self.settings)
        self.synthesizer = synthesizer or ContentSynthesizer(settings=self.settings)
        self.dedup = DedupGate(store)
        self.rng = rng or random.Random()
        self._phase = WorkflowPhase.IDLE

    @property
    def phase(self) -> WorkflowPhase:
        return self._phase

    def _set_phase(self, phase: WorkflowPhase, detail: str = "") -> None:
        self._phase = phase
        suffix = f" ({detail})" if detail else ""
        logger.info(f"Workflow phase -> {phase.value}{suffix}")

    def default_config(self) -> WorkflowConfig:
        workflow = self.settings.workflow
        return WorkflowConfig(
            max_topics_per_run=workflow.max_topics_per_run,
            target_word_count=workflow.target_word_count,
            regions=list(workflow.regions),
        )

    @asynccontextmanager
    async def _store_session(self) -> AsyncIterator[BaseArticleStore]:
        await self.store.connect()
        try:
            yield self.store
        finally:
            try:
                await self.store.disconnect()
            except Exception as e:
                logger.error(f"Store disconnect failed: {e}")

    async def _process_topic(self, topic: TrendingTopic, config: WorkflowConfig, result: WorkflowRunResult) -> None:
        keyword = topic.keyword
        if await self.dedup.exists(keyword):
            result.skip(keyword)
            return

        toggles = FeatureToggles(
            include_images=config.include_images,
            include_tweets=config.include_tweets,
            include_videos=config.include_videos,
        )
        bundle = await self.collector.collect(keyword, toggles)
        article = await self.synthesizer.synthesize(
            keyword,
            bundle,
            config.target_word_count,
            slug=self.dedup.slug_for(keyword),
        )
        status = ArticleStatus.PUBLISHED if config.auto_publish else ArticleStatus.DRAFT
        article = article.with_status(status)

        try:
            article_id = await self.store.save_article(
                article,
                origin_topic=keyword,
                contributing_sources=contributing_sources(topic, bundle),
            )
        except DuplicateSlugError:
            logger.info(f"Article for '{keyword}' was saved concurrently, skipping")
            result.skip(keyword)
            return

        result.record(GeneratedArticleRef(id=article_id, title=article.title, slug=article.slug, topic=keyword))
        logger.info(f"Saved article '{article.title}' ({article.slug}, {status.value})")

    async def _process_topics(self, topics: Sequence[TrendingTopic], config: WorkflowConfig, result: WorkflowRunResult) -> None:
        for index, topic in enumerate(topics, start=1):
            self._set_phase(WorkflowPhase.PROCESSING_TOPICS, f"{index}/{len(topics)}: {topic.keyword}")
            try:
                await self._process_topic(topic, config, result)
            except Exception as e:
                message = f'Failed to process topic "{topic.keyword}": {e}'
                logger.error(message)
                result.errors.append(message)

    async def execute(self, config: Optional[WorkflowConfig] = None) -> WorkflowRunResult:
        """
        Run one aggregation cycle.

        Args:
            config: run options (defaults from WORKFLOW_* settings)

        Returns:
            Run summary; success is true when at least one article was saved
        """
        config = config or self.default_config()
        result = WorkflowRunResult()
        self._set_phase(WorkflowPhase.COLLECTING_TOPICS)
        try:
            async with self._store_session():
                topics = await self.aggregator.aggregate(config.regions, config.max_topics_per_run)
                if not topics:
                    logger.warning("No trending topics found")
                    result.errors.append("No trending topics found")
                else:
                    await self._process_topics(topics, config, result)
        except Exception as e:
            logger.exception("Workflow failed")
            result.errors.append(f"Workflow failed: {e}")
        finally:
            self._set_phase(WorkflowPhase.DONE, f"{result.articles_generated} generated, {len(result.errors)} errors")

        return result.finalize()

    async def generate_for_topic(
        self,
        keyword: str,
        config: Optional[WorkflowConfig] = None,
        source: TrendSource = TrendSource.MANUAL,
        category: str = "General",
    ) -> WorkflowRunResult:
        config = config or self.default_config()
        result = WorkflowRunResult()
        keyword = str(keyword or "").strip()
        if not keyword:
            result.errors.append("Topic is required")
            return result.finalize()

        topic = TrendingTopic(keyword=keyword, category=category, source=source)
        try:
            async with self._store_session():
                await self._process_topics([topic], config, result)
        except Exception as e:
            logger.exception("Workflow failed")
            result.errors.append(f"Workflow failed: {e}")
        finally:
            self._set_phase(WorkflowPhase.DONE)
        return result.finalize()

    async def generate_for_category(self, category: str, config: Optional[WorkflowConfig] = None) -> WorkflowRunResult:
        keyword = topic_for_category(category, self.rng)
        logger.info(f"Category '{category}' -> topic '{keyword}'")
        return await self.generate_for_topic(keyword, config, source=TrendSource.CATALOG, category=category)

    def suggest_random_topic(self) -> str:
        return random_topic(self.rng)

    async def generate_random(self, config: Optional[WorkflowConfig] = None) -> WorkflowRunResult:
        keyword = self.suggest_random_topic()
        logger.info(f"Random topic -> '{keyword}'")
        return await self.generate_for_topic(keyword, config, source=TrendSource.CATALOG)

    async def trending(self, regions: Optional[Sequence[str]] = None, limit: int = 10) -> List[TrendingTopic]:
        return await self.aggregator.aggregate(regions or self.settings.workflow.regions, limit)

    async def get_stats(self) -> WorkflowStats:
        async with self._store_session() as store:
            return await compute_stats(store)

    async def close(self) -> None:
        await self.aggregator.close()
        await self.collector.close()
        await self.synthesizer.aclose()
