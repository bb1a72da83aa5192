"""
Scheduler
Recurring content runs plus a daily read-only report, with single-flight
exclusion for content runs.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, List, Optional, Tuple
from zoneinfo import ZoneInfo
import asyncio
import logging

from config import get_settings
from config.settings import Settings
from core import WorkflowConfig, WorkflowRunResult, WorkflowStats, utcnow

from .workflow import WorkflowOrchestrator


logger = logging.getLogger(__name__)


def _parse_run_at(run_at: str) -> Tuple[int, int]:
    text = str(run_at or "").strip()
    parts = text.split(":")
    if len(parts) != 2:
        return 9, 0
    try:
        hour = max(0, min(23, int(parts[0])))
        minute = max(0, min(59, int(parts[1])))
        return hour, minute
    except ValueError:
        return 9, 0


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(str(name or "UTC"))
    except Exception:
        logger.warning(f"Unknown timezone '{name}', using UTC")
        return ZoneInfo("UTC")


def seconds_until(run_at: str, tz: str, *, now_utc: Optional[datetime] = None) -> float:
    """Seconds from now until the next local HH:MM in ``tz``."""
    now = now_utc or datetime.now(timezone.utc)
    zone = _zone(tz)
    local_now = now.astimezone(zone)
    hour, minute = _parse_run_at(run_at)
    target = local_now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= local_now:
        target = (target + timedelta(days=1)).replace(hour=hour, minute=minute)
    return max(0.0, (target - local_now).total_seconds())


class SchedulerState:
    """
    In-progress flag shared by every content trigger.

    Created by the entry point and handed to the scheduler (and any other
    trigger that must not overlap with it).
    """

    def __init__(self) -> None:
        self._running = False
        self.last_started_at: Optional[datetime] = None
        self.last_finished_at: Optional[datetime] = None
        self.skipped_runs = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @asynccontextmanager
    async def try_acquire(self) -> AsyncIterator[bool]:
        """Yield True when the flag was taken, False when a run is already going."""
        if self._running:
            self.skipped_runs += 1
            yield False
            return
        self._running = True
        self.last_started_at = utcnow()
        try:
            yield True
        finally:
            self._running = False
            self.last_finished_at = utcnow()


class WorkflowScheduler:
    """
    Two asyncio loops: content every ``content_interval_hours`` and a report
    daily at ``report_at``. Overlapping content triggers are skipped, not
    queued.
    """

    def __init__(
        self,
        orchestrator: WorkflowOrchestrator,
        state: SchedulerState,
        settings: Optional[Settings] = None,
    ):
        self.orchestrator = orchestrator
        self.state = state
        self.settings = settings or get_settings()
        self._tasks: List[asyncio.Task] = []

    @property
    def is_started(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def scheduled_config(self) -> WorkflowConfig:
        sched = self.settings.scheduler
        return WorkflowConfig(
            max_topics_per_run=sched.max_topics_per_run,
            target_word_count=sched.target_word_count,
            include_images=True,
            include_tweets=True,
            include_videos=sched.include_videos,
            auto_publish=True,
            regions=list(self.settings.workflow.regions),
        )

    async def run_content_once(self, config: Optional[WorkflowConfig] = None) -> Optional[WorkflowRunResult]:
        async with self.state.try_acquire() as acquired:
            if not acquired:
                logger.info("Content workflow already running, skipping this trigger")
                return None
            logger.info("Scheduled content workflow starting")
            try:
                result = await self.orchestrator.execute(config or self.scheduled_config())
            except Exception:
                logger.exception("Scheduled content workflow failed")
                return None
            logger.info(
                f"Scheduled content workflow finished: {result.articles_generated} generated, "
                f"{len(result.errors)} errors"
            )
            for error in result.errors:
                logger.warning(f"  {error}")
            return result

    async def run_report_once(self) -> Optional[WorkflowStats]:
        try:
            stats = await self.orchestrator.get_stats()
        except Exception:
            logger.exception("Daily report failed")
            return None
        logger.info(
            f"Daily report: {stats.total_articles} published, {stats.articles_this_week} this week, "
            f"popular tags: {', '.join(stats.popular_tags) or '-'}"
        )
        return stats

    async def _content_loop(self) -> None:
        interval = max(60.0, float(self.settings.scheduler.content_interval_hours) * 3600.0)
        while True:
            await asyncio.sleep(interval)
            await self.run_content_once()

    async def _report_loop(self) -> None:
        sched = self.settings.scheduler
        while True:
            delay = seconds_until(sched.report_at, sched.report_tz)
            logger.debug(f"Next daily report in {delay:.0f}s")
            # a one-second floor keeps a just-fired report from firing twice
            await asyncio.sleep(max(1.0, delay))
            await self.run_report_once()

    def start(self) -> None:
        if self.is_started:
            logger.warning("Scheduler already started")
            return
        sched = self.settings.scheduler
        self._tasks = [
            asyncio.create_task(self._content_loop(), name="trendwise-content"),
            asyncio.create_task(self._report_loop(), name="trendwise-report"),
        ]
        logger.info(
            f"Scheduler started: content every {sched.content_interval_hours}h, "
            f"report daily at {sched.report_at} {sched.report_tz}"
        )

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Scheduler stopped")
