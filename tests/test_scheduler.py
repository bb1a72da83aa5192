from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from core import WorkflowConfig, WorkflowRunResult, WorkflowStats
from orchestrator import SchedulerState, WorkflowScheduler, seconds_until
from orchestrator.scheduler import _parse_run_at
from tests.conftest import make_settings


class _BlockingOrchestrator:
    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.configs = []

    async def execute(self, config: WorkflowConfig) -> WorkflowRunResult:
        self.configs.append(config)
        self.started.set()
        await self.release.wait()
        return WorkflowRunResult(articles_generated=1).finalize()

    async def get_stats(self) -> WorkflowStats:
        return WorkflowStats(total_articles=4, articles_this_week=2, popular_tags=["AI"])


class _FailingOrchestrator:
    async def execute(self, config: WorkflowConfig) -> WorkflowRunResult:
        raise RuntimeError("store offline")

    async def get_stats(self) -> WorkflowStats:
        raise RuntimeError("store offline")


def test_parse_run_at_defaults_on_bad_input() -> None:
    assert _parse_run_at("07:30") == (7, 30)
    assert _parse_run_at("25:99") == (23, 59)
    assert _parse_run_at("noon") == (9, 0)
    assert _parse_run_at("") == (9, 0)


def test_seconds_until_next_local_time() -> None:
    now = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)

    assert seconds_until("09:00", "UTC", now_utc=now) == 3600
    assert seconds_until("07:00", "UTC", now_utc=now) == 23 * 3600
    # 08:00 UTC is 04:00 in New York (EDT) on this date
    assert seconds_until("05:00", "America/New_York", now_utc=now) == 3600
    assert seconds_until("09:00", "Not/AZone", now_utc=now) == 3600


@pytest.mark.asyncio
async def test_overlapping_trigger_is_skipped() -> None:
    orchestrator = _BlockingOrchestrator()
    state = SchedulerState()
    scheduler = WorkflowScheduler(orchestrator, state, settings=make_settings())

    first = asyncio.create_task(scheduler.run_content_once())
    await orchestrator.started.wait()
    assert state.is_running is True

    second = await scheduler.run_content_once()
    assert second is None
    assert state.skipped_runs == 1

    orchestrator.release.set()
    result = await first

    assert result.articles_generated == 1
    assert state.is_running is False
    assert len(orchestrator.configs) == 1


@pytest.mark.asyncio
async def test_flag_is_cleared_after_failure() -> None:
    state = SchedulerState()
    scheduler = WorkflowScheduler(_FailingOrchestrator(), state, settings=make_settings())

    assert await scheduler.run_content_once() is None
    assert state.is_running is False
    assert state.last_finished_at is not None


@pytest.mark.asyncio
async def test_try_acquire_releases_on_exception() -> None:
    state = SchedulerState()

    with pytest.raises(ValueError):
        async with state.try_acquire() as acquired:
            assert acquired is True
            raise ValueError("boom")

    assert state.is_running is False


def test_scheduled_config_uses_scheduler_settings() -> None:
    scheduler = WorkflowScheduler(_BlockingOrchestrator(), SchedulerState(), settings=make_settings())

    config = scheduler.scheduled_config()

    assert config.max_topics_per_run == 3
    assert config.target_word_count == 1200
    assert config.include_videos is False
    assert config.include_images is True
    assert config.auto_publish is True


@pytest.mark.asyncio
async def test_report_returns_stats_or_none() -> None:
    ok = WorkflowScheduler(_BlockingOrchestrator(), SchedulerState(), settings=make_settings())
    broken = WorkflowScheduler(_FailingOrchestrator(), SchedulerState(), settings=make_settings())

    stats = await ok.run_report_once()

    assert stats.total_articles == 4
    assert await broken.run_report_once() is None


@pytest.mark.asyncio
async def test_start_and_stop_manage_loop_tasks() -> None:
    scheduler = WorkflowScheduler(_BlockingOrchestrator(), SchedulerState(), settings=make_settings())

    scheduler.start()
    assert scheduler.is_started is True
    await scheduler.stop()

    assert scheduler.is_started is False
