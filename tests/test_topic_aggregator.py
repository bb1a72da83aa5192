from __future__ import annotations

import pytest

from aggregator import TopicAggregator, merge_topics, rank_key
from models import TrendSource
from tests.conftest import FakeTrendSource, make_settings, make_topic


def test_rank_orders_by_volume_then_source_then_keyword() -> None:
    topics = [
        make_topic("beta", 100, TrendSource.TWITTER),
        make_topic("Alpha", 100, TrendSource.TWITTER),
        make_topic("gamma", 100, TrendSource.GOOGLE_TRENDS),
        make_topic("delta", 500, TrendSource.TWITTER),
    ]
    ranked = sorted(topics, key=rank_key)

    assert [topic.keyword for topic in ranked] == ["delta", "gamma", "Alpha", "beta"]


def test_merge_dedupes_on_normalized_keyword_and_keeps_max_volume() -> None:
    first = [make_topic("Quantum Computing", 100, TrendSource.GOOGLE_TRENDS, category="TechDaily")]
    second = [make_topic("  quantum   computing ", 900, TrendSource.TWITTER, category="Social")]

    merged = merge_topics([first, second])

    assert len(merged) == 1
    assert merged[0].keyword == "Quantum Computing"
    assert merged[0].category == "TechDaily"
    assert merged[0].source == TrendSource.GOOGLE_TRENDS
    assert merged[0].volume == 900


def test_merge_skips_blank_keywords() -> None:
    merged = merge_topics([[make_topic("   ", 10), make_topic("Real", 1)]])
    assert [topic.keyword for topic in merged] == ["Real"]


@pytest.mark.asyncio
async def test_aggregate_selects_highest_volume_topic() -> None:
    google = FakeTrendSource(
        "google",
        [make_topic("AI Code Generation", 5000), make_topic("Local Weather", 200)],
    )
    twitter = FakeTrendSource(
        "twitter",
        [make_topic("Celebrity News", 1000, TrendSource.TWITTER)],
    )
    aggregator = TopicAggregator(sources=[google, twitter], settings=make_settings())

    topics = await aggregator.aggregate(["US"], limit=1)

    assert [topic.keyword for topic in topics] == ["AI Code Generation"]


@pytest.mark.asyncio
async def test_aggregate_queries_each_region() -> None:
    source = FakeTrendSource("google", [make_topic("Topic", 1)])
    aggregator = TopicAggregator(sources=[source], settings=make_settings())

    await aggregator.aggregate(["us", " gb ", ""], limit=5)

    assert sorted(source.regions) == ["GB", "US"]


@pytest.mark.asyncio
async def test_failing_source_does_not_fail_aggregation() -> None:
    broken = FakeTrendSource("broken", [], error=RuntimeError("503 from upstream"))
    healthy = FakeTrendSource("healthy", [make_topic("Green Hydrogen", 300)])
    aggregator = TopicAggregator(sources=[broken, healthy], settings=make_settings())

    topics = await aggregator.aggregate(["US"], limit=3)

    assert [topic.keyword for topic in topics] == ["Green Hydrogen"]


@pytest.mark.asyncio
async def test_slow_source_is_cut_off_by_timeout() -> None:
    slow = FakeTrendSource("slow", [make_topic("Too Late", 99999)], delay=3.0)
    fast = FakeTrendSource("fast", [make_topic("On Time", 10)])
    aggregator = TopicAggregator(sources=[slow, fast], source_timeout_sec=1.0, settings=make_settings())

    topics = await aggregator.aggregate(["US"], limit=3)

    assert [topic.keyword for topic in topics] == ["On Time"]


@pytest.mark.asyncio
async def test_no_sources_yields_empty_list() -> None:
    aggregator = TopicAggregator(sources=[], settings=make_settings())
    assert await aggregator.aggregate(["US"], limit=3) == []
