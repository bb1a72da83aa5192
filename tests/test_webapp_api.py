"""Tests for the HTTP API."""

from __future__ import annotations

import asyncio
import importlib
import random

import pytest
from fastapi.testclient import TestClient

from aggregator import MediaCollector, TopicAggregator
from core import ArticleStatus
from intelligence import ContentSynthesizer
from orchestrator import SchedulerState, WorkflowOrchestrator
from storage import InMemoryArticleStore
from tests.conftest import FakeLLM, FakeMediaSource, FakeTrendSource, make_article, make_settings, make_topic

webapp_module = importlib.import_module("webapp.app")


@pytest.fixture
def wired(monkeypatch):
    settings = make_settings()
    store = InMemoryArticleStore()
    orchestrator = WorkflowOrchestrator(
        store=store,
        aggregator=TopicAggregator(
            sources=[FakeTrendSource("trends", [make_topic("AI Code Generation", 900), make_topic("Green Hydrogen", 50)])],
            settings=settings,
        ),
        collector=MediaCollector(
            image_source=FakeMediaSource("images"),
            social_source=FakeMediaSource("social"),
            video_source=FakeMediaSource("videos"),
            news_source=FakeMediaSource("news"),
            settings=settings,
        ),
        synthesizer=ContentSynthesizer(llm=FakeLLM(), settings=settings),
        settings=settings,
        rng=random.Random(5),
    )
    state = SchedulerState()
    monkeypatch.setattr(webapp_module, "get_store", lambda: store)
    monkeypatch.setattr(webapp_module, "get_orchestrator", lambda: orchestrator)
    return store, orchestrator, state


@pytest.fixture
def client(wired):
    _, _, state = wired
    return TestClient(webapp_module.create_app(state, run_scheduler=False))


def test_health(client):
    payload = client.get("/api/health").json()

    assert payload["ok"] is True
    assert payload["workflowRunning"] is False


def test_workflow_run_and_stats(client):

    response = client.post("/api/workflow", json={"maxTopics": 1, "includeVideos": False})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["articlesGenerated"] == 1
    assert body["generatedArticles"][0]["slug"] == "ai-code-generation"

    stats = client.get("/api/workflow").json()
    assert stats["totalArticles"] == 1
    assert stats["recentArticles"][0]["slug"] == "ai-code-generation"


def test_workflow_rejects_invalid_config(client):

    response = client.post("/api/workflow", json={"maxTopicsPerRun": 0})

    assert response.status_code == 422


def test_workflow_conflict_while_running(wired, client):
    _, _, state = wired
    state._running = True

    response = client.post("/api/workflow", json={})

    assert response.status_code == 409
    assert response.json() == {"error": "Workflow already running"}


def test_trending_lists_topics(client):

    payload = client.get("/api/trending", params={"limit": 1, "region": "us,gb"}).json()

    assert payload["count"] == 1
    assert payload["topics"][0]["keyword"] == "AI Code Generation"


def test_generate_for_topic(client):

    created = client.post("/api/trending", json={"topic": "Edge Computing", "config": {"autoPublish": False}})
    duplicate = client.post("/api/trending", json={"topic": "edge computing"})
    missing = client.post("/api/trending", json={"topic": "  "})

    assert created.status_code == 201
    assert created.json()["topic"] == "Edge Computing"
    assert duplicate.status_code == 409
    assert duplicate.json()["skippedTopics"] == ["edge computing"]
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Topic is required"


def test_generate_failure_returns_500(wired, client):
    _, orchestrator, _ = wired
    orchestrator.synthesizer = ContentSynthesizer(llm=FakeLLM(body_error=RuntimeError("down")), settings=make_settings())

    response = client.post("/api/trending", json={"topic": "Edge Computing"})

    assert response.status_code == 500
    assert response.json()["errors"][0].startswith('Failed to process topic "Edge Computing"')


def test_category_and_random_generation(client):

    missing = client.post("/api/articles/category", json={"category": ""})
    created = client.post("/api/articles/category", json={"category": "Sustainability"})
    suggestion = client.get("/api/articles/random").json()
    rand = client.post("/api/articles/random", json={})

    assert missing.status_code == 400
    assert created.status_code == 201
    assert created.json()["category"] == "Sustainability"
    assert suggestion["topic"]
    assert rand.status_code in (201, 409)


def test_article_reads_and_counters(wired, client):
    store, _, _ = wired
    asyncio.run(store.save_article(make_article("cloud-gaming", tags=["Gaming"])))
    asyncio.run(store.save_article(make_article("hidden-draft", status=ArticleStatus.DRAFT)))

    listing = client.get("/api/articles").json()
    assert listing["total"] == 1
    assert listing["articles"][0]["slug"] == "cloud-gaming"

    drafts = client.get("/api/articles", params={"status": "draft"}).json()
    assert [a["slug"] for a in drafts["articles"]] == ["hidden-draft"]

    assert client.get("/api/articles", params={"tag": "gaming"}).json()["total"] == 1
    assert client.get("/api/articles/cloud-gaming").json()["title"] == "Cloud Gaming"
    assert client.get("/api/articles/nope").status_code == 404

    assert client.post("/api/articles/cloud-gaming/view").json() == {"slug": "cloud-gaming", "views": 1}
    assert client.post("/api/articles/cloud-gaming/like").json() == {"slug": "cloud-gaming", "likes": 1}
    assert client.post("/api/articles/nope/like").status_code == 404


def test_status_update(wired, client):
    store, _, _ = wired
    asyncio.run(store.save_article(make_article("to-publish", status=ArticleStatus.DRAFT)))

    response = client.patch("/api/articles/to-publish/status", json={"status": "published"})

    assert response.status_code == 200
    assert response.json()["status"] == "published"
    assert response.json()["published_at"] is not None
    assert client.patch("/api/articles/to-publish/status", json={"status": "bogus"}).status_code == 422


def test_http_trigger_and_scheduler_share_the_injected_state(wired):
    _, orchestrator, state = wired
    application = webapp_module.create_app(state, run_scheduler=True)

    with TestClient(application) as client:
        scheduler = application.state.scheduler
        assert scheduler.is_started is True
        assert scheduler.state is state
        assert application.state.scheduler_state is state

        state._running = True
        assert client.get("/api/health").json()["workflowRunning"] is True
        assert client.post("/api/workflow", json={}).status_code == 409
        assert state.skipped_runs == 1

        state._running = False
        assert client.post("/api/workflow", json={"maxTopics": 1}).status_code == 200

    assert application.state.scheduler is None


def test_lifespan_creates_state_when_none_injected(wired):
    application = webapp_module.create_app(run_scheduler=False)

    with TestClient(application) as client:
        assert client.get("/api/health").json()["workflowRunning"] is False
        assert application.state.scheduler_state is not None
