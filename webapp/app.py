"""HTTP API: workflow triggers, trending topics and article reads."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError, field_validator

from config import get_settings
from core import ArticleFilter, ArticleStatus, WorkflowConfig, WorkflowRunResult
from models import TrendSource
from orchestrator import SchedulerState, WorkflowScheduler
from storage import BaseArticleStore
from webapp.runtime import get_orchestrator, get_store


logger = logging.getLogger(__name__)


class TopicPayload(BaseModel):
    topic: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("topic")
    @classmethod
    def _strip(cls, value: str) -> str:
        return str(value or "").strip()


class CategoryPayload(BaseModel):
    category: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("category")
    @classmethod
    def _strip(cls, value: str) -> str:
        return str(value or "").strip()


class StatusPayload(BaseModel):
    status: ArticleStatus


router = APIRouter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.scheduler_state is None:
        app.state.scheduler_state = SchedulerState()
    run_scheduler = app.state.run_scheduler
    if run_scheduler is None:
        run_scheduler = get_settings().scheduler.run_with_server

    scheduler = None
    if run_scheduler:
        scheduler = WorkflowScheduler(get_orchestrator(), app.state.scheduler_state)
        scheduler.start()
    app.state.scheduler = scheduler
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()
        app.state.scheduler = None
        await get_orchestrator().close()


def get_scheduler_state(request: Request) -> SchedulerState:
    """Single-flight flag owned by the app; shared with its scheduler."""
    state = request.app.state.scheduler_state
    if state is None:
        raise HTTPException(status_code=503, detail="Scheduler state not initialized")
    return state



def _build_config(payload: Optional[Dict[str, Any]]) -> WorkflowConfig:
    """Request values over the configured defaults; legacy keys accepted."""
    try:
        requested = WorkflowConfig.model_validate(payload or {})
    except ValidationError as exc:
        detail = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        raise HTTPException(status_code=422, detail=detail) from exc
    base = get_orchestrator().default_config()
    return base.model_copy(update={name: getattr(requested, name) for name in requested.model_fields_set})


def _run_response(result: WorkflowRunResult, **extra: Any) -> JSONResponse:
    payload = {**extra, **result.model_dump(by_alias=True, mode="json")}
    if result.success:
        return JSONResponse(status_code=201, content=payload)
    if result.errors:
        return JSONResponse(status_code=500, content=payload)
    return JSONResponse(status_code=409, content=payload)


async def _store() -> BaseArticleStore:
    store = get_store()
    await store.connect()
    return store


@router.get("/api/health")
def health(state: SchedulerState = Depends(get_scheduler_state)) -> Dict[str, Any]:
    return {
        "ok": True,
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "workflowRunning": state.is_running,
    }


@router.post("/api/workflow")
async def run_workflow(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    state: SchedulerState = Depends(get_scheduler_state),
) -> JSONResponse:
    config = _build_config(payload)
    async with state.try_acquire() as acquired:
        if not acquired:
            return JSONResponse(status_code=409, content={"error": "Workflow already running"})
        result = await get_orchestrator().execute(config)
    return JSONResponse(status_code=200, content=result.model_dump(by_alias=True, mode="json"))


@router.get("/api/workflow")
async def workflow_stats() -> Dict[str, Any]:
    stats = await get_orchestrator().get_stats()
    return stats.model_dump(by_alias=True, mode="json")


@router.get("/api/trending")
async def trending(
    limit: int = Query(default=10, ge=1, le=50),
    region: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    regions = [part for part in (region or "").split(",") if part.strip()] or None
    topics = await get_orchestrator().trending(regions, limit)
    return {
        "topics": [topic.model_dump(mode="json") for topic in topics],
        "count": len(topics),
    }


@router.post("/api/trending")
async def generate_for_topic(payload: TopicPayload) -> JSONResponse:
    if not payload.topic:
        raise HTTPException(status_code=400, detail="Topic is required")
    config = _build_config(payload.config)
    result = await get_orchestrator().generate_for_topic(payload.topic, config)
    return _run_response(result, topic=payload.topic)


@router.post("/api/articles/category")
async def generate_for_category(payload: CategoryPayload) -> JSONResponse:
    if not payload.category:
        raise HTTPException(status_code=400, detail="Category is required")
    config = _build_config(payload.config)
    result = await get_orchestrator().generate_for_category(payload.category, config)
    return _run_response(result, category=payload.category)


@router.get("/api/articles/random")
def suggest_random_topic() -> Dict[str, Any]:
    return {"topic": get_orchestrator().suggest_random_topic()}


@router.post("/api/articles/random")
async def generate_random(payload: Optional[Dict[str, Any]] = Body(default=None)) -> JSONResponse:
    config = _build_config(payload)
    orchestrator = get_orchestrator()
    topic = orchestrator.suggest_random_topic()
    result = await orchestrator.generate_for_topic(topic, config, source=TrendSource.CATALOG)
    return _run_response(result, topic=topic)


@router.get("/api/articles")
async def list_articles(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    q: Optional[str] = Query(default=None),
    tag: Optional[str] = Query(default=None),
    status: ArticleStatus = Query(default=ArticleStatus.PUBLISHED),
) -> Dict[str, Any]:
    store = await _store()
    listing = await store.list_articles(
        page=page,
        page_size=limit,
        filter=ArticleFilter(status=status, tag=tag or None, search=(q or "").strip() or None),
    )
    return listing.to_payload()


@router.get("/api/articles/{slug}")
async def get_article(slug: str) -> Dict[str, Any]:
    store = await _store()
    article = await store.find_by_slug(slug)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article.model_dump(mode="json")


@router.post("/api/articles/{slug}/view")
async def record_view(slug: str) -> Dict[str, Any]:
    store = await _store()
    views = await store.increment_view_count(slug)
    if views is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return {"slug": slug, "views": views}


@router.post("/api/articles/{slug}/like")
async def record_like(slug: str) -> Dict[str, Any]:
    store = await _store()
    likes = await store.increment_like_count(slug)
    if likes is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return {"slug": slug, "likes": likes}


@router.patch("/api/articles/{slug}/status")
async def update_status(slug: str, payload: StatusPayload) -> Dict[str, Any]:
    store = await _store()
    article = await store.update_status(slug, payload.status)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article.model_dump(mode="json")


def create_app(
    scheduler_state: Optional[SchedulerState] = None,
    run_scheduler: Optional[bool] = None,
) -> FastAPI:
    """
    Build the API.

    ``scheduler_state`` is the entry point's single-flight flag; when omitted
    the lifespan creates one. ``run_scheduler`` overrides
    ``SCHEDULER_RUN_WITH_SERVER``.
    """
    application = FastAPI(title="TrendWise Content Workflow API", version="1.0", lifespan=lifespan)
    application.state.scheduler_state = scheduler_state
    application.state.run_scheduler = run_scheduler
    application.state.scheduler = None
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(router)
    return application


app = create_app()
