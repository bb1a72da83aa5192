"""CLI entrypoint for workflow runs, the scheduler and the HTTP server."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Dict

from core import WorkflowConfig
from models import TrendSource
from orchestrator import SchedulerState, WorkflowOrchestrator, WorkflowScheduler
from storage import InMemoryArticleStore
from utils import configure_logging
from webapp.runtime import get_store


logger = logging.getLogger(__name__)


def _print(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--max-topics", type=int, default=None, help="Topics per run")
    parser.add_argument("--word-count", type=int, default=None, help="Target body length")
    parser.add_argument("--regions", default=None, help="Comma-separated region codes, e.g. US,GB")
    parser.add_argument("--no-images", action="store_true")
    parser.add_argument("--no-tweets", action="store_true")
    parser.add_argument("--no-videos", action="store_true")
    parser.add_argument("--draft", action="store_true", help="Save as draft instead of publishing")
    parser.add_argument("--dry-run", action="store_true", help="Use an in-memory store; nothing is persisted")


def _config_from_args(orchestrator: WorkflowOrchestrator, args: argparse.Namespace) -> WorkflowConfig:
    overrides: Dict[str, Any] = {}
    if args.max_topics is not None:
        overrides["max_topics_per_run"] = args.max_topics
    if args.word_count is not None:
        overrides["target_word_count"] = args.word_count
    if args.regions:
        overrides["regions"] = args.regions
    if args.no_images:
        overrides["include_images"] = False
    if args.no_tweets:
        overrides["include_tweets"] = False
    if args.no_videos:
        overrides["include_videos"] = False
    if args.draft:
        overrides["auto_publish"] = False
    base = orchestrator.default_config().model_dump()
    return WorkflowConfig.model_validate({**base, **overrides})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TrendWise content workflow CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", default=None, help="Also log to logs/<name>")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Aggregate trending topics and generate articles")
    _add_config_flags(run)

    stats = sub.add_parser("stats", help="Published-article statistics")
    stats.add_argument("--dry-run", action="store_true")

    topic = sub.add_parser("topic", help="Generate an article for one topic")
    topic.add_argument("--keyword", required=True)
    _add_config_flags(topic)

    category = sub.add_parser("category", help="Generate an article for a catalog category")
    category.add_argument("--name", required=True)
    _add_config_flags(category)

    rand = sub.add_parser("random", help="Generate an article for a random catalog topic")
    _add_config_flags(rand)

    trending = sub.add_parser("trending", help="Show aggregated trending topics")
    trending.add_argument("--limit", type=int, default=10)
    trending.add_argument("--region", default=None, help="Comma-separated region codes")

    schedule = sub.add_parser("schedule", help="Run the scheduler until interrupted")
    schedule.add_argument("--run-now", action="store_true", help="Trigger one content run at startup")

    serve = sub.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--with-scheduler", action="store_true")
    return parser


def _build_orchestrator(dry_run: bool = False) -> WorkflowOrchestrator:
    store = InMemoryArticleStore() if dry_run else get_store()
    return WorkflowOrchestrator(store=store)


async def _run_schedule(args: argparse.Namespace) -> None:
    orchestrator = _build_orchestrator()
    scheduler = WorkflowScheduler(orchestrator, SchedulerState())
    scheduler.start()
    try:
        if args.run_now:
            await scheduler.run_content_once()
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()
        await orchestrator.close()


async def _dispatch(args: argparse.Namespace) -> int:
    orchestrator = _build_orchestrator(getattr(args, "dry_run", False))
    try:
        if args.command == "stats":
            stats = await orchestrator.get_stats()
            _print(stats.model_dump(by_alias=True, mode="json"))
            return 0

        if args.command == "trending":
            regions = [part for part in (args.region or "").split(",") if part.strip()] or None
            topics = await orchestrator.trending(regions, args.limit)
            _print([item.model_dump(mode="json") for item in topics])
            return 0

        config = _config_from_args(orchestrator, args)
        if args.command == "run":
            result = await orchestrator.execute(config)
        elif args.command == "topic":
            result = await orchestrator.generate_for_topic(args.keyword, config)
        elif args.command == "category":
            result = await orchestrator.generate_for_category(args.name, config)
        else:
            keyword = orchestrator.suggest_random_topic()
            result = await orchestrator.generate_for_topic(keyword, config, source=TrendSource.CATALOG)

        _print(result.model_dump(by_alias=True, mode="json"))
        return 0 if result.success or not result.errors else 1
    finally:
        await orchestrator.close()


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    if args.command == "serve":
        import uvicorn

        from webapp.app import create_app

        # one flag for the HTTP trigger and the in-process scheduler
        app = create_app(SchedulerState(), run_scheduler=True if args.with_scheduler else None)
        uvicorn.run(app, host=args.host, port=args.port)
        return

    if args.command == "schedule":
        try:
            asyncio.run(_run_schedule(args))
        except KeyboardInterrupt:
            logger.info("Scheduler interrupted")
        return

    raise SystemExit(asyncio.run(_dispatch(args)))


if __name__ == "__main__":
    main()
