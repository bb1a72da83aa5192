"""Read-only statistics over published articles."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from core import ArticleFilter, ArticleStatus, RecentArticle, WorkflowStats, utcnow
from storage import BaseArticleStore


TOP_TAGS = 10
RECENT_LIMIT = 10
WEEK = timedelta(days=7)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


async def compute_stats(store: BaseArticleStore, *, now: Optional[datetime] = None) -> WorkflowStats:
    now = now or utcnow()
    published = await store.list_all(ArticleFilter(status=ArticleStatus.PUBLISHED))
    week_start = now - WEEK

    this_week = sum(
        1 for article in published
        if article.published_at is not None and _as_utc(article.published_at) >= week_start
    )

    # count case-insensitively, report the first spelling seen
    counts: Counter = Counter()
    display: Dict[str, str] = {}
    for article in published:
        for tag in article.tags:
            key = tag.casefold()
            display.setdefault(key, tag)
            counts[key] += 1

    return WorkflowStats(
        total_articles=len(published),
        articles_this_week=this_week,
        popular_tags=[display[key] for key, _ in counts.most_common(TOP_TAGS)],
        recent_articles=[
            RecentArticle(
                title=article.title,
                slug=article.slug,
                published_at=article.published_at,
                view_count=article.view_count,
            )
            for article in published[:RECENT_LIMIT]
        ],
    )
