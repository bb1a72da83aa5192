"""Deduplication gate: one persisted article per topic slug."""

from __future__ import annotations

import logging

from processing import fallback_slug, normalize_keyword, slugify
from storage import BaseArticleStore


logger = logging.getLogger(__name__)


class DedupGate:
    """
    Checks the store for an article under the topic's slug.

    Slugification is lossy, so distinct keywords that share a slug count as
    the same topic.
    """

    def __init__(self, store: BaseArticleStore) -> None:
        self.store = store

    @staticmethod
    def slug_for(keyword: str) -> str:
        return slugify(keyword) or fallback_slug(normalize_keyword(keyword))

    async def exists(self, keyword: str) -> bool:
        slug = self.slug_for(keyword)
        found = await self.store.find_by_slug(slug) is not None
        if found:
            logger.info(f"Duplicate topic '{keyword}' (slug={slug}), skipping")
        return found
