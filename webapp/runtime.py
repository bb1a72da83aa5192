"""Shared runtime singletons for the web and CLI entrypoints."""

from __future__ import annotations

from typing import Optional

from orchestrator import WorkflowOrchestrator
from storage import BaseArticleStore, get_article_store


_STORE: Optional[BaseArticleStore] = None
_ORCHESTRATOR: Optional[WorkflowOrchestrator] = None


def get_store() -> BaseArticleStore:
    global _STORE
    if _STORE is None:
        _STORE = get_article_store()
    return _STORE


def get_orchestrator() -> WorkflowOrchestrator:
    global _ORCHESTRATOR
    if _ORCHESTRATOR is None:
        _ORCHESTRATOR = WorkflowOrchestrator(store=get_store())
    return _ORCHESTRATOR
