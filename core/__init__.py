"""Core contracts and shared types for the content workflow."""

from .contracts import (
    ArticleFilter,
    ArticleListing,
    ArticleStatus,
    EmbeddedMediaManifest,
    EmbeddedPostRef,
    EmbeddedVideoRef,
    GeneratedArticle,
    GeneratedArticleRef,
    InlineImageRef,
    OpenGraphFields,
    Provenance,
    RecentArticle,
    SearchMetaFields,
    WorkflowConfig,
    WorkflowPhase,
    WorkflowRunResult,
    WorkflowStats,
    utcnow,
)

__all__ = [
    "ArticleFilter",
    "ArticleListing",
    "ArticleStatus",
    "EmbeddedMediaManifest",
    "EmbeddedPostRef",
    "EmbeddedVideoRef",
    "GeneratedArticle",
    "GeneratedArticleRef",
    "InlineImageRef",
    "OpenGraphFields",
    "Provenance",
    "RecentArticle",
    "SearchMetaFields",
    "WorkflowConfig",
    "WorkflowPhase",
    "WorkflowRunResult",
    "WorkflowStats",
    "utcnow",
]
