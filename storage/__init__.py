"""
Storage Module
Article persistence gateway
"""
from .article_store import (
    BaseArticleStore,
    InMemoryArticleStore,
    SqliteArticleStore,
    get_article_store,
)

__all__ = [
    "BaseArticleStore",
    "InMemoryArticleStore",
    "SqliteArticleStore",
    "get_article_store",
]
