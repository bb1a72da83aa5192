"""
Processing Module
Text helpers shared by the synthesizer, dedup gate and stores
"""
from .cleaner import (
    count_words,
    fallback_slug,
    normalize_keyword,
    slugify,
    strip_html,
    truncate,
)

__all__ = [
    "count_words",
    "fallback_slug",
    "normalize_keyword",
    "slugify",
    "strip_html",
    "truncate",
]
