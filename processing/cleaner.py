"""Text normalization helpers: slugs, keyword keys, HTML stripping, word counts."""

from __future__ import annotations

import hashlib
import html as html_lib
import re
import unicodedata


_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*>.*?</\1>", flags=re.IGNORECASE | re.DOTALL)
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
_WORD_RE = re.compile(r"\S+")

SLUG_MAX_LEN = 96


def normalize_keyword(keyword: str) -> str:
    """Uniqueness key for a topic: lowercased, trimmed, whitespace collapsed."""
    return _WHITESPACE_RE.sub(" ", str(keyword or "")).strip().lower()


def slugify(value: str, max_len: int = SLUG_MAX_LEN) -> str:
    """
    URL-safe slug: ASCII-folded, lowercased, runs of non-alphanumerics
    collapsed to a single hyphen, no leading/trailing hyphen.

    Lossy by construction; "AI: Code-Gen" and "AI Code Gen" share a slug.
    """
    text = unicodedata.normalize("NFKD", str(value or ""))
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_SLUG_RE.sub("-", text).strip("-")
    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")
    return slug


def fallback_slug(seed: str) -> str:
    """Deterministic slug for inputs that slugify to nothing (e.g. non-Latin topics)."""
    digest = hashlib.sha1(str(seed or "").encode("utf-8")).hexdigest()[:10]
    return f"article-{digest}"


def strip_html(value: str) -> str:
    text = _SCRIPT_STYLE_RE.sub(" ", str(value or ""))
    text = _HTML_TAG_RE.sub(" ", text)
    text = html_lib.unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(value: str) -> int:
    """Word count of the visible text of an HTML fragment."""
    return len(_WORD_RE.findall(strip_html(value)))


def truncate(value: str, max_len: int) -> str:
    text = _WHITESPACE_RE.sub(" ", str(value or "")).strip()
    if len(text) <= max_len:
        return text
    return text[: max(0, max_len - 3)].rstrip() + "..."
