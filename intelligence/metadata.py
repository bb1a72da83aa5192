"""
Article metadata: parsing model output and the deterministic fallback.

``parse_metadata_response`` returns either ``ParsedMetadata`` or
``UnparseableMetadata``; ``resolve_metadata`` turns either into a complete
``ArticleMetadata`` and never raises.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import json
import logging
import re

from processing import slugify


logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ArticleMetadata:
    title: str
    meta_description: str
    keywords: str
    slug: str
    excerpt: str


@dataclass(frozen=True)
class ParsedMetadata:
    """Fields the model supplied; missing ones are None."""
    title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: Optional[str] = None
    slug: Optional[str] = None
    excerpt: Optional[str] = None


@dataclass(frozen=True)
class UnparseableMetadata:
    raw: str
    reason: str


MetadataResult = Union[ParsedMetadata, UnparseableMetadata]


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(item).strip() for item in value if str(item).strip())
    text = re.sub(r"\s+", " ", str(value)).strip()
    return text or None


def parse_metadata_response(text: str) -> MetadataResult:
    raw = str(text or "")
    match = _JSON_OBJECT_RE.search(raw)
    if not match:
        return UnparseableMetadata(raw=raw, reason="no JSON object found")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        return UnparseableMetadata(raw=raw, reason=f"invalid JSON: {e.msg}")
    if not isinstance(payload, dict):
        return UnparseableMetadata(raw=raw, reason="JSON root is not an object")

    data: Dict[str, Any] = {str(k).strip(): v for k, v in payload.items()}
    parsed = ParsedMetadata(
        title=_clean_text(data.get("title")),
        meta_description=_clean_text(data.get("metaDescription", data.get("meta_description"))),
        keywords=_clean_text(data.get("keywords")),
        slug=_clean_text(data.get("slug")),
        excerpt=_clean_text(data.get("excerpt")),
    )
    if not any(vars(parsed).values()):
        return UnparseableMetadata(raw=raw, reason="no recognised metadata keys")
    return parsed


def fallback_metadata(topic: str) -> ArticleMetadata:
    topic = _clean_text(topic) or "this topic"
    return ArticleMetadata(
        title=f"Understanding {topic}: A Comprehensive Guide",
        meta_description=f"Explore the latest insights and trends in {topic}.",
        keywords=f"{topic}, trends, analysis, insights",
        slug=slugify(topic),
        excerpt=f"Discover key insights and analysis about {topic}.",
    )


def resolve_metadata(result: MetadataResult, topic: str) -> ArticleMetadata:
    """Complete metadata; absent or unparseable fields come from the fallback."""
    fallback = fallback_metadata(topic)
    if isinstance(result, UnparseableMetadata):
        logger.warning(f"Metadata for '{topic}' unparseable ({result.reason}); using fallback")
        return fallback

    slug = slugify(result.slug or "") or fallback.slug
    return ArticleMetadata(
        title=result.title or fallback.title,
        meta_description=result.meta_description or fallback.meta_description,
        keywords=result.keywords or fallback.keywords,
        slug=slug,
        excerpt=result.excerpt or fallback.excerpt,
    )
