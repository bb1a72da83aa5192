"""
Prompt templates for article body and metadata generation.
"""
from typing import List

from models import MediaBundle


CONTENT_SYSTEM_PROMPT = (
    "You are an expert content writer specializing in SEO-optimized articles. "
    "Create engaging, informative and well-structured content. "
    "Always return HTML with semantic headings (h1, h2, h3); never wrap it in Markdown code fences."
)

META_SYSTEM_PROMPT = (
    "You are an SEO expert. Generate optimized metadata for maximum search visibility. "
    "Reply with a single JSON object and nothing else."
)

META_PREVIEW_CHARS = 500


def _marker_instruction(kind: str, label: str, count: int) -> str:
    if count <= 0:
        return f"Do not include any {kind}_PLACEHOLDER markers; there are no {label} available."
    if count == 1:
        return f"Include the marker [{kind}_PLACEHOLDER_1] once where the {label[:-1]} fits best."
    return (
        f"Include the markers [{kind}_PLACEHOLDER_1] through [{kind}_PLACEHOLDER_{count}], "
        f"each exactly once, where the {label} fit best."
    )


def build_content_prompt(topic: str, bundle: MediaBundle, target_word_count: int) -> str:
    related = "\n".join(
        f"- {article.title}: {article.excerpt}".rstrip(": ")
        for article in bundle.background_articles
    ) or "- (none)"
    social = "\n".join(
        f"- {post.text} (by {post.author_name})"
        for post in bundle.social_posts
    ) or "- (none)"

    requirements: List[str] = [
        "Start with an engaging <h1> title",
        "Use a proper heading hierarchy (<h2>, <h3>)",
        "Open with an introduction that hooks the reader",
        "Provide valuable, actionable insights",
        "Use bullet points and numbered lists where appropriate",
        "Finish with a strong conclusion",
        "Write in a conversational yet professional tone",
        "Optimize for search without keyword stuffing",
        _marker_instruction("IMAGE", "images", len(bundle.images)),
        _marker_instruction("TWEET", "tweets", len(bundle.social_posts)),
        _marker_instruction("VIDEO", "videos", len(bundle.videos)),
    ]
    numbered = "\n".join(f"{i}. {line}" for i, line in enumerate(requirements, start=1))

    return (
        f'Write a comprehensive, SEO-optimized article about "{topic}" '
        f"with at least {int(target_word_count)} words.\n\n"
        f"Context from related sources:\n{related}\n\n"
        f"Social media insights:\n{social}\n\n"
        f"Requirements:\n{numbered}\n\n"
        "Return only the article HTML."
    )


def build_meta_prompt(topic: str, content: str) -> str:
    preview = (content or "")[:META_PREVIEW_CHARS]
    return (
        f'Based on this article about "{topic}", generate SEO metadata.\n\n'
        f"Article content preview: {preview}...\n\n"
        "Generate:\n"
        "1. SEO-optimized title (50-60 characters)\n"
        "2. Meta description (150-160 characters)\n"
        "3. Keywords (comma-separated, 5-10 relevant keywords)\n"
        "4. URL slug (lowercase, hyphen-separated)\n"
        "5. Excerpt (2-3 sentences summarizing the article)\n\n"
        "Format as JSON with keys: title, metaDescription, keywords, slug, excerpt"
    )
