"""
Placeholder resolution: swap IMAGE/TWEET/VIDEO_PLACEHOLDER_n tokens for HTML
and record what was embedded.
"""
from dataclasses import dataclass, field
from typing import List, Tuple
import html
import logging
import re

from core import EmbeddedMediaManifest, EmbeddedPostRef, EmbeddedVideoRef, InlineImageRef
from models import ImageItem, MediaBundle, SocialPostItem, VideoItem


logger = logging.getLogger(__name__)

_KINDS = "IMAGE|TWEET|VIDEO"
PLACEHOLDER_RE = re.compile(
    rf"\[\s*(?P<bkind>{_KINDS})_PLACEHOLDER_(?P<bindex>\d+)\s*\]"
    rf"|(?P<kind>{_KINDS})_PLACEHOLDER_(?P<index>\d+)"
)
# Matches a token anywhere, including inside a bracketed one.
TOKEN_RE = re.compile(rf"(?P<kind>{_KINDS})_PLACEHOLDER_(?P<index>\d+)")


@dataclass
class EmbedResult:
    content: str
    manifest: EmbeddedMediaManifest
    anomalies: List[str] = field(default_factory=list)


def _esc(value: str) -> str:
    return html.escape(str(value or ""), quote=True)


def _token_parts(match: "re.Match[str]") -> Tuple[str, int]:
    kind = match.group("bkind") or match.group("kind")
    index = match.group("bindex") or match.group("index")
    return kind, int(index)


def video_embed_url(video: VideoItem) -> str:
    if "watch?v=" in video.url:
        return video.url.replace("watch?v=", "embed/")
    return f"https://www.youtube.com/embed/{video.id}"


def render_image(image: ImageItem) -> str:
    caption = image.alt_text
    if image.attribution:
        caption = f"{caption} - {image.attribution}" if caption else image.attribution
    return (
        '<figure class="article-figure">'
        f'<img src="{_esc(image.url)}" alt="{_esc(image.alt_text)}" loading="lazy" />'
        f"<figcaption>{_esc(caption)}</figcaption>"
        "</figure>"
    )


def render_post(post: SocialPostItem) -> str:
    link = ""
    if post.permalink:
        link = f'<a href="{_esc(post.permalink)}" target="_blank" rel="noopener">View on Twitter</a>'
    return (
        '<blockquote class="twitter-tweet">'
        f"<p>{_esc(post.text)}</p>"
        f"<cite>&mdash; {_esc(post.author_name)}</cite>"
        f"{link}"
        "</blockquote>"
    )


def render_video(video: VideoItem) -> str:
    return (
        '<div class="video-embed">'
        '<div class="video-embed__frame" style="position:relative;padding-bottom:56.25%;height:0;">'
        f'<iframe src="{_esc(video_embed_url(video))}" title="{_esc(video.title)}" '
        'style="position:absolute;top:0;left:0;width:100%;height:100%;" '
        'frameborder="0" allowfullscreen></iframe>'
        "</div>"
        f"<p>{_esc(video.title)}</p>"
        "</div>"
    )


def resolve_placeholders(content: str, bundle: MediaBundle, featured_image: str = "") -> EmbedResult:
    """
    Replace every in-range token with its rendered item.

    Out-of-range tokens stay in the text verbatim and are reported in
    ``anomalies``. Each item appears in the manifest once, at its 1-based
    placeholder index, however many times its token occurs.
    """
    manifest = EmbeddedMediaManifest(featured_image=featured_image)
    anomalies: List[str] = []
    embedded = set()

    def _replace(match: "re.Match[str]") -> str:
        kind, index = _token_parts(match)
        pos = index - 1
        first = (kind, index) not in embedded

        if kind == "IMAGE" and 0 <= pos < len(bundle.images):
            image = bundle.images[pos]
            if first:
                manifest.inline_images.append(
                    InlineImageRef(
                        url=image.url,
                        alt=image.alt_text,
                        caption=image.attribution or "",
                        position=index,
                    )
                )
            embedded.add((kind, index))
            return render_image(image)

        if kind == "TWEET" and 0 <= pos < len(bundle.social_posts):
            post = bundle.social_posts[pos]
            if first:
                manifest.embedded_posts.append(
                    EmbeddedPostRef(id=post.id, permalink=post.permalink, position=index)
                )
            embedded.add((kind, index))
            return render_post(post)

        if kind == "VIDEO" and 0 <= pos < len(bundle.videos):
            video = bundle.videos[pos]
            if first:
                manifest.embedded_videos.append(
                    EmbeddedVideoRef(url=video.url, title=video.title, position=index)
                )
            embedded.add((kind, index))
            return render_video(video)

        anomalies.append(match.group(0))
        return match.group(0)

    resolved = PLACEHOLDER_RE.sub(_replace, content or "")
    if anomalies:
        logger.warning(f"Left {len(anomalies)} placeholder(s) with no matching media: {anomalies}")
    return EmbedResult(content=resolved, manifest=manifest, anomalies=anomalies)


def find_unresolved(content: str, bundle: MediaBundle) -> List[str]:
    """Tokens still present whose index is within the bundle's list sizes."""
    sizes = {
        "IMAGE": len(bundle.images),
        "TWEET": len(bundle.social_posts),
        "VIDEO": len(bundle.videos),
    }
    leftovers = []
    for match in TOKEN_RE.finditer(content or ""):
        kind, index = match.group("kind"), int(match.group("index"))
        if 1 <= index <= sizes[kind]:
            leftovers.append(match.group(0))
    return leftovers
