from __future__ import annotations

from intelligence.media_embed import find_unresolved, render_post, resolve_placeholders, video_embed_url
from models import ImageItem, MediaBundle, SocialPostItem, VideoItem


def _bundle() -> MediaBundle:
    return MediaBundle(
        images=[
            ImageItem(
                url="https://img.example.com/a.jpg",
                alt_text="Server racks",
                attribution="Photo by Ann on Unsplash",
            )
        ],
        social_posts=[
            SocialPostItem(
                id="111",
                text="Edge is <finally> here & fast",
                author_name="Dev Jane",
                permalink="https://twitter.com/devjane/status/111",
            )
        ],
        videos=[VideoItem(id="abc", title="Edge explained", url="https://www.youtube.com/watch?v=abc")],
    )


def test_bracketed_and_bare_tokens_are_replaced() -> None:
    content = "<p>Intro</p>[IMAGE_PLACEHOLDER_1]<p>More</p>TWEET_PLACEHOLDER_1<p>End</p>[ VIDEO_PLACEHOLDER_1 ]"

    result = resolve_placeholders(content, _bundle(), featured_image="https://img.example.com/a.jpg")

    assert "PLACEHOLDER" not in result.content
    assert '<img src="https://img.example.com/a.jpg" alt="Server racks"' in result.content
    assert "<figcaption>Server racks - Photo by Ann on Unsplash</figcaption>" in result.content
    assert 'class="twitter-tweet"' in result.content
    assert "https://www.youtube.com/embed/abc" in result.content
    assert result.anomalies == []


def test_manifest_records_each_item_once_at_its_position() -> None:
    content = "[IMAGE_PLACEHOLDER_1] text [IMAGE_PLACEHOLDER_1] [TWEET_PLACEHOLDER_1] [VIDEO_PLACEHOLDER_1]"

    result = resolve_placeholders(content, _bundle(), featured_image="https://img.example.com/a.jpg")

    manifest = result.manifest
    assert manifest.featured_image == "https://img.example.com/a.jpg"
    assert [(ref.url, ref.position) for ref in manifest.inline_images] == [("https://img.example.com/a.jpg", 1)]
    assert [(ref.id, ref.position) for ref in manifest.embedded_posts] == [("111", 1)]
    assert [(ref.url, ref.position) for ref in manifest.embedded_videos] == [
        ("https://www.youtube.com/watch?v=abc", 1)
    ]


def test_out_of_range_tokens_stay_literal() -> None:
    content = "[IMAGE_PLACEHOLDER_1] and [IMAGE_PLACEHOLDER_3] and [VIDEO_PLACEHOLDER_2]"

    result = resolve_placeholders(content, _bundle())

    assert "[IMAGE_PLACEHOLDER_3]" in result.content
    assert "[VIDEO_PLACEHOLDER_2]" in result.content
    assert result.anomalies == ["[IMAGE_PLACEHOLDER_3]", "[VIDEO_PLACEHOLDER_2]"]
    assert find_unresolved(result.content, _bundle()) == []


def test_find_unresolved_reports_in_range_tokens() -> None:
    assert find_unresolved("[TWEET_PLACEHOLDER_1] [TWEET_PLACEHOLDER_2]", _bundle()) == ["TWEET_PLACEHOLDER_1"]


def test_post_text_is_escaped() -> None:
    html = render_post(_bundle().social_posts[0])

    assert "Edge is &lt;finally&gt; here &amp; fast" in html
    assert "<cite>&mdash; Dev Jane</cite>" in html
    assert "View on Twitter" in html


def test_video_embed_url_without_watch_link() -> None:
    video = VideoItem(id="zzz", title="t", url="https://youtu.be/zzz")
    assert video_embed_url(video) == "https://www.youtube.com/embed/zzz"


def test_empty_bundle_leaves_content_untouched() -> None:
    result = resolve_placeholders("<p>No media here</p>", MediaBundle())
    assert result.content == "<p>No media here</p>"
    assert result.manifest.inline_images == []


def test_tokens_glued_to_word_characters_are_replaced() -> None:
    content = "<p>_IMAGE_PLACEHOLDER_1_</p><p>TWEET_PLACEHOLDER_1x</p><p>see VIDEO_PLACEHOLDER_1_hero</p>"

    result = resolve_placeholders(content, _bundle())

    assert "PLACEHOLDER" not in result.content
    assert len(result.manifest.inline_images) == 1
    assert len(result.manifest.embedded_posts) == 1
    assert len(result.manifest.embedded_videos) == 1
    assert result.content.startswith('<p>_<figure class="article-figure">')


def test_find_unresolved_sees_glued_tokens() -> None:
    assert find_unresolved("<p>_IMAGE_PLACEHOLDER_1_</p><p>IMAGE_PLACEHOLDER_1x</p>", _bundle()) == [
        "IMAGE_PLACEHOLDER_1",
        "IMAGE_PLACEHOLDER_1",
    ]
