"""
Content Synthesizer
Turn a topic and its media bundle into a structured, unsaved article.
"""
from typing import Optional
import logging
import re

from config import get_settings
from config.settings import Settings
from core import (
    ArticleStatus,
    GeneratedArticle,
    OpenGraphFields,
    Provenance,
    SearchMetaFields,
)
from models import MediaBundle
from processing import fallback_slug, slugify
from utils.exceptions import GenerationFailure

from .llm import BaseLLM, get_llm
from .media_embed import find_unresolved, resolve_placeholders
from .metadata import (
    MetadataResult,
    UnparseableMetadata,
    parse_metadata_response,
    resolve_metadata,
)
from .prompts import (
    CONTENT_SYSTEM_PROMPT,
    META_SYSTEM_PROMPT,
    build_content_prompt,
    build_meta_prompt,
)
from .tagging import estimate_read_minutes, generate_tags


logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*\n(?P<body>[\s\S]*?)\n?```\s*$")


def strip_code_fence(text: str) -> str:
    match = _CODE_FENCE_RE.match(text or "")
    return match.group("body") if match else (text or "")


class ContentSynthesizer:
    """
    Two model calls per article: a body call and a metadata call.

    The body call is mandatory; any failure there raises GenerationFailure.
    The metadata call is best effort and falls back to values derived from
    the topic.
    """

    def __init__(self, llm: Optional[BaseLLM] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._llm = llm

    @property
    def llm(self) -> BaseLLM:
        if self._llm is None:
            self._llm = get_llm()
        return self._llm

    @property
    def generation_method(self) -> str:
        llm = self.llm
        return f"{llm.provider}:{llm.model}"

    async def _generate_body(self, topic: str, bundle: MediaBundle, target_word_count: int) -> str:
        llm_settings = self.settings.llm
        try:
            body = await self.llm.generate(
                build_content_prompt(topic, bundle, target_word_count),
                max_output_tokens=llm_settings.max_tokens,
                temperature=llm_settings.temperature,
                system_prompt=CONTENT_SYSTEM_PROMPT,
            )
        except Exception as e:
            raise GenerationFailure(f"Body generation failed: {e}", topic=topic) from e

        body = strip_code_fence(body).strip()
        if not body:
            raise GenerationFailure("Body generation returned empty text", topic=topic)
        return body

    async def _generate_metadata(self, topic: str, body: str) -> MetadataResult:
        llm_settings = self.settings.llm
        try:
            raw = await self.llm.generate(
                build_meta_prompt(topic, body),
                max_output_tokens=llm_settings.meta_max_tokens,
                temperature=llm_settings.meta_temperature,
                system_prompt=META_SYSTEM_PROMPT,
            )
        except Exception as e:
            logger.warning(f"Metadata generation failed for '{topic}': {e}")
            return UnparseableMetadata(raw="", reason=f"model call failed: {e}")
        return parse_metadata_response(raw)

    async def synthesize(
        self,
        topic: str,
        bundle: MediaBundle,
        target_word_count: Optional[int] = None,
        slug: Optional[str] = None,
    ) -> GeneratedArticle:
        """
        Build an unsaved draft article.

        Args:
            topic: topic keyword
            bundle: collected media, consumed once
            target_word_count: minimum body length requested from the model
            slug: pinned slug; when given it overrides the model's proposal

        Raises:
            GenerationFailure: body missing, or a resolvable placeholder left behind
        """
        workflow = self.settings.workflow
        words = int(target_word_count or workflow.target_word_count)
        logger.info(f"Generating article for topic '{topic}' ({words} words, media={bundle.summary()})")

        body = await self._generate_body(topic, bundle, words)
        meta = resolve_metadata(await self._generate_metadata(topic, body), topic)

        final_slug = slugify(slug or "") or meta.slug or slugify(topic) or fallback_slug(topic)

        featured_image = bundle.images[0].url if bundle.images else workflow.default_featured_image
        embed = resolve_placeholders(body, bundle, featured_image=featured_image)
        leftovers = find_unresolved(embed.content, bundle)
        if leftovers:
            raise GenerationFailure(f"Unresolved media placeholders: {leftovers}", topic=topic)

        site_url = workflow.site_url.rstrip("/")
        return GeneratedArticle(
            title=meta.title,
            slug=final_slug,
            meta_description=meta.meta_description,
            excerpt=meta.excerpt,
            content=embed.content,
            tags=generate_tags(topic, body),
            estimated_read_minutes=estimate_read_minutes(embed.content),
            open_graph=OpenGraphFields(
                title=meta.title,
                description=meta.meta_description,
                image=featured_image,
                url=f"{site_url}/article/{final_slug}",
            ),
            search_meta=SearchMetaFields(
                title=meta.title,
                description=meta.meta_description,
                keywords=meta.keywords,
                author=workflow.author_name,
            ),
            embedded_media=embed.manifest,
            status=ArticleStatus.DRAFT,
            provenance=Provenance(origin_topic=topic, generation_method=self.generation_method),
        )

    async def aclose(self) -> None:
        if self._llm is not None:
            await self._llm.aclose()
