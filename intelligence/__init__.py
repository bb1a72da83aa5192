"""
Intelligence Module
LLM abstraction + article synthesis + topic catalog
"""
from .llm import (
    BaseLLM,
    OpenAILLM,
    AnthropicLLM,
    DeepSeekLLM,
    GeminiLLM,
    get_llm,
)
from .metadata import (
    ArticleMetadata,
    ParsedMetadata,
    UnparseableMetadata,
    fallback_metadata,
    parse_metadata_response,
    resolve_metadata,
)
from .media_embed import EmbedResult, find_unresolved, resolve_placeholders
from .tagging import estimate_read_minutes, generate_tags
from .synthesizer import ContentSynthesizer
from .topic_catalog import (
    TopicCategory,
    random_topic,
    resolve_category,
    topic_for_category,
)

__all__ = [
    # LLM
    "BaseLLM",
    "OpenAILLM",
    "AnthropicLLM",
    "DeepSeekLLM",
    "GeminiLLM",
    "get_llm",
    # Metadata
    "ArticleMetadata",
    "ParsedMetadata",
    "UnparseableMetadata",
    "fallback_metadata",
    "parse_metadata_response",
    "resolve_metadata",
    # Media embedding
    "EmbedResult",
    "find_unresolved",
    "resolve_placeholders",
    # Tagging
    "estimate_read_minutes",
    "generate_tags",
    # Synthesis
    "ContentSynthesizer",
    # Catalog
    "TopicCategory",
    "random_topic",
    "resolve_category",
    "topic_for_category",
]
