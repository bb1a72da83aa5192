"""
LLM Factory
Build the configured provider adapter.
"""
from typing import Optional
import logging

from config import get_llm_settings
from utils.exceptions import ConfigurationError

from .base import BaseLLM
from .openai_llm import OpenAILLM
from .anthropic_llm import AnthropicLLM
from .deepseek_llm import DeepSeekLLM
from .gemini_llm import GeminiLLM


logger = logging.getLogger(__name__)


DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-sonnet-20241022",
    "deepseek": "deepseek-chat",
    "gemini": "gemini-2.0-flash",
}

_PROVIDERS = {
    "openai": OpenAILLM,
    "anthropic": AnthropicLLM,
    "deepseek": DeepSeekLLM,
    "gemini": GeminiLLM,
}


def get_llm(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    **kwargs,
) -> BaseLLM:
    """
    Create an LLM from LLM_* settings, with explicit overrides.

    Example:
        llm = get_llm()
        llm = get_llm(provider="anthropic", temperature=0.5)
    """
    settings = get_llm_settings()

    provider = (provider or settings.provider or "openai").strip().lower()
    llm_cls = _PROVIDERS.get(provider)
    if llm_cls is None:
        raise ConfigurationError(f"Unsupported LLM provider: {provider}", {"provider": provider})

    model = model or settings.model_name or DEFAULT_MODELS[provider]
    api_keys = {
        "openai": settings.openai_api_key,
        "anthropic": settings.anthropic_api_key,
        "deepseek": settings.deepseek_api_key,
        "gemini": settings.gemini_api_key,
    }
    api_key = kwargs.pop("api_key", None) or api_keys.get(provider)
    if not api_key:
        logger.warning(f"No API key configured for LLM provider '{provider}'")

    kwargs.setdefault("temperature", settings.temperature)
    kwargs.setdefault("max_tokens", settings.max_tokens)
    kwargs.setdefault("timeout", settings.timeout)

    logger.info(f"Using LLM provider={provider} model={model}")
    return llm_cls(model=model, api_key=api_key, **kwargs)
