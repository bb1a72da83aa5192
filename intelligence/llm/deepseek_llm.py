"""
DeepSeek LLM
OpenAI-compatible endpoint, reached through the openai SDK.
"""
from typing import Optional
import logging

from .openai_llm import OpenAILLM


logger = logging.getLogger(__name__)


class DeepSeekLLM(OpenAILLM):
    """
    DeepSeek adapter.

    Models: deepseek-chat (V3), deepseek-reasoner (R1).
    """

    DEFAULT_BASE_URL = "https://api.deepseek.com"

    def __init__(
        self,
        model: str = "deepseek-chat",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(
            model=model,
            api_key=api_key,
            base_url=base_url or self.DEFAULT_BASE_URL,
            **kwargs,
        )

    @property
    def provider(self) -> str:
        return "deepseek"
