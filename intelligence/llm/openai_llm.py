"""
OpenAI LLM
GPT-4o family via the official async SDK.
"""
from typing import List, Optional
import inspect
import logging

from .base import BaseLLM, LLMResponse, Message


logger = logging.getLogger(__name__)


async def close_client(client) -> None:
    close_fn = getattr(client, "close", None)
    if not callable(close_fn):
        return
    try:
        maybe_awaitable = close_fn()
        if inspect.isawaitable(maybe_awaitable):
            await maybe_awaitable
    except Exception as e:
        logger.debug(f"Client close failed: {e!r}")


class OpenAILLM(BaseLLM):
    """OpenAI chat-completions adapter (gpt-4o, gpt-4o-mini, ...)."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 3000,
        timeout: float = 120.0,
        **kwargs,
    ):
        super().__init__(model, temperature, max_tokens, timeout, **kwargs)
        self.api_key = api_key
        self.base_url = base_url
        self._async_client = None

    @property
    def provider(self) -> str:
        return "openai"

    def _get_async_client(self):
        if self._async_client is None:
            from openai import AsyncOpenAI
            self._async_client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._async_client

    async def acomplete(self, messages: List[Message], **kwargs) -> LLMResponse:
        client = self._get_async_client()
        response = await client.chat.completions.create(
            model=self.model,
            messages=[m.to_dict() for m in messages],
            temperature=kwargs.get("temperature", self.temperature),
            max_tokens=kwargs.get("max_tokens", self.max_tokens),
        )

        choice = response.choices[0]
        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            usage=usage,
            finish_reason=choice.finish_reason,
        )

    async def aclose(self) -> None:
        if self._async_client is not None:
            await close_client(self._async_client)
            self._async_client = None
