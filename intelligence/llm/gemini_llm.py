"""
Google Gemini LLM
"""
from typing import List, Optional, Tuple
import logging

from .base import BaseLLM, LLMResponse, Message, MessageRole


logger = logging.getLogger(__name__)


class GeminiLLM(BaseLLM):
    """Gemini adapter via google-generativeai."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 3000,
        timeout: float = 120.0,
        **kwargs,
    ):
        super().__init__(model, temperature, max_tokens, timeout, **kwargs)
        self.api_key = api_key

    @property
    def provider(self) -> str:
        return "gemini"

    @staticmethod
    def _convert_messages(messages: List[Message]) -> Tuple[Optional[str], list, str]:
        """
        Returns:
            (system_instruction, history, last_user_message)
        """
        system_instruction = None
        history = []
        last_message = ""
        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_instruction = msg.content
            else:
                if last_message:
                    history.append({"role": "user", "parts": [last_message]})
                last_message = msg.content
        return system_instruction, history, last_message

    async def acomplete(self, messages: List[Message], **kwargs) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self.api_key)
        system_instruction, history, last_message = self._convert_messages(messages)

        model = genai.GenerativeModel(
            model_name=self.model,
            generation_config={
                "temperature": kwargs.get("temperature", self.temperature),
                "max_output_tokens": kwargs.get("max_tokens", self.max_tokens),
            },
            system_instruction=system_instruction,
        )
        chat = model.start_chat(history=history)
        response = await chat.send_message_async(last_message)

        usage = {}
        metadata = getattr(response, "usage_metadata", None)
        if metadata is not None:
            usage = {
                "prompt_tokens": getattr(metadata, "prompt_token_count", 0),
                "completion_tokens": getattr(metadata, "candidates_token_count", 0),
                "total_tokens": getattr(metadata, "total_token_count", 0),
            }

        finish_reason = None
        if response.candidates:
            finish_reason = str(response.candidates[0].finish_reason)

        return LLMResponse(
            content=response.text or "",
            model=self.model,
            usage=usage,
            finish_reason=finish_reason,
        )
