"""
Base LLM
Provider-neutral interface for the generative model.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import asyncio
import logging

from utils.exceptions import LLMError


logger = logging.getLogger(__name__)


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"


@dataclass
class Message:
    """A chat message"""
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)


@dataclass
class LLMResponse:
    content: str
    model: str
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: Optional[str] = None


class BaseLLM(ABC):
    """
    LLM base class.

    Providers implement ``acomplete``; callers in this project use
    ``generate``, which adds the per-call timeout and maps every provider
    failure to ``LLMError``.
    """

    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 3000,
        timeout: float = 120.0,
        **kwargs,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.extra_config = kwargs

    @property
    @abstractmethod
    def provider(self) -> str:
        pass

    @abstractmethod
    async def acomplete(self, messages: List[Message], **kwargs) -> LLMResponse:
        """
        Run one completion.

        Args:
            messages: conversation, optionally starting with a system message
            **kwargs: per-call ``temperature`` / ``max_tokens`` overrides
        """
        pass

    async def generate(
        self,
        prompt: str,
        max_output_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        """
        Single-prompt completion returning the text.

        Raises:
            LLMError: provider error or timeout
        """
        messages: List[Message] = []
        if system_prompt:
            messages.append(Message.system(system_prompt))
        messages.append(Message.user(prompt))

        try:
            response = await asyncio.wait_for(
                self.acomplete(
                    messages,
                    max_tokens=max_output_tokens or self.max_tokens,
                    temperature=self.temperature if temperature is None else temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise LLMError(f"{self.provider} call timed out after {self.timeout}s", provider=self.provider) from e
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(f"{self.provider} call failed: {e}", provider=self.provider) from e

        return response.content or ""

    async def aclose(self) -> None:
        """Release underlying client resources (no-op by default)."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, provider={self.provider})"
