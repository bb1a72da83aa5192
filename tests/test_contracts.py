from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from config.settings import LLMSettings
from core import ArticleStatus, WorkflowConfig, WorkflowRunResult
from intelligence.llm import AnthropicLLM, GeminiLLM, Message, MessageRole, OpenAILLM, factory
from tests.conftest import FakeLLM, make_article
from utils.exceptions import ConfigurationError, LLMError


def test_workflow_config_accepts_aliases_and_legacy_keys() -> None:
    config = WorkflowConfig.model_validate(
        {"maxTopics": 2, "wordCount": 900, "includeVideos": False, "autoPublish": False, "regions": "us, gb"}
    )

    assert config.max_topics_per_run == 2
    assert config.target_word_count == 900
    assert config.include_videos is False
    assert config.auto_publish is False
    assert config.regions == ["US", "GB"]


def test_workflow_config_defaults_and_bounds() -> None:
    config = WorkflowConfig()
    assert config.max_topics_per_run == 3
    assert config.regions == ["US"]

    with pytest.raises(ValidationError):
        WorkflowConfig(max_topics_per_run=0)
    with pytest.raises(ValidationError):
        WorkflowConfig(target_word_count=10)


def test_run_result_serializes_with_camel_case() -> None:
    result = WorkflowRunResult()
    result.skip("Quantum Computing")
    payload = result.finalize().model_dump(by_alias=True)

    assert payload["success"] is False
    assert payload["articlesGenerated"] == 0
    assert payload["skippedTopics"] == ["Quantum Computing"]
    assert payload["generatedArticles"] == []


def test_with_status_tracks_published_at() -> None:
    ts = datetime(2025, 5, 1, tzinfo=timezone.utc)
    draft = make_article("x", status=ArticleStatus.DRAFT)

    published = draft.with_status(ArticleStatus.PUBLISHED, now=ts)
    republished = published.with_status(ArticleStatus.PUBLISHED, now=datetime(2026, 1, 1, tzinfo=timezone.utc))
    archived = published.with_status(ArticleStatus.ARCHIVED, now=ts)
    back_to_draft = published.with_status(ArticleStatus.DRAFT, now=ts)

    assert published.published_at == ts
    assert republished.published_at == ts
    assert archived.published_at is None
    assert back_to_draft.published_at is None
    assert draft.status == ArticleStatus.DRAFT


def test_blank_slug_is_rejected() -> None:
    with pytest.raises(ValidationError):
        make_article("   ")


def test_llm_factory_builds_configured_provider(monkeypatch) -> None:
    monkeypatch.setattr(
        factory,
        "get_llm_settings",
        lambda: LLMSettings(provider="openai", openai_api_key="sk-test", temperature=0.2, timeout=30),
    )

    llm = factory.get_llm()

    assert isinstance(llm, OpenAILLM)
    assert llm.model == factory.DEFAULT_MODELS["openai"]
    assert llm.temperature == 0.2
    assert llm.timeout == 30


def test_llm_factory_rejects_unknown_provider(monkeypatch) -> None:
    monkeypatch.setattr(factory, "get_llm_settings", lambda: LLMSettings(provider="openai"))

    with pytest.raises(ConfigurationError):
        factory.get_llm(provider="mystery")


@pytest.mark.asyncio
async def test_llm_generate_maps_timeouts_to_llm_error() -> None:
    class _SlowLLM(FakeLLM):
        async def acomplete(self, messages, **kwargs):
            await asyncio.sleep(1)
            return await super().acomplete(messages, **kwargs)

    llm = _SlowLLM(timeout=0.05)

    with pytest.raises(LLMError) as excinfo:
        await llm.generate("hello")

    assert excinfo.value.provider == "fake"


def test_provider_message_conversion_splits_system_prompt() -> None:
    messages = [Message.system("Be terse."), Message.user("Write about edge computing.")]

    assert [role.value for role in MessageRole] == ["system", "user"]
    assert AnthropicLLM._convert_messages(messages) == (
        "Be terse.",
        [{"role": "user", "content": "Write about edge computing."}],
    )
    assert GeminiLLM._convert_messages(messages) == ("Be terse.", [], "Write about edge computing.")
