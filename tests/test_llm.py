"""Tests for pipeline/llm.py: provider dispatch and completion error mapping."""

import asyncio
from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from book_rag.core.config import ModelConfig
from book_rag.core.exceptions import ConfigurationError, ServiceError
from book_rag.pipeline.llm import OLLAMA_DEFAULT_BASE_URL, OpenAIChatModel, get_chat_model


class _FakeCompletions:
    def __init__(self, outcome):
        self._outcome = outcome
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome


def _client(outcome) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=_FakeCompletions(outcome)))


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestGetChatModel:
    def test_openai(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "test-key")
        model = get_chat_model(ModelConfig(provider="openai", timeout_s=12))
        assert isinstance(model, OpenAIChatModel)
        assert model._client.max_retries == 0

    def test_ollama_uses_local_endpoint(self) -> None:
        model = get_chat_model(ModelConfig(provider="Ollama", model="llama3.1"))
        assert str(model._client.base_url).rstrip("/") == OLLAMA_DEFAULT_BASE_URL

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported model provider"):
            get_chat_model(ModelConfig(provider="carrier-pigeon"))

    def test_missing_credentials_are_a_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="Cannot create openai client"):
            get_chat_model(ModelConfig(provider="openai"))


class TestOpenAIChatModel:
    def test_returns_message_content(self) -> None:
        client = _client(_completion("Score: 5"))
        model = OpenAIChatModel(ModelConfig(model="judge-model", temperature=0.2), client)

        assert asyncio.run(model.complete("Rate this")) == "Score: 5"
        call = client.chat.completions.calls[0]
        assert call["model"] == "judge-model"
        assert call["temperature"] == 0.2
        assert call["messages"] == [{"role": "user", "content": "Rate this"}]

    def test_sdk_errors_become_service_errors(self) -> None:
        error = APIConnectionError(request=httpx.Request("POST", "http://llm.test"))
        model = OpenAIChatModel(ModelConfig(), _client(error))
        with pytest.raises(ServiceError):
            asyncio.run(model.complete("Rate this"))

    @pytest.mark.parametrize("content", [None, "", "   "])
    def test_empty_content_is_a_service_error(self, content: str | None) -> None:
        model = OpenAIChatModel(ModelConfig(), _client(_completion(content)))
        with pytest.raises(ServiceError, match="empty response"):
            asyncio.run(model.complete("Rate this"))

    def test_no_choices_is_a_service_error(self) -> None:
        model = OpenAIChatModel(ModelConfig(), _client(SimpleNamespace(choices=[])))
        with pytest.raises(ServiceError, match="no response"):
            asyncio.run(model.complete("Rate this"))

    def test_async_context_closes_the_client(self) -> None:
        closed: list[bool] = []

        async def close() -> None:
            closed.append(True)

        client = _client(_completion("Score: 5"))
        client.close = close

        async def scenario() -> str:
            async with OpenAIChatModel(ModelConfig(), client) as model:
                return await model.complete("Rate this")

        assert asyncio.run(scenario()) == "Score: 5"
        assert closed == [True]
