"""Chat-completion models used by the judge and the dataset generator.

This module provides:
- ChatModel: the protocol every chat-completion backend implements
- OpenAIChatModel: an OpenAI-compatible backend built on ``AsyncOpenAI``
- get_chat_model: construct a backend from a ``ModelConfig``
"""

from typing import Protocol

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from book_rag.core.config import ModelConfig
from book_rag.core.exceptions import ConfigurationError, ServiceError

OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434/v1"


class ChatModel(Protocol):
    """Anything that turns one prompt into one free-text completion."""

    async def complete(self, prompt: str) -> str:  # noqa: D102
        ...


class OpenAIChatModel:
    """Single-turn chat completions against an OpenAI-compatible endpoint.

    The SDK's own retries are disabled; retry policy belongs to the caller.
    """

    def __init__(self, model_config: ModelConfig, client: AsyncOpenAI):
        self.model_config = model_config
        self._client = client

    async def __aenter__(self) -> "OpenAIChatModel":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying API client."""
        await self._client.close()

    async def complete(self, prompt: str) -> str:
        """Send ``prompt`` as a user message and return the text response.

        Raises:
            ServiceError: on transport failure, timeout or an empty response.
        """
        try:
            completion = await self._client.chat.completions.create(
                model=self.model_config.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.model_config.temperature,
            )
        except OpenAIError as exc:
            raise ServiceError(f"chat completion call failed: {exc}") from exc

        if not completion.choices:
            raise ServiceError(f"no response from {self.model_config.provider}")
        content = completion.choices[0].message.content
        if not content or not content.strip():
            raise ServiceError(f"empty response from {self.model_config.provider}")
        return content


def get_chat_model(model_config: ModelConfig) -> OpenAIChatModel:
    """Initialize the chat model based on the provided configuration."""
    provider = model_config.provider.lower()
    if provider == "openai":
        client_kwargs = {"base_url": model_config.base_url}
    elif provider == "ollama":
        client_kwargs = {
            "base_url": model_config.base_url or OLLAMA_DEFAULT_BASE_URL,
            "api_key": "ollama",
        }
    else:
        raise ConfigurationError(f"Unsupported model provider: {model_config.provider}")

    try:
        client = AsyncOpenAI(
            **client_kwargs, timeout=model_config.timeout_s, max_retries=0
        )
    except OpenAIError as exc:
        raise ConfigurationError(f"Cannot create {provider} client: {exc}") from exc

    logger.debug("Using {} model {}", provider, model_config.model)
    return OpenAIChatModel(model_config, client)
