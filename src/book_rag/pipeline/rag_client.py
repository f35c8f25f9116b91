"""Client for the book RAG system under evaluation.

This module provides:
- SystemAnswer: the parsed answer returned by the RAG server
- RAGSystem: the protocol the evaluation runner queries
- RAGSystemClient: an HTTP implementation against ``/books/{id}/rag``
"""

from typing import Protocol

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from book_rag.core.config import RAGConfig
from book_rag.core.exceptions import ServiceError


class SystemAnswer(BaseModel):
    """Answer, retrieval count and retrieved context for one question.

    Accepts the server's wire keys (``answer``, ``retrieved_chunks``) as well
    as the field names.
    """

    model_config = ConfigDict(populate_by_name=True)

    generated_answer: str = Field(alias="answer")
    retrieved_chunk_count: int = Field(default=0, alias="retrieved_chunks")
    retrieved_context: str = ""


class RAGSystem(Protocol):
    """A system under test that answers one question about one source."""

    async def query(self, question: str, source_id: str) -> SystemAnswer:  # noqa: D102
        ...


class RAGSystemClient:
    """Query a running book RAG server over HTTP.

    Use as an async context manager so the underlying connection pool is
    closed when the run ends.
    """

    def __init__(
        self,
        config: RAGConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_s,
            transport=transport,
        )

    async def __aenter__(self) -> "RAGSystemClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def query(self, question: str, source_id: str) -> SystemAnswer:
        """Ask the RAG server ``question`` about the book ``source_id``.

        Raises:
            ServiceError: on transport failure, timeout, non-success status
                or a malformed response body.
        """
        try:
            response = await self._client.post(
                f"/books/{source_id}/rag", json={"query": question}
            )
        except httpx.HTTPError as exc:
            raise ServiceError(f"http request failed: {exc}") from exc

        if not response.is_success:
            raise ServiceError(
                f"server returned status {response.status_code}: {response.text}"
            )

        try:
            answer = SystemAnswer.model_validate_json(response.content)
        except ValidationError as exc:
            raise ServiceError(f"failed to parse response: {exc}") from exc

        logger.debug(
            "RAG server answered with {} retrieved chunks", answer.retrieved_chunk_count
        )
        return answer
