"""LLM-as-judge client and the fan-out/fan-in helper for dimension scoring.

A ``JudgeClient`` issues exactly one chat completion per judgment and parses
the "Score: X" directive out of it. ``gather_judgments`` runs several such
judgments concurrently and joins all of them before reducing: if any
dimension failed, the whole judgment fails with that dimension named.

When several dimensions fail together the reported one is the first in the
order the caller declared them. Completion order of the calls is irrelevant.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass

from book_rag.core.exceptions import EvalError
from book_rag.evals.scoring import parse_score_response
from book_rag.pipeline.llm import ChatModel


@dataclass(frozen=True)
class Judgment:
    """A parsed judge response for one dimension."""

    score: int
    reasoning: str


class JudgeClient:
    """Score one prompt with one chat completion. No retries at this layer."""

    def __init__(self, chat_model: ChatModel):
        self._chat_model = chat_model

    async def judge(self, prompt: str) -> Judgment:
        """Return the parsed judgment for ``prompt``.

        Raises:
            ServiceError: if the chat completion fails or comes back empty.
            ParseError: if the response has no valid score directive.
        """
        response = await self._chat_model.complete(prompt)
        score, reasoning = parse_score_response(response)
        return Judgment(score=score, reasoning=reasoning)


async def gather_judgments(
    calls: dict[str, Awaitable[Judgment]], kind: str
) -> dict[str, Judgment]:
    """Run every dimension call concurrently and fail if any of them failed.

    Cancelling the awaiting task cancels all in-flight calls.
    """
    names = list(calls)
    outcomes = await asyncio.gather(*calls.values(), return_exceptions=True)

    judgments: dict[str, Judgment] = {}
    for name, outcome in zip(names, outcomes, strict=True):
        if isinstance(outcome, EvalError):
            raise type(outcome)(
                f"{name} {kind} failed: {outcome}", dimension=name
            ) from outcome
        if isinstance(outcome, BaseException):
            raise outcome
        judgments[name] = outcome
    return judgments
