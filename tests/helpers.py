"""Fakes and builders shared by the test modules.

No test talks to a real model or RAG server: chat completions are scripted
per prompt and the system under test is a dictionary of canned answers.
"""

from collections.abc import Callable

from book_rag.core.exceptions import ServiceError
from book_rag.evals.schemas import EvalDataset, QAPair, SourceChunk
from book_rag.pipeline.rag_client import SystemAnswer

# A phrase unique to each prompt template, used to route fake responses.
PROMPT_MARKERS = {
    "generation": "generate ONE factoid question",
    "groundedness": "fully answered using ONLY the provided context",
    "relevance": "useful to someone reading or researching",
    "standalone": "understandable and well-formed on its own",
    "faithfulness": "fully grounded in the provided context",
    "answer_relevance": "addresses the specific question asked",
    "correctness": "compared to the reference answer",
    "context_relevance": "relevant the retrieved context is",
}


def prompt_kind(prompt: str) -> str:
    """Return which template ``prompt`` was built from."""
    for name, marker in PROMPT_MARKERS.items():
        if marker in prompt:
            return name
    raise AssertionError(f"unrecognised prompt: {prompt[:80]!r}")


def scored(score: int, reasoning: str = "Looks fine.") -> str:
    """Build a judge response carrying ``score``."""
    return f"{reasoning}\nScore: {score}"


class FakeChatModel:
    """Chat model whose replies come from ``responder(prompt)``.

    A responder may return an exception instance to make the call raise it.
    """

    def __init__(self, responder: Callable[[str], str | BaseException]):
        self._responder = responder
        self.prompts: list[str] = []
        self.closed = False

    async def __aenter__(self) -> "FakeChatModel":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.closed = True

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self._responder(prompt)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def kinds(self) -> list[str]:
        return [prompt_kind(prompt) for prompt in self.prompts]


class FakeRAGSystem:
    """System under test answering from a ``question -> answer`` mapping."""

    def __init__(self, answers: dict[str, SystemAnswer | ServiceError]):
        self._answers = answers
        self.queries: list[tuple[str, str]] = []

    async def query(self, question: str, source_id: str) -> SystemAnswer:
        self.queries.append((question, source_id))
        answer = self._answers[question]
        if isinstance(answer, ServiceError):
            raise answer
        return answer


def make_chunk(text: str = "Ahab hunts the white whale.", source_id: str = "moby-dick") -> SourceChunk:
    return SourceChunk(text=text, source_id=source_id)


def make_pair(question: str = "Who hunts the white whale?", qa_id: str | None = None) -> QAPair:
    fields = {
        "question": question,
        "reference_answer": "Captain Ahab.",
        "source_context": "Ahab hunts the white whale.",
        "source_id": "moby-dick",
    }
    if qa_id is not None:
        fields["id"] = qa_id
    return QAPair(**fields)


def make_dataset(*questions: str) -> EvalDataset:
    return EvalDataset(qa_pairs=tuple(make_pair(q, qa_id=f"qa-{i}") for i, q in enumerate(questions)))


def make_answer(text: str = "Captain Ahab hunts it.", chunks: int = 2) -> SystemAnswer:
    return SystemAnswer(
        generated_answer=text,
        retrieved_chunk_count=chunks,
        retrieved_context="Ahab hunts the white whale.",
    )
