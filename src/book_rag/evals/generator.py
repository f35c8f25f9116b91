"""Synthesis of a filtered question/answer benchmark from source chunks.

This module provides:
- parse_qa_response: extract a question and answer from generator output
- generate_qa_pair: synthesize one candidate pair from one chunk
- DatasetGenerator: shuffle chunks, synthesize, critique and keep the
  accepted pairs until the target size is reached or chunks run out
"""

import random
from collections.abc import Sequence

from loguru import logger

from book_rag.core.exceptions import (
    ConfigurationError,
    EmptyDatasetError,
    EvalError,
    ParseError,
)
from book_rag.evals.critique import critique_qa_pair
from book_rag.evals.judge import JudgeClient
from book_rag.evals.prompts import QA_GENERATION_PROMPT
from book_rag.evals.schemas import EvalDataset, GenerationStats, QAPair, SourceChunk
from book_rag.pipeline.llm import ChatModel

QUESTION_PREFIXES = ("Question:", "Q:")
ANSWER_PREFIXES = ("Answer:", "A:")


def _strip_prefix(line: str, prefixes: tuple[str, ...]) -> str | None:
    for prefix in prefixes:
        if line.startswith(prefix):
            return line[len(prefix) :].strip()
    return None


def parse_qa_response(response: str) -> tuple[str, str]:
    """Extract the question and answer lines from a generation response.

    Markdown emphasis around the labels is ignored. When a label repeats,
    the last occurrence wins.

    Raises:
        ParseError: if either the question or the answer is missing.
    """
    question = answer = ""
    for raw_line in response.splitlines():
        line = raw_line.strip().replace("**", "")
        if not line:
            continue
        parsed_question = _strip_prefix(line, QUESTION_PREFIXES)
        if parsed_question:
            question = parsed_question
            continue
        parsed_answer = _strip_prefix(line, ANSWER_PREFIXES)
        if parsed_answer:
            answer = parsed_answer

    if not question or not answer:
        raise ParseError(
            f"could not parse question and answer from response: {response!r}"
        )
    return question, answer


async def generate_qa_pair(chat_model: ChatModel, chunk: SourceChunk) -> QAPair:
    """Synthesize one self-contained candidate pair from ``chunk``.

    Raises:
        ServiceError: if the chat completion fails.
        ParseError: if the response does not contain a question and answer.
    """
    response = await chat_model.complete(QA_GENERATION_PROMPT.format(context=chunk.text))
    question, answer = parse_qa_response(response)
    return QAPair(
        question=question,
        reference_answer=answer,
        source_context=chunk.text,
        source_id=chunk.source_id,
    )


class DatasetGenerator:
    """Build an ``EvalDataset`` of critiqued question/answer pairs.

    Parameters
    ----------
    chat_model : ChatModel
        Model used to synthesize candidate pairs.
    judge : JudgeClient
        Judge used by the critique quality gate.
    seed : int | None
        Shuffle seed. ``None`` draws a fresh seed per run.
    version : str
        Version label written into the generated dataset.
    """

    def __init__(
        self,
        chat_model: ChatModel,
        judge: JudgeClient,
        seed: int | None = None,
        version: str = "1.0",
    ):
        self._chat_model = chat_model
        self._judge = judge
        self._rng = random.Random(seed)
        self.version = version
        self.stats = GenerationStats()

    async def generate(
        self, chunks: Sequence[SourceChunk], target_size: int
    ) -> EvalDataset:
        """Generate up to ``target_size`` accepted pairs from ``chunks``.

        Each chunk is tried at most once, in random order. Chunks whose
        generation or critique fails are skipped with a warning.

        Raises:
            ConfigurationError: if ``target_size`` is not positive or
                ``chunks`` is empty. Raised before any model call.
            EmptyDatasetError: if no candidate passed the quality filter.
        """
        if target_size <= 0:
            raise ConfigurationError(f"target size must be positive, got {target_size}")
        if not chunks:
            raise ConfigurationError("no source chunks to generate questions from")

        shuffled = list(chunks)
        self._rng.shuffle(shuffled)
        self.stats = GenerationStats()
        accepted: list[QAPair] = []

        logger.info(
            "Generating up to {} QA pairs from {} chunks...", target_size, len(shuffled)
        )
        for chunk in shuffled:
            if len(accepted) >= target_size:
                break
            self.stats.attempted += 1
            logger.info("Generating QA pair {}/{}...", len(accepted) + 1, target_size)

            try:
                candidate = await generate_qa_pair(self._chat_model, chunk)
            except EvalError as exc:
                self.stats.skipped += 1
                logger.warning("Failed to generate QA pair: {}", exc)
                continue
            self.stats.generated += 1

            try:
                scores = await critique_qa_pair(self._judge, candidate)
            except EvalError as exc:
                self.stats.skipped += 1
                logger.warning("Failed to critique QA pair: {}", exc)
                continue

            summary = (
                f"G={scores.groundedness}, R={scores.relevance}, S={scores.standalone}"
            )
            if scores.passes_quality_filter():
                accepted.append(candidate.model_copy(update={"critique_scores": scores}))
                self.stats.accepted += 1
                logger.info("Accepted ({}) - Total: {}", summary, len(accepted))
            else:
                self.stats.rejected += 1
                logger.info("Rejected ({})", summary)

        logger.info(
            "Dataset generation complete: {} generated, {} passed filtering ({:.1f}%)",
            self.stats.generated,
            self.stats.accepted,
            self.stats.acceptance_rate * 100,
        )
        if not accepted:
            raise EmptyDatasetError(
                "No QA pairs passed quality filtering. Try supplying more chunks."
            )
        return EvalDataset(version=self.version, qa_pairs=tuple(accepted))
