"""Run a benchmark dataset through the live RAG system and the RAG judge.

Questions are processed one at a time in dataset order. For each question the
system under test is queried once; a failed query is recorded as a failed
result without judging. Otherwise the four-dimension judgment is attempted up
to ``max_judge_attempts`` times without backoff, and a question whose every
attempt failed is recorded as failed too. The run itself always continues.
"""

from collections.abc import AsyncIterator

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from book_rag.core.config import EvaluationConfig
from book_rag.core.exceptions import EvalError, ServiceError
from book_rag.evals.judge import JudgeClient
from book_rag.evals.metrics import calculate_metrics
from book_rag.evals.rag_judge import judge_answer
from book_rag.evals.schemas import (
    EvalDataset,
    EvalResult,
    EvalRun,
    QAPair,
    RAGEvalScores,
)
from book_rag.pipeline.rag_client import RAGSystem

RUN_VERSION = "1.0"
SYSTEM_ERROR_REASONING = "System error - could not generate answer"


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Evaluation attempt {} failed: {}. Retrying...", retry_state.attempt_number, exc
    )


class EvaluationRunner:
    """Evaluate a dataset against one system under test.

    Parameters
    ----------
    system : RAGSystem
        The RAG system whose answers are scored.
    judge : JudgeClient
        Judge used for the four-dimension scoring.
    config : EvaluationConfig
        Retry budget and judge settings for this run.
    """

    def __init__(self, system: RAGSystem, judge: JudgeClient, config: EvaluationConfig):
        self._system = system
        self._judge = judge
        self.config = config

    async def _judge_with_retry(
        self, qa: QAPair, answer: str, retrieved_context: str
    ) -> RAGEvalScores:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.max_judge_attempts),
            retry=retry_if_exception_type(EvalError),
            before_sleep=_log_failed_attempt,
        )
        return await retrying(
            judge_answer,
            self._judge,
            qa.question,
            qa.reference_answer,
            answer,
            retrieved_context,
        )

    async def evaluate_pair(self, qa: QAPair) -> EvalResult:
        """Query the system for one pair and judge its answer."""
        try:
            answer = await self._system.query(qa.question, qa.source_id)
        except ServiceError as exc:
            logger.warning("Failed to query RAG system: {}", exc)
            return EvalResult(
                qa_id=qa.id,
                question=qa.question,
                reference_answer=qa.reference_answer,
                generated_answer=f"ERROR: {exc}",
                scores=RAGEvalScores(reasoning=SYSTEM_ERROR_REASONING),
                failed=True,
            )

        attempts = self.config.max_judge_attempts
        try:
            scores = await self._judge_with_retry(
                qa, answer.generated_answer, answer.retrieved_context
            )
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            logger.error("All {} evaluation attempts failed: {}", attempts, last_error)
            return EvalResult(
                qa_id=qa.id,
                question=qa.question,
                reference_answer=qa.reference_answer,
                generated_answer=answer.generated_answer,
                retrieved_chunk_count=answer.retrieved_chunk_count,
                retrieved_context=answer.retrieved_context,
                scores=RAGEvalScores(
                    reasoning=f"Evaluation error after {attempts} attempts: {last_error}"
                ),
                failed=True,
            )

        logger.info(
            "Scores - Faithfulness: {}, Relevance: {}, Correctness: {}, Context: {}",
            scores.faithfulness,
            scores.answer_relevance,
            scores.correctness,
            scores.context_relevance,
        )
        return EvalResult(
            qa_id=qa.id,
            question=qa.question,
            reference_answer=qa.reference_answer,
            generated_answer=answer.generated_answer,
            retrieved_chunk_count=answer.retrieved_chunk_count,
            retrieved_context=answer.retrieved_context,
            scores=scores,
        )

    async def iter_results(self, dataset: EvalDataset) -> AsyncIterator[EvalResult]:
        """Yield one result per pair, in dataset order."""
        total = len(dataset.qa_pairs)
        for index, qa in enumerate(dataset.qa_pairs, start=1):
            logger.info("Evaluating {}/{}: {}", index, total, qa.question)
            yield await self.evaluate_pair(qa)

    async def run(self, dataset: EvalDataset, dataset_id: str = "") -> EvalRun:
        """Evaluate every pair and attach aggregate metrics."""
        logger.info("Running evaluation on {} QA pairs...", len(dataset.qa_pairs))
        results = [result async for result in self.iter_results(dataset)]
        logger.info("Calculating metrics...")
        return EvalRun(
            version=RUN_VERSION,
            dataset_id=dataset_id,
            results=results,
            metrics=calculate_metrics(results),
        )
