"""Quality gate for synthesized question/answer pairs.

A candidate pair is scored on groundedness, relevance and standalone clarity
by three concurrent judge calls. It enters the benchmark only if all three
scores reach the quality threshold.
"""

from book_rag.evals.judge import JudgeClient, gather_judgments
from book_rag.evals.prompts import (
    GROUNDEDNESS_CRITIQUE_PROMPT,
    RELEVANCE_CRITIQUE_PROMPT,
    STANDALONE_CRITIQUE_PROMPT,
)
from book_rag.evals.schemas import CritiqueScores, QAPair


async def critique_qa_pair(judge: JudgeClient, qa: QAPair) -> CritiqueScores:
    """Score a candidate pair on all three critique dimensions.

    Raises:
        ServiceError | ParseError: if any one dimension fails; ``dimension``
            names it. No partial scores are returned.
    """
    judgments = await gather_judgments(
        {
            "groundedness": judge.judge(
                GROUNDEDNESS_CRITIQUE_PROMPT.format(
                    context=qa.source_context,
                    question=qa.question,
                    reference=qa.reference_answer,
                )
            ),
            "relevance": judge.judge(
                RELEVANCE_CRITIQUE_PROMPT.format(
                    question=qa.question, reference=qa.reference_answer
                )
            ),
            "standalone": judge.judge(
                STANDALONE_CRITIQUE_PROMPT.format(question=qa.question)
            ),
        },
        kind="critique",
    )

    groundedness = judgments["groundedness"]
    relevance = judgments["relevance"]
    standalone = judgments["standalone"]
    return CritiqueScores(
        groundedness=groundedness.score,
        relevance=relevance.score,
        standalone=standalone.score,
        reasoning=(
            f"Groundedness: {groundedness.reasoning}\n"
            f"Relevance: {relevance.reasoning}\n"
            f"Standalone: {standalone.reasoning}"
        ),
    )
