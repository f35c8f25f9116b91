"""RAGAS-style scoring of one RAG answer on four independent dimensions.

Each dimension's prompt receives only the inputs its judgment needs, so the
scores stay decorrelated: faithfulness never sees the reference, correctness
never sees the retrieved context, answer relevance sees neither, and context
relevance never sees the generated answer.
"""

from book_rag.evals.judge import JudgeClient, gather_judgments
from book_rag.evals.prompts import (
    ANSWER_RELEVANCE_PROMPT,
    CONTEXT_RELEVANCE_PROMPT,
    CORRECTNESS_PROMPT,
    FAITHFULNESS_PROMPT,
)
from book_rag.evals.schemas import RAGEvalScores


async def judge_answer(
    judge: JudgeClient,
    question: str,
    reference: str,
    generated: str,
    retrieved_context: str,
) -> RAGEvalScores:
    """Score a generated answer on all four dimensions concurrently.

    Raises:
        ServiceError | ParseError: if any one dimension fails; ``dimension``
            names it. Callers retry the whole four-way judgment.
    """
    judgments = await gather_judgments(
        {
            "faithfulness": judge.judge(
                FAITHFULNESS_PROMPT.format(
                    question=question,
                    retrieved_context=retrieved_context,
                    generated=generated,
                )
            ),
            "answer_relevance": judge.judge(
                ANSWER_RELEVANCE_PROMPT.format(question=question, generated=generated)
            ),
            "correctness": judge.judge(
                CORRECTNESS_PROMPT.format(
                    question=question, reference=reference, generated=generated
                )
            ),
            "context_relevance": judge.judge(
                CONTEXT_RELEVANCE_PROMPT.format(
                    question=question, retrieved_context=retrieved_context
                )
            ),
        },
        kind="evaluation",
    )

    return RAGEvalScores(
        faithfulness=judgments["faithfulness"].score,
        answer_relevance=judgments["answer_relevance"].score,
        correctness=judgments["correctness"].score,
        context_relevance=judgments["context_relevance"].score,
        reasoning=(
            f"Faithfulness: {judgments['faithfulness'].reasoning}\n\n"
            f"Answer Relevance: {judgments['answer_relevance'].reasoning}\n\n"
            f"Correctness: {judgments['correctness'].reasoning}\n\n"
            f"Context Relevance: {judgments['context_relevance'].reasoning}"
        ),
    )
