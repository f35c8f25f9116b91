"""Schemas for benchmark datasets, evaluation results and metrics.

This module defines the data models persisted by the pipeline: synthesized
question/answer pairs with their critique scores, per-question evaluation
results with four-dimension judge scores, and the aggregate statistics of a run.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

QUALITY_THRESHOLD = 3

CRITIQUE_DIMENSIONS = ("groundedness", "relevance", "standalone")
RAG_DIMENSIONS = (
    "faithfulness",
    "answer_relevance",
    "correctness",
    "context_relevance",
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class SourceChunk:
    """A passage of source text used to seed question synthesis."""

    text: str
    source_id: str


@dataclass
class GenerationStats:
    """Bookkeeping for one dataset-generation pass."""

    attempted: int = 0
    generated: int = 0
    accepted: int = 0
    rejected: int = 0
    skipped: int = 0

    @property
    def acceptance_rate(self) -> float:
        """Share of generated candidates that passed the critique."""
        if self.generated == 0:
            return 0.0
        return self.accepted / self.generated


class CritiqueScores(BaseModel):
    """Three-dimension quality scores for a candidate question/answer pair."""

    model_config = ConfigDict(frozen=True)

    groundedness: int = Field(ge=1, le=5)
    relevance: int = Field(ge=1, le=5)
    standalone: int = Field(ge=1, le=5)
    reasoning: str = ""

    def passes_quality_filter(self) -> bool:
        """Return True when every dimension reaches the minimum quality score."""
        return (
            self.groundedness >= QUALITY_THRESHOLD
            and self.relevance >= QUALITY_THRESHOLD
            and self.standalone >= QUALITY_THRESHOLD
        )


class QAPair(BaseModel):
    """A synthesized benchmark question with its reference answer and source."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    question: str
    reference_answer: str
    source_context: str
    source_id: str
    critique_scores: CritiqueScores | None = None
    generated_at: datetime = Field(default_factory=_utcnow)


class EvalDataset(BaseModel):
    """An ordered, versioned collection of accepted question/answer pairs."""

    model_config = ConfigDict(frozen=True)

    version: str = "1.0"
    created_at: datetime = Field(default_factory=_utcnow)
    qa_pairs: tuple[QAPair, ...] = ()


class RAGEvalScores(BaseModel):
    """Four-dimension judge scores for one generated answer.

    A score of 0 marks a placeholder on a failed result.
    """

    faithfulness: int = Field(default=0, ge=0, le=5)
    answer_relevance: int = Field(default=0, ge=0, le=5)
    correctness: int = Field(default=0, ge=0, le=5)
    context_relevance: int = Field(default=0, ge=0, le=5)
    reasoning: str = ""


class EvalResult(BaseModel):
    """Outcome of evaluating one question against the system under test."""

    qa_id: str
    question: str
    reference_answer: str
    generated_answer: str
    retrieved_chunk_count: int = 0
    retrieved_context: str = ""
    scores: RAGEvalScores = Field(default_factory=RAGEvalScores)
    evaluated_at: datetime = Field(default_factory=_utcnow)
    failed: bool = False

    @model_validator(mode="after")
    def _scored_unless_failed(self) -> "EvalResult":
        if self.failed:
            return self
        for name in RAG_DIMENSIONS:
            value = getattr(self.scores, name)
            if not 1 <= value <= 5:
                raise ValueError(f"{name} score {value} outside 1-5 on a non-failed result")
        return self


class DimensionMetrics(BaseModel):
    """Distributional statistics of one dimension over non-failed results."""

    average: float = 0.0
    median: float = 0.0
    score_distribution: dict[int, int] = Field(default_factory=dict)
    accuracy_at_threshold: dict[int, float] = Field(default_factory=dict)
    pass_rate: float = 0.0


class EvalMetrics(BaseModel):
    """Aggregate statistics of an evaluation run."""

    total_questions: int = 0
    failed_questions: int = 0
    faithfulness: DimensionMetrics = Field(default_factory=DimensionMetrics)
    answer_relevance: DimensionMetrics = Field(default_factory=DimensionMetrics)
    correctness: DimensionMetrics = Field(default_factory=DimensionMetrics)
    context_relevance: DimensionMetrics = Field(default_factory=DimensionMetrics)

    def dimensions(self) -> dict[str, DimensionMetrics]:
        """Return the per-dimension metrics keyed by dimension name."""
        return {name: getattr(self, name) for name in RAG_DIMENSIONS}


class EvalRun(BaseModel):
    """A complete evaluation run with all results in dataset order."""

    version: str = "1.0"
    dataset_id: str = ""
    run_at: datetime = Field(default_factory=_utcnow)
    results: list[EvalResult] = Field(default_factory=list)
    metrics: EvalMetrics = Field(default_factory=EvalMetrics)
