"""Aggregate statistics for evaluation runs.

This module reduces a sequence of ``EvalResult`` rows into ``EvalMetrics``.
Failed results are counted but never scored. Every function is pure: the same
input always yields the same output.

Key functions:
- score_median: median of a list of integer scores
- dimension_metrics: statistics of one dimension's scores
- calculate_metrics: full reduction over a result sequence
"""

from collections.abc import Sequence
from statistics import fmean

from book_rag.evals.schemas import (
    RAG_DIMENSIONS,
    DimensionMetrics,
    EvalMetrics,
    EvalResult,
)

SCORE_RANGE = range(1, 6)
PASS_THRESHOLD = 4


def score_median(scores: Sequence[int]) -> float:
    """Return the middle score, or the mean of the two middle scores."""
    ordered = sorted(scores)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2.0
    return float(ordered[mid])


def dimension_metrics(scores: Sequence[int]) -> DimensionMetrics:
    """Compute average, median, histogram and threshold accuracy for ``scores``.

    An empty sequence yields the zero value.
    """
    if not scores:
        return DimensionMetrics()

    count = len(scores)
    distribution = {value: 0 for value in SCORE_RANGE}
    for score in scores:
        distribution[score] += 1

    accuracy = {
        threshold: sum(1 for score in scores if score >= threshold) / count
        for threshold in SCORE_RANGE
    }
    return DimensionMetrics(
        average=fmean(scores),
        median=score_median(scores),
        score_distribution=distribution,
        accuracy_at_threshold=accuracy,
        pass_rate=accuracy[PASS_THRESHOLD],
    )


def calculate_metrics(results: Sequence[EvalResult]) -> EvalMetrics:
    """Reduce ``results`` into per-dimension statistics over non-failed rows."""
    scored = [result.scores for result in results if not result.failed]
    per_dimension = {
        name: dimension_metrics([getattr(scores, name) for scores in scored])
        for name in RAG_DIMENSIONS
    }
    return EvalMetrics(
        total_questions=len(results),
        failed_questions=len(results) - len(scored),
        **per_dimension,
    )
