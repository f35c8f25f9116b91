"""Comparison of two evaluation runs over the same benchmark.

A regression is any dimension whose pass rate dropped by more than the
threshold between the baseline and the candidate run.
"""

from dataclasses import dataclass, field

from book_rag.evals.schemas import RAG_DIMENSIONS, EvalRun


@dataclass(frozen=True)
class DimensionDelta:
    """Change of one dimension's headline statistics between two runs."""

    dimension: str
    baseline_average: float
    candidate_average: float
    baseline_pass_rate: float
    candidate_pass_rate: float

    @property
    def average_delta(self) -> float:
        return self.candidate_average - self.baseline_average

    @property
    def pass_rate_delta(self) -> float:
        return self.candidate_pass_rate - self.baseline_pass_rate


@dataclass
class RunComparison:
    """Per-dimension deltas between a baseline and a candidate run."""

    baseline_dataset: str
    candidate_dataset: str
    threshold: float
    deltas: list[DimensionDelta] = field(default_factory=list)

    @property
    def regressions(self) -> list[DimensionDelta]:
        return [d for d in self.deltas if d.pass_rate_delta < -self.threshold]

    @property
    def improvements(self) -> list[DimensionDelta]:
        return [d for d in self.deltas if d.pass_rate_delta > self.threshold]

    @property
    def has_regressions(self) -> bool:
        return bool(self.regressions)

    @property
    def same_dataset(self) -> bool:
        return self.baseline_dataset == self.candidate_dataset


def compare_runs(
    baseline: EvalRun, candidate: EvalRun, threshold: float = 0.05
) -> RunComparison:
    """Compare ``candidate`` against ``baseline`` dimension by dimension.

    ``threshold`` is the absolute pass-rate change (0.05 = 5pp) that counts
    as a regression or an improvement.
    """
    baseline_dims = baseline.metrics.dimensions()
    candidate_dims = candidate.metrics.dimensions()
    deltas = [
        DimensionDelta(
            dimension=name,
            baseline_average=baseline_dims[name].average,
            candidate_average=candidate_dims[name].average,
            baseline_pass_rate=baseline_dims[name].pass_rate,
            candidate_pass_rate=candidate_dims[name].pass_rate,
        )
        for name in RAG_DIMENSIONS
    ]
    return RunComparison(
        baseline_dataset=baseline.dataset_id,
        candidate_dataset=candidate.dataset_id,
        threshold=threshold,
        deltas=deltas,
    )
