"""Persistence of benchmark datasets and evaluation runs.

Datasets and runs are stored as indented JSON documents using the field names
of their schemas, so any run can be reloaded later for comparison. Per-question
results can additionally be flattened into a CSV table.
"""

from pathlib import Path
from typing import TypeVar

import pandas as pd
from pydantic import BaseModel, ValidationError

from book_rag.core.exceptions import ConfigurationError
from book_rag.evals.schemas import RAG_DIMENSIONS, EvalDataset, EvalRun

ModelT = TypeVar("ModelT", bound=BaseModel)

RESULT_COLUMNS = [
    "qa_id",
    "question",
    "reference_answer",
    "generated_answer",
    "retrieved_chunk_count",
    "failed",
    *RAG_DIMENSIONS,
    "reasoning",
    "evaluated_at",
]


def _write_json(document: BaseModel, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
    return path


def _read_json(model: type[ModelT], path: Path, label: str) -> ModelT:
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {label.lower()} in {path}: {exc}") from exc


def save_dataset(dataset: EvalDataset, path: Path) -> Path:
    """Write ``dataset`` to ``path``, creating parent directories."""
    return _write_json(dataset, path)


def load_dataset(path: Path) -> EvalDataset:
    """Load a dataset written by ``save_dataset``.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ConfigurationError: if the file is not a valid dataset or holds no pairs.
    """
    dataset = _read_json(EvalDataset, path, "Dataset")
    if not dataset.qa_pairs:
        raise ConfigurationError(f"Dataset is empty: {path}")
    return dataset


def save_run(run: EvalRun, path: Path) -> Path:
    """Write ``run`` to ``path``, creating parent directories."""
    return _write_json(run, path)


def load_run(path: Path) -> EvalRun:
    """Load a run written by ``save_run``."""
    return _read_json(EvalRun, path, "Run")


def results_frame(run: EvalRun) -> pd.DataFrame:
    """Flatten the run's results into one row per question."""
    rows = []
    for result in run.results:
        row = {
            "qa_id": result.qa_id,
            "question": result.question,
            "reference_answer": result.reference_answer,
            "generated_answer": result.generated_answer,
            "retrieved_chunk_count": result.retrieved_chunk_count,
            "failed": result.failed,
        }
        for name in RAG_DIMENSIONS:
            row[name] = None if result.failed else getattr(result.scores, name)
        row["reasoning"] = result.scores.reasoning
        row["evaluated_at"] = result.evaluated_at.isoformat()
        rows.append(row)
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def export_results_csv(run: EvalRun, path: Path) -> Path:
    """Write the flattened results of ``run`` as CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    results_frame(run).to_csv(path, index=False)
    return path
