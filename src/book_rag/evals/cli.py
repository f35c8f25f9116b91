"""CLI argument parsing for dataset generation, evaluation and run comparison.

This module provides command-line argument parsing for the ``rag-gendata``,
``rag-evaluate`` and ``rag-compare`` commands.
"""
import argparse
import sys
from collections.abc import Sequence

from loguru import logger

DEFAULT_CONFIG_PATH = "./config/eval_config.yaml"
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"]


def configure_logging(level: str) -> None:
    """Replace loguru's default sink with a stderr sink at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the evaluation configuration file.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Minimum level of log messages written to stderr.",
    )


def parse_gendata_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for benchmark dataset generation."""
    parser = argparse.ArgumentParser(
        description="Generate a critiqued question/answer benchmark from book chunks."
    )
    parser.add_argument(
        "--chunks",
        type=str,
        required=True,
        help="Path to a .json or .jsonl file of {text, source_id} chunks.",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=None,
        help="Number of accepted QA pairs to aim for. Defaults to the config value.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="./artifacts/datasets/eval_dataset.json",
        help="Where the generated dataset is written.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Shuffle seed for reproducible chunk order.",
    )
    _add_common_args(parser)
    return parser.parse_args(argv)


def parse_evaluate_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for evaluation execution."""
    parser = argparse.ArgumentParser(
        description="Evaluate a running book RAG system against a benchmark dataset."
    )
    parser.add_argument(
        "--dataset",
        type=str,
        required=True,
        help="Path to a dataset written by rag-gendata.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="./artifacts/runs/eval_run.json",
        help="Where the evaluation run is written.",
    )
    parser.add_argument(
        "--rag-url",
        type=str,
        default=None,
        help="Base URL of the RAG server. Overrides the config value.",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Optional path for a per-question CSV export.",
    )
    _add_common_args(parser)
    return parser.parse_args(argv)


def parse_compare_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for comparing two evaluation runs."""
    parser = argparse.ArgumentParser(
        description="Compare two evaluation runs and flag pass-rate regressions."
    )
    parser.add_argument("baseline", type=str, help="Path to the baseline run.")
    parser.add_argument("candidate", type=str, help="Path to the candidate run.")
    parser.add_argument(
        "--threshold",
        type=float,
        default=0.05,
        help="Pass-rate drop (absolute, 0-1) that counts as a regression.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Minimum level of log messages written to stderr.",
    )
    return parser.parse_args(argv)
