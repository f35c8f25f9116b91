"""Run a benchmark dataset against the live book RAG system.

This module executes the end-to-end evaluation flow:
1) load the benchmark dataset,
2) query the RAG system once per question,
3) score each answer on four dimensions with the judge,
4) aggregate per-dimension statistics,
5) persist the run (and optionally a CSV export) for later comparison.
"""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from book_rag.core.config import load_config
from book_rag.core.exceptions import ConfigurationError
from book_rag.evals.cli import configure_logging, parse_evaluate_args
from book_rag.evals.judge import JudgeClient
from book_rag.evals.reporting import (
    print_artifacts_panel,
    print_startup_panel,
    print_summary,
)
from book_rag.evals.runner import EvaluationRunner
from book_rag.evals.testset import export_results_csv, load_dataset, save_run
from book_rag.pipeline.llm import get_chat_model
from book_rag.pipeline.rag_client import RAGSystemClient


async def _main() -> int:
    """Async implementation of the evaluation CLI."""
    load_dotenv()
    args = parse_evaluate_args()
    configure_logging(args.log_level)

    config_path = Path(args.config)
    dataset_path = Path(args.dataset)
    try:
        app_config = load_config(config_path)
        if args.rag_url:
            app_config.rag.base_url = args.rag_url
        dataset = load_dataset(dataset_path)
        chat_model = get_chat_model(app_config.evaluation.judge)
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("{}", exc)
        return 1

    logger.info("Loaded {} QA pairs from {}", len(dataset.qa_pairs), dataset_path)
    print_startup_panel(
        config_file=config_path if config_path.exists() else None,
        dataset_path=dataset_path,
        sample_count=len(dataset.qa_pairs),
        rag_url=app_config.rag.base_url,
        judge_model=app_config.evaluation.judge.model,
        judge_provider=app_config.evaluation.judge.provider,
        max_attempts=app_config.evaluation.max_judge_attempts,
    )

    async with chat_model, RAGSystemClient(app_config.rag) as system:
        runner = EvaluationRunner(system, JudgeClient(chat_model), app_config.evaluation)
        run = await runner.run(dataset, dataset_id=str(dataset_path))

    print_summary(run)

    run_path = save_run(run, Path(args.output))
    logger.info("Saved run: {}", run_path)
    csv_path = None
    if args.csv:
        csv_path = export_results_csv(run, Path(args.csv))
        logger.info("Saved results: {}", csv_path)

    print_artifacts_panel(run=run_path, results=csv_path)
    return 0


def main() -> None:
    """Synchronous entry point for the rag-evaluate CLI command."""
    sys.exit(asyncio.run(_main()))


if __name__ == "__main__":
    main()
