"""Generate a critiqued question/answer benchmark from book chunks.

This module executes the dataset generation flow:
1) load source chunks,
2) synthesize one candidate pair per shuffled chunk,
3) critique each candidate and keep those passing the quality filter,
4) persist the accepted pairs as a versioned dataset.
"""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from book_rag.core.config import load_config
from book_rag.core.exceptions import ConfigurationError
from book_rag.evals.cli import configure_logging, parse_gendata_args
from book_rag.evals.generator import DatasetGenerator
from book_rag.evals.judge import JudgeClient
from book_rag.evals.reporting import print_generation_panel
from book_rag.evals.testset import save_dataset
from book_rag.pipeline.chunks import load_chunks
from book_rag.pipeline.llm import get_chat_model


async def _main() -> int:
    """Async implementation of the dataset generation CLI."""
    load_dotenv()
    args = parse_gendata_args()
    configure_logging(args.log_level)

    try:
        app_config = load_config(Path(args.config))
        dataset_config = app_config.dataset
        target_size = (
            args.samples if args.samples is not None else dataset_config.target_size
        )
        seed = args.seed if args.seed is not None else dataset_config.seed

        chunks = load_chunks(Path(args.chunks))
        chat_model = get_chat_model(dataset_config.generator)
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("{}", exc)
        return 1

    async with chat_model:
        generator = DatasetGenerator(
            chat_model=chat_model,
            judge=JudgeClient(chat_model),
            seed=seed,
            version=dataset_config.version,
        )
        try:
            dataset = await generator.generate(chunks, target_size)
        except ConfigurationError as exc:
            logger.error("{}", exc)
            return 1

    output_path = save_dataset(dataset, Path(args.output))
    logger.info("Saved dataset: {}", output_path)
    print_generation_panel(generator.stats, output_path)
    return 0


def main() -> None:
    """Synchronous entry point for the rag-gendata CLI command."""
    sys.exit(asyncio.run(_main()))


if __name__ == "__main__":
    main()
