"""Check a candidate evaluation run against a baseline run.

Exit status is 0 when no dimension regressed, 1 when at least one did or
when either run could not be loaded.
"""

import sys
from pathlib import Path

from loguru import logger

from book_rag.core.exceptions import ConfigurationError
from book_rag.evals.cli import configure_logging, parse_compare_args
from book_rag.evals.compare import compare_runs
from book_rag.evals.reporting import print_comparison
from book_rag.evals.testset import load_run


def run_check() -> int:
    """Compare the two runs named on the command line and report regressions."""
    args = parse_compare_args()
    configure_logging(args.log_level)

    try:
        baseline = load_run(Path(args.baseline))
        candidate = load_run(Path(args.candidate))
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("{}", exc)
        return 1

    comparison = compare_runs(baseline, candidate, threshold=args.threshold)
    print_comparison(comparison)
    for delta in comparison.regressions:
        logger.warning(
            "{} pass rate dropped {:.1%} -> {:.1%}",
            delta.dimension,
            delta.baseline_pass_rate,
            delta.candidate_pass_rate,
        )
    return 1 if comparison.has_regressions else 0


def main() -> None:
    """Synchronous entry point for the rag-compare CLI command."""
    sys.exit(run_check())


if __name__ == "__main__":
    main()
