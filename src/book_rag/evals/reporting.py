"""Reporting module for dataset generation and evaluation runs.

This module provides functions to:
- print_generation_panel: Render the outcome of a dataset-generation pass
- print_startup_panel: Render the run configuration before evaluation starts
- print_summary: Render rich tables summarising an evaluation run
- print_comparison: Render the per-dimension deltas between two runs
- print_artifacts_panel: Render saved artifact paths after a command
"""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from book_rag.evals.compare import RunComparison
from book_rag.evals.metrics import SCORE_RANGE
from book_rag.evals.schemas import EvalRun, GenerationStats

console = Console()


def _title(name: str) -> str:
    return name.replace("_", " ").title()


def _score_style(value: float) -> str:
    """Return a Rich style string for an average on the 1-5 scale."""
    if value >= 4.0:
        return "bold green"
    if value >= 3.0:
        return "yellow"
    return "bold red"


def _rate_style(value: float) -> str:
    if value >= 0.7:
        return "bold green"
    if value >= 0.5:
        return "yellow"
    return "bold red"


def _fmt_score(value: float | None) -> Text:
    """Format a 1-5 score as a Rich Text object with colour coding."""
    if value is None:
        return Text("N/A", style="dim")
    return Text(f"{value:.2f}", style=_score_style(value))


def _fmt_rate(value: float | None) -> Text:
    """Format a rate in [0, 1] as a percentage with colour coding."""
    if value is None:
        return Text("N/A", style="dim")
    return Text(f"{value:.1%}", style=_rate_style(value))


def _fmt_delta(value: float, percent: bool = False) -> Text:
    text = f"{value:+.1%}" if percent else f"{value:+.2f}"
    if value > 0:
        return Text(text, style="green")
    if value < 0:
        return Text(text, style="red")
    return Text(text, style="dim")


def print_generation_panel(stats: GenerationStats, output_path: Path) -> None:
    """Render a panel summarising one dataset-generation pass."""
    content = (
        f"[bold cyan]Attempted[/bold cyan]        {stats.attempted}\n"
        f"[bold cyan]Generated[/bold cyan]        {stats.generated}\n"
        f"[bold cyan]Accepted[/bold cyan]         {stats.accepted}\n"
        f"[bold cyan]Rejected[/bold cyan]         {stats.rejected}\n"
        f"[bold cyan]Skipped[/bold cyan]          {stats.skipped}\n"
        f"[bold cyan]Acceptance rate[/bold cyan]  {stats.acceptance_rate:.1%}\n"
        "\n"
        f"[bold cyan]Dataset[/bold cyan]          {output_path}\n"
    )
    console.print(
        Panel(content, title="[bold]Dataset Generation[/bold]", border_style="cyan")
    )


def print_startup_panel(
    config_file: Path | None,
    dataset_path: Path,
    sample_count: int,
    rag_url: str,
    judge_model: str,
    judge_provider: str,
    max_attempts: int,
) -> None:
    """Render a startup panel summarising the evaluation configuration."""
    content = (
        f"[bold cyan]Config file[/bold cyan]      {config_file or 'defaults'}\n"
        f"[bold cyan]Dataset[/bold cyan]          {dataset_path}  ([bold]{sample_count}[/bold] questions)\n"
        "\n"
        f"[bold cyan]RAG system[/bold cyan]       {rag_url}\n"
        f"[bold cyan]Judge LLM[/bold cyan]        {judge_model}  [dim]({judge_provider})[/dim]\n"
        f"[bold cyan]Judge attempts[/bold cyan]   {max_attempts}\n"
    )
    console.print(
        Panel(content, title="[bold]RAG Evaluation[/bold]", border_style="cyan")
    )


def print_summary(run: EvalRun) -> None:
    """Render rich tables summarising an evaluation run."""
    metrics = run.metrics
    dimensions = metrics.dimensions()

    # --- Overall metrics table ---
    table = Table(
        title=(
            f"Evaluation Metrics - {metrics.total_questions} questions, "
            f"{metrics.failed_questions} failed"
        ),
        show_header=True,
        header_style="bold cyan",
        show_lines=False,
    )
    table.add_column("Dimension", style="bold")
    table.add_column("Average", justify="right")
    table.add_column("Median", justify="right")
    table.add_column("Pass Rate (>=4)", justify="right")
    for name, values in dimensions.items():
        table.add_row(
            _title(name),
            _fmt_score(values.average),
            _fmt_score(values.median),
            _fmt_rate(values.pass_rate),
        )
    console.print()
    console.print(table)

    # --- Distribution table ---
    dist_table = Table(
        title="Score Distribution",
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )
    dist_table.add_column("Dimension", style="bold")
    for value in SCORE_RANGE:
        dist_table.add_column(f"{value}", justify="right")
    for value in SCORE_RANGE:
        dist_table.add_column(f">={value}", justify="right")
    for name, values in dimensions.items():
        counts = [str(values.score_distribution.get(v, 0)) for v in SCORE_RANGE]
        accuracy = [
            _fmt_rate(values.accuracy_at_threshold.get(v)) for v in SCORE_RANGE
        ]
        dist_table.add_row(_title(name), *counts, *accuracy)
    console.print()
    console.print(dist_table)

    # --- Failed questions table ---
    failed = [result for result in run.results if result.failed]
    console.print()
    if failed:
        fail_table = Table(
            title=f"[red]Failed Questions[/red]  ({len(failed)} of {len(run.results)})",
            show_header=True,
            header_style="bold red",
            show_lines=True,
        )
        fail_table.add_column("Question", max_width=55, no_wrap=False)
        fail_table.add_column("Answer", max_width=40, no_wrap=False)
        fail_table.add_column("Reason", max_width=40, no_wrap=False)
        for result in failed:
            fail_table.add_row(
                result.question, result.generated_answer, result.scores.reasoning
            )
        console.print(fail_table)
    else:
        console.print(
            Panel(
                "[bold green]Every question was answered and judged[/bold green]",
                title="Failures",
                border_style="green",
            )
        )
    console.print()


def print_comparison(comparison: RunComparison) -> None:
    """Render the per-dimension deltas between a baseline and a candidate run."""
    if not comparison.same_dataset:
        console.print(
            "[yellow]Runs were produced from different datasets:[/yellow] "
            f"{comparison.baseline_dataset} vs {comparison.candidate_dataset}"
        )

    table = Table(
        title=f"Run Comparison (threshold {comparison.threshold:.1%})",
        show_header=True,
        header_style="bold cyan",
        show_lines=False,
    )
    table.add_column("Dimension", style="bold")
    table.add_column("Baseline Avg", justify="right")
    table.add_column("Candidate Avg", justify="right")
    table.add_column("Delta", justify="right")
    table.add_column("Baseline Pass", justify="right")
    table.add_column("Candidate Pass", justify="right")
    table.add_column("Delta", justify="right")
    for delta in comparison.deltas:
        table.add_row(
            _title(delta.dimension),
            _fmt_score(delta.baseline_average),
            _fmt_score(delta.candidate_average),
            _fmt_delta(delta.average_delta),
            _fmt_rate(delta.baseline_pass_rate),
            _fmt_rate(delta.candidate_pass_rate),
            _fmt_delta(delta.pass_rate_delta, percent=True),
        )
    console.print()
    console.print(table)
    console.print()

    if comparison.has_regressions:
        names = ", ".join(_title(d.dimension) for d in comparison.regressions)
        console.print(
            Panel(
                f"[bold red]Pass rate regressed on: {names}[/bold red]",
                title="Regressions",
                border_style="red",
            )
        )
    else:
        console.print(
            Panel(
                "[bold green]No dimension regressed beyond the threshold[/bold green]",
                title="Regressions",
                border_style="green",
            )
        )


def print_artifacts_panel(**paths: Path | None) -> None:
    """Render a closing panel listing all persisted artifact paths."""
    width = max(len(label) for label in paths)
    content = "".join(
        f"[bold]{label.title():<{width}}[/bold] {path}\n"
        for label, path in paths.items()
        if path is not None
    )
    console.print(
        Panel(
            content,
            title="[bold green]Artifacts Saved[/bold green]",
            border_style="green",
        )
    )
