"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of ingestion and analysis results.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import (
    AnalysisResult,
    ExerciseTrend,
    IngestionMeta,
    ResolutionResult,
    SessionAnalysis,
    TimeSeries,
    TrainingEvent,
    WeightRecommendation,
)

console = Console()

_STATUS_STYLE = {
    "success": "green",
    "info": "blue",
    "warning": "yellow",
    "danger": "red",
}

_TREND_STYLE = {
    "overload": "green",
    "stagnant": "yellow",
    "regression": "red",
    "fake_pr": "magenta",
    "neutral": "white",
    "new": "dim",
}

_METHOD_STYLE = {
    "exact": "green",
    "case_insensitive": "green",
    "alias": "cyan",
    "normalized_exact": "cyan",
    "normalized_case_insensitive": "cyan",
    "fuzzy": "yellow",
    "representative": "magenta",
    "none": "red",
}


def _fmt_num(value: float) -> str:
    return f"{value:g}"


def format_ingestion_summary(meta: IngestionMeta, event_count: int) -> Table:
    """
    Create a Rich table describing how a file was read.

    Args:
        meta: Ingestion metadata
        event_count: Number of events produced

    Returns:
        Rich Table object
    """
    table = Table(title=f"Import ({meta.source_format})")
    table.add_column("Column", style="cyan")
    table.add_column("Field", style="magenta")

    for header, field_name in meta.field_mappings.items():
        table.add_row(header, field_name)

    table.caption = (
        f"{event_count} sets from {meta.row_count} rows, "
        f"confidence {meta.confidence:.0%}, "
        f"{meta.fuzzy_matches} fuzzy / {meta.representative_matches} representative matches"
    )
    return table


def format_events_table(events: list[TrainingEvent], limit: int = 20) -> Table:
    """Create a Rich table with the most recent sets."""
    table = Table(title="Recent Sets")

    table.add_column("Date", style="cyan")
    table.add_column("Workout")
    table.add_column("Exercise", style="green")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Type", style="magenta")
    table.add_column("kg", justify="right")
    table.add_column("Reps", justify="right", style="bold")
    table.add_column("RPE", justify="right")

    for event in events[:limit]:
        table.add_row(
            event.start_time,
            event.title,
            event.exercise_title,
            str(event.set_index),
            event.set_type,
            f"{event.weight_kg:.1f}" if event.weight_kg > 0 else "-",
            _fmt_num(event.reps),
            _fmt_num(event.rpe) if event.rpe is not None else "-",
        )

    return table


def format_resolution_table(results: list[tuple[str, ResolutionResult]]) -> Table:
    table = Table(title="Name Resolution")
    table.add_column("Input")
    table.add_column("Catalog name", style="green")
    table.add_column("Method")

    for raw, result in results:
        style = _METHOD_STYLE.get(result.method, "white")
        table.add_row(raw, result.name if result.matched else "-", f"[{style}]{result.method}[/{style}]")

    return table


def format_volume_table(series: TimeSeries, title: str) -> Table:
    """
    Create a Rich table with one row per period and one column per muscle.

    Args:
        series: Volume time series
        title: Table title

    Returns:
        Rich Table object
    """
    table = Table(title=title)
    table.add_column("Period", style="cyan")
    for key in series.keys:
        table.add_column(key, justify="right")
    table.add_column("Total", justify="right", style="bold")

    for entry in series.data:
        values = [entry.values.get(k, 0.0) for k in series.keys]
        table.add_row(
            entry.label,
            *(f"{v:.1f}" if v > 0 else "-" for v in values),
            f"{sum(values):.1f}",
        )

    return table


def print_session_analysis(
    heading: str,
    transitions: list[AnalysisResult],
    session: SessionAnalysis,
    recommendation: WeightRecommendation | None,
) -> None:
    """Print set transitions, goal label and load recommendation for one session."""
    console.print()
    console.print(f"[bold]{heading}[/bold]  [dim]{session.goal_label} · {session.set_count} sets · avg {session.avg_reps} reps[/dim]")

    for result in transitions:
        style = _STATUS_STYLE.get(result.status, "white")
        console.print(f"  {result.transition}: [{style}]{result.short_message}[/{style}]  [dim]{result.tooltip}[/dim]")

    if recommendation is not None:
        style = "green" if recommendation.kind == "promote" else "yellow"
        console.print(f"  [{style}]{recommendation.message}[/{style}]: {recommendation.tooltip}")


def format_trend_table(trends: dict[str, ExerciseTrend]) -> Table:
    """Create a Rich table with one trend row per exercise."""
    table = Table(title="Exercise Trends")

    table.add_column("Exercise", style="green")
    table.add_column("Status")
    table.add_column("Change", justify="right")
    table.add_column("Confidence", style="dim")
    table.add_column("Evidence")

    for name, trend in trends.items():
        style = _TREND_STYLE.get(trend.status, "white")
        status = trend.status + (" (bw)" if trend.is_bodyweight_like else "")
        table.add_row(
            name,
            f"[{style}]{status}[/{style}]",
            f"{trend.diff_pct:+.1f}%" if trend.diff_pct is not None else "-",
            trend.confidence,
            "; ".join(trend.evidence),
        )

    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
