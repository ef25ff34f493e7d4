"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from markforge.core.variants import VariantRanking
from markforge.domain import Construction, Evaluation, ManifestEntry, WordmarkMetrics

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Markforge[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_written(output_path: str) -> None:
    """Print the path of a written file."""
    line = Text(f"\n{SYM_OK} ", style="bold green")
    line.append("Wrote ", style="bold green")
    line.append(output_path, style="bold")
    console.print(line)


def print_construction(construction: Construction) -> None:
    """Print how a motif mark was built.

    Args:
        construction: Construction info of the mark
    """
    console.print(
        f"  {construction.family.value} {SYM_DOT} variant {construction.variant} "
        f"{SYM_DOT} grid {construction.grid:g} {SYM_DOT} stroke {construction.stroke_px:g}"
    )
    if construction.fallback_reason:
        console.print(f"  [yellow]fallback:[/yellow] {construction.fallback_reason}")
    for warning in construction.warnings:
        console.print(f"  [yellow]warning:[/yellow] {warning}")


def print_manifest(manifest: list[ManifestEntry]) -> None:
    """Print per-device outcomes."""
    if not manifest:
        console.print("  No devices in plan")
        return
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Device")
    table.add_column("Target")
    table.add_column("Applied")
    table.add_column("Reason")
    for entry in manifest:
        applied = f"[green]{SYM_OK}[/green]" if entry.applied else f"[red]{SYM_ERR}[/red]"
        table.add_row(entry.device, entry.target, applied, entry.reason or "")
    console.print(table)


def print_metrics(metrics: WordmarkMetrics, retried: bool) -> None:
    """Print customization metrics.

    Args:
        metrics: Metrics of the returned path
        retried: Whether the intensified retry produced the path
    """
    console.print(
        f"  visibility {metrics.device_visibility:.1f} {SYM_DOT} "
        f"silhouette {metrics.silhouette_delta:.0f} {SYM_DOT} "
        f"font risk {metrics.default_font_risk:.1f} {SYM_DOT} "
        f"legibility {metrics.legibility:.1f}"
    )
    if retried:
        console.print(f"  {SYM_DOT} intensified retry used")


def print_evaluation(evaluation: Evaluation) -> None:
    """Print evaluator output."""
    b = evaluation.breakdown
    console.print(f"  [bold]{evaluation.total_score:.1f}[/bold] total")
    console.print(
        f"  legibility {b.legibility:.1f} {SYM_DOT} weight {b.weight:.1f} {SYM_DOT} "
        f"distinctiveness {b.distinctiveness:.1f} {SYM_DOT} spacing {b.spacing_consistency:.1f}"
    )
    if evaluation.flags:
        console.print(f"  [yellow]flags:[/yellow] {', '.join(evaluation.flags)}")


def print_variants(ranking: VariantRanking) -> None:
    """Print ranked wordmark variants."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Tracking", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Flags")
    for rank, variant in enumerate(ranking.variants):
        style = "bold green" if rank == ranking.best_index else None
        table.add_row(
            str(variant.variant_index),
            str(variant.font.weight),
            f"{variant.size_px:g}",
            f"{variant.tracking_px:g}",
            f"{variant.evaluation.total_score:.1f}",
            ", ".join(variant.evaluation.flags),
            style=style,
        )
    console.print(table)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
