"""CLI application entry point for markforge.

This module provides the main CLI interface using Typer.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from markforge import __version__
from markforge.cli.output import (
    console,
    print_construction,
    print_error,
    print_evaluation,
    print_header,
    print_manifest,
    print_metrics,
    print_step,
    print_variants,
    print_written,
)
from markforge.config import LoggingConfig, MarkforgeSettings
from markforge.core import (
    MotifMarkBuilder,
    VariantRequest,
    WordmarkCustomizer,
    evaluate_wordmark_variant,
    generate_variants,
)
from markforge.domain import CustomizationPlan, MotifMarkSpec, WordmarkBase, WordmarkCandidate
from markforge.exceptions import MarkforgeError
from markforge.io import FallbackOutlineProvider, FontOutlineProvider, wordmark_svg, write_svg
from markforge.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="markforge",
    help="Generate motif marks and customize wordmark outlines as SVG path geometry.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Markforge[/bold blue] v{__version__}")
        raise typer.Exit()


def _state(ctx: typer.Context) -> dict[str, Any]:
    if ctx.obj is None:
        ctx.obj = {"settings": MarkforgeSettings(), "quiet": False}
    return ctx.obj


def _read_json(path: Path) -> dict[str, Any]:
    """Load a JSON object from ``path``, exiting with an error message on failure."""
    if not path.is_file():
        print_error(f"Input file not found: {path}")
        raise typer.Exit(code=1)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON in {path}", details=str(e))
        raise typer.Exit(code=1) from None
    if not isinstance(data, dict):
        print_error(f"Expected a JSON object in {path}")
        raise typer.Exit(code=1)
    return data


def _font_provider(font_dir: Path) -> FallbackOutlineProvider:
    if not font_dir.is_dir():
        print_error(f"Font directory not found: {font_dir}")
        raise typer.Exit(code=1)
    return FallbackOutlineProvider([(str(font_dir), FontOutlineProvider.from_directory(font_dir))])


@app.callback()
def main(
    ctx: typer.Context,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Markforge: deterministic vector geometry for brand marks."""
    settings = MarkforgeSettings(
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )
    ctx.obj = {"settings": settings, "quiet": quiet}


@app.command()
def motif(
    ctx: typer.Context,
    spec_file: Annotated[
        Path,
        typer.Argument(help="JSON motif mark specification", show_default=False),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the SVG here instead of stdout"),
    ] = None,
    font_dir: Annotated[
        Path | None,
        typer.Option("--font-dir", help="Directory of TTF/OTF fonts for monogram initials"),
    ] = None,
) -> None:
    """Generate a motif mark from a JSON specification.

    Example:
        markforge motif spec.json -o mark.svg
    """
    state = _state(ctx)
    quiet = state["quiet"]
    try:
        spec = MotifMarkSpec.model_validate(_read_json(spec_file))
    except ValidationError as e:
        print_error("Invalid motif specification", details=str(e))
        raise typer.Exit(code=1) from None

    provider = _font_provider(font_dir) if font_dir else None
    try:
        mark = MotifMarkBuilder(provider, state["settings"]).build(spec)
    except MarkforgeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if output is None:
        typer.echo(mark.mark_svg)
        return

    write_svg(output, mark.mark_svg)
    if not quiet:
        print_header(__version__)
        print_step(f"Motif mark for {spec.brand_name}")
        print_construction(mark.construction)
        print_written(str(output))


@app.command()
def customize(
    ctx: typer.Context,
    base_file: Annotated[
        Path,
        typer.Argument(help="JSON wordmark base (combined path, view box, glyphs)", show_default=False),
    ],
    plan_file: Annotated[
        Path,
        typer.Argument(help="JSON customization plan", show_default=False),
    ],
    seed: Annotated[
        str,
        typer.Option("--seed", "-s", help="Seed recorded with the result"),
    ] = "",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the customized wordmark SVG here"),
    ] = None,
) -> None:
    """Apply a customization plan to a wordmark base.

    Example:
        markforge customize base.json plan.json -o wordmark.svg
    """
    state = _state(ctx)
    quiet = state["quiet"]
    try:
        base = WordmarkBase.from_dict(_read_json(base_file))
        plan = CustomizationPlan.from_dict(_read_json(plan_file))
        result = WordmarkCustomizer(state["settings"]).customize(base, plan, seed)
    except (MarkforgeError, KeyError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if not quiet:
        print_header(__version__)
        print_step(f"Customized '{base.text}'")
        print_manifest(result.manifest)
        print_metrics(result.metrics, result.retried)

    if output is not None:
        write_svg(output, wordmark_svg(result.path, base.view_box))
        if not quiet:
            print_written(str(output))
    elif quiet:
        typer.echo(json.dumps(result.to_dict()))


@app.command()
def evaluate(
    ctx: typer.Context,
    candidate_file: Annotated[
        Path,
        typer.Argument(help="JSON wordmark candidate (bbox, paths, advances)", show_default=False),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the evaluation as JSON"),
    ] = False,
) -> None:
    """Score a wordmark candidate.

    Example:
        markforge evaluate candidate.json
    """
    state = _state(ctx)
    try:
        candidate = WordmarkCandidate.from_dict(_read_json(candidate_file))
    except (KeyError, TypeError, ValueError) as e:
        print_error("Invalid candidate", details=str(e))
        raise typer.Exit(code=1) from None

    evaluation = evaluate_wordmark_variant(
        candidate,
        state["settings"].evaluator,
        state["settings"].geometry.metrics_sample_budget,
    )
    if as_json or state["quiet"]:
        typer.echo(json.dumps(evaluation.to_dict()))
        return
    print_header(__version__)
    print_step("Evaluation")
    print_evaluation(evaluation)


@app.command()
def variants(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Wordmark text", show_default=False)],
    font_dir: Annotated[
        Path,
        typer.Option("--font-dir", help="Directory of TTF/OTF fonts", show_default=False),
    ],
    family: Annotated[str, typer.Option("--family", "-f", help="Font family")] = "Inter",
    size: Annotated[float, typer.Option("--size", help="Font size in px", min=1.0)] = 64.0,
    tracking: Annotated[float, typer.Option("--tracking", help="Base tracking in px")] = 0.0,
    workers: Annotated[
        int,
        typer.Option("--workers", "-j", help="Worker processes for evaluation", min=1),
    ] = 1,
) -> None:
    """Render and rank twelve wordmark variants.

    Example:
        markforge variants Acme --font-dir fonts/ --family Inter
    """
    state = _state(ctx)
    request = VariantRequest(text=text, font_family=family, size_px=size, tracking_px=tracking)
    try:
        ranking = generate_variants(
            request, _font_provider(font_dir), state["settings"], max_workers=workers
        )
    except MarkforgeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if state["quiet"]:
        typer.echo(json.dumps([v.evaluation.to_dict() for v in ranking.variants]))
        return
    print_header(__version__)
    print_step(f"{len(ranking.variants)} variants for '{text}'")
    print_variants(ranking)


if __name__ == "__main__":
    app()
