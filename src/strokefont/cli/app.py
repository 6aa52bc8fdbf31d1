"""CLI application entry point for strokefont.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from strokefont import __version__
from strokefont.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_error,
    print_header,
    print_layout_info,
    print_source_info,
    print_step,
    print_success,
    print_summary,
    print_warnings,
)
from strokefont.config import (
    GeometryConfig,
    LayoutConfig,
    LoggingConfig,
    NamingConfig,
    ProcessingConfig,
    StrokeConfig,
    StrokeFontSettings,
    WidthPolicy,
)
from strokefont.core import BuildResult, FontPipeline
from strokefont.exceptions import FontSaveError, GlyphSourceError, StrokeFontError
from strokefont.io import FontWriter, GlyphSource
from strokefont.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="strokefont",
    help="Build an outline font from single-stroke glyph paths.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Strokefont[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def build(
    source: Annotated[
        Path,
        typer.Argument(
            help="JSON file mapping characters to path strings",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {source}.ttf)",
        ),
    ] = None,
    stroke_width: Annotated[
        float,
        typer.Option(
            "--stroke-width",
            "-w",
            help="Stroke width in normalized glyph units",
        ),
    ] = 0.08,
    cap_segments: Annotated[
        int,
        typer.Option(
            "--cap-segments",
            help="Straight segments per round cap",
        ),
    ] = 8,
    monospace: Annotated[
        bool,
        typer.Option(
            "--monospace/--proportional",
            help="Give every glyph the same advance width",
        ),
    ] = False,
    side_bearing: Annotated[
        float,
        typer.Option(
            "--side-bearing",
            "-b",
            help="Side bearing as percentage of glyph width",
        ),
    ] = 10.0,
    min_bearing: Annotated[
        int,
        typer.Option(
            "--min-bearing",
            help="Minimum side bearing in font units (proportional only)",
        ),
    ] = 50,
    units_per_em: Annotated[
        int,
        typer.Option(
            "--upm",
            help="Font units per em",
        ),
    ] = 1000,
    baseline_normalization: Annotated[
        bool,
        typer.Option(
            "--baseline-normalization/--no-baseline-normalization",
            help="Rest glyph ink on the baseline, descenders below it",
        ),
    ] = True,
    y_up: Annotated[
        bool,
        typer.Option(
            "--y-up",
            help="Source paths are already y-up (no vertical flip)",
        ),
    ] = False,
    family: Annotated[
        str,
        typer.Option(
            "--family",
            help="Font family name",
        ),
    ] = "Strokefont",
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-j",
            help="Worker processes for glyph measurement",
            min=1,
        ),
    ] = 1,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Build glyphs and report without writing a font",
        ),
    ] = False,
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
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
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
    """Build a TrueType font from single-stroke glyph paths.

    Every segment is stroked into a round-capped capsule, the capsules of each
    glyph are unioned into closed outlines, and the outlines are fitted into
    the font's em square.

    Example:
        strokefont alphabet.json -o Alphabet.ttf --monospace
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not source.is_file():
        print_error(
            f"Glyph source not found: {source}",
            details="Please provide a JSON file mapping characters to path strings.",
        )
        raise typer.Exit(code=1)

    # Configuration errors are fatal and reported before any glyph is built
    try:
        settings = StrokeFontSettings(
            stroke=StrokeConfig(width=stroke_width, cap_segments=cap_segments),
            geometry=GeometryConfig(flip_y=not y_up),
            layout=LayoutConfig(
                units_per_em=units_per_em,
                width_policy=WidthPolicy.MONOSPACE if monospace else WidthPolicy.PROPORTIONAL,
                side_bearing_percent=side_bearing,
                side_bearing_minimum=min_bearing,
                baseline_normalization=baseline_normalization,
            ),
            naming=NamingConfig(family_name=family),
            processing=ProcessingConfig(max_workers=workers),
            logging=LoggingConfig(log_file=log_file, log_level=log_level.upper()),
        )
    except ValidationError as e:
        print_error("Invalid configuration", details=_first_validation_error(e))
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level.value,
        file_level=settings.logging.file_log_level.value,
        quiet=quiet,
    )

    try:
        with GlyphSource(source) as glyph_source:
            if not quiet:
                print_step("Loading glyph source")
                print_source_info(str(source), len(glyph_source), glyph_source.characters)
                print_layout_info(
                    settings.layout.width_policy.value,
                    settings.stroke.width,
                    settings.layout.units_per_em,
                )
                print_step("Building glyphs")

            result = _run_build(FontPipeline(settings, logger), glyph_source, quiet)

        if not quiet:
            print_summary(
                glyphs=len(result.glyphs),
                empty=result.stats.empty_count,
                fallbacks=result.stats.fallback_count,
                errors=result.stats.error_count,
                advance_width=result.monospace_advance if monospace else None,
            )
            print_warnings(result.warnings, verbose)

        if dry_run:
            if not quiet:
                console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green], no font written")
            raise typer.Exit(code=0)

        output_path = output if output is not None else FontWriter.get_output_path(source)
        FontWriter(result.glyphs, settings).save(output_path)

        if not quiet:
            print_success(
                output_path=str(output_path),
                file_size=_format_file_size(output_path),
                total_time_s=result.stats.duration_seconds,
                avg_time_ms=result.stats.avg_glyph_time_ms,
            )

    except GlyphSourceError as e:
        print_error(f"Could not load glyph source: {e.reason}")
        raise typer.Exit(code=1)
    except FontSaveError as e:
        print_error(f"Could not save font: {e.reason}")
        raise typer.Exit(code=1)
    except StrokeFontError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _run_build(pipeline: FontPipeline, glyph_source: GlyphSource, quiet: bool) -> BuildResult:
    """Run the pipeline, with a progress bar unless quiet."""
    if quiet:
        return pipeline.build(glyph_source)

    with create_progress() as progress:
        task_id = progress.add_task("Building", total=len(glyph_source))

        def update_progress(completed: int, *_: object) -> None:
            progress.update(task_id, completed=completed)

        return pipeline.build(glyph_source, progress_callback=update_progress)


def _first_validation_error(error: ValidationError) -> str:
    """Summarize the first pydantic error as 'field: message'."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "28 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"

    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
