"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from strokefont.core import GlyphWarning

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_WARN = "!"  # Warning
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for glyph building.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header."""
    console.print(f"\n[bold]Strokefont[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_source_info(source_path: str, glyph_count: int, characters: str) -> None:
    """Print glyph source information.

    Args:
        source_path: Path to the glyph source file
        glyph_count: Number of characters in the source
        characters: The characters, in source order
    """
    line = Text("  ")
    line.append(source_path)
    console.print(line)
    preview = characters if len(characters) <= 40 else characters[:40] + "…"
    console.print(f"  {glyph_count:,} characters {SYM_DOT} ", Text(preview), sep="")


def print_layout_info(width_policy: str, stroke_width: float, units_per_em: int) -> None:
    """Print the layout configuration in use."""
    console.print(
        f"  {width_policy} {SYM_DOT} stroke {stroke_width:g} {SYM_DOT} {units_per_em:,} UPM"
    )


def print_warnings(warnings: Sequence[GlyphWarning], verbose: bool) -> None:
    """Print recoverable per-glyph problems.

    Args:
        warnings: Warnings collected during the build
        verbose: Whether to list every warning
    """
    if not warnings:
        return

    console.print(f"  [yellow]{SYM_WARN} {len(warnings)} warnings[/yellow]")
    if verbose:
        for warning in warnings[:20]:
            line = Text(f"    {warning.kind} ")
            line.append(repr(warning.character), style="bold")
            line.append(f": {warning.message}")
            console.print(line)
        if len(warnings) > 20:
            console.print(f"    {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(warnings) - 20} more)")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_summary(
    glyphs: int,
    empty: int,
    fallbacks: int,
    errors: int,
    advance_width: int | None = None,
) -> None:
    """Print glyph counts of a build.

    Args:
        glyphs: Number of glyphs emitted, including the undefined glyph
        empty: Number of glyphs with no ink
        fallbacks: Number of glyphs emitted with unmerged capsules
        errors: Number of characters that failed
        advance_width: Shared advance width for monospace builds
    """
    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {glyphs} glyphs {SYM_DOT} {empty} empty {SYM_DOT} {fallbacks} unmerged {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )
    if advance_width is not None:
        console.print(f"  advance width {advance_width}")


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    avg_time_ms: float | None = None,
) -> None:
    """Print success message.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total build time in seconds
        avg_time_ms: Average measurement time per glyph in milliseconds
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    if avg_time_ms is not None:
        console.print(f"  {avg_time_ms:.1f}ms avg per glyph")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
