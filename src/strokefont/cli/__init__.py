"""Command-line interface for strokefont.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bar for glyph building
- Verbose/quiet output modes
- Dry-run mode that builds without writing a font
- Detailed warning and error reporting
"""

from strokefont.cli.app import cli, main

__all__ = ["cli", "main"]
