"""I/O layer for strokefont.

This module handles the boundaries of the pipeline: reading glyph source
data and writing finished glyphs with fonttools. The core pipeline itself
never touches files.

Key classes:
- GlyphSource: Lazily-loaded character to path mapping
- FontWriter: Assemble and save a TrueType font
"""

from strokefont.io.source import GlyphSource
from strokefont.io.writer import FontWriter

__all__ = [
    "FontWriter",
    "GlyphSource",
]
