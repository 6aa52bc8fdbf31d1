"""Strokefont - Build outline fonts from single-stroke path data.

Strokefont takes centerline (single-stroke) glyph paths, strokes every segment
into a round-capped capsule, unions the capsules into closed outlines and fits
them into a font's metric space.

Example:
    $ strokefont alphabet.json -o Alphabet.ttf

This reads a JSON mapping of characters to path strings and writes a
TrueType font with one outline glyph per character.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
