"""Domain models for strokefont.

This module contains the core domain models representing stroke paths,
outlines and glyphs. All models are designed to be:

- Immutable (using frozen dataclasses)
- Serializable for inter-process communication (parallel measurement)
- Independent of shapely and fonttools implementation details

Key classes:
- Point: An immutable 2D point
- Polyline: One parsed pen stroke
- Contour: A closed polygon ring
- Face / Outline: The unified filled shape of a glyph
- BoundingBox: Axis-aligned extent
- GlyphMetrics / Glyph: The finished glyph record
"""

from strokefont.domain.contour import Contour, Point, WindingDirection
from strokefont.domain.glyph import NOTDEF_NAME, Glyph, GlyphMetrics
from strokefont.domain.outline import BoundingBox, Face, Outline
from strokefont.domain.path import Polyline

__all__: list[str] = [
    # Enums
    "WindingDirection",
    # Core types
    "Point",
    "Polyline",
    "Contour",
    "BoundingBox",
    "Face",
    "Outline",
    "GlyphMetrics",
    "Glyph",
    "NOTDEF_NAME",
]
