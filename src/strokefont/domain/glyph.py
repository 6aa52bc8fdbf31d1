"""Glyph representation and metrics.

This module defines the finished glyph record handed to the font assembler:
identity, outline in font units and horizontal metrics.
"""

from dataclasses import dataclass, field
from typing import Any

from strokefont.domain.outline import BoundingBox, Outline

NOTDEF_NAME = ".notdef"


@dataclass(frozen=True)
class GlyphMetrics:
    """Horizontal metrics of a fitted glyph, in font units.

    Attributes:
        bbox: Bounding box of the fitted outline
        glyph_width: Width of the ink
        advance_width: Horizontal advance
        left_side_bearing: Space left of the ink
        right_side_bearing: Space right of the ink
    """

    bbox: BoundingBox
    glyph_width: int
    advance_width: int
    left_side_bearing: int
    right_side_bearing: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "bbox": self.bbox.to_dict(),
            "glyph_width": self.glyph_width,
            "advance_width": self.advance_width,
            "lsb": self.left_side_bearing,
            "rsb": self.right_side_bearing,
        }


@dataclass(frozen=True)
class Glyph:
    """A finished glyph.

    Created once per character during a build and never mutated afterwards.

    Attributes:
        name: Glyph name (e.g., "A", "zero", ".notdef")
        character: Source character (None for the undefined glyph)
        unicode: Unicode code point (None for the undefined glyph)
        outline: Outline in font units
        metrics: Horizontal metrics
    """

    name: str
    character: str | None
    unicode: int | None
    outline: Outline = field(default_factory=Outline)
    metrics: GlyphMetrics = field(
        default_factory=lambda: GlyphMetrics(BoundingBox(), 0, 0, 0, 0)
    )

    @property
    def advance_width(self) -> int:
        return self.metrics.advance_width

    def is_empty(self) -> bool:
        """Check if glyph has no outline.

        Empty glyphs include spaces and the undefined glyph.
        """
        return self.outline.is_empty()

    def is_notdef(self) -> bool:
        """Check if this is the reserved undefined glyph."""
        return self.name == NOTDEF_NAME

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "character": self.character,
            "unicode": self.unicode,
            "outline": self.outline.to_dict(),
            "metrics": self.metrics.to_dict(),
        }
