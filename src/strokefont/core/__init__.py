"""Core processing algorithms for strokefont.

This module contains the stroke-to-outline pipeline:

- Path parsing (move/line/curve/close commands into polylines)
- Stroke expansion (segments into round-capped capsules)
- Polygon union (capsules into non-overlapping faces)
- Metrics fitting (outlines into font units with advance widths)

All services are designed to be:
- Stateless per glyph (safe for use in worker processes)
- Deterministic for identical input and configuration

Key classes:
- PathParser: Parses path descriptions
- StrokeExpander: Builds capsule polygons
- PolygonUnifier: Unions capsules, falling back to unmerged capsules
- MetricsFitter: Positions outlines and assigns widths
- FontPipeline: Runs the two-pass build
"""

from strokefont.core.expander import StrokeExpander
from strokefont.core.metrics import MetricsFitter, glyph_name, order_glyphs
from strokefont.core.parser import (
    ParseResult,
    PathParser,
    parse_path,
    serialize_polylines,
)
from strokefont.core.pipeline import (
    BuildResult,
    FontPipeline,
    GlyphWarning,
    MeasuredGlyph,
    measure_glyph,
)
from strokefont.core.unifier import PolygonUnifier, UnionResult

__all__ = [
    # Pipeline
    "BuildResult",
    "FontPipeline",
    "GlyphWarning",
    "MeasuredGlyph",
    "measure_glyph",
    # Stages
    "MetricsFitter",
    "ParseResult",
    "PathParser",
    "PolygonUnifier",
    "StrokeExpander",
    "UnionResult",
    # Functions
    "glyph_name",
    "order_glyphs",
    "parse_path",
    "serialize_polylines",
]
