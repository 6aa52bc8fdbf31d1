"""Metrics fitting of unified outlines into font units.

This module maps outlines from normalized design space onto the font's em
square, positions them on the baseline and assigns advance widths and side
bearings under the configured width policy.
"""

from collections.abc import Iterable

import shapely
import structlog
from fontTools.agl import UV2AGL
from fontTools.misc.roundTools import otRound
from shapely.affinity import affine_transform

from strokefont.config import LayoutConfig, WidthPolicy
from strokefont.core.geometry import face_to_polygon, geometry_polygons, polygon_to_face
from strokefont.domain import (
    NOTDEF_NAME,
    BoundingBox,
    Contour,
    Face,
    Glyph,
    GlyphMetrics,
    Outline,
    Point,
)
from strokefont.exceptions import ConfigurationError

# Font units are integers; outlines are snapped to this grid.
GRID_SIZE = 1.0

logger = structlog.get_logger(__name__)


def glyph_name(character: str) -> str:
    """Production glyph name for a character.

    Uses the Adobe Glyph List where it has a name, otherwise ``uniXXXX``
    (or ``uXXXXX`` outside the BMP).
    """
    code_point = ord(character)
    name = UV2AGL.get(code_point)
    if name is not None:
        return name
    if code_point > 0xFFFF:
        return f"u{code_point:05X}"
    return f"uni{code_point:04X}"


def order_glyphs(glyphs: Iterable[Glyph]) -> list[Glyph]:
    """Order glyphs for emission.

    The undefined glyph comes first, then all others by code point. The sort
    is stable, so equal keys keep their input order.
    """
    return sorted(
        glyphs,
        key=lambda g: (not g.is_notdef(), g.unicode if g.unicode is not None else -1),
    )


class MetricsFitter:
    """Fits normalized outlines into font metric space.

    X maps by units-per-em. Y maps by the ascender (or units-per-em). One
    normalized baseline is shared by every glyph of a build: with baseline
    normalization it is the lowest ink of the non-descender glyphs, so those
    rest on or above y=0 and descender characters hang below it. Outlines are
    snapped to the integer grid without introducing self-intersections.

    Example:
        fitter = MetricsFitter(settings.layout)
        baseline = fitter.baseline_offset([("A", bbox)])
        glyph = fitter.fit("A", outline, bbox, baseline=baseline)
    """

    def __init__(self, layout: LayoutConfig) -> None:
        """Initialize the fitter.

        Args:
            layout: Layout configuration

        Raises:
            ConfigurationError: If units-per-em is not positive
        """
        if layout.units_per_em <= 0:
            raise ConfigurationError(f"units per em must be positive, got {layout.units_per_em}")
        self.layout = layout

    @property
    def is_monospace(self) -> bool:
        return self.layout.width_policy == WidthPolicy.MONOSPACE

    @property
    def _bearing_ratio(self) -> float:
        return self.layout.side_bearing_percent / 100.0

    def glyph_width(self, bbox: BoundingBox) -> float:
        """Ink width in font units of a normalized bounding box."""
        return bbox.width * self.layout.units_per_em

    def monospace_advance(self, bboxes: Iterable[BoundingBox]) -> int:
        """Shared advance width for a monospace build.

        Computed from the widest glyph: ``max_width * (1 + 2 * ratio)``. When
        every glyph is empty, half an em is used so spaces stay visible.

        Args:
            bboxes: Normalized bounding boxes of every glyph in the build

        Returns:
            Advance width in font units
        """
        max_width = max((self.glyph_width(b) for b in bboxes), default=0.0)
        if max_width <= 0:
            return self.layout.units_per_em // 2
        return otRound(max_width * (1 + 2 * self._bearing_ratio))

    def baseline_offset(self, measured: Iterable[tuple[str, BoundingBox]]) -> float:
        """Normalized Y that maps to the font baseline for a whole build.

        Without baseline normalization this is the configured baseline. With
        it, the lowest ink point of all non-descender glyphs; the configured
        baseline is used when no such glyph has ink.

        Args:
            measured: (character, normalized bounding box) of every glyph

        Returns:
            Normalized baseline Y
        """
        if not self.layout.baseline_normalization:
            return self.layout.baseline

        bottoms = [
            bbox.min_y
            for character, bbox in measured
            if character not in self.layout.descender_characters and not bbox.is_empty()
        ]
        return min(bottoms, default=self.layout.baseline)

    def notdef_advance(self, monospace_advance: int | None = None) -> int:
        """Advance width of the undefined glyph."""
        if self.is_monospace and monospace_advance is not None:
            return monospace_advance
        return self.layout.units_per_em // 2

    def fit(
        self,
        character: str,
        outline: Outline,
        bbox: BoundingBox,
        advance: int | None = None,
        baseline: float | None = None,
    ) -> Glyph:
        """Fit a normalized outline into font units.

        Args:
            character: Source character
            outline: Outline in normalized, y-up design space
            bbox: Bounding box of the outline
            advance: Shared advance width; required under monospace policy
            baseline: Normalized Y placed on the font baseline, normally
                from baseline_offset(); defaults to the configured baseline

        Returns:
            Finished glyph with metrics

        Raises:
            ValueError: If the policy is monospace and no advance is given
        """
        width = self.glyph_width(bbox)

        if self.is_monospace:
            if advance is None:
                raise ValueError("monospace layout needs the shared advance width")
            advance_width = float(advance)
            left = (advance_width - width) / 2.0
        else:
            bearing = max(width * self._bearing_ratio, float(self.layout.side_bearing_minimum))
            advance_width = width + 2 * bearing
            left = bearing

        if baseline is None:
            baseline = self.layout.baseline

        x_scale = float(self.layout.units_per_em)
        y_scale = float(self.layout.y_scale)
        matrix = [x_scale, 0.0, 0.0, y_scale, left - bbox.min_x * x_scale, -baseline * y_scale]

        faces: list[Face] = []
        for face in outline.faces:
            polygon = affine_transform(face_to_polygon(face), matrix)
            # set_precision returns valid geometry; collapsed edges and
            # touching rings come back repaired
            parts = geometry_polygons(shapely.set_precision(polygon, GRID_SIZE))
            if not parts:
                logger.debug("Collapsed face dropped", character=character)
                continue
            faces.extend(_integer_face(polygon_to_face(part)) for part in parts)

        fitted = Outline(faces=tuple(faces), merged=outline.merged)
        fitted_bbox = fitted.bounding_box()
        advance_int = otRound(advance_width)

        metrics = GlyphMetrics(
            bbox=fitted_bbox,
            glyph_width=otRound(fitted_bbox.width),
            advance_width=advance_int,
            left_side_bearing=otRound(fitted_bbox.min_x),
            right_side_bearing=otRound(advance_int - fitted_bbox.max_x),
        )
        return Glyph(
            name=glyph_name(character),
            character=character,
            unicode=ord(character),
            outline=fitted,
            metrics=metrics,
        )

    def notdef_glyph(self, advance: int) -> Glyph:
        """The reserved undefined glyph: no outline, fixed advance."""
        return Glyph(
            name=NOTDEF_NAME,
            character=None,
            unicode=None,
            metrics=GlyphMetrics(
                bbox=BoundingBox(),
                glyph_width=0,
                advance_width=advance,
                left_side_bearing=0,
                right_side_bearing=advance,
            ),
        )


def _integer_face(face: Face) -> Face:
    """Store grid-snapped coordinates as ints."""

    def snap(contour: Contour) -> Contour:
        return Contour(points=tuple(Point(otRound(p.x), otRound(p.y)) for p in contour.points))

    return Face(exterior=snap(face.exterior), holes=tuple(snap(h) for h in face.holes))
