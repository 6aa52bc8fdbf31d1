"""Stroke expansion of centerline polylines into capsule polygons."""

import math
from collections.abc import Iterable

import structlog

from strokefont.core.geometry import (
    DEGENERATE_LENGTH,
    arc_points,
    perpendicular_direction,
    segment_length,
)
from strokefont.domain import Contour, Point, Polyline
from strokefont.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


class StrokeExpander:
    """Expands line segments into round-capped capsules.

    Each capsule is a convex, counter-clockwise polygon: the rectangle around
    the segment at half the stroke width on either side, closed by a
    half-circle cap at each end. A capsule has ``2 * (cap_segments + 1)``
    points.

    Example:
        expander = StrokeExpander(stroke_width=0.1)
        capsules = expander.expand(polyline)
    """

    def __init__(self, stroke_width: float, cap_segments: int = 8) -> None:
        """Initialize the expander.

        Args:
            stroke_width: Full stroke width (same units as the path points)
            cap_segments: Straight pieces per half-circle cap

        Raises:
            ConfigurationError: If stroke_width is not positive or
                cap_segments is below 2
        """
        if not stroke_width > 0:
            raise ConfigurationError(f"stroke width must be positive, got {stroke_width}")
        if cap_segments < 2:
            raise ConfigurationError(f"cap segments must be at least 2, got {cap_segments}")

        self.stroke_width = stroke_width
        self.cap_segments = cap_segments
        self.degenerate_count = 0

    @property
    def radius(self) -> float:
        return self.stroke_width / 2.0

    def expand_segment(self, p1: Point, p2: Point) -> Contour | None:
        """Build the capsule around one segment.

        Args:
            p1: Segment start
            p2: Segment end

        Returns:
            Capsule contour, or None for a zero-length segment
        """
        if segment_length(p1, p2) < DEGENERATE_LENGTH:
            self.degenerate_count += 1
            logger.debug("Degenerate segment skipped", point=p1.to_tuple())
            return None

        nx, ny = perpendicular_direction(p1, p2)
        left = math.atan2(ny, nx)
        right = math.atan2(-ny, -nx)

        # Cap at p2 sweeps from the right side round to the left side, then
        # the cap at p1 sweeps from the left side back to the right side.
        # The two straight edges between the caps are the rectangle sides.
        points = arc_points(p2, self.radius, right, self.cap_segments)
        points += arc_points(p1, self.radius, left, self.cap_segments)
        return Contour(points=tuple(points))

    def expand(self, polyline: Polyline) -> list[Contour]:
        """Expand every segment of a polyline.

        A closed polyline includes its closing segment.

        Args:
            polyline: Polyline to stroke

        Returns:
            One capsule per non-degenerate segment, in segment order
        """
        capsules: list[Contour] = []
        for p1, p2 in polyline.segments():
            capsule = self.expand_segment(p1, p2)
            if capsule is not None:
                capsules.append(capsule)
        return capsules

    def expand_all(self, polylines: Iterable[Polyline]) -> list[Contour]:
        """Expand all polylines of a glyph, preserving order."""
        capsules: list[Contour] = []
        for polyline in polylines:
            capsules.extend(self.expand(polyline))
        return capsules
