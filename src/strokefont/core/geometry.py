"""Geometric operations for stroke expansion and outline union.

This module provides core mathematical utilities for:
- Segment length and perpendicular direction
- Semicircular arc tessellation
- Conversion between domain contours/faces and shapely polygons

All functions are pure, stateless, and designed for use in parallel processing.
"""

import math

from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient

from strokefont.domain import Contour, Face, Point

# Segments shorter than this are treated as zero-length.
DEGENERATE_LENGTH = 1e-10


def segment_length(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def perpendicular_direction(p1: Point, p2: Point) -> tuple[float, float]:
    """Calculate the unit perpendicular vector to a line from p1 to p2.

    The perpendicular is rotated 90 degrees counter-clockwise from the
    direction vector (p2 - p1), i.e. it points to the left of the segment.

    Args:
        p1: Start point of line
        p2: End point of line

    Returns:
        Tuple (px, py) representing the unit perpendicular vector

    Raises:
        ValueError: If p1 and p2 are the same point (zero-length line)

    Examples:
        >>> perpendicular_direction(Point(0.0, 0.0), Point(1.0, 0.0))
        (-0.0, 1.0)
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    length = math.hypot(dx, dy)

    if length < DEGENERATE_LENGTH:
        raise ValueError("Cannot calculate perpendicular of zero-length line")

    # Rotate 90 degrees counter-clockwise: (x, y) -> (-y, x)
    return -dy / length, dx / length


def arc_points(
    center: Point, radius: float, start_angle: float, segments: int
) -> list[Point]:
    """Tessellate a counter-clockwise half circle.

    Args:
        center: Arc center
        radius: Arc radius
        start_angle: Angle of the first point, in radians
        segments: Number of straight pieces; segments + 1 points are returned

    Returns:
        Points from start_angle to start_angle + pi inclusive
    """
    step = math.pi / segments
    return [
        Point(
            center.x + radius * math.cos(start_angle + i * step),
            center.y + radius * math.sin(start_angle + i * step),
        )
        for i in range(segments + 1)
    ]


def contour_to_polygon(contour: Contour) -> Polygon:
    """Build a shapely polygon from a contour's ring."""
    return Polygon([p.to_tuple() for p in contour.points])


def face_to_polygon(face: Face) -> Polygon:
    """Build a shapely polygon from a face and its holes."""
    return Polygon(
        [p.to_tuple() for p in face.exterior.points],
        holes=[[p.to_tuple() for p in hole.points] for hole in face.holes],
    )


def _ring_to_contour(coords: list[tuple[float, float]]) -> Contour:
    # shapely repeats the first coordinate at the end of every ring
    if len(coords) > 1 and coords[0] == coords[-1]:
        coords = coords[:-1]
    return Contour(points=tuple(Point(float(x), float(y)) for x, y in coords))


def polygon_to_face(polygon: Polygon) -> Face:
    """Convert a shapely polygon into a face.

    The exterior is oriented counter-clockwise and holes clockwise.
    """
    oriented = orient(polygon, sign=1.0)
    exterior = _ring_to_contour(list(oriented.exterior.coords))
    holes = tuple(_ring_to_contour(list(ring.coords)) for ring in oriented.interiors)
    return Face(exterior=exterior, holes=holes)


def geometry_polygons(geometry: BaseGeometry) -> list[Polygon]:
    """Extract the non-empty polygons of a union result.

    Lines and points that boolean operations can leave behind are dropped.
    Polygons are returned sorted by their bounds so face order does not
    depend on GEOS internals.
    """
    if geometry.is_empty:
        return []

    if isinstance(geometry, Polygon):
        polygons = [geometry]
    elif isinstance(geometry, (MultiPolygon, GeometryCollection)):
        polygons = [
            part
            for member in geometry.geoms
            for part in geometry_polygons(member)
        ]
    else:
        polygons = []

    polygons = [p for p in polygons if not p.is_empty and p.area > 0]
    return sorted(polygons, key=lambda p: p.bounds)
