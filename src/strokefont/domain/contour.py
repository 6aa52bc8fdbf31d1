"""Core geometric types for outline representation.

This module defines the fundamental geometric types used throughout strokefont:
- Point: An immutable 2D point
- Contour: A closed polygon ring (capsule or outline boundary)
- WindingDirection: Enum for contour winding direction

All coordinates are y-up. Before metrics fitting they are in normalized design
space; afterwards they are in font units.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class WindingDirection(Enum):
    """Contour winding direction in a y-up coordinate system.

    Exterior rings produced by the pipeline wind counter-clockwise and holes
    wind clockwise. The font writer reverses both for TrueType output.
    """

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True)
class Contour:
    """A closed polygon ring.

    The ring is implicitly closed: the last point connects back to the first
    and the first point is never repeated at the end.

    Attributes:
        points: Points forming the ring, one per edge start
    """

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        The sign of the area indicates winding direction:
        - Positive area: counter-clockwise winding
        - Negative area: clockwise winding

        Returns:
            Signed area of the contour
        """
        n = len(self.points)
        if n < 3:
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        return area / 2.0

    @property
    def direction(self) -> WindingDirection:
        """Winding direction derived from the signed area."""
        if self.signed_area() < 0:
            return WindingDirection.CLOCKWISE
        return WindingDirection.COUNTER_CLOCKWISE

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate bounding box of the contour.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if not self.points:
            return (0.0, 0.0, 0.0, 0.0)

        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def contains_point(self, x: float, y: float) -> bool:
        """Check if point is inside contour using ray casting algorithm.

        Args:
            x: X coordinate of point to test
            y: Y coordinate of point to test

        Returns:
            True if point is inside contour, False otherwise
        """
        n = len(self.points)
        if n < 3:
            return False

        inside = False
        j = n - 1

        for i in range(n):
            xi, yi = self.points[i].x, self.points[i].y
            xj, yj = self.points[j].x, self.points[j].y

            if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
                inside = not inside

            j = i

        return inside

    def reversed(self) -> "Contour":
        """Return the same ring with opposite winding."""
        return Contour(points=tuple(reversed(self.points)))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary."""
        return cls(points=tuple(Point.from_dict(p) for p in data["points"]))
