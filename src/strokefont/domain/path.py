"""Polyline representation of parsed stroke paths."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from strokefont.domain.contour import Point


@dataclass(frozen=True)
class Polyline:
    """One pen stroke, from a move to the next move or close.

    Attributes:
        points: Ordered points visited by the pen
        closed: True if the subpath was closed with a close command
    """

    points: tuple[Point, ...]
    closed: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def is_empty(self) -> bool:
        """Check if the polyline has no points."""
        return len(self.points) == 0

    def segments(self) -> Iterator[tuple[Point, Point]]:
        """Iterate over consecutive point pairs.

        A closed polyline yields one extra segment from its last point back to
        its first, unless the path already returned to the start explicitly.

        Yields:
            (start, end) point pairs
        """
        for start, end in zip(self.points, self.points[1:]):
            yield start, end

        if self.closed and len(self.points) > 1 and self.points[-1] != self.points[0]:
            yield self.points[-1], self.points[0]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "points": [p.to_dict() for p in self.points],
            "closed": self.closed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polyline":
        """Deserialize from dictionary."""
        return cls(
            points=tuple(Point.from_dict(p) for p in data["points"]),
            closed=data.get("closed", False),
        )
