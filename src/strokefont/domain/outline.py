"""Unified outline representation.

An outline is the filled shape of one glyph: a set of faces, each a connected
region bounded by one exterior ring and any number of hole rings.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from strokefont.domain.contour import Contour


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min_x: Minimum X coordinate
        min_y: Minimum Y coordinate
        max_x: Maximum X coordinate
        max_y: Maximum Y coordinate
    """

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def is_empty(self) -> bool:
        """Check if the box has collapsed to a point."""
        return self.width == 0 and self.height == 0

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    @classmethod
    def from_contours(cls, contours: Iterable[Contour]) -> "BoundingBox":
        """Compute the box enclosing all points of the given contours.

        Returns the zero box when there are no points.
        """
        xs: list[float] = []
        ys: list[float] = []
        for contour in contours:
            xs.extend(p.x for p in contour.points)
            ys.extend(p.y for p in contour.points)

        if not xs:
            return cls()
        return cls(min(xs), min(ys), max(xs), max(ys))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BoundingBox":
        """Deserialize from dictionary."""
        return cls(
            min_x=data["min_x"],
            min_y=data["min_y"],
            max_x=data["max_x"],
            max_y=data["max_y"],
        )


@dataclass(frozen=True)
class Face:
    """One connected region of a unified outline.

    Attributes:
        exterior: Outer boundary, counter-clockwise
        holes: Inner boundaries, clockwise
    """

    exterior: Contour
    holes: tuple[Contour, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.holes, tuple):
            object.__setattr__(self, "holes", tuple(self.holes))

    @property
    def contours(self) -> tuple[Contour, ...]:
        """Exterior followed by holes."""
        return (self.exterior, *self.holes)

    def area(self) -> float:
        """Filled area of the face (exterior minus holes)."""
        return abs(self.exterior.signed_area()) - sum(
            abs(hole.signed_area()) for hole in self.holes
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "exterior": self.exterior.to_dict(),
            "holes": [h.to_dict() for h in self.holes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Face":
        """Deserialize from dictionary."""
        return cls(
            exterior=Contour.from_dict(data["exterior"]),
            holes=tuple(Contour.from_dict(h) for h in data.get("holes", [])),
        )


@dataclass(frozen=True)
class Outline:
    """The filled shape of one glyph.

    Attributes:
        faces: Connected regions, in deterministic order
        merged: False when the boolean union failed and the faces are the raw,
            possibly overlapping capsules
    """

    faces: tuple[Face, ...] = field(default_factory=tuple)
    merged: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.faces, tuple):
            object.__setattr__(self, "faces", tuple(self.faces))

    def is_empty(self) -> bool:
        """Check if the outline has no faces (e.g. a space)."""
        return len(self.faces) == 0

    @property
    def contours(self) -> list[Contour]:
        """All rings of all faces, each exterior followed by its holes."""
        return [contour for face in self.faces for contour in face.contours]

    def area(self) -> float:
        """Total filled area.

        Only meaningful for merged outlines; unmerged capsules may overlap.
        """
        return sum(face.area() for face in self.faces)

    def bounding_box(self) -> BoundingBox:
        """Bounding box of all exterior rings."""
        return BoundingBox.from_contours(face.exterior for face in self.faces)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "faces": [f.to_dict() for f in self.faces],
            "merged": self.merged,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Outline":
        """Deserialize from dictionary."""
        return cls(
            faces=tuple(Face.from_dict(f) for f in data["faces"]),
            merged=data.get("merged", True),
        )
