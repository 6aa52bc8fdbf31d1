"""Boolean union of capsule polygons into glyph outlines.

This module provides the PolygonUnifier which folds all capsules of one glyph
into a single shapely geometry and reads it back as faces. When the union
algebra fails, the unmerged capsules are returned instead so that one bad
glyph never stops a build.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog
from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from strokefont.core.geometry import contour_to_polygon, geometry_polygons, polygon_to_face
from strokefont.domain import BoundingBox, Contour, Face, Outline
from strokefont.exceptions import UnionFailureError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UnionResult:
    """Result of unifying one glyph's capsules.

    Attributes:
        outline: Unified outline (or unmerged capsules on failure)
        bbox: Bounding box of the outline, zero box when empty
        warning: UnionFailure description when the fallback was used
    """

    outline: Outline
    bbox: BoundingBox
    warning: str | None = None

    @property
    def merged(self) -> bool:
        return self.outline.merged


class PolygonUnifier:
    """Merges capsules into non-overlapping closed contours.

    Capsules are folded left to right in input order, so the same input
    always produces the same faces.

    Example:
        unifier = PolygonUnifier()
        result = unifier.unify(capsules)
        for face in result.outline.faces:
            print(len(face.exterior))
    """

    def unify(self, capsules: Sequence[Contour], character: str | None = None) -> UnionResult:
        """Union all capsules of a glyph.

        Args:
            capsules: Capsule contours, counter-clockwise
            character: Character being built, for log context

        Returns:
            UnionResult with the outline and its bounding box. Never raises
            for geometric failures.
        """
        if not capsules:
            return UnionResult(outline=Outline(), bbox=BoundingBox())

        try:
            faces = self._merge(capsules)
        except UnionFailureError as e:
            logger.warning(
                "Union failed, using unmerged capsules",
                character=character,
                capsules=len(capsules),
                reason=e.reason,
            )
            outline = Outline(
                faces=tuple(Face(exterior=c) for c in capsules),
                merged=False,
            )
            return UnionResult(
                outline=outline,
                bbox=outline.bounding_box(),
                warning=str(e),
            )

        outline = Outline(faces=tuple(faces), merged=True)
        logger.debug(
            "Capsules unified",
            character=character,
            capsules=len(capsules),
            faces=len(faces),
        )
        return UnionResult(outline=outline, bbox=outline.bounding_box())

    def _merge(self, capsules: Sequence[Contour]) -> list[Face]:
        """Fold the capsules into one geometry and read back its faces.

        Raises:
            UnionFailureError: If any pairwise union fails or the final
                geometry is invalid
        """
        polygons = [contour_to_polygon(c) for c in capsules]
        for index, polygon in enumerate(polygons):
            if not polygon.is_valid:
                raise UnionFailureError(f"capsule {index} is not a simple polygon")

        result: BaseGeometry = polygons[0]
        for index, polygon in enumerate(polygons[1:], start=1):
            try:
                result = self._union(result, polygon)
            except (GEOSException, ValueError) as e:
                raise UnionFailureError(f"step {index}: {e}") from e

        if not result.is_valid:
            raise UnionFailureError("union produced an invalid geometry")

        return [polygon_to_face(p) for p in geometry_polygons(result)]

    @staticmethod
    def _union(accumulated: BaseGeometry, polygon: Polygon) -> BaseGeometry:
        return accumulated.union(polygon)
