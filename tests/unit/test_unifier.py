"""Unit tests for capsule union."""

from unittest.mock import patch

import pytest
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, LineString, MultiPolygon, Polygon

from strokefont.core.expander import StrokeExpander
from strokefont.core.geometry import contour_to_polygon, geometry_polygons, polygon_to_face
from strokefont.core.parser import parse_path
from strokefont.core.unifier import PolygonUnifier
from strokefont.domain import BoundingBox, Contour, Point, WindingDirection


def capsules_for(path: str, width: float = 0.1) -> list[Contour]:
    """Parse and expand a path with the default y-flip."""
    return StrokeExpander(width).expand_all(parse_path(path))


@pytest.fixture
def unifier() -> PolygonUnifier:
    return PolygonUnifier()


class TestGeometryConversion:
    """Tests for shapely conversion helpers."""

    def test_polygon_to_face_orients_exterior(self) -> None:
        """A clockwise shapely ring comes back counter-clockwise."""
        polygon = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])

        face = polygon_to_face(polygon)

        assert face.exterior.direction == WindingDirection.COUNTER_CLOCKWISE
        assert len(face.exterior) == 4

    def test_polygon_to_face_orients_holes(self) -> None:
        polygon = Polygon(
            [(0, 0), (10, 0), (10, 10), (0, 10)],
            holes=[[(2, 2), (4, 2), (4, 4), (2, 4)]],
        )

        face = polygon_to_face(polygon)

        assert len(face.holes) == 1
        assert face.holes[0].direction == WindingDirection.CLOCKWISE
        assert face.area() == pytest.approx(96.0)

    def test_geometry_polygons_drops_lines(self) -> None:
        square = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        collection = GeometryCollection([square, LineString([(5, 5), (6, 6)])])

        assert geometry_polygons(collection) == [square]

    def test_geometry_polygons_sorted(self) -> None:
        right = Polygon([(5, 0), (6, 0), (6, 1), (5, 1)])
        left = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])

        polygons = geometry_polygons(MultiPolygon([right, left]))

        assert [p.bounds[0] for p in polygons] == [0.0, 5.0]

    def test_geometry_polygons_empty(self) -> None:
        assert geometry_polygons(Polygon()) == []


class TestUnify:
    """Tests for PolygonUnifier.unify."""

    def test_connected_square(self, unifier: PolygonUnifier) -> None:
        """Three strokes sharing corners merge into one face."""
        capsules = capsules_for("M0 0L1 0L1 1L0 1")
        assert len(capsules) == 3

        result = unifier.unify(capsules, character="U")

        assert result.merged
        assert result.warning is None
        assert len(result.outline.faces) == 1

    def test_disjoint_strokes(self, unifier: PolygonUnifier) -> None:
        """Strokes farther apart than the stroke width stay separate."""
        result = unifier.unify(capsules_for("M0 0L0 1M0.5 0L0.5 1"))

        assert result.merged
        assert len(result.outline.faces) == 2

    def test_closed_square_has_hole(self, unifier: PolygonUnifier) -> None:
        """A closed square outline encloses a counter."""
        result = unifier.unify(capsules_for("M0 0L1 0L1 1L0 1Z"))

        assert len(result.outline.faces) == 1
        face = result.outline.faces[0]
        assert len(face.holes) == 1
        assert face.exterior.direction == WindingDirection.COUNTER_CLOCKWISE
        assert face.holes[0].direction == WindingDirection.CLOCKWISE

    def test_empty_input(self, unifier: PolygonUnifier) -> None:
        result = unifier.unify([])

        assert result.outline.is_empty()
        assert result.bbox == BoundingBox()
        assert result.warning is None

    def test_single_capsule(self, unifier: PolygonUnifier) -> None:
        capsules = capsules_for("M0 0L1 0")

        result = unifier.unify(capsules)

        assert len(result.outline.faces) == 1
        assert result.outline.area() == pytest.approx(abs(capsules[0].signed_area()))

    def test_bbox_covers_stroke(self, unifier: PolygonUnifier) -> None:
        """The box is the centerline box grown by the stroke radius."""
        result = unifier.unify(capsules_for("M0 0L1 0L1 1L0 1"))

        assert result.bbox.min_x == pytest.approx(-0.05)
        assert result.bbox.max_x == pytest.approx(1.05)
        assert result.bbox.min_y == pytest.approx(-0.05)
        assert result.bbox.max_y == pytest.approx(1.05)

    def test_area_never_exceeds_capsule_sum(self, unifier: PolygonUnifier) -> None:
        """Union area is at most the sum of capsule areas."""
        capsules = capsules_for("M0 0L1 1M0 1L1 0")

        result = unifier.unify(capsules)

        total = sum(abs(c.signed_area()) for c in capsules)
        assert result.outline.area() < total
        assert result.outline.area() >= max(abs(c.signed_area()) for c in capsules)

    def test_output_rings_valid_and_open(self, unifier: PolygonUnifier) -> None:
        """Rings do not repeat their first point and form valid polygons."""
        result = unifier.unify(capsules_for("M0 0L0.5 1L1 0M0.2 0.5L0.8 0.5"))

        for face in result.outline.faces:
            assert face.exterior.points[0] != face.exterior.points[-1]
            polygon = Polygon(
                [p.to_tuple() for p in face.exterior.points],
                holes=[[p.to_tuple() for p in h.points] for h in face.holes],
            )
            assert polygon.is_valid

    def test_deterministic(self, unifier: PolygonUnifier) -> None:
        capsules = capsules_for("M0 0L0.5 1L1 0M0.2 0.5L0.8 0.5")
        assert unifier.unify(capsules) == PolygonUnifier().unify(capsules)


class TestUnionFallback:
    """Tests for falling back to unmerged capsules."""

    def test_union_exception_falls_back(self, unifier: PolygonUnifier) -> None:
        """A failing union returns the raw capsules with a warning."""
        capsules = capsules_for("M0 0L1 0L1 1")

        with patch.object(PolygonUnifier, "_union", side_effect=GEOSException("boom")):
            result = unifier.unify(capsules, character="x")

        assert not result.merged
        assert result.warning is not None
        assert "boom" in result.warning
        assert [face.exterior for face in result.outline.faces] == capsules
        assert result.bbox == BoundingBox.from_contours(capsules)

    def test_invalid_capsule_falls_back(self, unifier: PolygonUnifier) -> None:
        """A self-intersecting ring is not unioned."""
        bowtie = Contour((Point(0, 0), Point(1, 1), Point(1, 0), Point(0, 1)))
        assert not contour_to_polygon(bowtie).is_valid

        result = unifier.unify([bowtie, *capsules_for("M0 0L1 0")])

        assert not result.merged
        assert "capsule 0" in (result.warning or "")
        assert len(result.outline.faces) == 2

    def test_single_capsule_never_calls_union(self, unifier: PolygonUnifier) -> None:
        with patch.object(PolygonUnifier, "_union", side_effect=GEOSException("boom")):
            result = unifier.unify(capsules_for("M0 0L1 0"))

        assert result.merged
