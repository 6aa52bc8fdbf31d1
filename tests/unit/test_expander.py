"""Unit tests for stroke expansion and its geometry helpers."""

import math

import pytest

from strokefont.core.expander import StrokeExpander
from strokefont.core.geometry import (
    arc_points,
    contour_to_polygon,
    perpendicular_direction,
    segment_length,
)
from strokefont.domain import Point, Polyline, WindingDirection
from strokefont.exceptions import ConfigurationError


@pytest.fixture
def expander() -> StrokeExpander:
    return StrokeExpander(stroke_width=0.1, cap_segments=8)


class TestGeometryHelpers:
    """Tests for the geometry functions used by the expander."""

    def test_segment_length(self) -> None:
        assert segment_length(Point(0, 0), Point(3, 4)) == pytest.approx(5.0)

    def test_perpendicular_points_left(self) -> None:
        """The perpendicular of a rightward segment points up."""
        px, py = perpendicular_direction(Point(0, 0), Point(2, 0))
        assert px == pytest.approx(0.0)
        assert py == pytest.approx(1.0)

    def test_perpendicular_is_unit_length(self) -> None:
        px, py = perpendicular_direction(Point(1, 1), Point(4, 5))
        assert math.hypot(px, py) == pytest.approx(1.0)

    def test_perpendicular_zero_length(self) -> None:
        with pytest.raises(ValueError, match="zero-length"):
            perpendicular_direction(Point(1, 1), Point(1, 1))

    def test_arc_points(self) -> None:
        """A half circle has segments + 1 points spanning pi radians."""
        points = arc_points(Point(0, 0), 1.0, -math.pi / 2, 4)

        assert len(points) == 5
        assert points[0].x == pytest.approx(0.0)
        assert points[0].y == pytest.approx(-1.0)
        assert points[2].x == pytest.approx(1.0)
        assert points[-1].y == pytest.approx(1.0)
        for p in points:
            assert math.hypot(p.x, p.y) == pytest.approx(1.0)


class TestExpanderConfiguration:
    """Tests for expander construction."""

    @pytest.mark.parametrize("width", [0.0, -0.1])
    def test_non_positive_width(self, width: float) -> None:
        with pytest.raises(ConfigurationError):
            StrokeExpander(stroke_width=width)

    def test_too_few_cap_segments(self) -> None:
        with pytest.raises(ConfigurationError):
            StrokeExpander(stroke_width=0.1, cap_segments=1)

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            StrokeExpander(stroke_width=0.0)

    def test_radius(self, expander: StrokeExpander) -> None:
        assert expander.radius == pytest.approx(0.05)


class TestExpandSegment:
    """Tests for single capsules."""

    def test_point_count(self, expander: StrokeExpander) -> None:
        capsule = expander.expand_segment(Point(0, 0), Point(1, 0))
        assert capsule is not None
        assert len(capsule) == 2 * (8 + 1)

    def test_counter_clockwise(self, expander: StrokeExpander) -> None:
        capsule = expander.expand_segment(Point(0, 0), Point(1, 0))
        assert capsule is not None
        assert capsule.direction == WindingDirection.COUNTER_CLOCKWISE

    @pytest.mark.parametrize(
        "p1, p2",
        [
            (Point(0, 0), Point(1, 0)),
            (Point(1, 0), Point(0, 0)),
            (Point(0, 0), Point(0, 1)),
            (Point(0.2, 0.9), Point(0.7, 0.1)),
        ],
    )
    def test_counter_clockwise_any_direction(
        self, expander: StrokeExpander, p1: Point, p2: Point
    ) -> None:
        """Winding does not depend on segment direction."""
        capsule = expander.expand_segment(p1, p2)
        assert capsule is not None
        assert capsule.signed_area() > 0

    def test_extent(self, expander: StrokeExpander) -> None:
        """The capsule reaches one radius past each end and to each side."""
        capsule = expander.expand_segment(Point(0, 0), Point(1, 0))
        assert capsule is not None

        min_x, min_y, max_x, max_y = capsule.bounding_box()
        assert min_x == pytest.approx(-0.05)
        assert max_x == pytest.approx(1.05)
        assert min_y == pytest.approx(-0.05)
        assert max_y == pytest.approx(0.05)

    def test_area_close_to_stadium(self, expander: StrokeExpander) -> None:
        """Area approaches rectangle plus circle as caps get finer."""
        capsule = expander.expand_segment(Point(0, 0), Point(1, 0))
        assert capsule is not None

        exact = 1.0 * 0.1 + math.pi * 0.05**2
        assert capsule.signed_area() == pytest.approx(exact, rel=0.01)
        assert capsule.signed_area() < exact

    def test_valid_simple_polygon(self, expander: StrokeExpander) -> None:
        capsule = expander.expand_segment(Point(0, 0), Point(0.3, 0.8))
        assert capsule is not None
        assert contour_to_polygon(capsule).is_valid

    def test_degenerate_segment(self, expander: StrokeExpander) -> None:
        """A zero-length segment yields no capsule and is counted."""
        assert expander.expand_segment(Point(0.5, 0.5), Point(0.5, 0.5)) is None
        assert expander.degenerate_count == 1


class TestExpandPolyline:
    """Tests for expanding whole polylines."""

    def test_open_polyline(self, expander: StrokeExpander) -> None:
        """An open polyline of n points gives n-1 capsules."""
        polyline = Polyline((Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)))
        assert len(expander.expand(polyline)) == 3

    def test_closed_polyline(self, expander: StrokeExpander) -> None:
        """A closed polyline of n points gives n capsules."""
        polyline = Polyline((Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)), closed=True)
        assert len(expander.expand(polyline)) == 4

    def test_single_point_polyline(self, expander: StrokeExpander) -> None:
        assert expander.expand(Polyline((Point(0.5, 0.5),))) == []

    def test_duplicate_points_skipped(self, expander: StrokeExpander) -> None:
        polyline = Polyline((Point(0, 0), Point(0, 0), Point(1, 0)))

        capsules = expander.expand(polyline)

        assert len(capsules) == 1
        assert expander.degenerate_count == 1

    def test_expand_all_keeps_order(self, expander: StrokeExpander) -> None:
        first = Polyline((Point(0, 0), Point(1, 0)))
        second = Polyline((Point(0, 5), Point(1, 5)))

        capsules = expander.expand_all([first, second])

        assert len(capsules) == 2
        assert capsules[0].bounding_box()[1] < capsules[1].bounding_box()[1]

    def test_deterministic(self, expander: StrokeExpander) -> None:
        polyline = Polyline((Point(0, 0), Point(0.4, 0.9), Point(1, 0)))
        assert expander.expand(polyline) == StrokeExpander(0.1, 8).expand(polyline)
