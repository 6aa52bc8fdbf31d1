"""Internal Bezier curve flattening algorithms.

This is an internal module used by the path parser to turn quadratic and
cubic curve commands into line segments. Not intended for public use.
"""

import math

from strokefont.domain import Point

# Subdivision depth limit; 2**12 pieces per curve is far past visual need.
_MAX_DEPTH = 12


def _distance_to_chord(p: Point, a: Point, b: Point) -> float:
    """Distance from p to the infinite line through a and b."""
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy)
    if length == 0.0:
        return math.hypot(p.x - a.x, p.y - a.y)
    return abs(dx * (a.y - p.y) - dy * (a.x - p.x)) / length


def _mid(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def flatten_quadratic(p0: Point, p1: Point, p2: Point, tolerance: float) -> list[Point]:
    """Flatten a quadratic Bezier curve.

    The curve deviates from its chord by at most half the control point's
    distance to that chord, which is the flatness test used here.

    Args:
        p0: Start point (current pen position)
        p1: Control point
        p2: End point
        tolerance: Maximum distance from true curve

    Returns:
        Points after p0 up to and including p2
    """
    if tolerance <= 0:
        raise ValueError("tolerance must be positive")

    result: list[Point] = []
    stack: list[tuple[Point, Point, Point, int]] = [(p0, p1, p2, 0)]

    while stack:
        a, c, b, depth = stack.pop()
        if depth >= _MAX_DEPTH or _distance_to_chord(c, a, b) / 2 <= tolerance:
            result.append(b)
            continue

        ac = _mid(a, c)
        cb = _mid(c, b)
        m = _mid(ac, cb)
        # Right half first so the left half is processed next.
        stack.append((m, cb, b, depth + 1))
        stack.append((a, ac, m, depth + 1))

    return result


def flatten_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, tolerance: float
) -> list[Point]:
    """Flatten a cubic Bezier curve using De Casteljau subdivision.

    A cubic stays within 3/4 of its farthest control point's chord distance,
    which bounds the error of replacing it by the chord.

    Args:
        p0: Start point (current pen position)
        p1: First control point
        p2: Second control point
        p3: End point
        tolerance: Maximum distance from true curve

    Returns:
        Points after p0 up to and including p3
    """
    if tolerance <= 0:
        raise ValueError("tolerance must be positive")

    result: list[Point] = []
    stack: list[tuple[Point, Point, Point, Point, int]] = [(p0, p1, p2, p3, 0)]

    while stack:
        a, c1, c2, b, depth = stack.pop()
        deviation = 0.75 * max(_distance_to_chord(c1, a, b), _distance_to_chord(c2, a, b))
        if depth >= _MAX_DEPTH or deviation <= tolerance:
            result.append(b)
            continue

        q1 = _mid(a, c1)
        q2 = _mid(c1, c2)
        q3 = _mid(c2, b)
        r1 = _mid(q1, q2)
        r2 = _mid(q2, q3)
        m = _mid(r1, r2)
        stack.append((m, r2, q3, b, depth + 1))
        stack.append((a, q1, r1, m, depth + 1))

    return result
