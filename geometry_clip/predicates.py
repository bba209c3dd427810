"""
Geometric predicates used by the clippers.

Scalar tests on points and rectangles: triangle area, point-in-triangle,
colinearity, point-to-line distance, point thinning and rectangle
validity/overlap/containment. All functions are pure.

Functions:
    area_of_triangle: Area of a triangle (always >= 0)
    point_inside_triangle: Is a point inside a triangle (1% tolerance)?
    colinear: Do three points lie along a line (or coincide)?
    point_line_distance: Distance from a point to an infinite line
    unique_points: Are two points more than a tolerance apart on some axis?
    is_valid_longitude_latitude: Is a point a valid lon-lat coordinate?
    is_valid_bounds: Is a rectangle valid within a coordinate domain?
    overlap: Do two rectangles intersect?
    subsumes: Does one rectangle contain another?
    in_bounds: Are all vertices within a rectangle (plus tolerance)?
"""

import math
import sys
from typing import Optional

import numpy as np

from geometry_clip.bounds import (
    Bounds,
    ClipContractError,
    LONGITUDE_LATITUDE,
    Point,
)

# Reciprocal line lengths at or below this are treated as infinitely long lines.
_MINIMUM_RECIPROCAL_LENGTH = 1e-12

# Dot-product tolerance of the unit-vector colinearity test.
_COLINEAR_TOLERANCE = 1e-6

# Triangle area slack for point_inside_triangle round-off.
_TRIANGLE_AREA_SCALE = 1.01


def area_of_triangle(p1: Point, p2: Point, p3: Point) -> float:
    """Area of the triangle with vertices p1, p2, p3."""
    (x1, y1), (x2, y2), (x3, y3) = p1, p2, p3
    a = x1 - x3
    b = y1 - y3
    c = x2 - x3
    d = y2 - y3
    return abs(0.5 * (a * d - b * c))


def point_inside_triangle(point: Point, p1: Point, p2: Point, p3: Point) -> bool:
    """
    Is point inside (or on) the triangle p1, p2, p3?

    The point is inside when the three sub-triangles it forms with the edges
    add up to no more than the triangle's area, allowing 1% for round-off.
    """
    triangle_area = _TRIANGLE_AREA_SCALE * area_of_triangle(p1, p2, p3)
    area = area_of_triangle(point, p2, p3)

    if area > triangle_area:
        return False

    area += area_of_triangle(point, p1, p2)

    if area > triangle_area:
        return False

    area += area_of_triangle(point, p1, p3)
    return area <= triangle_area


def _unit_vector(from_point: Point, to_point: Point) -> Point:
    dx = to_point[0] - from_point[0]
    dy = to_point[1] - from_point[1]
    reciprocal = 1.0 / math.sqrt(dx * dx + dy * dy)
    return dx * reciprocal, dy * reciprocal


def _is_reflection(origin: Point, a: Point, b: Point) -> bool:
    return origin == (0.0, 0.0) and a[0] == -b[0] and a[1] == -b[1]


def colinear(p1: Point, p2: Point, p3: Point) -> bool:
    """
    Do p1, p2, p3 lie along one line?

    Coincident points and reflections through the origin count as colinear
    and are checked first since the unit-vector test below is not reliable
    for them. Otherwise the unit vectors P1->P2, P1->P3 and P2->P3 are
    formed and both dot products P1->P2 . P1->P3 and P1->P2 . P2->P3 must
    have magnitude within 1e-6 of 1.

    Raises:
        ClipContractError: If any coordinate is NaN
    """
    (x1, y1), (x2, y2), (x3, y3) = p1, p2, p3

    if any(math.isnan(value) for value in (x1, y1, x2, y2, x3, y3)):
        raise ClipContractError(f"colinear() given NaN coordinates: {p1}, {p2}, {p3}")

    p1, p2, p3 = (x1, y1), (x2, y2), (x3, y3)

    if p1 == p2 or p1 == p3 or p2 == p3:
        return True

    if _is_reflection(p1, p2, p3) or _is_reflection(p2, p1, p3) or _is_reflection(p3, p1, p2):
        return True

    lower = 1.0 - _COLINEAR_TOLERANCE
    upper = 1.0 + _COLINEAR_TOLERANCE
    v1x, v1y = _unit_vector(p1, p2)
    v2x, v2y = _unit_vector(p1, p3)

    if not lower <= abs(v1x * v2x + v1y * v2y) <= upper:
        return False

    v3x, v3y = _unit_vector(p2, p3)
    return lower <= abs(v1x * v3x + v1y * v3y) <= upper


def point_line_distance(point: Point, a: Point, b: Point) -> float:
    """
    Nearest distance from point to the infinite line through a and b.

    If a == b the line is degenerate and the point-to-point distance is
    returned. If the line is so long that the reciprocal of its length
    underflows (<= 1e-12), the result is 0.0 when the three points are
    colinear and sys.float_info.max otherwise.

    Raises:
        ClipContractError: If any coordinate is NaN
    """
    (x, y), (x1, y1), (x2, y2) = point, a, b

    if any(math.isnan(value) for value in (x, y, x1, y1, x2, y2)):
        raise ClipContractError(
            f"point_line_distance() given NaN coordinates: {point}, {a}, {b}"
        )

    dx = x2 - x1
    dy = y2 - y1
    line_length = math.sqrt(dx * dx + dy * dy)

    if line_length == 0.0:
        dx0 = x - x1
        dy0 = y - y1
        return math.sqrt(dx0 * dx0 + dy0 * dy0)

    reciprocal_length = 1.0 / line_length

    if reciprocal_length <= _MINIMUM_RECIPROCAL_LENGTH:
        return 0.0 if colinear(point, a, b) else sys.float_info.max

    cross = dx * (y - y1) - (x - x1) * dy
    return reciprocal_length * abs(cross)


def unique_points(p1: Point, p2: Point, tolerance: float) -> bool:
    """True if p1 and p2 differ by more than tolerance along either axis."""
    delta_x = p1[0] - p2[0]
    delta_y = p1[1] - p2[1]
    return (
        delta_x > tolerance or delta_x < -tolerance
        or delta_y > tolerance or delta_y < -tolerance
    )


def is_valid_longitude_latitude(longitude: float, latitude: float) -> bool:
    return -180.0 <= longitude <= 180.0 and -90.0 <= latitude <= 90.0


def is_valid_bounds(bounds: Optional[Bounds], domain: Bounds = LONGITUDE_LATITUDE) -> bool:
    """
    Is bounds a non-crossed rectangle lying within domain?

    With the default domain this is the longitude-latitude check:
    x_min in [-180, 180], x_max in [x_min, 180], y_min in [-90, 90] and
    y_max in [y_min, 90]. NaN coordinates always fail.
    """
    if bounds is None:
        return False
    return (
        domain.x_min <= bounds.x_min <= domain.x_max
        and bounds.x_min <= bounds.x_max <= domain.x_max
        and domain.y_min <= bounds.y_min <= domain.y_max
        and bounds.y_min <= bounds.y_max <= domain.y_max
    )


def _require_valid_pair(a: Bounds, b: Bounds, domain: Bounds, operation: str) -> None:
    if not is_valid_bounds(a, domain):
        raise ClipContractError(f"{operation}() given invalid bounds: {a}")
    if not is_valid_bounds(b, domain):
        raise ClipContractError(f"{operation}() given invalid bounds: {b}")


def overlap(a: Bounds, b: Bounds, domain: Bounds = LONGITUDE_LATITUDE) -> bool:
    """Do rectangles a and b intersect (touching edges count)?"""
    _require_valid_pair(a, b, domain, 'overlap')
    outside = (
        a.y_min > b.y_max
        or a.y_max < b.y_min
        or a.x_min > b.x_max
        or a.x_max < b.x_min
    )
    return not outside


def subsumes(a: Bounds, b: Bounds, domain: Bounds = LONGITUDE_LATITUDE) -> bool:
    """Does rectangle a contain rectangle b?"""
    _require_valid_pair(a, b, domain, 'subsumes')
    return (
        a.x_min <= b.x_min <= a.x_max
        and a.x_min <= b.x_max <= a.x_max
        and a.y_min <= b.y_min <= a.y_max
        and a.y_min <= b.y_max <= a.y_max
    )


def in_bounds(vertices, bounds: Bounds, tolerance: float = 1e-3) -> bool:
    """
    Are all vertices (an (n, 2) array-like) within bounds +/- tolerance?

    An empty vertex array is trivially in bounds.
    """
    coordinates = np.asarray(vertices, dtype=np.float64).reshape(-1, 2)

    if len(coordinates) == 0:
        return True

    x = coordinates[:, 0]
    y = coordinates[:, 1]
    return bool(
        np.all(x >= bounds.x_min - tolerance)
        and np.all(x <= bounds.x_max + tolerance)
        and np.all(y >= bounds.y_min - tolerance)
        and np.all(y <= bounds.y_max + tolerance)
    )
