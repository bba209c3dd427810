"""Tests for geometric predicates."""

import math
import sys

import numpy as np
import pytest

from geometry_clip.bounds import Bounds, ClipContractError, LONGITUDE_LATITUDE, UNBOUNDED
from geometry_clip.predicates import (
    area_of_triangle,
    colinear,
    in_bounds,
    is_valid_bounds,
    is_valid_longitude_latitude,
    overlap,
    point_inside_triangle,
    point_line_distance,
    subsumes,
    unique_points,
)


class TestTriangles:
    def test_area_of_right_triangle(self):
        assert area_of_triangle((0.0, 0.0), (4.0, 0.0), (0.0, 3.0)) == 6.0

    def test_area_is_orientation_independent(self):
        assert area_of_triangle((0.0, 0.0), (0.0, 3.0), (4.0, 0.0)) == 6.0

    def test_area_of_degenerate_triangle(self):
        assert area_of_triangle((0.0, 0.0), (1.0, 1.0), (2.0, 2.0)) == 0.0

    def test_point_inside_triangle(self):
        triangle = ((0.0, 0.0), (4.0, 0.0), (0.0, 4.0))
        assert point_inside_triangle((1.0, 1.0), *triangle)
        assert point_inside_triangle((0.0, 0.0), *triangle)
        assert not point_inside_triangle((3.0, 3.0), *triangle)
        assert not point_inside_triangle((-1.0, 2.0), *triangle)


class TestColinear:
    def test_points_along_a_line(self):
        assert colinear((0.0, 0.0), (1.0, 1.0), (2.0, 2.0))

    def test_out_of_order_points_along_a_line(self):
        assert colinear((2.0, 2.0), (0.0, 0.0), (1.0, 1.0))

    def test_right_angle_is_not_colinear(self):
        assert not colinear((0.0, 0.0), (1.0, 0.0), (0.0, 1.0))

    def test_coincident_points(self):
        assert colinear((3.0, 4.0), (3.0, 4.0), (10.0, -2.0))

    def test_reflection_through_origin(self):
        assert colinear((0.0, 0.0), (1.0, 2.0), (-1.0, -2.0))

    def test_nan_raises(self):
        with pytest.raises(ClipContractError):
            colinear((math.nan, 0.0), (1.0, 1.0), (2.0, 2.0))


class TestPointLineDistance:
    def test_distance_to_horizontal_line(self):
        assert point_line_distance((0.0, 1.0), (0.0, 0.0), (2.0, 0.0)) == 1.0

    def test_distance_is_to_infinite_line(self):
        assert point_line_distance((10.0, -3.0), (0.0, 0.0), (2.0, 0.0)) == 3.0

    def test_degenerate_line_gives_point_distance(self):
        assert point_line_distance((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == 5.0

    def test_very_long_colinear_line(self):
        assert point_line_distance((5.0, 0.0), (0.0, 0.0), (1e13, 0.0)) == 0.0

    def test_very_long_line_off_line_gives_maximum(self):
        assert point_line_distance((5.0, 1.0), (0.0, 0.0), (1e13, 0.0)) == sys.float_info.max

    def test_nan_raises(self):
        with pytest.raises(ClipContractError):
            point_line_distance((0.0, 0.0), (math.nan, 0.0), (1.0, 1.0))


class TestUniquePoints:
    def test_within_tolerance(self):
        assert not unique_points((0.0, 0.0), (0.0005, -0.0005), 0.001)

    def test_beyond_tolerance_on_one_axis(self):
        assert unique_points((0.0, 0.0), (0.0, -0.002), 0.001)

    def test_zero_tolerance(self):
        assert not unique_points((1.0, 1.0), (1.0, 1.0), 0.0)
        assert unique_points((1.0, 1.0), (1.0, 1.0 + 1e-12), 0.0)


class TestBoundsPredicates:
    def test_valid_longitude_latitude(self):
        assert is_valid_longitude_latitude(180.0, -90.0)
        assert not is_valid_longitude_latitude(181.0, 0.0)
        assert not is_valid_longitude_latitude(0.0, 90.5)
        assert not is_valid_longitude_latitude(math.nan, 0.0)

    def test_valid_bounds(self):
        assert is_valid_bounds(LONGITUDE_LATITUDE)
        assert is_valid_bounds(Bounds(5.0, 5.0, 1.0, 1.0))

    def test_invalid_bounds(self):
        assert not is_valid_bounds(None)
        assert not is_valid_bounds(Bounds(10.0, 0.0, 0.0, 10.0))
        assert not is_valid_bounds(Bounds(-200.0, 0.0, 0.0, 10.0))
        assert not is_valid_bounds(Bounds(0.0, 10.0, 0.0, math.nan))

    def test_valid_bounds_in_unbounded_domain(self):
        projected = Bounds(-2e7, 2e7, -1e7, 1e7)
        assert not is_valid_bounds(projected)
        assert is_valid_bounds(projected, UNBOUNDED)

    def test_overlap(self):
        a = Bounds(0.0, 10.0, 0.0, 10.0)
        assert overlap(a, Bounds(5.0, 15.0, 5.0, 15.0))
        assert overlap(a, Bounds(10.0, 20.0, 0.0, 10.0))
        assert not overlap(a, Bounds(11.0, 20.0, 0.0, 10.0))
        assert not overlap(a, Bounds(0.0, 10.0, -20.0, -1.0))

    def test_subsumes(self):
        a = Bounds(0.0, 10.0, 0.0, 10.0)
        assert subsumes(a, Bounds(1.0, 9.0, 1.0, 9.0))
        assert subsumes(a, a)
        assert not subsumes(a, Bounds(5.0, 15.0, 5.0, 9.0))
        assert not subsumes(Bounds(1.0, 9.0, 1.0, 9.0), a)

    def test_overlap_rejects_invalid_bounds(self):
        with pytest.raises(ClipContractError):
            overlap(Bounds(10.0, 0.0, 0.0, 10.0), LONGITUDE_LATITUDE)

    def test_subsumes_rejects_invalid_bounds(self):
        with pytest.raises(ClipContractError):
            subsumes(LONGITUDE_LATITUDE, Bounds(0.0, 10.0, 0.0, 100.0))


class TestInBounds:
    def test_empty_is_in_bounds(self, unit_window):
        assert in_bounds(np.empty((0, 2)), unit_window)

    def test_tolerance(self, unit_window):
        assert in_bounds([(10.0005, 5.0)], unit_window)
        assert not in_bounds([(10.0005, 5.0)], unit_window, tolerance=0.0)
        assert not in_bounds([(5.0, 5.0), (5.0, -0.5)], unit_window)
