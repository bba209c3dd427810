"""Tests for Liang-Barsky polygon clipping."""

import numpy as np
import pytest
from shapely.geometry import MultiPoint, Polygon, box

from geometry_clip.bounds import Bounds, ClipContractError, LONGITUDE_LATITUDE
from geometry_clip.polygon_clipper import _discard_degenerate_hat, clip_polygon
from geometry_clip.predicates import in_bounds


class TestClipPolygon:
    def test_polygon_inside_window_is_returned_unchanged(self):
        """A polygon entirely inside the window comes back vertex-for-vertex."""
        vertices = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (5.0, 15.0), (0.0, 10.0)]
        result = clip_polygon(True, LONGITUDE_LATITUDE, vertices)
        assert result.tolist() == [list(vertex) for vertex in vertices]

    def test_overlapping_square(self, unit_window):
        square = [(-5.0, -5.0), (5.0, -5.0), (5.0, 5.0), (-5.0, 5.0)]
        result = clip_polygon(False, unit_window, square)
        assert result.tolist() == pytest.approx([[0, 0], [5, 0], [5, 5], [0, 5]])

    def test_polygon_covering_window_gives_window_corners(self, unit_window):
        square = [(-50.0, -50.0), (50.0, -50.0), (50.0, 50.0), (-50.0, 50.0)]
        result = clip_polygon(True, unit_window, square)
        assert sorted(map(tuple, result.tolist())) == [(0, 0), (0, 10), (10, 0), (10, 10)]

    def test_triangle_cut_at_two_corners(self, unit_window):
        triangle = [(-5.0, 5.0), (5.0, -5.0), (15.0, 15.0)]
        result = clip_polygon(False, unit_window, triangle)

        assert result.tolist() == pytest.approx([
            [5, 10], [0, 7.5], [0, 0], [0, 0], [7.5, 0], [10, 5], [10, 10]
        ])
        assert Polygon(result).area == pytest.approx(87.5)

    def test_polygon_outside_window_is_empty(self, unit_window):
        triangle = [(20.0, 20.0), (30.0, 20.0), (25.0, 30.0)]
        result = clip_polygon(True, unit_window, triangle)
        assert result.shape == (0, 2)

    def test_accepts_numpy_input(self, unit_window):
        vertices = np.array([[1.0, 1.0], [2.0, 1.0], [2.0, 2.0]])
        result = clip_polygon(True, unit_window, vertices)
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, vertices)

    def test_random_polygons_stay_in_window(self, unit_window):
        """Output is empty or 3..3n vertices, all inside the window."""
        rng = np.random.default_rng(7)
        for _ in range(200):
            count = int(rng.integers(3, 9))
            vertices = rng.uniform(-20.0, 30.0, size=(count, 2))
            result = clip_polygon(bool(rng.integers(0, 2)), unit_window, vertices)

            assert len(result) == 0 or 3 <= len(result) <= 3 * count
            assert in_bounds(result, unit_window, tolerance=1e-9)

    def test_concave_quadrilateral_emits_three_vertices_on_one_edge(self, unit_window):
        quadrilateral = [(15.0, -3.0), (-1.0, 8.0), (17.0, -9.0), (-9.0, 14.0)]
        result = clip_polygon(False, unit_window, quadrilateral)

        assert len(result) == 11
        assert in_bounds(result, unit_window, tolerance=1e-9)
        expected = Polygon(quadrilateral).intersection(box(0.0, 0.0, 10.0, 10.0)).area
        assert _ring_area(result) == pytest.approx(expected)

    def test_random_quadrilaterals_fit_output_buffer(self, unit_window):
        rng = np.random.default_rng(11)
        for _ in range(2000):
            vertices = rng.uniform(-10.0, 20.0, size=(4, 2))
            for discard_degenerates in (False, True):
                result = clip_polygon(discard_degenerates, unit_window, vertices)
                assert len(result) <= 12

    def test_convex_polygons_keep_intersection_area(self, unit_window):
        rng = np.random.default_rng(3)
        window = box(0.0, 0.0, 10.0, 10.0)
        for _ in range(100):
            hull = MultiPoint(rng.uniform(-10.0, 20.0, size=(8, 2)).tolist()).convex_hull
            vertices = np.asarray(hull.exterior.coords)[:-1]
            result = clip_polygon(False, unit_window, vertices)

            expected = hull.intersection(window).area
            if len(result) == 0:
                assert expected == pytest.approx(0.0, abs=1e-9)
            else:
                assert _ring_area(result) == pytest.approx(expected)


class TestDegenerateHatTrim:
    # Exits through the bottom edge, then turns around the (0, 0) and (10, 0)
    # corners, leaving a colinear tail on y == 0.
    HAT_TRIANGLE = [(18.0, 16.0), (-1.0, -9.0), (13.0, -3.0)]

    def test_untrimmed_ring_keeps_intersection_area(self, unit_window):
        result = clip_polygon(False, unit_window, self.HAT_TRIANGLE)

        assert result.tolist() == pytest.approx([
            [10, 10], [10, 104 / 19], [5.84, 0], [0, 0], [10, 0]
        ])
        expected = Polygon(self.HAT_TRIANGLE).intersection(box(0.0, 0.0, 10.0, 10.0)).area
        assert _ring_area(result) == pytest.approx(expected)

    def test_trim_drops_colinear_tail(self, unit_window):
        result = clip_polygon(True, unit_window, self.HAT_TRIANGLE)
        assert result.tolist() == pytest.approx([[10, 10], [10, 104 / 19], [5.84, 0]])

    def test_trim_leaves_other_vertex_counts_alone(self, unit_window):
        triangle = [(-5.0, 5.0), (5.0, -5.0), (15.0, 15.0)]
        trimmed = clip_polygon(True, unit_window, triangle)
        untrimmed = clip_polygon(False, unit_window, triangle)
        np.testing.assert_array_equal(trimmed, untrimmed)


def _ring_area(vertices):
    x = vertices[:, 0]
    y = vertices[:, 1]
    return abs(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2.0


class TestClipPolygonContract:
    def test_too_few_vertices(self, unit_window):
        with pytest.raises(ClipContractError):
            clip_polygon(True, unit_window, [(0.0, 0.0), (1.0, 1.0)])

    def test_non_finite_vertices(self, unit_window):
        with pytest.raises(ClipContractError):
            clip_polygon(True, unit_window, [(0.0, 0.0), (1.0, np.nan), (2.0, 0.0)])

    def test_bad_vertex_shape(self, unit_window):
        with pytest.raises(ClipContractError):
            clip_polygon(True, unit_window, [0.0, 1.0, 2.0, 3.0])

    def test_crossed_window(self):
        with pytest.raises(ClipContractError):
            clip_polygon(True, Bounds(10.0, 0.0, 0.0, 10.0), [(0, 0), (1, 0), (1, 1)])

    def test_infinite_window(self):
        with pytest.raises(ClipContractError):
            clip_polygon(True, Bounds(0.0, np.inf, 0.0, 10.0), [(0, 0), (1, 0), (1, 1)])

    def test_contract_error_is_value_error(self, unit_window):
        with pytest.raises(ValueError):
            clip_polygon(True, unit_window, [])


class TestDiscardDegenerateHat:
    def test_trims_colinear_tail(self):
        clipped = np.array([[0, 0], [10, 0], [10, 5], [10, 7], [10, 10]], dtype=float)
        assert _discard_degenerate_hat(clipped, 5) == 3

    def test_keeps_proper_pentagon(self):
        clipped = np.array([[0, 0], [10, 0], [10, 10], [5, 15], [0, 10]], dtype=float)
        assert _discard_degenerate_hat(clipped, 5) == 5
