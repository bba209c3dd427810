"""Tests for Liang-Barsky segment clipping."""

import pytest

from geometry_clip.bounds import Bounds
from geometry_clip.segment_clipper import (
    ClippedSegment,
    ClipState,
    clip_coordinate,
    clip_line,
    clip_segment,
)


class TestClipCoordinate:
    def test_entering_boundary_raises_t1(self):
        state = ClipState()
        assert clip_coordinate(-2.0, -1.0, state) is True
        assert state.t1 == 0.5
        assert state.t2 == 1.0

    def test_exiting_boundary_lowers_t2(self):
        state = ClipState()
        assert clip_coordinate(4.0, 1.0, state) is True
        assert state.t2 == 0.25

    def test_rejects_when_interval_empties(self):
        state = ClipState(t1=0.5, t2=1.0)
        assert clip_coordinate(2.0, 0.5, state) is False

    def test_parallel_outside_rejects(self):
        assert clip_coordinate(0.0, -1.0, ClipState()) is False

    def test_parallel_inside_keeps_interval(self):
        state = ClipState()
        assert clip_coordinate(0.0, 3.0, state) is True
        assert (state.t1, state.t2) == (0.0, 1.0)

    def test_state_visibility(self):
        assert ClipState().visible
        assert not ClipState(t1=0.7, t2=0.2).visible


class TestClipLine:
    def test_clips_entering_segment(self):
        """A horizontal segment entering from the left is cut at x_min."""
        result = clip_line(0.0, 0.0, 10.0, 10.0, -5.0, 5.0, 5.0, 5.0)
        assert result == ClippedSegment(0.0, 5.0, 5.0, 5.0)

    def test_inside_segment_is_unchanged(self):
        assert clip_line(0.0, 0.0, 10.0, 10.0, 1.0, 1.0, 2.0, 3.0) == (1.0, 1.0, 2.0, 3.0)

    def test_outside_segment_is_rejected(self):
        assert clip_line(0.0, 0.0, 10.0, 10.0, -5.0, -5.0, -1.0, -1.0) is None

    def test_parallel_outside_segment_is_rejected(self):
        assert clip_line(0.0, 0.0, 10.0, 10.0, -1.0, 0.0, -1.0, 10.0) is None

    def test_diagonal_crossing_both_corners(self):
        result = clip_line(0.0, 0.0, 10.0, 10.0, -5.0, -5.0, 15.0, 15.0)
        assert result == pytest.approx((0.0, 0.0, 10.0, 10.0))

    def test_segment_on_boundary_is_visible(self):
        assert clip_line(0.0, 0.0, 10.0, 10.0, 0.0, 2.0, 0.0, 8.0) == (0.0, 2.0, 0.0, 8.0)

    def test_zero_length_segment_inside(self):
        assert clip_line(0.0, 0.0, 10.0, 10.0, 4.0, 4.0, 4.0, 4.0) == (4.0, 4.0, 4.0, 4.0)

    def test_reversed_segment_keeps_direction(self):
        result = clip_line(0.0, 0.0, 10.0, 10.0, 5.0, 5.0, -5.0, 5.0)
        assert result.start == (5.0, 5.0)
        assert result.end == (0.0, 5.0)

    def test_result_lies_in_window(self):
        result = clip_line(-1.0, -2.0, 3.0, 4.0, -10.0, 7.0, 8.0, -9.0)
        assert result is not None
        for x, y in (result.start, result.end):
            assert -1.0 - 1e-9 <= x <= 3.0 + 1e-9
            assert -2.0 - 1e-9 <= y <= 4.0 + 1e-9


class TestClipSegment:
    def test_uses_bounds_window(self):
        result = clip_segment(Bounds(0.0, 10.0, 0.0, 10.0), (5.0, 5.0), (5.0, 15.0))
        assert result.start == (5.0, 5.0)
        assert result.end == (5.0, 10.0)

    def test_rejects_outside(self):
        assert clip_segment(Bounds(0.0, 10.0, 0.0, 10.0), (20.0, 0.0), (30.0, 10.0)) is None
