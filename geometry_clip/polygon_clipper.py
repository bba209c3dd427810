"""
Liang-Barsky polygon clipping to an axis-aligned rectangle.

Reference:
    Liang, Y-D. and Barsky, B., "An Analysis and Algorithm for Polygon
    Clipping", Communications of the ACM 26(11), November 1983.

Each edge of the closed input ring is classified by the parametric values
at which its containing line enters and exits the window along x and y.
An edge can emit an entry point, an exit point (or its own end vertex) and
the window corner it turns around, so the output ring may be up to
3n vertices long.
"""

import math

import numpy as np

from geometry_clip.bounds import Bounds, ClipContractError, UNBOUNDED
from geometry_clip.predicates import area_of_triangle, in_bounds, is_valid_bounds
from utils.logger import get_logger

logger = get_logger(__name__)

# Emitted vertex count of the _/\_ "hat" artifact checked by the degenerate trim.
_HAT_VERTEX_COUNT = 5


def _check_polygon_inputs(clip_rect: Bounds, coordinates: np.ndarray) -> None:
    if not is_valid_bounds(clip_rect, UNBOUNDED) or not all(
        math.isfinite(value) for value in clip_rect.as_total_bounds()
    ):
        raise ClipContractError(f"clip_polygon() given invalid clip rectangle: {clip_rect}")
    if coordinates.ndim != 2 or coordinates.shape[1] != 2:
        raise ClipContractError(
            f"clip_polygon() expects (n, 2) vertices, got shape {coordinates.shape}"
        )
    if len(coordinates) < 3:
        raise ClipContractError(
            f"clip_polygon() needs at least 3 vertices, got {len(coordinates)}"
        )
    if not np.all(np.isfinite(coordinates)):
        raise ClipContractError("clip_polygon() given non-finite vertex coordinates")


def _discard_degenerate_hat(clipped: np.ndarray, result: int) -> int:
    """
    Drop the trailing 2 vertices of a 5-vertex _/\\_ result whose last 3 are colinear.

    Checked twice since a 5-vertex 'line' has two consecutive degenerate corners.
    """
    for _ in range(2):
        if result >= 3:
            last_triangle_area = area_of_triangle(
                tuple(clipped[result - 3]),
                tuple(clipped[result - 2]),
                tuple(clipped[result - 1]),
            )

            if last_triangle_area == 0.0:
                result -= 2

    return result


def clip_polygon(discard_degenerates: bool, clip_rect: Bounds, vertices) -> np.ndarray:
    """
    Clip a closed polygon to clip_rect.

    Args:
        discard_degenerates: Trim the zero-area 'hat' artifact the algorithm
            can produce at window corners. The trim drops the last two
            vertices of a colinear tail, which can include a real window
            corner, so leave it off when the clipped area matters
        clip_rect: Clip window
        vertices: (n, 2) array-like of ring vertices, n >= 3, without a
            repeated closing vertex (the edge from last to first is implied)

    Returns:
        (m, 2) float64 array of the clipped ring: m == 0 when nothing of the
        polygon lies inside the window, otherwise 3 <= m <= 3n.

    Raises:
        ClipContractError: If vertices or clip_rect are malformed

    Note:
        Edges are visited starting with the closing edge, so a polygon lying
        entirely inside the window is returned vertex-for-vertex.
    """
    coordinates = np.asarray(vertices, dtype=np.float64)
    _check_polygon_inputs(clip_rect, coordinates)

    clip_x_min = clip_rect.x_min
    clip_x_max = clip_rect.x_max
    clip_y_min = clip_rect.y_min
    clip_y_max = clip_rect.y_max
    count = len(coordinates)
    points = coordinates.tolist()
    clipped = np.empty((3 * count, 2), dtype=np.float64)
    result = 0

    for vertex in range(count):
        vx, vy = points[vertex - 1]
        next_x, next_y = points[vertex]
        delta_x = next_x - vx
        delta_y = next_y - vy

        # Which window edges the containing line hits first on each axis:
        if delta_x > 0.0 or (delta_x == 0.0 and vx > clip_x_max):
            x_in, x_out = clip_x_min, clip_x_max
        else:
            x_in, x_out = clip_x_max, clip_x_min

        if delta_y > 0.0 or (delta_y == 0.0 and vy > clip_y_max):
            y_in, y_out = clip_y_min, clip_y_max
        else:
            y_in, y_out = clip_y_max, clip_y_min

        one_over_delta_x = 1.0 / delta_x if delta_x != 0.0 else 0.0
        one_over_delta_y = 1.0 / delta_y if delta_y != 0.0 else 0.0

        # Parameters of the exit points:
        if delta_x != 0.0:
            t_out_x = (x_out - vx) * one_over_delta_x
        elif clip_x_min <= vx <= clip_x_max:
            t_out_x = math.inf
        else:
            t_out_x = -math.inf

        if delta_y != 0.0:
            t_out_y = (y_out - vy) * one_over_delta_y
        elif clip_y_min <= vy <= clip_y_max:
            t_out_y = math.inf
        else:
            t_out_y = -math.inf

        t_out1, t_out2 = (t_out_x, t_out_y) if t_out_x < t_out_y else (t_out_y, t_out_x)

        if t_out2 <= 0.0:
            continue

        t_in_x = (x_in - vx) * one_over_delta_x if delta_x != 0.0 else -math.inf
        t_in_y = (y_in - vy) * one_over_delta_y if delta_y != 0.0 else -math.inf
        t_in2 = t_in_y if t_in_x < t_in_y else t_in_x

        if t_out1 < t_in2:
            # No visible segment: the edge only passes the corner region.
            if 0.0 < t_out1 <= 1.0:
                if t_in_x < t_in_y:
                    clipped[result] = (x_out, y_in)
                else:
                    clipped[result] = (x_in, y_out)
                result += 1
        elif 0.0 < t_out1 and t_in2 <= 1.0:
            if 0.0 <= t_in2:
                if t_in_x > t_in_y:
                    clipped[result] = (x_in, vy + t_in_x * delta_y)
                else:
                    clipped[result] = (vx + t_in_y * delta_x, y_in)
                result += 1

            if t_out1 <= 1.0:
                if t_out_x < t_out_y:
                    clipped[result] = (x_out, vy + t_out_x * delta_y)
                else:
                    clipped[result] = (vx + t_out_y * delta_x, y_out)
            else:
                clipped[result] = (next_x, next_y)
            result += 1

        if 0.0 < t_out2 <= 1.0:
            clipped[result] = (x_out, y_out)
            result += 1

    if discard_degenerates and result == _HAT_VERTEX_COUNT:
        result = _discard_degenerate_hat(clipped, result)

    if result < 3:
        result = 0

    assert result == 0 or 3 <= result <= 3 * count
    assert in_bounds(clipped[:result], clip_rect)

    logger.debug(f"clip_polygon: {count} -> {result} vertices")
    return clipped[:result].copy()
