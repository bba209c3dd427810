"""
Liang-Barsky clipping of a single line segment to a rectangle.

Reference:
    Liang, Y-D. and Barsky, B., "A New Concept and Method for Line Clipping",
    ACM Transactions on Graphics 3(1), January 1984, pp 1-22.
    https://doi.org/10.1145/357332.357333

The segment (x1, y1)-(x2, y2) is parameterized as P(t) = P1 + t * (P2 - P1)
for t in [0, 1]. Each of the four window boundaries narrows the visible
interval [t1, t2]; the segment is visible iff the interval is non-empty
after all four.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional

from geometry_clip.bounds import Bounds, Point


@dataclass
class ClipState:
    """Visible parametric interval [t1, t2] of the segment being clipped."""

    t1: float = 0.0
    t2: float = 1.0

    @property
    def visible(self) -> bool:
        return self.t1 <= self.t2


class ClippedSegment(NamedTuple):
    """Endpoints of the visible part of a clipped segment."""

    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def start(self) -> Point:
        return (self.x1, self.y1)

    @property
    def end(self) -> Point:
        return (self.x2, self.y2)


def clip_coordinate(p: float, q: float, state: ClipState) -> bool:
    """
    Narrow state's interval against one boundary.

    Args:
        p: Directional delta toward the boundary (negative when the segment
           enters through it, positive when it exits through it, 0 when
           parallel to it)
        q: Signed offset of the segment start from the boundary (>= 0 on the
           inside)
        state: Interval to update; t1 only increases and t2 only decreases

    Returns:
        False if the segment is now known to be invisible, else True
    """
    if p < 0.0:
        r = q / p

        if r > state.t2:
            return False
        if r > state.t1:
            state.t1 = r
    elif p > 0.0:
        r = q / p

        if r < state.t1:
            return False
        if r < state.t2:
            state.t2 = r
    elif q < 0.0:
        return False

    return True


def clip_line(
    x_min: float, y_min: float, x_max: float, y_max: float,
    x1: float, y1: float, x2: float, y2: float
) -> Optional[ClippedSegment]:
    """
    Clip segment (x1, y1)-(x2, y2) to the window [x_min, x_max] x [y_min, y_max].

    Boundaries are tested left, right, bottom, top, stopping at the first
    rejection.

    Returns:
        The visible part of the segment, or None if no part is visible

    Example:
        >>> clip_line(0.0, 0.0, 10.0, 10.0, -5.0, 5.0, 5.0, 5.0)
        ClippedSegment(x1=0.0, y1=5.0, x2=5.0, y2=5.0)
    """
    state = ClipState()
    dx = x2 - x1

    if not clip_coordinate(-dx, x1 - x_min, state):
        return None
    if not clip_coordinate(dx, x_max - x1, state):
        return None

    dy = y2 - y1

    if not clip_coordinate(-dy, y1 - y_min, state):
        return None
    if not clip_coordinate(dy, y_max - y1, state):
        return None

    # The end point is derived from the original start point, so it goes first.
    if state.t2 < 1.0:
        x2 = x1 + state.t2 * dx
        y2 = y1 + state.t2 * dy

    if state.t1 > 0.0:
        x1 += state.t1 * dx
        y1 += state.t1 * dy

    return ClippedSegment(x1, y1, x2, y2)


def clip_segment(bounds: Bounds, start: Point, end: Point) -> Optional[ClippedSegment]:
    """Clip the segment start-end to bounds. See clip_line."""
    return clip_line(
        bounds.x_min, bounds.y_min, bounds.x_max, bounds.y_max,
        start[0], start[1], end[0], end[1]
    )
