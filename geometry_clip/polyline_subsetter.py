"""
Polyline batch subsetting.

Clips every edge of a batch of open polylines to a window with the segment
clipper and re-chains the surviving pieces into output polylines: a piece
whose start point is the previously emitted point extends the current
output polyline, any other piece starts a new one.

Classes:
    PolylineBatch: Flat vertices plus per-polyline vertex counts
    SubsetResult: Output counts and (optionally) vertices of a subset

Functions:
    subset_map: Subset a batch, storing single-precision output
    subset_map_double: Subset a batch, storing double-precision output
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

import numpy as np

from geometry_clip.bounds import Bounds, ClipContractError, LONGITUDE_LATITUDE, Point
from geometry_clip.predicates import in_bounds, is_valid_bounds, unique_points
from geometry_clip.segment_clipper import clip_segment
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PolylineBatch:
    """
    A batch of polylines stored as flat (n, 2) vertices and per-polyline counts.

    The vertices are the concatenation of each polyline's vertices in order,
    so sum(counts) == len(vertices).

    Raises:
        ClipContractError: If the batch is empty or counts and vertices disagree
    """

    counts: np.ndarray
    vertices: np.ndarray

    def __post_init__(self):
        self.counts = np.asarray(self.counts, dtype=np.int64).reshape(-1)
        vertices = np.asarray(self.vertices)

        if not np.issubdtype(vertices.dtype, np.floating):
            vertices = vertices.astype(np.float64)

        self.vertices = vertices

        if len(self.counts) == 0:
            raise ClipContractError("Polyline batch has no polylines")
        if vertices.ndim != 2 or vertices.shape[1] != 2:
            raise ClipContractError(
                f"Polyline vertices must have shape (n, 2), got {vertices.shape}"
            )
        if self.counts.min() < 1:
            raise ClipContractError(
                f"Every polyline needs at least 1 vertex, got counts {self.counts.tolist()}"
            )
        if int(self.counts.sum()) != len(vertices):
            raise ClipContractError(
                f"Vertex counts sum to {int(self.counts.sum())} "
                f"but batch holds {len(vertices)} vertices"
            )

    @classmethod
    def from_polylines(cls, polylines: Sequence[Sequence[Point]],
                       dtype=np.float64) -> 'PolylineBatch':
        """Build a batch from a sequence of polylines (each a sequence of (x, y))."""
        counts = [len(polyline) for polyline in polylines]
        flat = [tuple(point) for polyline in polylines for point in polyline]
        vertices = np.array(flat, dtype=dtype).reshape(-1, 2)
        return cls(counts, vertices)

    @property
    def polyline_count(self) -> int:
        return len(self.counts)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def polylines(self) -> Iterator[np.ndarray]:
        """Yield each polyline's (count, 2) vertex view in order."""
        start = 0
        for count in self.counts.tolist():
            yield self.vertices[start:start + count]
            start += count


@dataclass
class SubsetResult:
    """
    Output of subset_map / subset_map_double.

    counts and vertices are None for a count-only run. An empty result has
    polyline_count == vertex_count == 0 and zero-length arrays.
    """

    polyline_count: int
    vertex_count: int
    counts: Optional[np.ndarray] = None
    vertices: Optional[np.ndarray] = None

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0

    def to_batch(self) -> Optional[PolylineBatch]:
        """The output as a PolylineBatch, or None if empty or count-only."""
        if self.is_empty or self.counts is None or self.vertices is None:
            return None
        return PolylineBatch(self.counts, self.vertices)


def _check_subset_inputs(batch: PolylineBatch, resolution: float,
                         bounds: Bounds, domain: Bounds) -> None:
    if not isinstance(batch, PolylineBatch):
        raise ClipContractError(f"Expected a PolylineBatch, got {type(batch).__name__}")
    if not (math.isfinite(resolution) and resolution >= 0.0):
        raise ClipContractError(f"Resolution must be finite and >= 0, got {resolution}")
    if not is_valid_bounds(bounds, domain):
        raise ClipContractError(f"Invalid clip bounds {bounds} for domain {domain}")

    vertices = batch.vertices

    if not np.all(np.isfinite(vertices)):
        raise ClipContractError("Polyline batch has non-finite vertex coordinates")
    if not in_bounds(vertices, domain, tolerance=0.0):
        raise ClipContractError(f"Polyline batch has vertices outside domain {domain}")


def _subset_polylines(batch: PolylineBatch, resolution: float, bounds: Bounds,
                      domain: Bounds, count_only: bool, dtype) -> SubsetResult:
    _check_subset_inputs(batch, resolution, bounds, domain)

    # Each edge emits at most 2 vertices.
    output_vertices = None if count_only else np.zeros((2 * batch.vertex_count, 2), dtype=dtype)
    output_counts: List[int] = []
    vertex_count = 0
    last_stored: Optional[Point] = None

    for polyline in batch.polylines():
        points = polyline.tolist()
        start = points[0]

        for end in points[1:]:
            if resolution == 0.0 or unique_points(start, end, resolution):
                clipped = clip_segment(bounds, start, end)

                if clipped is not None:
                    discontiguous = clipped.start != last_stored

                    if discontiguous:
                        output_counts.append(0)

                        if output_vertices is not None:
                            output_vertices[vertex_count] = clipped.start
                            output_vertices[vertex_count + 1] = clipped.end
                        vertex_count += 2
                        output_counts[-1] += 2
                    else:
                        if output_vertices is not None:
                            output_vertices[vertex_count] = clipped.end
                        vertex_count += 1
                        output_counts[-1] += 1

                    last_stored = clipped.end

            start = end

    counts = np.array(output_counts, dtype=np.int32)

    assert (len(counts) == 0) == (vertex_count == 0)
    assert len(counts) == 0 or (counts.min() >= 2 and int(counts.sum()) == vertex_count)

    logger.debug(
        f"subset: {batch.polyline_count} polylines / {batch.vertex_count} vertices -> "
        f"{len(counts)} polylines / {vertex_count} vertices"
    )

    if count_only:
        return SubsetResult(len(counts), vertex_count)

    vertices = output_vertices[:vertex_count].copy()
    assert in_bounds(vertices, bounds)
    return SubsetResult(len(counts), vertex_count, counts, vertices)


def subset_map(batch: PolylineBatch, resolution: float, bounds: Bounds,
               domain: Bounds = LONGITUDE_LATITUDE,
               count_only: bool = False) -> SubsetResult:
    """
    Clip a batch of polylines to bounds, storing float32 output vertices.

    Args:
        batch: Input polylines
        resolution: Edges whose endpoints are within resolution of each other
            on both axes are skipped before clipping; 0 disables thinning
        bounds: Clip window, valid within domain
        domain: Coordinate domain the bounds and vertices must lie in
        count_only: Only count the output polylines and vertices

    Returns:
        SubsetResult where every output polyline has >= 2 vertices and
        sum(counts) == vertex_count

    Raises:
        ClipContractError: If the inputs violate the preconditions above

    Example:
        >>> batch = PolylineBatch.from_polylines([[(-5, 5), (5, 5), (5, 15)]])
        >>> result = subset_map(batch, 0.0, Bounds(0, 10, 0, 10))
        >>> result.counts.tolist(), result.vertices.tolist()
        ([3], [[0.0, 5.0], [5.0, 5.0], [5.0, 10.0]])
    """
    return _subset_polylines(batch, resolution, bounds, domain, count_only, np.float32)


def subset_map_double(batch: PolylineBatch, resolution: float, bounds: Bounds,
                      domain: Bounds = LONGITUDE_LATITUDE,
                      count_only: bool = False) -> SubsetResult:
    """Same as subset_map but stores float64 output vertices."""
    return _subset_polylines(batch, resolution, bounds, domain, count_only, np.float64)
