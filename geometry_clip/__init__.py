"""
Geometry Clipping Package

Clips 2-D vector geometry (open polylines and closed polygons) to an
axis-aligned rectangular window.

Modules:
    bounds: Clip window / coordinate domain type and contract error
    predicates: Triangle, colinearity, distance and rectangle tests
    segment_clipper: Liang-Barsky clipping of one line segment
    polygon_clipper: Liang-Barsky clipping of a closed polygon ring
    polyline_subsetter: Clip and re-chain batches of polylines

Usage:
    from geometry_clip import Bounds, PolylineBatch, subset_map_double, clip_polygon

    window = Bounds(x_min=-80.0, x_max=-70.0, y_min=35.0, y_max=45.0)
    result = subset_map_double(PolylineBatch.from_polylines(lines), 0.0, window)
    ring = clip_polygon(True, window, polygon_vertices)
"""

from geometry_clip.bounds import (
    Bounds,
    ClipContractError,
    LONGITUDE_LATITUDE,
    UNBOUNDED,
    domain_for_crs,
)
from geometry_clip.segment_clipper import ClippedSegment, clip_line, clip_segment
from geometry_clip.polygon_clipper import clip_polygon
from geometry_clip.polyline_subsetter import (
    PolylineBatch,
    SubsetResult,
    subset_map,
    subset_map_double,
)

__all__ = [
    'Bounds',
    'ClipContractError',
    'LONGITUDE_LATITUDE',
    'UNBOUNDED',
    'domain_for_crs',
    'ClippedSegment',
    'clip_line',
    'clip_segment',
    'clip_polygon',
    'PolylineBatch',
    'SubsetResult',
    'subset_map',
    'subset_map_double',
]
