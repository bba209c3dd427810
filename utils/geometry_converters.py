"""
Geometry conversion utilities for Map Subsetter.

The clipping core works on plain coordinate arrays: polyline batches (flat
vertices plus per-polyline counts) and polygon rings without a repeated
closing vertex. This module converts between those and Shapely geometries,
and provides vertex counting for clip statistics.

Functions:
    bounds_to_box: Convert Bounds to a Shapely box polygon
    geometry_bounds: Bounds of a Shapely geometry
    count_vertices: Count total vertices in a geometry
    extract_geometry_type: Pull lines or polygons out of a mixed result
    lines_to_batch: Convert LineString/MultiLineString to a PolylineBatch
    batch_to_lines: Convert a PolylineBatch to LineString/MultiLineString
    ring_vertices: Open (n, 2) vertex array of a closed Shapely ring
    rings_to_polygon: Build a Polygon from clipped exterior and hole rings
"""

from typing import List, Optional, Sequence

import numpy as np
from shapely.geometry import (
    Point, MultiPoint, LineString, MultiLineString,
    Polygon, MultiPolygon, GeometryCollection, box
)
from shapely.geometry.base import BaseGeometry

from geometry_clip.bounds import Bounds
from geometry_clip.polyline_subsetter import PolylineBatch
from utils.logger import get_logger

logger = get_logger(__name__)


def bounds_to_box(bounds: Bounds) -> Polygon:
    """Shapely box covering bounds."""
    return box(bounds.x_min, bounds.y_min, bounds.x_max, bounds.y_max)


def geometry_bounds(geometry: BaseGeometry) -> Bounds:
    """Bounds of a non-empty Shapely geometry."""
    return Bounds.from_total_bounds(geometry.bounds)


def count_vertices(geometry: Optional[BaseGeometry]) -> int:
    """
    Count total vertices in a geometry.

    Handles Point, MultiPoint, LineString, MultiLineString,
    Polygon, MultiPolygon, and GeometryCollection types.

    Args:
        geometry: Shapely geometry object

    Returns:
        Total number of vertices/coordinates in the geometry
    """
    if geometry is None or geometry.is_empty:
        return 0

    if isinstance(geometry, Point):
        return 1
    elif isinstance(geometry, MultiPoint):
        return len(geometry.geoms)
    elif isinstance(geometry, LineString):
        return len(geometry.coords)
    elif isinstance(geometry, MultiLineString):
        return sum(len(line.coords) for line in geometry.geoms)
    elif isinstance(geometry, Polygon):
        # Exterior ring + interior rings (holes)
        count = len(geometry.exterior.coords)
        for interior in geometry.interiors:
            count += len(interior.coords)
        return count
    elif isinstance(geometry, (MultiPolygon, GeometryCollection)):
        return sum(count_vertices(part) for part in geometry.geoms)
    return 0


def extract_geometry_type(
    geometry: Optional[BaseGeometry],
    target_type: str
) -> Optional[BaseGeometry]:
    """
    Extract geometries of a specific type from a potentially mixed result.

    When make_valid() repairs a clipped polygon it can return a
    GeometryCollection holding stray lines or points; this keeps only the
    relevant geometry type.

    Args:
        geometry: Result geometry (may be GeometryCollection)
        target_type: 'line' or 'polygon'

    Returns:
        Extracted geometry of the target type, or None if no matching geometries
    """
    if geometry is None or geometry.is_empty:
        return None

    if target_type == 'line' and isinstance(geometry, (LineString, MultiLineString)):
        return geometry
    if target_type == 'polygon' and isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry

    if not isinstance(geometry, GeometryCollection):
        return None

    extracted = []
    for part in geometry.geoms:
        if target_type == 'line' and isinstance(part, (LineString, MultiLineString)):
            extracted.extend(part.geoms if isinstance(part, MultiLineString) else [part])
        elif target_type == 'polygon' and isinstance(part, (Polygon, MultiPolygon)):
            extracted.extend(part.geoms if isinstance(part, MultiPolygon) else [part])

    if not extracted:
        return None
    if len(extracted) == 1:
        return extracted[0]
    return MultiLineString(extracted) if target_type == 'line' else MultiPolygon(extracted)


def lines_to_batch(geometry: BaseGeometry, dtype=np.float64) -> Optional[PolylineBatch]:
    """
    Convert a LineString or MultiLineString to a PolylineBatch.

    Only x, y are kept. Empty parts are skipped.

    Returns:
        PolylineBatch, or None if the geometry holds no vertices

    Raises:
        TypeError: If geometry is not a (Multi)LineString
    """
    if isinstance(geometry, LineString):
        parts = [geometry]
    elif isinstance(geometry, MultiLineString):
        parts = list(geometry.geoms)
    else:
        raise TypeError(f"Expected LineString or MultiLineString, got {geometry.geom_type}")

    polylines = [[point[:2] for point in part.coords] for part in parts if not part.is_empty]

    if not polylines:
        return None

    return PolylineBatch.from_polylines(polylines, dtype=dtype)


def batch_to_lines(batch: Optional[PolylineBatch]) -> Optional[BaseGeometry]:
    """
    Convert a PolylineBatch back to Shapely.

    Single polyline = LineString, several polylines = MultiLineString.
    """
    if batch is None:
        return None

    lines = [LineString(polyline.astype(np.float64)) for polyline in batch.polylines()]

    if len(lines) == 1:
        return lines[0]
    return MultiLineString(lines)


def ring_vertices(ring) -> np.ndarray:
    """
    Vertices of a Shapely LinearRing as an open (n, 2) float64 array.

    Shapely rings repeat the first vertex at the end; the clipper implies
    the closing edge, so the repeat is dropped.
    """
    coordinates = np.asarray(ring.coords, dtype=np.float64)[:, :2]

    if len(coordinates) > 1 and np.array_equal(coordinates[0], coordinates[-1]):
        coordinates = coordinates[:-1]

    return coordinates


def rings_to_polygon(exterior: np.ndarray, holes: Sequence[np.ndarray] = ()) -> Optional[Polygon]:
    """
    Build a Polygon from clipped ring vertex arrays.

    Returns None if the exterior has fewer than 3 vertices. Holes with fewer
    than 3 vertices (clipped away) are dropped.
    """
    if len(exterior) < 3:
        return None

    interiors: List[np.ndarray] = [hole for hole in holes if len(hole) >= 3]
    return Polygon(exterior, interiors)
