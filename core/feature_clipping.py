"""
Feature Clipping Module

Clips point, line and polygon features of a GeoDataFrame to a rectangular
clip window using the geometry_clip core. This reduces large datasets to
the region of interest before they are written out.
"""

from typing import Dict, List, Optional, Tuple

import geopandas as gpd
import numpy as np
from shapely.geometry import (
    Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon
)
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from geometry_clip.bounds import Bounds, DOMAINS
from geometry_clip.polygon_clipper import clip_polygon
from geometry_clip.polyline_subsetter import subset_map, subset_map_double
from geometry_clip.predicates import in_bounds, overlap, subsumes
from utils.geometry_converters import (
    batch_to_lines,
    count_vertices,
    extract_geometry_type,
    geometry_bounds,
    lines_to_batch,
    ring_vertices,
    rings_to_polygon,
)
from utils.logger import get_logger

logger = get_logger(__name__)


def _empty_clip_metadata() -> Dict:
    return {
        'features_clipped': 0,
        'lines_clipped': 0,
        'polygons_clipped': 0,
        'points_removed': 0,
        'original_vertex_count': 0,
        'clipped_vertex_count': 0,
        'vertex_reduction_percent': 0.0,
        'empty_geometries_removed': 0,
        'containment_violations': 0
    }


def _clip_points(geometry: BaseGeometry, bounds: Bounds) -> Optional[BaseGeometry]:
    points = [geometry] if isinstance(geometry, Point) else list(geometry.geoms)
    kept = [point for point in points if bounds.contains_point(point.x, point.y)]

    if not kept:
        return None
    if isinstance(geometry, Point):
        return geometry
    return MultiPoint(kept)


def _clip_lines(geometry: BaseGeometry, bounds: Bounds, settings: Dict) -> Optional[BaseGeometry]:
    domain = DOMAINS[settings['domain']]

    if settings['precision'] == 'single':
        batch = lines_to_batch(geometry, dtype='float32')
        subset = subset_map
    else:
        batch = lines_to_batch(geometry)
        subset = subset_map_double

    if batch is None:
        return None

    result = subset(batch, settings['resolution'], bounds, domain=domain)
    return batch_to_lines(result.to_batch())


def _clip_one_polygon(polygon: Polygon, bounds: Bounds, discard_degenerates: bool) -> Optional[Polygon]:
    exterior = clip_polygon(discard_degenerates, bounds, ring_vertices(polygon.exterior))

    if len(exterior) == 0:
        return None

    holes = [
        clip_polygon(discard_degenerates, bounds, ring_vertices(interior))
        for interior in polygon.interiors
    ]
    return rings_to_polygon(exterior, holes)


def _clip_polygons(geometry: BaseGeometry, bounds: Bounds, settings: Dict) -> Optional[BaseGeometry]:
    polygons = [geometry] if isinstance(geometry, Polygon) else list(geometry.geoms)
    discard_degenerates = settings['discard_degenerates']
    clipped = [
        part for part in (
            _clip_one_polygon(polygon, bounds, discard_degenerates) for polygon in polygons
        )
        if part is not None
    ]

    if not clipped:
        return None

    result = clipped[0] if len(clipped) == 1 else MultiPolygon(clipped)

    # Clipped holes can touch the window edge or each other
    if not result.is_valid:
        result = extract_geometry_type(make_valid(result), 'polygon')

    return result


def clip_geometry(geometry: Optional[BaseGeometry], bounds: Bounds, settings: Dict) -> Optional[BaseGeometry]:
    """
    Clip a single Shapely geometry to bounds.

    Args:
        geometry: Point, line or polygon geometry (single or multi-part)
        bounds: Clip window
        settings: Clip settings (see config_loader.load_clip_settings)

    Returns:
        Clipped geometry, the original geometry if it already lies inside
        the window, or None if nothing of it lies inside

    Raises:
        TypeError: For unsupported geometry types (e.g. GeometryCollection)
    """
    if geometry is None or geometry.is_empty:
        return None

    domain = DOMAINS[settings['domain']]
    feature_bounds = geometry_bounds(geometry)

    if not overlap(bounds, feature_bounds, domain):
        return None
    if subsumes(bounds, feature_bounds, domain):
        return geometry

    if isinstance(geometry, (Point, MultiPoint)):
        return _clip_points(geometry, bounds)
    if isinstance(geometry, (LineString, MultiLineString)):
        return _clip_lines(geometry, bounds, settings)
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return _clip_polygons(geometry, bounds, settings)

    raise TypeError(f"Unsupported geometry type for clipping: {geometry.geom_type}")


def clip_geodataframe(
    gdf: gpd.GeoDataFrame,
    bounds: Bounds,
    layer_name: str,
    settings: Dict
) -> Tuple[gpd.GeoDataFrame, Dict]:
    """
    Clip all geometries in a GeoDataFrame to the clip window.

    Features entirely outside the window are removed; features entirely
    inside are kept unchanged.

    Args:
        gdf: GeoDataFrame with geometries to clip (in the window's CRS)
        bounds: Clip window
        layer_name: Name of the layer (for logging)
        settings: Clip settings (see config_loader.load_clip_settings)

    Returns:
        Tuple of (clipped GeoDataFrame, metadata dictionary)

    Metadata dictionary contains:
        - features_clipped: Number of features whose geometry was changed by clipping
        - lines_clipped: Count of line features clipped
        - polygons_clipped: Count of polygon features clipped
        - points_removed: Point features (or parts) outside the window
        - original_vertex_count: Total vertices before clipping
        - clipped_vertex_count: Total vertices after clipping
        - vertex_reduction_percent: Percentage reduction in vertices
        - empty_geometries_removed: Features removed due to empty geometry after clip
        - containment_violations: Clipped features reaching outside bounds + tolerance
    """
    clip_metadata = _empty_clip_metadata()

    if gdf is None or len(gdf) == 0:
        return gdf, clip_metadata

    logger.info(f"  Clipping {len(gdf)} features for {layer_name}...")

    tolerance = settings['containment_tolerance']
    original_vertex_count = 0
    clipped_vertex_count = 0
    clipped_geometries: List[Optional[BaseGeometry]] = []
    keep_mask: List[bool] = []

    for geometry in gdf.geometry:
        original_vertex_count += count_vertices(geometry)
        clipped = clip_geometry(geometry, bounds, settings)
        clipped_geometries.append(clipped)

        if clipped is None or clipped.is_empty:
            keep_mask.append(False)
            if isinstance(geometry, (Point, MultiPoint)):
                clip_metadata['points_removed'] += 1
            else:
                clip_metadata['empty_geometries_removed'] += 1
            continue

        keep_mask.append(True)
        clipped_vertex_count += count_vertices(clipped)

        if clipped is not geometry:
            clip_metadata['features_clipped'] += 1
            if isinstance(clipped, (LineString, MultiLineString)):
                clip_metadata['lines_clipped'] += 1
            elif isinstance(clipped, (Polygon, MultiPolygon)):
                clip_metadata['polygons_clipped'] += 1
            elif isinstance(clipped, MultiPoint):
                clip_metadata['points_removed'] += len(geometry.geoms) - len(clipped.geoms)

        if not in_bounds([clipped.bounds[:2], clipped.bounds[2:]], bounds, tolerance):
            clip_metadata['containment_violations'] += 1

    clipped_gdf = gdf.copy()
    clipped_gdf[gdf.geometry.name] = gpd.GeoSeries(clipped_geometries, index=gdf.index, crs=gdf.crs)
    clipped_gdf = clipped_gdf[np.array(keep_mask, dtype=bool)]

    clip_metadata['original_vertex_count'] = original_vertex_count
    clip_metadata['clipped_vertex_count'] = clipped_vertex_count

    if original_vertex_count > 0:
        reduction = ((original_vertex_count - clipped_vertex_count) / original_vertex_count) * 100
        clip_metadata['vertex_reduction_percent'] = round(reduction, 1)

    removed = clip_metadata['empty_geometries_removed'] + clip_metadata['points_removed']
    if removed > 0:
        logger.info(f"    Removed {removed} features outside the clip window")

    if clip_metadata['features_clipped'] > 0:
        logger.info(
            f"    Clipped {clip_metadata['features_clipped']} features: "
            f"{original_vertex_count:,} -> {clipped_vertex_count:,} vertices "
            f"({clip_metadata['vertex_reduction_percent']}% reduction)"
        )
    else:
        logger.info("    No features required clipping (all within clip window)")

    if clip_metadata['containment_violations'] > 0:
        logger.warning(
            f"    {clip_metadata['containment_violations']} clipped features extend "
            f"beyond the window by more than {tolerance}"
        )

    return clipped_gdf, clip_metadata


def aggregate_clip_metadata(layer_metadata_list: list) -> Dict:
    """
    Aggregate clipping statistics across all layers.

    Args:
        layer_metadata_list: List of per-layer metadata dictionaries, each
            holding its clip statistics under 'clipping'

    Returns:
        Dictionary with aggregated clipping statistics
    """
    summary = {
        'total_features_clipped': 0,
        'total_lines_clipped': 0,
        'total_polygons_clipped': 0,
        'total_points_removed': 0,
        'total_original_vertices': 0,
        'total_clipped_vertices': 0,
        'total_empty_removed': 0,
        'overall_vertex_reduction_percent': 0.0
    }

    for meta in layer_metadata_list:
        clip_data = meta.get('clipping')
        if not clip_data:
            continue
        summary['total_features_clipped'] += clip_data.get('features_clipped', 0)
        summary['total_lines_clipped'] += clip_data.get('lines_clipped', 0)
        summary['total_polygons_clipped'] += clip_data.get('polygons_clipped', 0)
        summary['total_points_removed'] += clip_data.get('points_removed', 0)
        summary['total_original_vertices'] += clip_data.get('original_vertex_count', 0)
        summary['total_clipped_vertices'] += clip_data.get('clipped_vertex_count', 0)
        summary['total_empty_removed'] += clip_data.get('empty_geometries_removed', 0)

    if summary['total_original_vertices'] > 0:
        reduction = (
            (summary['total_original_vertices'] - summary['total_clipped_vertices'])
            / summary['total_original_vertices']
        ) * 100
        summary['overall_vertex_reduction_percent'] = round(reduction, 1)

    return summary
