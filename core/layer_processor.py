"""
Layer processing module for Map Subsetter.

This module handles batch clipping of multiple vector layers to one clip
window and collects results and metadata.

Functions:
    process_all_layers: Clip every layer and return results and statistics
"""

import time
from typing import Dict, Tuple

import geopandas as gpd

from config.config_loader import load_clip_settings
from core.feature_clipping import aggregate_clip_metadata, clip_geodataframe
from core.input_reader import detect_geometry_type
from geometry_clip.bounds import Bounds
from utils.logger import get_logger

logger = get_logger(__name__)


def process_all_layers(
    layers: Dict[str, gpd.GeoDataFrame],
    bounds: Bounds,
    config: Dict
) -> Tuple[Dict[str, gpd.GeoDataFrame], Dict[str, Dict], Dict]:
    """
    Clip all layers to the clip window.

    Layers left with no features after clipping are omitted from the
    results but still reported in the metadata.

    Parameters:
    -----------
    layers : Dict[str, gpd.GeoDataFrame]
        Layer name -> features, already in the clip window's CRS
    bounds : Bounds
        Clip window
    config : Dict
        Configuration dictionary (see config_loader.load_config)

    Returns:
    --------
    Tuple[Dict[str, gpd.GeoDataFrame], Dict[str, Dict], Dict]
        - Dictionary of layer results (layer name -> clipped GeoDataFrame)
        - Dictionary of metadata (layer name -> metadata dict)
        - Dictionary of clipping summary statistics

    Example:
        >>> results, metadata, summary = process_all_layers({'roads': roads_gdf}, window, config)
        >>> metadata['roads']['feature_count']
        152
        >>> summary['total_clipped_vertices']
        4810
    """
    logger.info("=" * 80)
    logger.info("Clipping Layers")
    logger.info("=" * 80)

    settings = load_clip_settings(config)
    logger.info(
        f"Clip window: x [{bounds.x_min}, {bounds.x_max}], y [{bounds.y_min}, {bounds.y_max}]"
    )
    logger.info(
        f"Precision: {settings['precision']}, resolution: {settings['resolution']}, "
        f"discard degenerates: {settings['discard_degenerates']}"
    )

    results: Dict[str, gpd.GeoDataFrame] = {}
    metadata: Dict[str, Dict] = {}

    for layer_name, gdf in layers.items():
        start_time = time.time()
        geometry_type = detect_geometry_type(gdf) if len(gdf) > 0 else 'empty'

        clipped_gdf, clip_metadata = clip_geodataframe(gdf, bounds, layer_name, settings)
        elapsed = time.time() - start_time

        metadata[layer_name] = {
            'geometry_type': geometry_type,
            'original_feature_count': len(gdf),
            'feature_count': len(clipped_gdf),
            'processing_time': round(elapsed, 3),
            'clipping': clip_metadata
        }

        if len(clipped_gdf) > 0:
            results[layer_name] = clipped_gdf
            logger.info(f"  ✓ {layer_name}: {len(clipped_gdf)} of {len(gdf)} features kept")
        else:
            logger.info(f"  - {layer_name}: no features inside the clip window")

    clip_summary = aggregate_clip_metadata(list(metadata.values()))

    logger.info("")
    logger.info(f"Layers with data: {len(results)} of {len(layers)}")
    logger.info(
        f"Vertices: {clip_summary['total_original_vertices']:,} -> "
        f"{clip_summary['total_clipped_vertices']:,} "
        f"({clip_summary['overall_vertex_reduction_percent']}% reduction)"
    )

    return results, metadata, clip_summary
