"""
Output generation module for Map Subsetter.

This module handles saving clipped layers and run metadata to the output directory.

Functions:
    safe_layer_name: File-name form of a layer name
    generate_output: Save clipped layers, map files and metadata to an output directory
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import geopandas as gpd

from config.config_loader import OUTPUT_DIR
from geometry_clip.bounds import Bounds
from geometry_clip.polyline_subsetter import PolylineBatch
from utils.geometry_converters import lines_to_batch
from utils.logger import get_logger
from utils.map_file import write_map_file

logger = get_logger(__name__)


def safe_layer_name(layer_name: str) -> str:
    """File-name form of a layer name, as used for its output files."""
    return layer_name.replace(' ', '_').replace('/', '_').lower()


def _write_layer_map_file(gdf: gpd.GeoDataFrame, path: Path, layer_name: str) -> bool:
    """
    Write a line layer's polylines as a map file.

    Returns False for non-line layers and for layers in a projected CRS,
    since map files hold longitude-latitude vertices.
    """
    if gdf.crs is not None and not gdf.crs.is_geographic:
        logger.info(f"  - Skipping map file for {layer_name}: {gdf.crs.to_string()} is not geographic")
        return False

    polylines = []
    for geometry in gdf.geometry:
        if geometry.geom_type not in ('LineString', 'MultiLineString'):
            return False
        batch = lines_to_batch(geometry, dtype='float32')
        if batch is not None:
            polylines.extend(batch.polylines())

    if not polylines:
        return False

    write_map_file(path, PolylineBatch.from_polylines(polylines, dtype='float32'), title=layer_name)
    return True


def generate_output(
    layer_results: Dict[str, gpd.GeoDataFrame],
    metadata: Dict[str, Dict],
    bounds: Bounds,
    output_name: Optional[str] = None,
    output_dir: Optional[Path] = None,
    clip_summary: Optional[Dict] = None,
    write_map_files: bool = True,
    execution_time: Optional[float] = None
) -> Path:
    """
    Generate output directory with clipped layer files and metadata.

    Creates an output directory containing:
    - data/<layer>.geojson: Clipped features of each layer
    - data/map_<layer>.bin: Clipped polylines of each line layer (if enabled)
    - metadata.json: Clip window, per-layer statistics and summary

    Parameters:
    -----------
    layer_results : Dict[str, gpd.GeoDataFrame]
        Dictionary of clipped layers (layer name -> GeoDataFrame)
    metadata : Dict[str, Dict]
        Layer metadata from process_all_layers
    bounds : Bounds
        Clip window used
    output_name : Optional[str]
        Custom output directory name (defaults to timestamped name)
    output_dir : Optional[Path]
        Parent directory (defaults to OUTPUT_DIR)
    clip_summary : Optional[Dict]
        Aggregated clip statistics
    write_map_files : bool
        Also write line layers as map_*.bin files
    execution_time : Optional[float]
        Workflow run time in seconds, recorded in metadata.json

    Returns:
    --------
    Path
        Path to output directory
    """
    logger.info("=" * 80)
    logger.info("Generating Output Files")
    logger.info("=" * 80)

    if output_name is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_name = f"subset_{timestamp}"

    output_path = Path(output_dir or OUTPUT_DIR) / output_name
    data_path = output_path / 'data'
    data_path.mkdir(parents=True, exist_ok=True)

    logger.info(f"Output directory: {output_path}")

    for layer_name, gdf in layer_results.items():
        safe_name = safe_layer_name(layer_name)
        logger.info(f"  - Saving {layer_name} features...")
        gdf.to_file(data_path / f'{safe_name}.geojson', driver='GeoJSON')

        if write_map_files and _write_layer_map_file(gdf, data_path / f'map_{safe_name}.bin', layer_name):
            logger.info(f"  - Saved {layer_name} polylines as map file")

    logger.info("  - Saving metadata...")
    summary = {
        'generated_at': datetime.now().isoformat(),
        'clip_bounds': bounds.as_total_bounds(),
        'layers': metadata,
        'total_features': sum(m['feature_count'] for m in metadata.values()),
        'layers_with_data': sum(1 for m in metadata.values() if m['feature_count'] > 0)
    }

    if clip_summary:
        summary['clipping'] = clip_summary

    if execution_time is not None:
        summary['execution_time_seconds'] = round(execution_time, 2)

    with open(output_path / 'metadata.json', 'w', encoding='utf-8') as f:
        json.dump(summary, f, indent=2)

    logger.info("")
    logger.info("=" * 80)
    logger.info("✓ Output Generation Complete")
    logger.info("=" * 80)
    logger.info(f"Files saved to: {output_path}")

    return output_path
