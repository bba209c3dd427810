#!/usr/bin/env python
"""
Map Subsetter
=============
Reduces large longitude-latitude vector datasets (polylines, polygons and
points) to a rectangular region of interest before they are written out,
using Liang-Barsky line and polygon clipping.

Usage:
    python map_subsetter.py INPUT [INPUT ...] [--bounds X_MIN Y_MIN X_MAX Y_MAX]
                            [--output-name NAME] [--config PATH] [--verbose]
"""

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Union

# Import logging first
from utils.logger import setup_logging, get_logger

from config.config_loader import load_config, load_clip_settings, load_default_bounds
from core.input_reader import read_vector_file
from core.layer_processor import process_all_layers
from core.output_generator import generate_output, safe_layer_name
from geometry_clip.bounds import Bounds, DOMAINS
from geometry_clip.predicates import is_valid_bounds


def _layer_name(input_file: Union[str, Path], taken: Sequence[str]) -> str:
    """
    Layer name for an input file: its stem, suffixed _2, _3, ... when an
    earlier input already writes to the same output files.
    """
    stem = Path(input_file).stem
    used = {safe_layer_name(name) for name in taken}

    name = stem
    suffix = 2
    while safe_layer_name(name) in used:
        name = f"{stem}_{suffix}"
        suffix += 1
    return name


def main(
    input_files: Union[str, Sequence[str]],
    bounds: Optional[Union[Bounds, Sequence[float]]] = None,
    output_name: Optional[str] = None,
    output_dir: Optional[Path] = None,
    config_path: Optional[Path] = None,
    log_dir: Optional[Path] = None,
    verbose: bool = False
) -> Optional[Path]:
    """
    Main execution workflow for Map Subsetter.

    Workflow Steps:
    1. Setup logging to console and file
    2. Load configuration and clip settings
    3. Read each input file (one layer per file) in the target CRS
    4. Clip all layers to the clip window
    5. Generate output files

    Parameters:
    -----------
    input_files : Union[str, Sequence[str]]
        Input vector file(s): any GeoPandas-readable format, zipped
        shapefiles or map_*.bin files
    bounds : Optional[Union[Bounds, Sequence[float]]]
        Clip window as Bounds or [x_min, y_min, x_max, y_max]; defaults to the
        configured default_bounds
    output_name : Optional[str]
        Custom name for output directory (defaults to timestamped name)
    output_dir : Optional[Path]
        Parent directory for outputs (defaults to PROJECT_ROOT/outputs)
    config_path : Optional[Path]
        Configuration file (defaults to config/subset_config.json)
    log_dir : Optional[Path]
        Directory for the log file (defaults to PROJECT_ROOT/logs)
    verbose : bool
        Echo DEBUG messages (per-call clipping summaries) to the console

    Returns:
    --------
    Optional[Path]
        Path to output directory if successful, None if failed

    Example:
        >>> output_path = main('coastlines.gpkg', [-80.0, 35.0, -70.0, 45.0])
        >>> print(output_path / 'metadata.json')
    """
    workflow_start_time = time.time()

    log_file = setup_logging(log_dir, logging.DEBUG if verbose else logging.INFO)
    logger = get_logger(__name__)

    logger.info("=" * 80)
    logger.info("MAP SUBSETTER - Clip vector data to a region of interest")
    logger.info("=" * 80)
    logger.info(f"Log file: {log_file}")
    logger.info("")

    try:
        config = load_config(config_path)
        settings = load_clip_settings(config)

        if bounds is None:
            bounds = load_default_bounds(config)
            if bounds is None:
                raise ValueError("No clip bounds given and no default_bounds configured")
        elif not isinstance(bounds, Bounds):
            bounds = Bounds.from_total_bounds(bounds)

        domain = DOMAINS[settings['domain']]
        if not is_valid_bounds(bounds, domain):
            raise ValueError(f"Invalid clip bounds {bounds} for domain '{settings['domain']}'")

        if isinstance(input_files, (str, Path)):
            input_files = [input_files]

        # Step 1: Read each input as a layer named after its file
        layers = {}
        for input_file in input_files:
            layer_name = _layer_name(input_file, list(layers))
            if layer_name != Path(input_file).stem:
                logger.warning(f"⚠ Layer name '{Path(input_file).stem}' already used, reading {input_file} as '{layer_name}'")
            layers[layer_name] = read_vector_file(input_file, settings['target_crs'])
        logger.info("")

        # Step 2: Clip all layers
        layer_results, metadata, clip_summary = process_all_layers(layers, bounds, config)

        if not layer_results:
            logger.warning("⚠ WARNING: No features found inside the clip window in any layer.")
            logger.info("")

        total_execution_time = time.time() - workflow_start_time
        # Step 3: Generate output
        if output_name is None:
            output_name = f"subset_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        output_path = generate_output(
            layer_results, metadata, bounds,
            output_name=output_name,
            output_dir=output_dir,
            clip_summary=clip_summary,
            write_map_files=settings['write_map_files'],
            execution_time=total_execution_time
        )

        logger.info("")
        logger.info("✓ WORKFLOW COMPLETE")
        logger.info(f"✓ Total execution time: {total_execution_time:.2f} seconds")
        logger.info(f"✓ Output directory: {output_path}")
        logger.info(f"✓ Log file: {log_file}")
        logger.info("")

        return output_path

    except Exception as e:
        elapsed_time = time.time() - workflow_start_time

        logger.error("")
        logger.error("=" * 80)
        logger.error("✗ WORKFLOW FAILED")
        logger.error("=" * 80)
        logger.error(f"Error: {str(e)}", exc_info=True)
        logger.error(f"Workflow failed after {elapsed_time:.2f} seconds")
        logger.error("")
        logger.error(f"See log file for details: {log_file}")
        logger.error("=" * 80)
        return None


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Clip vector layers to a rectangular region of interest')
    parser.add_argument('input_files', nargs='+', help='Vector files or map_*.bin files, one layer each')
    parser.add_argument('--bounds', nargs=4, type=float, metavar=('X_MIN', 'Y_MIN', 'X_MAX', 'Y_MAX'),
                        help='Clip window (defaults to default_bounds in the config file)')
    parser.add_argument('--output-name', dest='output_name', help='Output directory name')
    parser.add_argument('--config', dest='config_path', type=Path, help='Configuration JSON file')
    parser.add_argument('--verbose', dest='verbose', action='store_true', help='Echo DEBUG logging to the console')
    args = parser.parse_args()

    output_dir = main(
        args.input_files, args.bounds,
        output_name=args.output_name,
        config_path=args.config_path,
        verbose=args.verbose
    )

    if output_dir:
        print(f"\n✓ Success! Clipped data written to {output_dir}")
    else:
        print("\n✗ Subsetting failed. Check log file for details.")
        sys.exit(1)
