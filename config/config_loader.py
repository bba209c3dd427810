"""
Configuration loading for Map Subsetter.

This module handles loading and validation of the subsetting configuration JSON file.

Constants:
    PROJECT_ROOT: Root directory of the project
    CONFIG_DIR: Configuration files directory
    CONFIG_FILE: Default configuration file
    OUTPUT_DIR: Output files directory

Functions:
    load_config: Load and validate configuration from JSON
    load_clip_settings: Clip settings merged over defaults
    load_default_bounds: Default clip window from configuration
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union

from geometry_clip.bounds import Bounds, DOMAINS, UNBOUNDED, domain_for_crs

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / 'config'
CONFIG_FILE = CONFIG_DIR / 'subset_config.json'
OUTPUT_DIR = PROJECT_ROOT / 'outputs'

PRECISIONS = ('single', 'double')


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Load subsetting configuration from JSON file.

    Reads subset_config.json (or the given file) and validates basic structure.

    Returns:
    --------
    Dict
        Configuration dictionary with a 'settings' key and optional
        'default_bounds' key

    Raises:
    -------
    FileNotFoundError
        If configuration file doesn't exist
    json.JSONDecodeError
        If configuration file contains invalid JSON
    KeyError
        If required configuration keys are missing
    """
    config_path = Path(config_path) if config_path is not None else CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    if 'settings' not in config:
        raise KeyError("Configuration missing required 'settings' key")

    return config


def load_clip_settings(config: Dict = None) -> Dict:
    """
    Load clipping settings from configuration.

    Args:
        config: Configuration dictionary (optional, will load if not provided)

    Returns:
        Dictionary with clip settings

    Defaults:
        - resolution: 0.0 (no point thinning)
        - precision: 'double'
        - discard_degenerates: False
        - domain: None (follow target_crs: geographic CRSs use
          'longitude_latitude', projected CRSs 'unbounded')
        - target_crs: 'EPSG:4326'
        - containment_tolerance: 0.001
        - write_map_files: True

    Raises:
        ValueError: If precision, domain or resolution have invalid values
    """
    if config is None:
        config = load_config()

    defaults = {
        'resolution': 0.0,
        'precision': 'double',
        'discard_degenerates': False,
        'domain': None,
        'target_crs': 'EPSG:4326',
        'containment_tolerance': 1e-3,
        'write_map_files': True
    }

    # Config values override defaults
    result = {**defaults, **config.get('settings', {})}

    if result['precision'] not in PRECISIONS:
        raise ValueError(
            f"Invalid precision '{result['precision']}', expected one of {PRECISIONS}"
        )
    if result['domain'] is None:
        projected = domain_for_crs(result['target_crs']) == UNBOUNDED
        result['domain'] = 'unbounded' if projected else 'longitude_latitude'
    if result['domain'] not in DOMAINS:
        raise ValueError(
            f"Invalid domain '{result['domain']}', expected one of {tuple(DOMAINS)}"
        )
    if result['resolution'] < 0:
        raise ValueError(f"Resolution must be >= 0, got {result['resolution']}")

    return result


def load_default_bounds(config: Dict = None) -> Optional[Bounds]:
    """Default clip window ([x_min, y_min, x_max, y_max]) or None if not configured."""
    if config is None:
        config = load_config()

    total_bounds = config.get('default_bounds')
    return Bounds.from_total_bounds(total_bounds) if total_bounds else None
