"""
Utility modules for Map Subsetter.

This package contains utility functions and helpers used throughout the application.

Modules:
    logger: Logging configuration and setup
    geometry_converters: Shapely geometry <-> polyline batch / ring conversion
    map_file: Read and write map_*.bin polyline files
"""

__version__ = '1.0.0'
