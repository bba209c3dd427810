"""
Configuration package for Map Subsetter.

This package contains configuration loading and validation.

Modules:
    config_loader: Load and validate subsetting configuration from JSON
"""

__version__ = '1.0.0'
