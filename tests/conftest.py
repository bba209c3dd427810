"""Pytest configuration and fixtures for Map Subsetter tests."""

import geopandas as gpd
import pytest
from shapely.geometry import LineString, Point, Polygon

from config.config_loader import load_clip_settings
from geometry_clip.bounds import Bounds


@pytest.fixture
def unit_window():
    """10 x 10 clip window anchored at the origin."""
    return Bounds(x_min=0.0, x_max=10.0, y_min=0.0, y_max=10.0)


@pytest.fixture
def clip_settings():
    """Default clip settings (no config file involved)."""
    return load_clip_settings({'settings': {}})


@pytest.fixture
def mixed_layer():
    """One straddling line, one point outside and one polygon inside the unit window."""
    return gpd.GeoDataFrame(
        {'name': ['road', 'tower', 'park']},
        geometry=[
            LineString([(-5, 5), (5, 5), (5, 15)]),
            Point(20, 20),
            Polygon([(1, 1), (3, 1), (3, 3), (1, 3)]),
        ],
        crs='EPSG:4326',
    )
