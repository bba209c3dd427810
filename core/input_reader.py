"""
Input reader module for Map Subsetter.

This module handles reading vector data from geospatial files or map_*.bin
polyline files and reprojecting it to the CRS the clip window is given in.

Functions:
    read_vector_file: Read a vector file into a GeoDataFrame in the target CRS
    batch_to_geodataframe: One LineString feature per polyline of a batch
    detect_geometry_type: Classify a layer as point, line, polygon or mixed
"""

import tempfile
import zipfile
from pathlib import Path

import geopandas as gpd
from shapely.geometry import LineString

from geometry_clip.polyline_subsetter import PolylineBatch
from utils.logger import get_logger
from utils.map_file import read_map_file

logger = get_logger(__name__)

MAP_FILE_SUFFIX = '.bin'


def batch_to_geodataframe(batch: PolylineBatch, crs: str = 'EPSG:4326') -> gpd.GeoDataFrame:
    """
    Convert a polyline batch to a GeoDataFrame with one LineString per polyline.

    Single-vertex polylines cannot be LineStrings and are skipped.
    """
    lines = [LineString(polyline) for polyline in batch.polylines() if len(polyline) >= 2]
    return gpd.GeoDataFrame({'polyline': range(len(lines))}, geometry=lines, crs=crs)


def _read_zipped_shapefile(file_path: Path) -> gpd.GeoDataFrame:
    logger.info("  - Detected ZIP file, extracting to read shapefile...")
    with tempfile.TemporaryDirectory() as tmpdir:
        with zipfile.ZipFile(file_path, 'r') as zip_ref:
            zip_ref.extractall(tmpdir)
        shp_files = list(Path(tmpdir).rglob('*.shp'))
        if not shp_files:
            raise ValueError("No shapefile (.shp) found in ZIP archive")
        if len(shp_files) > 1:
            logger.warning(f"  - Multiple shapefiles found in ZIP, using first: {shp_files[0].name}")
        return gpd.read_file(shp_files[0])


def read_vector_file(file_path: str, target_crs: str = 'EPSG:4326') -> gpd.GeoDataFrame:
    """
    Read vector features and return them in target_crs.

    Supports every format GeoPandas reads (Shapefile, GeoPackage, GeoJSON,
    KML, ...), ZIP archives holding a shapefile, and map_*.bin polyline files
    (which are always longitude-latitude, EPSG:4326).

    Parameters:
    -----------
    file_path : str
        Path to the input file
    target_crs : str
        CRS to reproject to (the CRS of the clip window)

    Returns:
    --------
    gpd.GeoDataFrame
        Features in target_crs; null and empty geometries removed

    Raises:
    -------
    FileNotFoundError
        If the input file doesn't exist
    ValueError
        If the file cannot be read, holds no features or has no CRS
    """
    file_path_obj = Path(file_path)

    if not file_path_obj.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    logger.info(f"Reading vector data from: {file_path}")

    try:
        suffix = file_path_obj.suffix.lower()
        if suffix == MAP_FILE_SUFFIX:
            gdf = batch_to_geodataframe(read_map_file(file_path_obj))
        elif suffix == '.zip':
            gdf = _read_zipped_shapefile(file_path_obj)
        else:
            gdf = gpd.read_file(file_path)
    except zipfile.BadZipFile:
        raise ValueError("Invalid ZIP file - file appears to be corrupted")
    except Exception as e:
        raise ValueError(f"Failed to read vector file: {e}")

    if gdf.crs is None:
        raise ValueError(
            "Input file has no Coordinate Reference System (CRS) defined. "
            "Please assign a CRS to your data before subsetting it."
        )

    empty_mask = gdf.geometry.isna() | gdf.geometry.is_empty
    if empty_mask.any():
        logger.debug(f"  - Dropping {int(empty_mask.sum())} null/empty geometries")
        gdf = gdf[~empty_mask]

    if gdf.empty:
        raise ValueError("Input file contains no features")

    logger.info(f"  - Loaded {len(gdf)} feature(s)")
    logger.info(f"  - Original CRS: {gdf.crs}")

    if gdf.crs != target_crs:
        logger.info(f"  - Reprojecting to {target_crs}...")
        gdf = gdf.to_crs(target_crs)

    return gdf


def detect_geometry_type(gdf: gpd.GeoDataFrame) -> str:
    """
    Detect the primary geometry type in the GeoDataFrame.

    Returns:
        One of: 'point', 'line', 'polygon', or 'mixed'

    Note:
        - MultiPoint/MultiLineString/MultiPolygon are classified as their base type
        - If multiple different types exist (or GeometryCollections), returns 'mixed'
    """
    normalized_types = set()
    for geom_type in gdf.geometry.geom_type.unique():
        if geom_type in ('Point', 'MultiPoint'):
            normalized_types.add('point')
        elif geom_type in ('LineString', 'MultiLineString'):
            normalized_types.add('line')
        elif geom_type in ('Polygon', 'MultiPolygon'):
            normalized_types.add('polygon')
        else:
            normalized_types.add('mixed')

    if len(normalized_types) != 1:
        return 'mixed'
    return normalized_types.pop()
