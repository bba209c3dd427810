"""
Map file reading and writing.

A map file stores a batch of longitude-latitude polylines (coastlines,
political boundaries, rivers) as a 4-line ASCII header followed by
big-endian binary data:

    Map_polylines
    # Dimensions: polylines vertices
    3 1204
    # MSB 32-bit int counts[polylines] + IEEE-754 32-bit reals vertices[vertices][2=<longitude,latitude>]:
    <counts as >i4><vertices as >f4, interleaved longitude, latitude>

Only the third header line is interpreted; the others are free text.

Functions:
    read_map_file: Read a map file into a float32 PolylineBatch
    write_map_file: Write a PolylineBatch as a map file
"""

from pathlib import Path
from typing import Tuple, Union

import numpy as np

from geometry_clip.polyline_subsetter import PolylineBatch
from utils.logger import get_logger

logger = get_logger(__name__)

COUNT_DTYPE = np.dtype('>i4')
VERTEX_DTYPE = np.dtype('>f4')

DIMENSIONS_LINE = '# Dimensions: polylines vertices'
DATA_LINE = (
    '# MSB 32-bit int counts[polylines] + '
    'IEEE-754 32-bit reals vertices[vertices][2=<longitude,latitude>]:'
)


def _read_header(data: bytes) -> Tuple[int, int, int]:
    """Parse the header, returning (polyline_count, vertex_count, data_offset)."""
    offset = 0
    lines = []

    for _ in range(4):
        end = data.find(b'\n', offset)
        if end < 0:
            raise ValueError("Invalid map file header: expected 4 header lines")
        lines.append(data[offset:end])
        offset = end + 1

    try:
        polyline_count, vertex_count = (int(value) for value in lines[2].split())
    except ValueError:
        raise ValueError(f"Invalid map file header dimensions: {lines[2]!r}")

    if polyline_count <= 0 or vertex_count <= 0:
        raise ValueError(
            f"Invalid map file header: {polyline_count} polylines, {vertex_count} vertices"
        )

    return polyline_count, vertex_count, offset


def read_map_file(file_path: Union[str, Path]) -> PolylineBatch:
    """
    Read a map file into a PolylineBatch of float32 longitude-latitude vertices.

    Args:
        file_path: Path to map_*.bin file

    Returns:
        PolylineBatch with native-endian int counts and float32 vertices

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the header or data is malformed
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Map file not found: {file_path}")

    data = file_path.read_bytes()
    polyline_count, vertex_count, offset = _read_header(data)

    counts_size = polyline_count * COUNT_DTYPE.itemsize
    vertices_size = 2 * vertex_count * VERTEX_DTYPE.itemsize

    if len(data) - offset < counts_size + vertices_size:
        raise ValueError(
            f"Invalid map file data: expected {counts_size + vertices_size} bytes, "
            f"found {len(data) - offset}"
        )

    counts = np.frombuffer(data, dtype=COUNT_DTYPE, count=polyline_count, offset=offset)
    vertices = np.frombuffer(
        data, dtype=VERTEX_DTYPE, count=2 * vertex_count, offset=offset + counts_size
    )

    logger.debug(f"Read {polyline_count} polylines / {vertex_count} vertices from {file_path}")

    try:
        return PolylineBatch(
            counts.astype(np.int64),
            vertices.astype(np.float32).reshape(vertex_count, 2)
        )
    except ValueError as e:
        raise ValueError(f"Invalid map file data: {e}")


def write_map_file(file_path: Union[str, Path], batch: PolylineBatch,
                   title: str = 'Map_polylines') -> Path:
    """
    Write batch as a map file (vertices are stored as float32).

    Returns:
        Path of the written file
    """
    file_path = Path(file_path)
    header = (
        f"{title}\n"
        f"{DIMENSIONS_LINE}\n"
        f"{batch.polyline_count} {batch.vertex_count}\n"
        f"{DATA_LINE}\n"
    )

    with open(file_path, 'wb') as f:
        f.write(header.encode('ascii', errors='replace'))
        f.write(batch.counts.astype(COUNT_DTYPE).tobytes())
        f.write(batch.vertices.astype(VERTEX_DTYPE).tobytes())

    logger.debug(f"Wrote {batch.polyline_count} polylines to {file_path}")
    return file_path
