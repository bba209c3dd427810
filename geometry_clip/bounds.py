"""
Clip window and coordinate domain definitions.

A Bounds is an axis-aligned rectangle. The same type describes both the clip
window handed to every clipping routine and the coordinate domain the window
(and the input vertices) must lie in.

Constants:
    LONGITUDE_LATITUDE: Domain of geographic coordinates in degrees
    UNBOUNDED: Domain with no limits (projected or generic x, y data)

Functions:
    domain_for_crs: Pick the coordinate domain for a pyproj CRS
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pyproj import CRS

Point = Tuple[float, float]


class ClipContractError(ValueError):
    """Raised when a clipping routine is called with malformed input."""


@dataclass(frozen=True)
class Bounds:
    """An axis-aligned rectangle [x_min, x_max] x [y_min, y_max]."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @classmethod
    def from_total_bounds(cls, total_bounds: Sequence[float]) -> 'Bounds':
        """
        Build Bounds from shapely/geopandas ordering [minx, miny, maxx, maxy].

        Raises:
            ClipContractError: If the sequence does not hold four values
        """
        if len(total_bounds) != 4:
            raise ClipContractError(
                f"Expected [x_min, y_min, x_max, y_max], got {list(total_bounds)}"
            )
        x_min, y_min, x_max, y_max = (float(value) for value in total_bounds)
        return cls(x_min, x_max, y_min, y_max)

    def as_total_bounds(self) -> List[float]:
        return [self.x_min, self.y_min, self.x_max, self.y_max]

    def contains_point(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


LONGITUDE_LATITUDE = Bounds(-180.0, 180.0, -90.0, 90.0)
UNBOUNDED = Bounds(-math.inf, math.inf, -math.inf, math.inf)

DOMAINS = {
    'longitude_latitude': LONGITUDE_LATITUDE,
    'unbounded': UNBOUNDED,
}


def domain_for_crs(crs: Optional[CRS]) -> Bounds:
    """
    Coordinate domain for data in the given CRS.

    Geographic CRSs (and data with no CRS, which the toolkit treats as
    EPSG:4326) use longitude-latitude limits. Projected CRSs are unbounded.
    """
    if crs is None:
        return LONGITUDE_LATITUDE
    return LONGITUDE_LATITUDE if CRS.from_user_input(crs).is_geographic else UNBOUNDED
