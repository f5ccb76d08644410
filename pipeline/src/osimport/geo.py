"""British National Grid to WGS84 coordinate conversion."""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

from pyproj import Transformer

from osimport.config import SOURCE_CRS, TARGET_CRS

CoordinateConverter = Callable[[float, float], tuple[float, float]]


@lru_cache(maxsize=1)
def _grid_transformer() -> Transformer:
    return Transformer.from_crs(SOURCE_CRS, TARGET_CRS, always_xy=True)


def convert(easting: float, northing: float) -> tuple[float, float]:
    """Return (longitude, latitude) in WGS84 for an OSGB36 easting/northing."""

    longitude, latitude = _grid_transformer().transform(easting, northing)
    return float(longitude), float(latitude)
