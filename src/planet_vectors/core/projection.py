"""Geometry-level moves between lat/lon and a projection's render coordinates."""

import numpy as np
import shapely
from shapely.geometry.base import BaseGeometry

from ..models import CYLINDRICAL, NORTH_POLAR, SOUTH_POLAR, Projection, pole_of
from .coords import lonlat_to_polar, polar_to_lonlat

# Polar maps show the cap poleward of this latitude.
POLAR_CAP_LATITUDE = 60.0


def to_render(geometry: BaseGeometry, projection: Projection,
              polar_radius_km: float) -> BaseGeometry:
    """Lat/lon degrees -> render coordinates (degrees or polar meters)."""
    if projection == CYLINDRICAL:
        return geometry
    pole = pole_of(projection)

    def forward(coords: np.ndarray) -> np.ndarray:
        x, y = lonlat_to_polar(coords[:, 0], coords[:, 1], pole, polar_radius_km)
        return np.column_stack([x, y])

    return shapely.transform(geometry, forward)


def from_render(geometry: BaseGeometry, projection: Projection,
                polar_radius_km: float) -> BaseGeometry:
    """Render coordinates -> lat/lon degrees."""
    if projection == CYLINDRICAL:
        return geometry
    pole = pole_of(projection)

    def inverse(coords: np.ndarray) -> np.ndarray:
        lon, lat = polar_to_lonlat(coords[:, 0], coords[:, 1], pole, polar_radius_km)
        return np.column_stack([lon, lat])

    return shapely.transform(geometry, inverse)


def is_drawable(geometry: BaseGeometry, projection: Projection) -> bool:
    """Whether a lat/lon geometry reaches into the visible part of the projection."""
    if projection == CYLINDRICAL:
        return True
    _, min_lat, _, max_lat = geometry.bounds
    if projection == NORTH_POLAR:
        return max_lat > POLAR_CAP_LATITUDE
    if projection == SOUTH_POLAR:
        return min_lat < -POLAR_CAP_LATITUDE
    raise ValueError(f"Unknown projection {projection!r}")
