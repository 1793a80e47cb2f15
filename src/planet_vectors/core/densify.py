"""Edge densification ("warp") before nonlinear reprojection.

Straight render segments between widely spaced lat/lon vertices drift away
from the true projected curve near the edge of a stereographic map, so sparse
rings and lines get extra vertices interpolated along each edge.
"""

import numpy as np
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from ..errors import UnsupportedGeometryError

POINTS_PER_EDGE = 16
MAX_VERTICES = 16

# k/16 for k = 0..15: binary midpoint refinement of one edge, end point excluded
_FRACTIONS = np.arange(POINTS_PER_EDGE) / POINTS_PER_EDGE


def _skip_edge(start: np.ndarray, end: np.ndarray) -> bool:
    if np.array_equal(start, end):
        return True
    # an edge running along the split seam (0 or 360) must stay straight
    return start[0] in (0.0, 360.0) and end[0] in (0.0, 360.0)


def densify_coords(coords: np.ndarray) -> np.ndarray:
    """Subdivide every edge of a coordinate run into 16 points.

    Runs with more than 16 coordinates are returned unchanged.
    """
    coords = np.asarray(coords, dtype=float)
    if len(coords) > MAX_VERTICES or len(coords) < 2:
        return coords

    out = []
    for start, end in zip(coords[:-1], coords[1:]):
        if _skip_edge(start, end):
            out.append(start[np.newaxis, :])
            continue
        out.append(start + _FRACTIONS[:, np.newaxis] * (end - start))
    out.append(coords[-1:])
    return np.concatenate(out)


def densify(geometry: BaseGeometry) -> BaseGeometry:
    """Densify a lat/lon geometry; points pass through untouched."""
    kind = geometry.geom_type
    if kind in ("Point", "MultiPoint"):
        return geometry
    if kind == "LineString":
        return LineString(densify_coords(geometry.coords))
    if kind == "Polygon":
        return Polygon(densify_coords(geometry.exterior.coords))
    if kind == "MultiLineString":
        return MultiLineString([densify(line) for line in geometry.geoms])
    if kind == "MultiPolygon":
        return MultiPolygon([densify(polygon) for polygon in geometry.geoms])
    raise UnsupportedGeometryError(f"Unsupported geometry type {kind!r}")
