"""Dateline (0/360 seam) handling for lat/lon geometries.

Splitting relies on the consecutive-vertex heuristic: a longitude step of more
than 180 degrees between two vertices is read as a trip across the seam rather
than the long way around. That is only correct for simple polygons and
linestrings spanning less than 180 degrees of longitude; wider shapes are
split incorrectly and nothing detects it.
"""

import logging
import math

import numpy as np
import shapely
from shapely.geometry import (
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

from ..errors import UnsupportedGeometryError
from ..models import CYLINDRICAL, NORTH_POLAR, SOUTH_POLAR, Extent, Projection, pole_of
from .coords import lonlat_to_polar

logger = logging.getLogger(__name__)

SEAM_JUMP_DEGREES = 180.0

_MULTI = {
    "Point": MultiPoint,
    "MultiPoint": MultiPoint,
    "LineString": MultiLineString,
    "MultiLineString": MultiLineString,
    "Polygon": MultiPolygon,
    "MultiPolygon": MultiPolygon,
}


def _undangle_coords(coords: np.ndarray) -> np.ndarray:
    out = coords.copy()
    lon = coords[:, 0]
    inside = (lon >= 0.0) & (lon <= 360.0)
    out[:, 0] = np.where(inside, lon, np.mod(lon, 360.0))
    return out


def undangle(geometry: BaseGeometry) -> BaseGeometry:
    """Bring every longitude into [0, 360].

    Values already in range are untouched, including 360 itself, which is the
    high side of a split seam.
    """
    return shapely.transform(geometry, _undangle_coords)


def _shift(geometry: BaseGeometry, dx: float) -> BaseGeometry:
    return shapely.transform(geometry, lambda coords: coords + np.array([dx, 0.0]))


def _outline(geometry: BaseGeometry) -> np.ndarray:
    if geometry.geom_type == "Polygon":
        return np.asarray(geometry.exterior.coords)
    return np.asarray(geometry.coords)


def _seam_jumps(coords: np.ndarray) -> np.ndarray:
    """Indices i where the step from vertex i to i+1 jumps more than 180 degrees."""
    steps = np.diff(coords[:, 0])
    return np.flatnonzero(np.abs(steps) > SEAM_JUMP_DEGREES)


def _children(geometry: BaseGeometry) -> list[BaseGeometry]:
    if geometry.geom_type.startswith("Multi"):
        return list(geometry.geoms)
    return [geometry]


def _polar_dateline_extent(projection: Projection) -> Extent:
    """Projected extent of the 0 meridian from the pole to the equator (unit radius)."""
    pole = pole_of(projection)
    pole_lat = 90.0 if pole == "north" else -90.0
    x0, y0 = lonlat_to_polar(0.0, pole_lat, pole, 1.0)
    x1, y1 = lonlat_to_polar(0.0, 0.0, pole, 1.0)
    return Extent(
        min_x=min(x0, x1), min_y=min(y0, y1),
        max_x=max(x0, x1), max_y=max(y0, y1),
    )


def _crosses_polar_dateline(geometry: BaseGeometry, projection: Projection) -> bool:
    pole = pole_of(projection)
    coords = np.concatenate([_outline(child) for child in _children(geometry)])
    x, y = lonlat_to_polar(coords[:, 0], coords[:, 1], pole, 1.0)
    dateline = _polar_dateline_extent(projection)
    return bool(
        x.min() <= dateline.max_x and x.max() >= dateline.min_x
        and y.min() <= dateline.max_y and y.max() >= dateline.min_y
    )


def crosses_antimeridian(geometry: BaseGeometry, projection: Projection) -> bool:
    """Whether a lat/lon geometry crosses the 0/360 seam in the given projection.

    Points never cross. In cylindrical projection a polygon or linestring
    crosses when its longitude extent straddles 0 or 360, or when consecutive
    vertices jump more than 180 degrees. A multi-geometry crosses when a child
    does, or when one child starts exactly at 0 and another ends exactly at
    360 (a previously split shape). In polar projections the projected extent
    is tested against the projected 0 meridian.
    """
    kind = geometry.geom_type
    if kind in ("Point", "MultiPoint"):
        return False
    if kind not in _MULTI:
        raise UnsupportedGeometryError(f"Unsupported geometry type {kind!r}")

    if projection in (NORTH_POLAR, SOUTH_POLAR):
        return _crosses_polar_dateline(geometry, projection)
    if projection != CYLINDRICAL:
        raise ValueError(f"Unknown projection {projection!r}")

    if kind in ("Polygon", "LineString"):
        min_x, _, max_x, _ = geometry.bounds
        if (max_x > 360 and min_x < 360) or (min_x < 0 and max_x > 0):
            return True
        return _seam_jumps(_outline(geometry)).size > 0

    left_split = right_split = False
    for child in geometry.geoms:
        if crosses_antimeridian(child, projection):
            return True
        child_min_x, _, child_max_x, _ = child.bounds
        if child_min_x == 0:
            left_split = True
        if child_max_x == 360:
            right_split = True
    return left_split and right_split


def _seam_latitude(lon: float, lat: float, next_lon: float, next_lat: float,
                   projection: Projection) -> float:
    """Latitude at which the edge (lon, lat) -> (next_lon, next_lat) meets the seam."""
    if projection != CYLINDRICAL:
        d_lon = next_lon - lon
        d_lat = next_lat - lat
        fraction = (d_lon * (lat - 90) - d_lat * lon) / (-180 * d_lon)
        return lat + fraction * d_lat

    if lon > next_lon:
        # left to right, e.g. 357 -> 3: lift the next lon above 360
        slope = (next_lat - lat) / ((360 + next_lon) - lon)
        return lat + slope * (360 - lon)
    slope = (next_lat - lat) / (next_lon - (360 + lon))
    return lat + slope * (360 - (360 + lon))


def _cap_latitude(lats: np.ndarray, projection: Projection) -> float:
    if projection == NORTH_POLAR:
        return 90.0
    if projection == SOUTH_POLAR:
        return -90.0
    return 90.0 if float(np.mean(lats)) >= 0 else -90.0


def _already_split_at_pole(coords: np.ndarray) -> bool:
    lons, lats = coords[:, 0], coords[:, 1]
    for i in range(len(coords) - 1):
        if abs(lats[i]) == 90 and lats[i + 1] == lats[i]:
            if {float(lons[i]), float(lons[i + 1])} == {0.0, 360.0}:
                return True
    return False


def _split_polygon(polygon: Polygon, projection: Projection) -> MultiPolygon:
    ring = _outline(undangle(polygon))
    if _already_split_at_pole(ring):
        return MultiPolygon([Polygon(ring)])

    rings: dict[int, list[tuple[float, float]]] = {1: [], 2: []}
    current = 1
    crossings = 0
    pole_points: dict[int, tuple[float, float]] = {}
    cap_lat = _cap_latitude(ring[:, 1], projection)

    for i, (lon, lat) in enumerate(ring):
        lon, lat = float(lon), float(lat)
        rings[current].append((lon, lat))
        if i == len(ring) - 1:
            break
        next_lon, next_lat = float(ring[i + 1][0]), float(ring[i + 1][1])
        step = next_lon - lon
        if abs(step) <= SEAM_JUMP_DEGREES:
            continue

        crossings += 1
        seam_lat = _seam_latitude(lon, lat, next_lon, next_lat, projection)
        if step > 0:
            # low to high, e.g. 3 -> 357: leaves through 0, re-enters at 360
            seam_lon = 0.0
            pole_points = {1: (0.0, cap_lat), 2: (360.0, cap_lat)}
        else:
            seam_lon = 360.0
            pole_points = {1: (360.0, cap_lat), 2: (0.0, cap_lat)}
        rings[current].append((seam_lon, seam_lat))
        current = 2 if current == 1 else 1
        rings[current].append((360.0 - seam_lon, seam_lat))

    if not rings[2]:
        return MultiPolygon([Polygon(rings[1])])

    if crossings == 1:
        # A single crossing means the ring encloses a pole: close it over the cap.
        logger.debug("Polygon crosses the dateline once; capping at latitude %s", cap_lat)
        capped = rings[1] + [pole_points[1], pole_points[2]] + rings[2]
        return MultiPolygon([Polygon(capped)])

    logger.debug("Polygon split on the dateline (%d crossings)", crossings)
    rings[2].append(rings[2][0])
    return MultiPolygon([Polygon(rings[1]), Polygon(rings[2])])


def _into_seam_domain(piece: list[tuple[float, float]]) -> LineString:
    # A piece ends on a seam at most, so its middle picks the 360 band.
    lons = [lon for lon, _ in piece]
    middle = (min(lons) + max(lons)) / 2.0
    offset = 360.0 * math.floor(middle / 360.0)
    return LineString([(lon - offset, lat) for lon, lat in piece])


def _on_seam(lon: float) -> bool:
    return lon == 360.0 * round(lon / 360.0)


def _split_linestring(line: LineString, projection: Projection) -> MultiLineString:
    if not crosses_antimeridian(line, projection):
        return MultiLineString([line])

    coords = _outline(undangle(line))
    # Extend the longitude domain so the line never wraps, then cut it at
    # every multiple of 360 it passes through.
    lons = np.unwrap(coords[:, 0], period=360.0)
    lats = coords[:, 1]

    pieces = []
    current = [(float(lons[0]), float(lats[0]))]
    for i in range(1, len(lons)):
        lon0, lat0 = float(lons[i - 1]), float(lats[i - 1])
        lon1, lat1 = float(lons[i]), float(lats[i])
        low, high = sorted((lon0, lon1))
        seams = [
            k * 360.0
            for k in range(math.ceil(low / 360.0), math.floor(high / 360.0) + 1)
            if low < k * 360.0 < high
        ]
        if lon1 < lon0:
            seams.reverse()
        for seam in seams:
            t = (seam - lon0) / (lon1 - lon0)
            seam_point = (seam, lat0 + t * (lat1 - lat0))
            current.append(seam_point)
            pieces.append(current)
            current = [seam_point]
        current.append((lon1, lat1))
        if _on_seam(lon1) and i < len(lons) - 1:
            # vertex sits exactly on the seam: cut there too
            pieces.append(current)
            current = [(lon1, lat1)]
    pieces.append(current)

    if len(pieces) > 1:
        logger.debug("LineString split on the dateline into %d pieces", len(pieces))
    return MultiLineString([_into_seam_domain(p) for p in pieces if len(p) >= 2])


def split_on_dateline(geometry: BaseGeometry, projection: Projection) -> BaseGeometry:
    """Split a geometry on the 0/360 seam.

    Polygons and linestrings always come back as MULTI* (a single member when
    nothing was split); multi-geometries have every member split and the
    results flattened. Points are returned unchanged.
    """
    kind = geometry.geom_type
    if kind in ("Point", "MultiPoint"):
        return geometry
    if kind == "Polygon":
        return _split_polygon(geometry, projection)
    if kind == "LineString":
        return _split_linestring(geometry, projection)
    if kind in ("MultiPolygon", "MultiLineString"):
        parts = []
        for child in geometry.geoms:
            parts.extend(split_on_dateline(child, projection).geoms)
        return _MULTI[kind](parts)
    raise UnsupportedGeometryError(f"Unsupported geometry type {kind!r}")


def dateline_shift(geometry: BaseGeometry) -> BaseGeometry:
    """Duplicate every member at -360 and +360 so it renders on both sides of the seam.

    Expects a geometry that is already split. Order per member: original,
    +360, -360.
    """
    kind = geometry.geom_type
    if kind not in _MULTI:
        raise UnsupportedGeometryError(f"Unsupported geometry type {kind!r}")
    shifted = []
    for child in _children(geometry):
        shifted.extend([child, _shift(child, 360.0), _shift(child, -360.0)])
    return _MULTI[kind](shifted)
