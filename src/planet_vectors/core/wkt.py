"""WKT parsing and serialization for the six supported geometry types.

Polygons are outer-ring only; any interior ring is rejected rather than
silently dropped.
"""

import re

import shapely
import shapely.wkt
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry

from ..errors import MalformedGeometryError, UnsupportedGeometryError

GEOMETRY_TYPES = (
    "POINT", "MULTIPOINT",
    "LINESTRING", "MULTILINESTRING",
    "POLYGON", "MULTIPOLYGON",
)

_SHAPELY_TO_TAG = {
    "Point": "POINT",
    "MultiPoint": "MULTIPOINT",
    "LineString": "LINESTRING",
    "MultiLineString": "MULTILINESTRING",
    "Polygon": "POLYGON",
    "MultiPolygon": "MULTIPOLYGON",
}

_SPACE_BEFORE_PAREN = re.compile(r"\s+\(")
_SPACE_AFTER_COMMA = re.compile(r",\s+")


def clean_wkt(text: str) -> str:
    """Trim and remove whitespace between keywords and parentheses.

    '  MULTIPOINT ((10 10), (45 45))  ' -> 'MULTIPOINT((10 10),(45 45))'
    """
    return _SPACE_BEFORE_PAREN.sub("(", text.strip())


def type_tag(text: str) -> str | None:
    """Return the keyword before the first '(' (e.g. 'POLYGON'), or None if there is no '('."""
    text = clean_wkt(text)
    end = text.find("(")
    if end == -1:
        return None
    return text[:end].upper()


def geometry_tag(geometry: BaseGeometry) -> str:
    """WKT type tag of a shapely geometry."""
    try:
        return _SHAPELY_TO_TAG[geometry.geom_type]
    except KeyError:
        raise UnsupportedGeometryError(
            f"Unsupported geometry type {geometry.geom_type!r}"
        ) from None


def _check_supported(geometry: BaseGeometry) -> None:
    geometry_tag(geometry)
    if geometry.is_empty:
        raise MalformedGeometryError("Empty geometries are not supported")
    if geometry.geom_type == "Polygon":
        polygons = [geometry]
    elif geometry.geom_type == "MultiPolygon":
        polygons = list(geometry.geoms)
    else:
        return
    for polygon in polygons:
        if len(polygon.interiors) > 0:
            raise MalformedGeometryError(
                "Polygons with interior rings (holes) are not supported"
            )


def parse(text: str) -> BaseGeometry:
    """Parse WKT into a shapely geometry.

    Raises MalformedGeometryError on an unknown type tag, bad parenthesis
    structure, unclosed rings, empty geometries or polygon holes.
    """
    if not isinstance(text, str):
        raise MalformedGeometryError(f"Expected WKT text, got {type(text).__name__}")
    cleaned = clean_wkt(text)
    tag = type_tag(cleaned)
    if tag is None:
        raise MalformedGeometryError(f"Missing '(' in geometry text: {text!r}")
    if tag not in GEOMETRY_TYPES:
        raise MalformedGeometryError(f"Unknown geometry type {tag!r}")
    try:
        geometry = shapely.wkt.loads(cleaned)
    except (ShapelyError, ValueError) as exc:
        raise MalformedGeometryError(f"Could not parse {text!r}: {exc}") from exc
    try:
        _check_supported(geometry)
    except UnsupportedGeometryError as exc:
        raise MalformedGeometryError(str(exc)) from exc
    return geometry


def serialize(geometry: BaseGeometry, precision: int | None = None) -> str:
    """Write compact WKT, e.g. 'POLYGON((0 0,10 0,10 10,0 0))'.

    With ``precision`` coordinates are written with that many fixed decimals.
    """
    _check_supported(geometry)
    if precision is None:
        text = shapely.to_wkt(geometry, trim=True, rounding_precision=-1)
    else:
        text = shapely.to_wkt(geometry, trim=False, rounding_precision=precision)
    return _SPACE_AFTER_COMMA.sub(",", clean_wkt(text))


def geometry_from_value(value: str | BaseGeometry) -> BaseGeometry:
    """Accept WKT text or a shapely geometry."""
    if isinstance(value, BaseGeometry):
        _check_supported(value)
        return value
    return parse(value)
