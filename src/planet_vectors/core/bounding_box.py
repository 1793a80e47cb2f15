"""Single-slot footprint (bounding box) drawing on top of a VectorStore."""

import logging
from typing import Callable, Optional

import shapely.affinity
from shapely.geometry import MultiLineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry

from planet_vectors.models import (
    CYLINDRICAL,
    NORTH_POLAR,
    SOUTH_POLAR,
    DisplaySettings,
)
from . import projection as proj
from .coords import to_display
from .dateline import split_on_dateline
from .models import BoundingBoxCorners, FeatureState
from .vector_store import VectorStore
from .wkt import geometry_from_value

logger = logging.getLogger(__name__)

FOOTPRINT_ID = "footprint"

Corner = float | str | None


def _missing(value: Corner) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def build_from_corners(top_left_lon: Corner, top_left_lat: Corner,
                       bottom_right_lon: Corner, bottom_right_lat: Corner,
                       projection=CYLINDRICAL) -> Optional[BaseGeometry]:
    """Build a footprint geometry from its top-left and bottom-right corners.

    Longitudes follow the left-most-least rule, so a top-left longitude
    greater than the bottom-right one means the box crosses the dateline.
    Returns None if any corner value is missing.
    """
    if any(_missing(v) for v in (top_left_lon, top_left_lat, bottom_right_lon, bottom_right_lat)):
        return None
    tlx, tly = float(top_left_lon), float(top_left_lat)
    brx, bry = float(bottom_right_lon), float(bottom_right_lat)

    if tlx > brx:
        pole_lat = None
        if tly == 90 or bry == 90:
            pole_lat = 90.0
            border = min(tly, bry)
        if tly == -90 or bry == -90:
            pole_lat = -90.0
            border = max(tly, bry)

        if pole_lat is not None:
            mid = (tlx + brx) / 2
            return Polygon([
                (tlx, border), (mid, border), (brx, border),
                (brx, pole_lat), (tlx, pole_lat), (tlx, border),
            ])

        rectangle = Polygon([(tlx, tly), (brx, tly), (brx, bry), (tlx, bry), (tlx, tly)])
        return split_on_dateline(rectangle, projection)

    # midpoints on the long edges keep later densify/split steps honest
    mid = (tlx + brx) / 2
    return Polygon([
        (tlx, tly), (mid, tly), (brx, tly),
        (brx, bry), (mid, bry), (tlx, bry), (tlx, tly),
    ])


def scale(geometry: BaseGeometry, factor: float) -> BaseGeometry:
    """Grow or shrink a geometry about its centroid (factor 2 doubles it)."""
    return shapely.affinity.scale(geometry, xfact=factor, yfact=factor, origin="centroid")


def _merge(new: BaseGeometry, previous: BaseGeometry) -> BaseGeometry:
    if new.geom_type == "Polygon":
        multi, base = MultiPolygon, "Polygon"
    else:
        multi, base = MultiLineString, "LineString"
    if previous.geom_type == f"Multi{base}":
        return multi(list(previous.geoms) + [new])
    if previous.geom_type == base:
        return multi([new, previous])
    return new


class BoundingBoxBuilder:
    """Keeps at most one footprint on a rendering layer.

    Drawing a new footprint replaces the old one, unless merge mode is on, in
    which case the new box is added to the previous one as a multi-geometry.
    """

    def __init__(self, store: VectorStore,
                 on_remove: Optional[Callable[[], None]] = None,
                 color: str = "#FFFFFF"):
        self.store = store
        self.on_remove = on_remove
        self.color = color
        self.merge_mode = False
        self.center_point: Optional[Point] = None

    build_from_corners = staticmethod(build_from_corners)
    scale = staticmethod(scale)

    @property
    def projection(self):
        return self.store.projection

    @property
    def footprint(self) -> Optional[FeatureState]:
        return next(self.store.live_features(), None)

    def draw_and_store(self, geometry: str | BaseGeometry,
                       merge: Optional[bool] = None) -> FeatureState:
        """Replace (or merge into) the stored footprint and fit the view to it."""
        geometry = geometry_from_value(geometry)
        merge = self.merge_mode if merge is None else merge
        previous = self.footprint
        if (merge and previous is not None
                and not geometry.geom_type.startswith("Multi")):
            geometry = _merge(geometry, previous.search_geometry)

        self.remove_and_unstore_all()
        feature = self.store.draw_and_store(
            geometry, color=self.color, feature_id=FOOTPRINT_ID,
        )
        if feature.is_rendered:
            self.store.center_on(feature.draw_geometry, force=True)
        return feature

    def draw_from_corners(self, top_left_lon: Corner, top_left_lat: Corner,
                          bottom_right_lon: Corner, bottom_right_lat: Corner
                          ) -> Optional[FeatureState]:
        geometry = build_from_corners(
            top_left_lon, top_left_lat, bottom_right_lon, bottom_right_lat,
            self.projection,
        )
        if geometry is None:
            return None
        return self.draw_and_store(geometry)

    def draw_from_control(self, geometry: str | BaseGeometry) -> Optional[FeatureState]:
        """Store a box drawn interactively, given in render coordinates.

        Returns None when the box is outside the visible polar cap.
        """
        geometry = geometry_from_value(geometry)
        if self.projection != CYLINDRICAL:
            geometry = proj.from_render(geometry, self.projection, self.store.body.polar_radius_km)
            if not proj.is_drawable(geometry, self.projection):
                logger.info("Footprint is not visible in %s; ignoring", self.projection)
                return None
        return self.draw_and_store(geometry)

    def build_from_center_and_diameter(self, center_lon: Corner, center_lat: Corner,
                                       diameter_km: float) -> None:
        """Record a center point for the footprint.

        No box is built from the diameter; this only remembers the center.
        """
        if _missing(center_lon) or _missing(center_lat) or diameter_km <= 0:
            return None
        self.center_point = Point(float(center_lon), float(center_lat))
        return None

    def feature_modified(self, handle: int, edited_geometry: BaseGeometry,
                         projection=None) -> Optional[FeatureState]:
        index = self.store.index_of_handle(handle)
        if index is None:
            return None
        latlon = self.store.edited_to_latlon(self.store.features[index], edited_geometry, projection)
        return self.draw_and_store(latlon, merge=False)

    def remove_and_unstore_all(self) -> None:
        self.store.remove_and_unstore_all()
        if self.on_remove is not None:
            self.on_remove()

    def redraw(self, projection=None) -> int:
        return self.store.redraw(projection)

    def corners(self, settings: Optional[DisplaySettings] = None
                ) -> Optional[BoundingBoxCorners]:
        """Read the stored footprint back as corner values in display conventions."""
        feature = self.footprint
        if feature is None:
            return None
        settings = settings or DisplaySettings()

        min_x, min_y, max_x, max_y = feature.search_geometry.bounds
        west, east = min_x, max_x
        split = feature.split_geometry
        if split is not None and len(split.geoms) > 1:
            high_side = [g.bounds[0] for g in split.geoms if g.bounds[2] == 360]
            low_side = [g.bounds[2] for g in split.geoms if g.bounds[0] == 0]
            if high_side and low_side:
                west, east = min(high_side), max(low_side)
            else:
                west, east = max_x, min_x
        if split is not None:
            _, split_min_y, _, split_max_y = split.bounds
            if self.projection == NORTH_POLAR and split_max_y == 90:
                max_y = 90.0
            if self.projection == SOUTH_POLAR and split_min_y == -90:
                min_y = -90.0

        body = self.store.body
        tl_lon, tl_lat = to_display(west, max_y, settings, body)
        br_lon, br_lat = to_display(east, min_y, settings, body)
        return BoundingBoxCorners(
            top_left_lon=tl_lon, top_left_lat=tl_lat,
            bottom_right_lon=br_lon, bottom_right_lat=br_lat,
        )
