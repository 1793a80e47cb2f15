"""Ordered store of drawn vectors and their derived render state.

Indices are insertion order and never move: removing a feature leaves a
``None`` tombstone in its slot so other indices stay valid.
"""

import logging
import math
from typing import Any, Iterator, Optional

from shapely.geometry.base import BaseGeometry

from planet_vectors.models import (
    CYLINDRICAL,
    SELECT_STYLE,
    BodyRadii,
    Extent,
    Projection,
    Style,
)
from . import projection as proj
from .dateline import crosses_antimeridian, dateline_shift, split_on_dateline, undangle
from .densify import densify
from .layer import RenderingLayer
from .models import DerivedGeometry, FeatureState
from .wkt import geometry_from_value

logger = logging.getLogger(__name__)

FIT_PADDING = 50
MAX_ZOOM_RATIO = 25.0
DEFAULT_COLOR = "#FFFFFF"


def derive_geometry(geometry: BaseGeometry, projection: Projection,
                    polar_radius_km: float, shift: bool = False) -> DerivedGeometry:
    """Run a lat/lon geometry through the render pipeline for one projection.

    Everything is derived from the undangled search form, so a redraw
    reproduces the first draw. Cylindrical: split if crossing, then optionally
    duplicate at +/-360. Polar: split if crossing, densify and project to
    stereographic meters.
    """
    search = undangle(geometry)
    split = None
    if crosses_antimeridian(search, projection):
        split = split_on_dateline(search, projection)
    base = split if split is not None else search

    if projection == CYLINDRICAL:
        draw = dateline_shift(base) if shift else base
    else:
        draw = proj.to_render(densify(base), projection, polar_radius_km)
    return DerivedGeometry(draw=draw, search=search, split=split)


def drop_shifted_copies(geometry: BaseGeometry) -> BaseGeometry:
    """Undo a dateline shift on an edited render geometry.

    Members lying wholly beyond 0 or 360 are the +/-360 copies and are
    dropped; a lone survivor comes back as a single geometry.
    """
    if not geometry.geom_type.startswith("Multi"):
        return geometry
    kept = [
        part for part in geometry.geoms
        if not (part.bounds[0] >= 360.0 or part.bounds[2] <= 0.0)
    ]
    if not kept or len(kept) == len(geometry.geoms):
        return geometry
    if len(kept) == 1:
        return kept[0]
    return type(geometry)(kept)


class VectorStore:
    """Vectors drawn on one rendering layer for one body."""

    def __init__(self, layer: RenderingLayer, body: BodyRadii,
                 projection: Projection = CYLINDRICAL):
        self.layer = layer
        self.body = body
        self.projection = projection
        self.features: list[Optional[FeatureState]] = []
        self.home: Optional[tuple[float, float]] = None

    # -- pipeline ---------------------------------------------------------

    def derive(self, geometry: BaseGeometry, shift: bool = False,
               projection: Optional[Projection] = None) -> DerivedGeometry:
        return derive_geometry(
            geometry, projection or self.projection, self.body.polar_radius_km, shift,
        )

    def is_drawable(self, geometry: BaseGeometry,
                    projection: Optional[Projection] = None) -> bool:
        return proj.is_drawable(geometry, projection or self.projection)

    def _render(self, geometry: BaseGeometry, color: str,
                properties: dict[str, Any]) -> int:
        return self.layer.add_renderable_feature(geometry, Style.from_hex(color), properties)

    # -- drawing ----------------------------------------------------------

    def draw(self, geometry: str | BaseGeometry, color: str = DEFAULT_COLOR,
             attributes: Optional[dict[str, Any]] = None, shift: bool = False) -> Optional[int]:
        """Render a geometry without storing it. Returns the layer handle, or None if not drawable."""
        geometry = geometry_from_value(geometry)
        if not self.is_drawable(geometry):
            return None
        derived = self.derive(geometry, shift)
        return self._render(derived.draw, color, dict(attributes or {}))

    def draw_and_store(
        self,
        geometry: str | BaseGeometry,
        attributes: Optional[dict[str, Any]] = None,
        color: str = DEFAULT_COLOR,
        feature_id: Optional[str] = None,
        center: bool = False,
        shift: bool = False,
    ) -> FeatureState:
        """Derive, store and (if visible in the current projection) render a geometry.

        The state is stored even when the geometry is outside the polar cap,
        so it reappears after a projection switch.
        """
        geometry = geometry_from_value(geometry)
        derived = self.derive(geometry, shift)
        feature = FeatureState(
            index=len(self.features),
            draw_geometry=derived.draw,
            search_geometry=derived.search,
            split_geometry=derived.split,
            projection=self.projection,
            color=color,
            feature_id=feature_id,
            attributes=dict(attributes or {}),
            center_on_draw=center,
            dateline_shift=shift,
        )
        if self.is_drawable(derived.search):
            feature.render_handle = self._render(
                derived.draw, feature.color, self._properties(feature),
            )
            if center:
                self.center_on(derived.draw)
        else:
            logger.debug("Feature %d is outside the %s view; stored undrawn",
                         feature.index, self.projection)
        self.features.append(feature)
        return feature

    def _properties(self, feature: FeatureState) -> dict[str, Any]:
        properties = dict(feature.attributes)
        properties["index"] = feature.index
        if feature.feature_id is not None:
            properties["feature_id"] = feature.feature_id
        return properties

    def _rebuild(self, feature: FeatureState, geometry: BaseGeometry) -> FeatureState:
        """Re-derive a stored feature from a lat/lon geometry and re-render it."""
        if feature.render_handle is not None:
            self.layer.remove_renderable_feature(feature.render_handle)
        derived = self.derive(geometry, feature.dateline_shift)
        rebuilt = feature.model_copy(update={
            "draw_geometry": derived.draw,
            "search_geometry": derived.search,
            "split_geometry": derived.split,
            "projection": self.projection,
            "render_handle": None,
        })
        if self.is_drawable(derived.search):
            rebuilt.render_handle = self._render(
                derived.draw, rebuilt.color, self._properties(rebuilt),
            )
        else:
            logger.debug("Skipping feature %d: not drawable in %s",
                         feature.index, self.projection)
        self.features[feature.index] = rebuilt
        return rebuilt

    def redraw(self, projection: Optional[Projection] = None) -> int:
        """Re-derive every live feature from its search geometry.

        Returns the number of features now rendered.
        """
        if projection is not None:
            self.projection = projection
        drawn = 0
        for feature in list(self.live_features()):
            rebuilt = self._rebuild(feature, feature.search_geometry)
            if rebuilt.is_rendered:
                drawn += 1
        return drawn

    def feature_modified(self, handle: int, edited_geometry: BaseGeometry,
                         projection: Optional[Projection] = None) -> Optional[FeatureState]:
        """Take an interactively edited render geometry back into the store.

        Returns the replacement state, or None when the handle is not stored.
        """
        index = self.index_of_handle(handle)
        if index is None:
            return None
        feature = self.features[index]
        return self._rebuild(feature, self.edited_to_latlon(feature, edited_geometry, projection))

    def edited_to_latlon(self, feature: FeatureState, edited_geometry: BaseGeometry,
                         projection: Optional[Projection] = None) -> BaseGeometry:
        """Lat/lon form of an edited render geometry, without shifted copies."""
        projection = projection or self.projection
        latlon = proj.from_render(edited_geometry, projection, self.body.polar_radius_km)
        if feature.dateline_shift and projection == CYLINDRICAL:
            latlon = drop_shifted_copies(latlon)
        return latlon

    # -- viewport ---------------------------------------------------------

    def center_on(self, geometry: BaseGeometry, force: bool = False) -> bool:
        """Fit the view to a render geometry unless it already sits comfortably in view.

        Returns True when a fit was requested.
        """
        target = geometry
        if (self.projection == CYLINDRICAL
                and geometry.geom_type in ("MultiPolygon", "MultiLineString")):
            # split or shifted copies: center on the first piece only
            target = geometry.geoms[0]
        extent = Extent.from_bounds(target.bounds)
        self.home = extent.center

        viewport = self.layer.get_viewport_extent()
        if not force and viewport is not None and self._fits(extent, viewport):
            return False
        self.layer.request_fit_to_extent(target, FIT_PADDING)
        return True

    @staticmethod
    def _fits(extent: Extent, viewport: Extent) -> bool:
        if not viewport.contains(extent):
            return False
        if extent.width > viewport.width or extent.height > viewport.height:
            return False
        if extent.width == 0 or extent.height == 0:
            ratio = math.inf
        else:
            ratio = max(viewport.width / extent.width, viewport.height / extent.height)
        return ratio <= MAX_ZOOM_RATIO

    def center_on_stored(self, index: int, force: bool = False) -> bool:
        feature = self.get(index)
        if feature is None or not feature.is_rendered:
            return False
        return self.center_on(feature.draw_geometry, force)

    # -- removal ----------------------------------------------------------

    def remove(self, handle: int) -> None:
        """Take a rendered feature off the layer, leaving the store untouched."""
        self.layer.remove_renderable_feature(handle)

    def remove_and_unstore(self, index: int) -> bool:
        feature = self.get(index)
        if feature is None:
            return False
        if feature.render_handle is not None:
            self.layer.remove_renderable_feature(feature.render_handle)
        self.features[index] = None
        return True

    def remove_and_unstore_all(self) -> None:
        for feature in self.live_features():
            if feature.render_handle is not None:
                self.layer.remove_renderable_feature(feature.render_handle)
        self.features = []

    # -- lookup -----------------------------------------------------------

    def get(self, index: int) -> Optional[FeatureState]:
        """Feature at ``index``; None for a removed slot. Raises IndexError past the end."""
        if index < 0 or index >= len(self.features):
            raise IndexError(f"No feature slot {index} (store has {len(self.features)})")
        return self.features[index]

    def live_features(self) -> Iterator[FeatureState]:
        return (f for f in self.features if f is not None)

    def find_by_attribute(self, key: str, value: Any) -> list[FeatureState]:
        return [f for f in self.live_features() if f.attributes.get(key) == value]

    def index_of_attribute(self, key: str, value: Any) -> Optional[int]:
        for feature in self.live_features():
            if feature.attributes.get(key) == value:
                return feature.index
        return None

    def index_of_handle(self, handle: int) -> Optional[int]:
        for feature in self.live_features():
            if feature.render_handle == handle:
                return feature.index
        return None

    def get_extent(self, index: int) -> Optional[Extent]:
        """Lat/lon extent of a stored feature's search geometry."""
        feature = self.get(index)
        if feature is None:
            return None
        return Extent.from_bounds(feature.search_geometry.bounds)

    # -- styling ----------------------------------------------------------

    def highlight(self, index: int) -> bool:
        feature = self.get(index)
        if feature is None or feature.render_handle is None:
            return False
        self.layer.set_feature_style(feature.render_handle, SELECT_STYLE)
        return True

    def unhighlight(self, index: int) -> bool:
        feature = self.get(index)
        if feature is None or feature.render_handle is None:
            return False
        self.layer.set_feature_style(feature.render_handle, Style.from_hex(feature.color))
        return True

    def unhighlight_all(self) -> None:
        for feature in self.live_features():
            self.unhighlight(feature.index)

    def __len__(self) -> int:
        return len(self.features)
