"""Contract between the vector store and whatever actually draws the map.

Geometries handed to a layer are render copies in projection coordinates;
the layer never sees or mutates canonical lat/lon state.
"""

import itertools
from abc import ABC, abstractmethod
from typing import Any, Optional

from shapely.geometry.base import BaseGeometry

from planet_vectors.models import Extent, Style


class RenderingLayer(ABC):
    """Abstract vector layer of a map widget."""

    @abstractmethod
    def add_renderable_feature(self, geometry: BaseGeometry, style: Style,
                               properties: Optional[dict[str, Any]] = None) -> int:
        """Add a geometry to the layer.

        Returns:
            Integer handle identifying the rendered feature.
        """
        pass

    @abstractmethod
    def remove_renderable_feature(self, handle: int) -> None:
        pass

    @abstractmethod
    def set_feature_style(self, handle: int, style: Style) -> None:
        pass

    @abstractmethod
    def clear_layer(self) -> None:
        pass

    @abstractmethod
    def get_viewport_extent(self) -> Optional[Extent]:
        """Current viewport in projection coordinates, or None before the map has a view."""
        pass

    @abstractmethod
    def request_fit_to_extent(self, geometry: BaseGeometry, padding: float) -> None:
        """Pan and zoom so the geometry's extent fills the view, less ``padding`` pixels."""
        pass


class RenderedFeature:
    """What a MemoryLayer holds for one handle."""

    def __init__(self, handle: int, geometry: BaseGeometry, style: Style,
                 properties: dict[str, Any]):
        self.handle = handle
        self.geometry = geometry
        self.style = style
        self.properties = properties


class MemoryLayer(RenderingLayer):
    """In-process layer that records what would have been drawn.

    A fit request moves the viewport to the requested extent so later
    centering decisions see it.
    """

    def __init__(self, viewport: Optional[Extent] = None):
        self.features: dict[int, RenderedFeature] = {}
        self.viewport = viewport
        self.fit_requests: list[tuple[BaseGeometry, float]] = []
        self._handles = itertools.count(1)

    def add_renderable_feature(self, geometry, style, properties=None) -> int:
        handle = next(self._handles)
        self.features[handle] = RenderedFeature(handle, geometry, style, dict(properties or {}))
        return handle

    def remove_renderable_feature(self, handle: int) -> None:
        self.features.pop(handle, None)

    def set_feature_style(self, handle: int, style: Style) -> None:
        if handle in self.features:
            self.features[handle].style = style

    def clear_layer(self) -> None:
        self.features.clear()

    def get_viewport_extent(self) -> Optional[Extent]:
        return self.viewport

    def request_fit_to_extent(self, geometry: BaseGeometry, padding: float) -> None:
        self.fit_requests.append((geometry, padding))
        self.viewport = Extent.from_bounds(geometry.bounds)

    def __len__(self) -> int:
        return len(self.features)
