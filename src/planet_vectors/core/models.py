"""Pydantic records and return models for the vector store and footprint builder."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from shapely.geometry.base import BaseGeometry

from planet_vectors.models import Projection, normalize_hex_color


class FeatureState(BaseModel):
    """One stored vector.

    ``search_geometry`` is the canonical lat/lon form; ``draw_geometry`` and
    ``split_geometry`` are derived from it for ``projection`` and are rebuilt
    on every redraw.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int = Field(ge=0)
    draw_geometry: BaseGeometry
    search_geometry: BaseGeometry
    split_geometry: Optional[BaseGeometry] = None
    projection: Projection
    color: str = "#FFFFFF"
    feature_id: Optional[str] = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    center_on_draw: bool = False
    dateline_shift: bool = False
    render_handle: Optional[int] = None

    @field_validator("color", mode="before")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return normalize_hex_color(v)

    @property
    def is_rendered(self) -> bool:
        return self.render_handle is not None


class DerivedGeometry(BaseModel):
    """The three forms of a geometry for one projection."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    draw: BaseGeometry
    search: BaseGeometry
    split: Optional[BaseGeometry] = None


class BoundingBoxCorners(BaseModel):
    """Footprint bounds as shown in a corner readout."""
    top_left_lon: float
    top_left_lat: float
    bottom_right_lon: float
    bottom_right_lat: float

    def as_dict(self) -> dict[str, float]:
        return self.model_dump()
