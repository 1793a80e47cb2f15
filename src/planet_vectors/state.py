"""Session state for the planet-vectors MCP server.

Holds the current target body, projection, display conventions, and the
vector and footprint stores drawn on in-memory layers.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from planet_vectors.core.bounding_box import BoundingBoxBuilder
from planet_vectors.core.layer import MemoryLayer
from planet_vectors.core.vector_store import VectorStore
from planet_vectors.models import (
    CYLINDRICAL,
    BodyRadii,
    DisplaySettings,
    FeatureSearchResult,
    Projection,
    normalize_hex_color,
)


class Colors(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    vector: str = "#FFFFFF"
    footprint: str = "#FFD700"

    @field_validator("vector", "footprint", mode="before")
    @classmethod
    def validate_and_normalize_hex(cls, v: str) -> str:
        return normalize_hex_color(v)


class SessionState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    body: Optional[BodyRadii] = None
    projection: Projection = CYLINDRICAL
    settings: DisplaySettings = Field(default_factory=DisplaySettings)
    colors: Colors = Field(default_factory=Colors)
    vector_layer: MemoryLayer = Field(default_factory=MemoryLayer)
    footprint_layer: MemoryLayer = Field(default_factory=MemoryLayer)
    store: Optional[VectorStore] = None
    footprint: Optional[BoundingBoxBuilder] = None
    last_search: Optional[FeatureSearchResult] = None

    def set_body(self, body: BodyRadii) -> None:
        """Switch target body. Everything drawn for the previous body is dropped."""
        if self.store is not None:
            self.store.remove_and_unstore_all()
        if self.footprint is not None:
            self.footprint.remove_and_unstore_all()
        self.vector_layer.clear_layer()
        self.footprint_layer.clear_layer()
        self.body = body
        self.store = VectorStore(self.vector_layer, body, self.projection)
        self.footprint = BoundingBoxBuilder(
            VectorStore(self.footprint_layer, body, self.projection),
            color=self.colors.footprint,
        )
        self.footprint.merge_mode = self.settings.multi_footprint
        self.last_search = None

    def switch_projection(self, projection: Projection) -> int:
        """Change projection and redraw every stored vector. Returns how many are drawn."""
        self.projection = projection
        drawn = 0
        if self.store is not None:
            drawn += self.store.redraw(projection)
        if self.footprint is not None:
            drawn += self.footprint.redraw(projection)
        return drawn

    def summary(self) -> dict:
        vectors = list(self.store.live_features()) if self.store is not None else []
        footprint = self.footprint.footprint if self.footprint is not None else None
        return {
            "target": {
                "body_set": self.body is not None,
                "name": self.body.name if self.body else None,
                "equatorial_radius_km": self.body.equatorial_radius_km if self.body else None,
                "polar_radius_km": self.body.polar_radius_km if self.body else None,
            },
            "map": {
                "projection": self.projection,
                "longitude_direction": self.settings.longitude_direction,
                "longitude_domain": self.settings.longitude_domain,
                "latitude_type": self.settings.latitude_type,
                "decimal_places": self.settings.decimal_places,
                "multi_footprint": self.settings.multi_footprint,
            },
            "vectors": {
                "stored": len(vectors),
                "rendered": sum(1 for v in vectors if v.is_rendered),
                "slots": len(self.store) if self.store is not None else 0,
            },
            "footprint": {
                "set": footprint is not None,
                "rendered": bool(footprint and footprint.is_rendered),
                "split": bool(footprint and footprint.split_geometry is not None),
            },
            "search": {
                "last_query": self.last_search.query if self.last_search else None,
                "ok": self.last_search.ok if self.last_search else None,
                "hits": len(self.last_search.records) if self.last_search else 0,
            },
        }


# Global session state, one per MCP server process
state = SessionState()
