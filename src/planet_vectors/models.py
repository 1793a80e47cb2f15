"""Pydantic domain models: projections, body radii, display conventions, search results."""

import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Projection = Literal[
    "cylindrical",
    "north-polar stereographic",
    "south-polar stereographic",
]
CYLINDRICAL: Projection = "cylindrical"
NORTH_POLAR: Projection = "north-polar stereographic"
SOUTH_POLAR: Projection = "south-polar stereographic"
PROJECTIONS: tuple[Projection, ...] = (CYLINDRICAL, NORTH_POLAR, SOUTH_POLAR)

Pole = Literal["north", "south"]
LongitudeDomain = Literal["0to360", "-180to180"]
LongitudeDirection = Literal["PositiveEast", "PositiveWest"]
LatitudeType = Literal["Planetocentric", "Planetographic"]

_HEX_COLOR = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


def pole_of(projection: Projection) -> Pole:
    """Return the pole a polar projection is centered on."""
    if projection == NORTH_POLAR:
        return "north"
    if projection == SOUTH_POLAR:
        return "south"
    raise ValueError(f"{projection!r} is not a polar projection")


def normalize_hex_color(value: str) -> str:
    """Validate a #RGB / #RRGGBB color and return it as upper-case #RRGGBB."""
    if not isinstance(value, str):
        raise ValueError("Color must be a string")
    value = value.strip()
    if not _HEX_COLOR.match(value):
        raise ValueError(f"Invalid hex color '{value}'. Must be #RRGGBB format.")
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"


class BodyRadii(BaseModel):
    """Radii of a planetary body in kilometers."""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    equatorial_radius_km: float = Field(gt=0)
    polar_radius_km: float = Field(gt=0)

    @property
    def flattening(self) -> float:
        return (self.equatorial_radius_km - self.polar_radius_km) / self.equatorial_radius_km


class DisplaySettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    longitude_direction: LongitudeDirection = "PositiveEast"
    longitude_domain: LongitudeDomain = "0to360"
    latitude_type: LatitudeType = "Planetocentric"
    decimal_places: Optional[int] = Field(default=None, ge=0, le=10)
    multi_footprint: bool = False


class Style(BaseModel):
    """Render style handed to the rendering layer. Colors are rgba() strings."""
    model_config = ConfigDict(frozen=True)

    fill: str
    stroke: str
    stroke_width: float = Field(default=1.0, gt=0)

    @classmethod
    def from_hex(cls, color: str, fill_opacity: float = 0.2) -> "Style":
        color = normalize_hex_color(color)
        r, g, b = (int(color[i:i + 2], 16) for i in (1, 3, 5))
        return cls(
            fill=f"rgba({r}, {g}, {b}, {fill_opacity})",
            stroke=f"rgba({r}, {g}, {b}, 1)",
        )


SELECT_STYLE = Style(
    fill="rgba(255, 128, 0, 0.2)",
    stroke="rgba(255, 128, 0, 1)",
    stroke_width=2.0,
)


class Extent(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @model_validator(mode="after")
    def check_ordered(self) -> "Extent":
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(
                f"Extent minimums must not exceed maximums: {self.as_tuple()}"
            )
        return self

    @classmethod
    def from_bounds(cls, bounds: tuple[float, float, float, float]) -> "Extent":
        min_x, min_y, max_x, max_y = bounds
        return cls(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def contains(self, other: "Extent") -> bool:
        return (
            self.min_x <= other.min_x and other.max_x <= self.max_x
            and self.min_y <= other.min_y and other.max_y <= self.max_y
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)


class FeatureSearchResult(BaseModel):
    """Outcome of a nomenclature feature-name search.

    ``ok`` is False when the request failed; ``records`` is empty (not an
    error) when the service simply had no hits.
    """
    ok: bool
    target: str
    query: str
    records: list[dict] = Field(default_factory=list)
    error: Optional[str] = None

    @field_validator("target")
    @classmethod
    def upper_target(cls, v: str) -> str:
        return v.strip().upper()
