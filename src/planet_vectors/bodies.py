"""Radii of bodies the host knows by name.

The geometry core never reads this table; radii are handed to it explicitly.
Values are IAU mean equatorial (a) and polar (c) radii in kilometers.
"""

from .models import BodyRadii

KNOWN_BODIES: dict[str, BodyRadii] = {
    body.name.lower(): body
    for body in (
        BodyRadii(name="Mercury", equatorial_radius_km=2440.53, polar_radius_km=2438.26),
        BodyRadii(name="Venus", equatorial_radius_km=6051.8, polar_radius_km=6051.8),
        BodyRadii(name="Moon", equatorial_radius_km=1737.4, polar_radius_km=1737.4),
        BodyRadii(name="Mars", equatorial_radius_km=3396.19, polar_radius_km=3376.2),
        BodyRadii(name="Ceres", equatorial_radius_km=482.1, polar_radius_km=445.9),
        BodyRadii(name="Vesta", equatorial_radius_km=286.3, polar_radius_km=223.2),
        BodyRadii(name="Io", equatorial_radius_km=1821.49, polar_radius_km=1815.7),
        BodyRadii(name="Europa", equatorial_radius_km=1560.8, polar_radius_km=1560.8),
        BodyRadii(name="Ganymede", equatorial_radius_km=2631.2, polar_radius_km=2631.2),
        BodyRadii(name="Callisto", equatorial_radius_km=2410.3, polar_radius_km=2410.3),
        BodyRadii(name="Titan", equatorial_radius_km=2575.0, polar_radius_km=2575.0),
        BodyRadii(name="Enceladus", equatorial_radius_km=252.1, polar_radius_km=248.6),
    )
}


def lookup_body(name: str) -> BodyRadii | None:
    return KNOWN_BODIES.get(name.strip().lower())
