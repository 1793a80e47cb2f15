"""Point-level coordinate transforms for planetary bodies.

Longitudes are degrees positive-east in the 0-360 domain unless stated
otherwise. Functions that take coordinates accept scalars or numpy arrays.
"""

import logging
import math

import numpy as np
from shapely.geometry.base import BaseGeometry

from ..errors import FormulaNonConvergenceError
from ..models import BodyRadii, DisplaySettings, LongitudeDomain, Pole

logger = logging.getLogger(__name__)

VINCENTY_TOLERANCE = 1e-12


def lonlat_to_polar(lon, lat, pole: Pole, polar_radius_km: float):
    """Project lon/lat degrees to polar stereographic meters.

    North:  x =  2R tan(pi/4 - lat/2) sin(lon),  y = -2R tan(pi/4 - lat/2) cos(lon)
    South:  x =  2R tan(pi/4 + lat/2) sin(lon),  y =  2R tan(pi/4 + lat/2) cos(lon)

    The antipodal pole maps to a huge (or infinite) distance.
    """
    r = polar_radius_km * 1000.0
    lon_rad = np.radians(lon)
    lat_rad = np.radians(lat)
    if pole == "north":
        rho = 2 * r * np.tan(np.pi / 4 - lat_rad / 2)
        return rho * np.sin(lon_rad), -rho * np.cos(lon_rad)
    rho = 2 * r * np.tan(np.pi / 4 + lat_rad / 2)
    return rho * np.sin(lon_rad), rho * np.cos(lon_rad)


def polar_to_lonlat(x, y, pole: Pole, polar_radius_km: float):
    """Inverse of lonlat_to_polar. Longitude is returned in [0, 360)."""
    r = polar_radius_km * 1000.0
    if pole == "north":
        center_lat = np.pi / 2
        lon_rad = np.arctan2(x, -y)
    else:
        center_lat = -np.pi / 2
        lon_rad = np.arctan2(x, y)

    p = np.hypot(x, y)
    c = 2 * np.arctan(p / (2 * r))
    lat = np.degrees(np.arcsin(np.cos(c) * np.sin(center_lat)))
    return _wrap360(np.degrees(lon_rad)), lat


def _wrap360(lon):
    lon = np.mod(lon, 360.0)
    # np.mod can round tiny negatives up to exactly 360
    return lon - 360.0 * (lon >= 360.0)


def normalize_longitude(lon, domain: LongitudeDomain = "0to360"):
    """Wrap longitude into [0, 360) or (-180, 180] with a single modulo."""
    if domain == "0to360":
        return _wrap360(lon)
    if domain == "-180to180":
        return 180.0 - np.mod(180.0 - lon, 360.0)
    raise ValueError(f"Unknown longitude domain {domain!r}")


def flip_longitude_direction(lon):
    """Convert positive-east <-> positive-west. Self-inverse."""
    return 360 - lon


def ocentric_to_ographic(lat, equatorial_radius: float, polar_radius: float):
    """Planetocentric to planetographic latitude (degrees)."""
    ratio = (equatorial_radius / polar_radius) ** 2
    return np.degrees(np.arctan(np.tan(np.radians(lat)) * ratio))


def ographic_to_ocentric(lat, equatorial_radius: float, polar_radius: float):
    """Planetographic to planetocentric latitude (degrees)."""
    ratio = (polar_radius / equatorial_radius) ** 2
    return np.degrees(np.arctan(np.tan(np.radians(lat)) * ratio))


def fix_decimals(value, places: int = 2):
    """Round to a fixed number of decimal places (coordinate readouts, form values)."""
    return np.round(value, places)


def great_circle_distance_km(
    lat1: float, lon1: float, lat2: float, lon2: float,
    equatorial_radius: float, polar_radius: float,
    *, spherical: bool = True, max_iterations: int = 100,
    raise_on_failure: bool = False,
) -> float:
    """Vincenty inverse distance between two lat/lon points, in km.

    With ``spherical=True`` the flattening is forced to zero, so the body is a
    sphere of the equatorial radius. Otherwise the ellipsoid has semi-major
    axis ``equatorial_radius`` and semi-minor axis ``polar_radius``.

    Returns ``math.nan`` if lambda has not converged to 1e-12 within
    ``max_iterations`` (or raises FormulaNonConvergenceError when
    ``raise_on_failure`` is set).
    """
    a = equatorial_radius
    if spherical:
        f = 0.0
        b = a
    else:
        f = (equatorial_radius - polar_radius) / equatorial_radius
        b = polar_radius

    big_l = math.radians(lon2 - lon1)
    u1 = math.atan((1 - f) * math.tan(math.radians(lat1)))
    u2 = math.atan((1 - f) * math.tan(math.radians(lat2)))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    lam = big_l
    for _ in range(max_iterations):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.sqrt(
            (cos_u2 * sin_lam) ** 2
            + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            return 0.0  # coincident points
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha * sin_alpha
        if cos_sq_alpha != 0:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        else:
            cos_2sigma_m = 0.0  # equatorial line
        c = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
        lam_prev = lam
        lam = big_l + (1 - c) * f * sin_alpha * (
            sigma + c * sin_sigma * (
                cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m ** 2)
            )
        )
        if abs(lam - lam_prev) <= VINCENTY_TOLERANCE:
            break
    else:
        logger.warning(
            "Vincenty formula did not converge after %d iterations "
            "(%s, %s) -> (%s, %s)", max_iterations, lat1, lon1, lat2, lon2,
        )
        if raise_on_failure:
            raise FormulaNonConvergenceError(
                f"Vincenty formula failed to converge in {max_iterations} iterations"
            )
        return math.nan

    u_sq = cos_sq_alpha * (a * a - b * b) / (b * b)
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = big_b * sin_sigma * (
        cos_2sigma_m + big_b / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m ** 2)
            - big_b / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma ** 2)
            * (-3 + 4 * cos_2sigma_m ** 2)
        )
    )
    s = b * big_a * (sigma - delta_sigma)
    return round(s, 3)  # 1 m precision


def line_length_km(geometry: BaseGeometry, body: BodyRadii) -> float:
    """Length of a (Multi)LineString in lat/lon degrees, summed segment by segment."""
    if geometry.geom_type == "LineString":
        lines = [geometry]
    elif geometry.geom_type == "MultiLineString":
        lines = list(geometry.geoms)
    else:
        raise ValueError(f"Cannot measure the length of a {geometry.geom_type}")

    total = 0.0
    for line in lines:
        coords = list(line.coords)
        for (lon1, lat1), (lon2, lat2) in zip(coords, coords[1:]):
            total += great_circle_distance_km(
                lat1, lon1, lat2, lon2,
                body.equatorial_radius_km, body.polar_radius_km,
            )
    return total


def to_display(lon: float, lat: float, settings: DisplaySettings,
               body: BodyRadii) -> tuple[float, float]:
    """Convert a canonical lon/lat to the user's display conventions.

    Applied in order: positive-west flip, -180..180 domain, planetographic latitude.
    """
    if settings.longitude_direction == "PositiveWest":
        lon = flip_longitude_direction(lon)
    if settings.longitude_domain == "-180to180":
        lon = normalize_longitude(lon, "-180to180")
    if settings.latitude_type == "Planetographic":
        lat = ocentric_to_ographic(lat, body.equatorial_radius_km, body.polar_radius_km)
    lon, lat = float(lon), float(lat)
    if settings.decimal_places is not None:
        lon = float(fix_decimals(lon, settings.decimal_places))
        lat = float(fix_decimals(lat, settings.decimal_places))
    return lon, lat
