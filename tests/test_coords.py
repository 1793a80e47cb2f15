"""Tests for point-level coordinate transforms."""
import logging
import math

import numpy as np
import pytest
from shapely.geometry import LineString, MultiLineString, Point

from planet_vectors.core.coords import (
    fix_decimals,
    flip_longitude_direction,
    great_circle_distance_km,
    line_length_km,
    lonlat_to_polar,
    normalize_longitude,
    ocentric_to_ographic,
    ographic_to_ocentric,
    polar_to_lonlat,
    to_display,
)
from planet_vectors.errors import FormulaNonConvergenceError
from planet_vectors.models import BodyRadii, DisplaySettings

MARS = BodyRadii(name="Mars", equatorial_radius_km=3396.19, polar_radius_km=3376.2)


class TestPolarStereographic:
    def test_north_pole_maps_to_origin(self):
        x, y = lonlat_to_polar(0.0, 90.0, "north", MARS.polar_radius_km)
        assert x == pytest.approx(0.0, abs=1e-6)
        assert y == pytest.approx(0.0, abs=1e-6)

    def test_equator_at_two_radii(self):
        x, y = lonlat_to_polar(0.0, 0.0, "north", 1.0)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(-2000.0)

    def test_south_equator_is_positive_y(self):
        x, y = lonlat_to_polar(0.0, 0.0, "south", 1.0)
        assert y == pytest.approx(2000.0)

    def test_lon_90_is_positive_x(self):
        x, y = lonlat_to_polar(90.0, 70.0, "north", 1.0)
        assert x > 0
        assert y == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("pole,lats", [
        ("north", [-60.0, -10.0, 0.0, 45.0, 80.0, 89.5]),
        ("south", [-89.5, -80.0, -45.0, 0.0, 10.0, 60.0]),
    ])
    def test_round_trip(self, pole, lats):
        lons = np.array([0.0, 15.0, 90.0, 179.0, 181.0, 270.0, 345.5])
        lon_grid, lat_grid = np.meshgrid(lons, np.array(lats))
        x, y = lonlat_to_polar(lon_grid, lat_grid, pole, MARS.polar_radius_km)
        lon_back, lat_back = polar_to_lonlat(x, y, pole, MARS.polar_radius_km)
        np.testing.assert_allclose(lat_back, lat_grid, atol=1e-6)
        np.testing.assert_allclose(lon_back, lon_grid, atol=1e-6)

    def test_inverse_longitude_in_0_360(self):
        x, y = lonlat_to_polar(-30.0, 70.0, "north", 1.0)
        lon, _ = polar_to_lonlat(x, y, "north", 1.0)
        assert lon == pytest.approx(330.0)


class TestLongitude:
    @pytest.mark.parametrize("lon,expected", [
        (0.0, 0.0), (359.5, 359.5), (360.0, 0.0), (370.0, 10.0),
        (-10.0, 350.0), (-720.0, 0.0), (1e9 + 5.0, (1e9 + 5.0) % 360),
    ])
    def test_normalize_0_360(self, lon, expected):
        assert normalize_longitude(lon, "0to360") == pytest.approx(expected)

    @pytest.mark.parametrize("lon,expected", [
        (0.0, 0.0), (190.0, -170.0), (180.0, 180.0), (-180.0, 180.0),
        (350.0, -10.0), (-190.0, 170.0),
    ])
    def test_normalize_180(self, lon, expected):
        assert normalize_longitude(lon, "-180to180") == pytest.approx(expected)

    def test_normalize_array(self):
        result = normalize_longitude(np.array([-10.0, 370.0, 45.0]))
        np.testing.assert_allclose(result, [350.0, 10.0, 45.0])

    def test_normalize_unknown_domain(self):
        with pytest.raises(ValueError):
            normalize_longitude(10.0, "0to180")

    @pytest.mark.parametrize("lon", [0.0, 10.0, 180.0, 359.9, -45.0, 720.5])
    def test_flip_is_self_inverse(self, lon):
        assert flip_longitude_direction(flip_longitude_direction(lon)) == pytest.approx(lon)

    def test_flip_value(self):
        assert flip_longitude_direction(10.0) == 350.0


class TestLatitudeTypes:
    def test_ographic_is_larger_on_oblate_body(self):
        lat = ocentric_to_ographic(45.0, MARS.equatorial_radius_km, MARS.polar_radius_km)
        assert lat > 45.0

    def test_equator_and_pole_unchanged(self):
        a, c = MARS.equatorial_radius_km, MARS.polar_radius_km
        assert ocentric_to_ographic(0.0, a, c) == pytest.approx(0.0)
        assert ocentric_to_ographic(90.0, a, c) == pytest.approx(90.0)

    def test_round_trip(self):
        a, c = MARS.equatorial_radius_km, MARS.polar_radius_km
        lats = np.linspace(-89.0, 89.0, 21)
        back = ographic_to_ocentric(ocentric_to_ographic(lats, a, c), a, c)
        np.testing.assert_allclose(back, lats, atol=1e-9)

    def test_sphere_is_identity(self):
        assert ocentric_to_ographic(33.3, 1737.4, 1737.4) == pytest.approx(33.3)


def test_fix_decimals():
    assert fix_decimals(12.34567) == pytest.approx(12.35)
    assert fix_decimals(12.34567, 3) == pytest.approx(12.346)


class TestGreatCircleDistance:
    def test_one_degree_of_latitude_on_mars(self):
        d = great_circle_distance_km(0.0, 0.0, 1.0, 0.0, 3396.2, 3376.2)
        assert d == pytest.approx(59.27, abs=0.1)

    def test_one_degree_of_longitude_on_equator(self):
        d = great_circle_distance_km(0.0, 0.0, 0.0, 1.0, 3396.2, 3376.2)
        assert d == pytest.approx(3396.2 * math.radians(1.0), abs=1e-3)

    def test_coincident_points(self):
        assert great_circle_distance_km(10.0, 20.0, 10.0, 20.0, 3396.2, 3376.2) == 0.0

    def test_ellipsoid_differs_from_sphere(self):
        sphere = great_circle_distance_km(0.0, 0.0, 1.0, 0.0, 3396.2, 3376.2)
        ellipsoid = great_circle_distance_km(
            0.0, 0.0, 1.0, 0.0, 3396.2, 3376.2, spherical=False
        )
        assert ellipsoid < sphere

    def test_rounded_to_metres(self):
        d = great_circle_distance_km(0.0, 0.0, 3.3, 7.7, 3396.2, 3376.2)
        assert d == round(d, 3)

    def test_non_convergence_returns_nan(self, caplog):
        with caplog.at_level(logging.WARNING, logger="planet_vectors.core.coords"):
            d = great_circle_distance_km(
                10.0, 20.0, 30.0, 40.0, 3396.2, 3376.2,
                spherical=False, max_iterations=1,
            )
        assert math.isnan(d)
        assert any("did not converge" in r.message for r in caplog.records)

    def test_non_convergence_can_raise(self):
        with pytest.raises(FormulaNonConvergenceError):
            great_circle_distance_km(
                10.0, 20.0, 30.0, 40.0, 3396.2, 3376.2,
                spherical=False, max_iterations=1, raise_on_failure=True,
            )


class TestLineLength:
    def test_linestring(self):
        line = LineString([(0, 0), (0, 1), (0, 2)])
        assert line_length_km(line, MARS) == pytest.approx(2 * 59.27, abs=0.2)

    def test_multilinestring_sums_parts(self):
        multi = MultiLineString([[(0, 0), (0, 1)], [(10, 0), (10, 1)]])
        assert line_length_km(multi, MARS) == pytest.approx(2 * 59.27, abs=0.2)

    def test_rejects_points(self):
        with pytest.raises(ValueError):
            line_length_km(Point(0, 0), MARS)


class TestToDisplay:
    def test_defaults_pass_through(self):
        assert to_display(10.0, 20.0, DisplaySettings(), MARS) == (10.0, 20.0)

    def test_positive_west(self):
        lon, _ = to_display(10.0, 20.0, DisplaySettings(longitude_direction="PositiveWest"), MARS)
        assert lon == pytest.approx(350.0)

    def test_positive_west_then_180_domain(self):
        settings = DisplaySettings(longitude_direction="PositiveWest", longitude_domain="-180to180")
        lon, _ = to_display(10.0, 20.0, settings, MARS)
        assert lon == pytest.approx(-10.0)

    def test_planetographic_and_decimals(self):
        settings = DisplaySettings(latitude_type="Planetographic", decimal_places=2)
        lon, lat = to_display(10.123456, 45.0, settings, MARS)
        assert lon == 10.12
        assert lat == round(lat, 2)
        assert lat > 45.0
