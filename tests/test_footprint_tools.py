"""Tests for footprint MCP tools."""
import json
from unittest.mock import MagicMock

import pytest


def _register_and_get(tool_name: str):
    from planet_vectors.tools.footprint import register_footprint_tools
    tools = {}
    mock_mcp = MagicMock()

    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator

    mock_mcp.tool = capture
    register_footprint_tools(mock_mcp)
    return tools[tool_name]


@pytest.fixture(autouse=True)
def mars_session():
    from planet_vectors.bodies import lookup_body
    from planet_vectors.models import CYLINDRICAL, DisplaySettings
    from planet_vectors.state import state
    state.projection = CYLINDRICAL
    state.settings = DisplaySettings()
    state.set_body(lookup_body("Mars"))
    return state


def test_draw_from_corners_reports_corners(mars_session):
    draw = _register_and_get("draw_footprint_from_corners")
    result = json.loads(draw(
        top_left_lon=10, top_left_lat=40, bottom_right_lon=50, bottom_right_lat=-10,
    ))
    assert result["corners"] == {
        "top_left_lon": 10.0, "top_left_lat": 40.0,
        "bottom_right_lon": 50.0, "bottom_right_lat": -10.0,
    }
    assert result["split_wkt"] is None
    assert result["rendered"] is True


def test_draw_from_corners_missing_value():
    draw = _register_and_get("draw_footprint_from_corners")
    result = draw(top_left_lon=10, top_left_lat=40, bottom_right_lon=50)
    assert result == "Error: All four corner values are required."


def test_dateline_footprint_is_split():
    draw = _register_and_get("draw_footprint_from_corners")
    result = json.loads(draw(
        top_left_lon=350, top_left_lat=40, bottom_right_lon=10, bottom_right_lat=-10,
    ))
    assert result["wkt"].startswith("MULTIPOLYGON")
    assert result["corners"]["top_left_lon"] == 350.0
    assert result["corners"]["bottom_right_lon"] == 10.0


def test_corners_in_display_conventions(mars_session):
    mars_session.settings.longitude_domain = "-180to180"
    draw = _register_and_get("draw_footprint_from_corners")
    result = json.loads(draw(
        top_left_lon=200, top_left_lat=40, bottom_right_lon=220, bottom_right_lat=-10,
    ))
    assert result["corners"]["top_left_lon"] == pytest.approx(-160.0)
    assert result["corners"]["bottom_right_lon"] == pytest.approx(-140.0)


def test_draw_from_wkt_replaces_footprint(mars_session):
    draw = _register_and_get("draw_footprint_from_wkt")
    draw(wkt="POLYGON((10 0,20 0,20 10,10 10,10 0))")
    draw(wkt="POLYGON((30 0,40 0,40 10,30 10,30 0))")
    assert len(list(mars_session.footprint.store.live_features())) == 1
    assert mars_session.footprint.footprint.search_geometry.bounds[0] == 30.0


def test_draw_from_render_coordinates_outside_cap(mars_session):
    from planet_vectors.models import NORTH_POLAR
    mars_session.switch_projection(NORTH_POLAR)
    draw = _register_and_get("draw_footprint_from_wkt")
    # near the equator in polar meters, far outside the 60 degree cap
    result = draw(
        wkt="POLYGON((3000000 0,3100000 0,3100000 100000,3000000 100000,3000000 0))",
        render_coordinates=True,
    )
    assert result.startswith("Error: Footprint is not visible")


def test_get_footprint_requires_footprint():
    get_footprint = _register_and_get("get_footprint")
    assert "Draw a footprint first" in get_footprint()


def test_clear_footprint(mars_session):
    draw = _register_and_get("draw_footprint_from_corners")
    clear = _register_and_get("clear_footprint")
    draw(top_left_lon=10, top_left_lat=40, bottom_right_lon=50, bottom_right_lat=-10)
    assert clear() == "Footprint removed."
    assert mars_session.footprint.footprint is None
    assert len(mars_session.footprint_layer) == 0


def test_set_center_point(mars_session):
    set_center_point = _register_and_get("set_center_point")
    result = set_center_point(center_lon=45, center_lat=10, diameter_km=100)
    assert result == "Center point recorded: POINT(45 10)"
    assert mars_session.footprint.footprint is None


def test_set_center_point_rejects_zero_diameter():
    set_center_point = _register_and_get("set_center_point")
    assert set_center_point(center_lon=45, center_lat=10, diameter_km=0).startswith("Error:")
