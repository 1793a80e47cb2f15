"""Tests for vector MCP tools."""
import json
from unittest.mock import MagicMock

import pytest


def _register_and_get(tool_name: str):
    from planet_vectors.tools.vectors import register_vector_tools
    tools = {}
    mock_mcp = MagicMock()

    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator

    mock_mcp.tool = capture
    register_vector_tools(mock_mcp)
    return tools[tool_name]


def _reset_state(body="mars"):
    from planet_vectors.bodies import lookup_body
    from planet_vectors.models import CYLINDRICAL, DisplaySettings
    from planet_vectors.state import Colors, state
    state.projection = CYLINDRICAL
    state.settings = DisplaySettings()
    state.colors = Colors()
    if body:
        state.set_body(lookup_body(body))
    else:
        state.body = None
        state.store = None
        state.footprint = None
    return state


class TestDrawVector:
    def setup_method(self):
        self.state = _reset_state()

    def test_requires_target(self):
        _reset_state(body=None)
        draw_vector = _register_and_get("draw_vector")
        assert "set_target" in draw_vector(wkt="POINT(10 10)")

    def test_draws_and_reports(self):
        draw_vector = _register_and_get("draw_vector")
        result = json.loads(draw_vector(
            wkt="POLYGON((10 0,20 0,20 10,10 10,10 0))",
            color="#ff0000", feature_id="crater-1", attributes={"name": "Gale"},
        ))
        assert result["index"] == 0
        assert result["type"] == "POLYGON"
        assert result["color"] == "#FF0000"
        assert result["rendered"] is True
        assert result["split_wkt"] is None
        assert result["attributes"] == {"name": "Gale"}

    def test_uses_session_color(self):
        self.state.colors.vector = "#00FF00"
        draw_vector = _register_and_get("draw_vector")
        result = json.loads(draw_vector(wkt="POINT(10 10)"))
        assert result["color"] == "#00FF00"

    def test_crossing_polygon_reports_split(self):
        draw_vector = _register_and_get("draw_vector")
        result = json.loads(draw_vector(wkt="POLYGON((350 0,10 0,10 10,350 10,350 0))"))
        assert result["split_wkt"].startswith("MULTIPOLYGON")

    def test_malformed_wkt(self):
        draw_vector = _register_and_get("draw_vector")
        result = draw_vector(wkt="POLYGON((0 0,1 1")
        assert result.startswith("Error:")
        assert len(self.state.store) == 0

    def test_bad_color(self):
        draw_vector = _register_and_get("draw_vector")
        assert draw_vector(wkt="POINT(10 10)", color="red").startswith("Error:")


class TestRemoveAndList:
    def setup_method(self):
        self.state = _reset_state()
        self.state.store.draw_and_store("POINT(10 10)", attributes={"name": "a"})
        self.state.store.draw_and_store("POINT(20 20)", attributes={"name": "b"})

    def test_remove_keeps_indices(self):
        remove_vector = _register_and_get("remove_vector")
        list_vectors = _register_and_get("list_vectors")
        assert remove_vector(index=0) == "Removed vector 0."
        listed = json.loads(list_vectors())
        assert [v["index"] for v in listed] == [1]

    def test_remove_twice(self):
        remove_vector = _register_and_get("remove_vector")
        remove_vector(index=0)
        assert "already removed" in remove_vector(index=0)

    def test_remove_out_of_range(self):
        remove_vector = _register_and_get("remove_vector")
        assert remove_vector(index=9).startswith("Error:")

    def test_clear(self):
        clear_vectors = _register_and_get("clear_vectors")
        list_vectors = _register_and_get("list_vectors")
        clear_vectors()
        assert json.loads(list_vectors()) == []

    def test_find(self):
        find_vector = _register_and_get("find_vector")
        found = json.loads(find_vector(key="name", value="b"))
        assert [v["index"] for v in found] == [1]
        assert json.loads(find_vector(key="missing", value="None")) == []

    def test_find_matches_store_lookup(self):
        self.state.store.draw_and_store("POINT(30 30)", attributes={"orbit": 42})
        find_vector = _register_and_get("find_vector")
        found = json.loads(find_vector(key="orbit", value=42))
        assert [v["index"] for v in found] == [
            f.index for f in self.state.store.find_by_attribute("orbit", 42)
        ] == [2]

    def test_highlight(self):
        from planet_vectors.models import SELECT_STYLE
        highlight_vector = _register_and_get("highlight_vector")
        assert highlight_vector(index=1) == "Vector 1 highlighted."
        handle = self.state.store.get(1).render_handle
        assert self.state.vector_layer.features[handle].style == SELECT_STYLE
        assert highlight_vector(index=1, highlight=False) == "Vector 1 unhighlighted."
        assert self.state.vector_layer.features[handle].style != SELECT_STYLE


class TestMeasureLine:
    def setup_method(self):
        _reset_state()

    def test_one_degree_on_mars(self):
        measure_line = _register_and_get("measure_line")
        result = json.loads(measure_line(wkt="LINESTRING(0 0,1 0)"))
        assert result["length_km"] == pytest.approx(59.274, abs=1e-3)
        assert result["body"] == "Mars"

    def test_rejects_polygon(self):
        measure_line = _register_and_get("measure_line")
        result = measure_line(wkt="POLYGON((0 0,1 0,1 1,0 0))")
        assert result.startswith("Error:")
