"""Tests for the search_feature_name MCP tool."""
import json
from unittest.mock import AsyncMock, patch, MagicMock

import pytest


def _register_and_get(tool_name: str):
    from planet_vectors.tools.search import register_search_tools
    tools = {}
    mock_mcp = MagicMock()

    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator

    mock_mcp.tool = capture
    register_search_tools(mock_mcp)
    return tools[tool_name]


@pytest.fixture
def mars_state():
    from planet_vectors.bodies import lookup_body
    from planet_vectors.state import state
    state.set_body(lookup_body("Mars"))
    return state


@pytest.mark.anyio
async def test_search_by_name(mars_state):
    from planet_vectors.models import FeatureSearchResult
    search = _register_and_get("search_feature_name")
    found = FeatureSearchResult(
        ok=True, target="MARS", query="Gale", records=[{"name": "Gale"}],
    )
    with patch(
        "planet_vectors.tools.search.search_feature_names",
        new=AsyncMock(return_value=found),
    ) as mock_search:
        result = json.loads(await search(query="Gale"))
    mock_search.assert_awaited_once_with("Mars", "Gale")
    assert result["hits"] == 1
    assert result["records"] == [{"name": "Gale"}]
    assert mars_state.last_search is found


@pytest.mark.anyio
async def test_search_by_type(mars_state):
    from planet_vectors.models import FeatureSearchResult
    search = _register_and_get("search_feature_name")
    found = FeatureSearchResult(ok=True, target="MARS", query="Crater, craters")
    with patch(
        "planet_vectors.tools.search.search_feature_type",
        new=AsyncMock(return_value=found),
    ) as mock_search:
        await search(query="Crater, craters", by_type=True)
    mock_search.assert_awaited_once()


@pytest.mark.anyio
async def test_search_failure_reported(mars_state):
    from planet_vectors.models import FeatureSearchResult
    search = _register_and_get("search_feature_name")
    failed = FeatureSearchResult(ok=False, target="MARS", query="Gale", error="HTTP 503")
    with patch(
        "planet_vectors.tools.search.search_feature_names",
        new=AsyncMock(return_value=failed),
    ):
        result = await search(query="Gale")
    assert result == "Error: Feature search failed (HTTP 503)."
    assert mars_state.summary()["search"] == {"last_query": "Gale", "ok": False, "hits": 0}


@pytest.mark.anyio
async def test_search_requires_target():
    from planet_vectors.state import state
    state.body = None
    state.store = None
    search = _register_and_get("search_feature_name")
    assert "set_target" in await search(query="Gale")
