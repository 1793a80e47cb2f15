"""Feature-name search tool: search_feature_name."""

import json

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..core.nomenclature import search_feature_names, search_feature_type
from ..state import state
from ._prereqs import require_state

MAX_RESULTS = 25


def register_search_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))
    async def search_feature_name(query: str, by_type: bool = False) -> str:
        """Look up named surface features on the target body.

        Queries the USGS planetary nomenclature service. Failures are reported,
        not retried.

        **Prior:** set_target.

        Args:
            query: Feature name (e.g. "Olympus") or, with by_type, a feature
                type (e.g. "Crater, craters").
            by_type: Search by feature type instead of name.
        """
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"

        search = search_feature_type if by_type else search_feature_names
        result = await search(state.body.name, query)
        state.last_search = result
        if not result.ok:
            return f"Error: Feature search failed ({result.error})."
        return json.dumps({
            "target": result.target,
            "query": result.query,
            "hits": len(result.records),
            "records": result.records[:MAX_RESULTS],
        }, indent=2)
