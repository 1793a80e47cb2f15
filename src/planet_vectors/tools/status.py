"""Status tool: get_status."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state


def register_status_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current map session.

        Shows the target body, projection and display options, vector counts
        (stored, drawn, index slots), the footprint with its corners in display
        conventions, and the last feature search.
        """
        summary = state.summary()
        if state.footprint is not None:
            corners = state.footprint.corners(state.settings)
            summary["footprint"]["corners"] = corners.as_dict() if corners else None
        return json.dumps(summary, indent=2)
