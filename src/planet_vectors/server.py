"""MCP server for planet-vectors.

Registers all tools and runs via stdio transport.
"""

import json

from mcp.server.fastmcp import FastMCP

from .state import state
from .tools.map import register_map_tools
from .tools.vectors import register_vector_tools
from .tools.footprint import register_footprint_tools
from .tools.search import register_search_tools
from .tools.session import register_session_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "planet-vectors",
    instructions=(
        "Draw and edit vector geometry (points, lines, polygons, footprints) on "
        "planetary bodies in cylindrical and polar stereographic projections"
    ),
)

# Register all tool groups
register_map_tools(mcp)
register_vector_tools(mcp)
register_footprint_tools(mcp)
register_search_tools(mcp)
register_session_tools(mcp)
register_status_tools(mcp)


@mcp.resource("state://session")
def session_state() -> str:
    """Current session summary as JSON."""
    return json.dumps(state.summary(), indent=2)


def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
