"""Footprint tools: draw_footprint_from_corners, draw_footprint_from_wkt,
get_footprint, clear_footprint, set_center_point."""

import json

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..core.wkt import serialize
from ..errors import PlanetVectorsError
from ..state import state
from ._prereqs import require_state


def _footprint_report() -> dict:
    feature = state.footprint.footprint
    corners = state.footprint.corners(state.settings)
    precision = state.settings.decimal_places
    return {
        "wkt": serialize(feature.search_geometry, precision),
        "split_wkt": (
            serialize(feature.split_geometry, precision)
            if feature.split_geometry is not None else None
        ),
        "rendered": feature.is_rendered,
        "corners": corners.as_dict() if corners else None,
    }


def register_footprint_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def draw_footprint_from_corners(
        top_left_lon: float | None = None,
        top_left_lat: float | None = None,
        bottom_right_lon: float | None = None,
        bottom_right_lat: float | None = None,
    ) -> str:
        """Draw the footprint box from two corners (0-360 longitude, left-most-least).

        A top-left longitude greater than the bottom-right one draws a box
        across the 0/360 seam; a corner latitude of +/-90 caps the pole.
        Replaces the current footprint unless multi_footprint is on.

        **Prior:** set_target.
        """
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        try:
            feature = state.footprint.draw_from_corners(
                top_left_lon, top_left_lat, bottom_right_lon, bottom_right_lat,
            )
        except (PlanetVectorsError, ValueError) as e:
            return f"Error: {e}"
        if feature is None:
            return "Error: All four corner values are required."
        return json.dumps(_footprint_report(), indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def draw_footprint_from_wkt(wkt: str, render_coordinates: bool = False) -> str:
        """Draw the footprint from WKT.

        Args:
            wkt: Footprint geometry.
            render_coordinates: The WKT is in the current projection's render
                coordinates (polar meters), as drawn on the map.
        """
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        try:
            if render_coordinates:
                feature = state.footprint.draw_from_control(wkt)
            else:
                feature = state.footprint.draw_and_store(wkt)
        except PlanetVectorsError as e:
            return f"Error: {e}"
        if feature is None:
            return f"Error: Footprint is not visible in {state.projection}."
        return json.dumps(_footprint_report(), indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_footprint() -> str:
        """Return the footprint WKT, its dateline-split form, and its corners."""
        try:
            require_state(state, body=True, footprint=True)
        except ValueError as e:
            return f"Error: {e}"
        return json.dumps(_footprint_report(), indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_footprint() -> str:
        """Remove the footprint."""
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        state.footprint.remove_and_unstore_all()
        return "Footprint removed."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_center_point(center_lon: float, center_lat: float, diameter_km: float) -> str:
        """Record a footprint center point.

        Only the center is recorded; no box is derived from the diameter.
        """
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        if diameter_km <= 0:
            return "Error: diameter_km must be positive."
        state.footprint.build_from_center_and_diameter(center_lon, center_lat, diameter_km)
        return f"Center point recorded: {serialize(state.footprint.center_point)}"
