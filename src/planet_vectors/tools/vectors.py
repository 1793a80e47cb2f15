"""Vector tools: draw_vector, remove_vector, clear_vectors, find_vector,
highlight_vector, list_vectors, measure_line."""

import json
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..core.coords import line_length_km
from ..core.models import FeatureState
from ..core.wkt import geometry_tag, parse, serialize
from ..errors import PlanetVectorsError
from ..state import state
from ._prereqs import require_state


def feature_summary(feature: FeatureState) -> dict[str, Any]:
    precision = state.settings.decimal_places
    return {
        "index": feature.index,
        "feature_id": feature.feature_id,
        "type": geometry_tag(feature.search_geometry),
        "wkt": serialize(feature.search_geometry, precision),
        "split_wkt": (
            serialize(feature.split_geometry, precision)
            if feature.split_geometry is not None else None
        ),
        "color": feature.color,
        "rendered": feature.is_rendered,
        "attributes": feature.attributes,
    }


def register_vector_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def draw_vector(
        wkt: str,
        color: str | None = None,
        attributes: dict[str, Any] | None = None,
        feature_id: str | None = None,
        center: bool = False,
        dateline_shift: bool = False,
    ) -> str:
        """Draw and store a WKT geometry in lat/lon degrees (0-360 longitude).

        Geometries crossing the 0/360 seam are split automatically. Only simple
        shapes spanning less than 180 degrees of longitude split correctly.

        **Prior:** set_target.

        Args:
            wkt: POINT, LINESTRING, POLYGON or a MULTI* variant. No polygon holes.
            color: #RRGGBB color. Default: the session vector color.
            attributes: Free-form key/value pairs for find_vector.
            feature_id: Optional identifier.
            center: Fit the view to the new vector.
            dateline_shift: Also draw copies at -360/+360 (cylindrical only).
        """
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        try:
            feature = state.store.draw_and_store(
                wkt,
                attributes=attributes,
                color=color or state.colors.vector,
                feature_id=feature_id,
                center=center,
                shift=dateline_shift,
            )
        except (PlanetVectorsError, ValidationError) as e:
            return f"Error: {e}"
        return json.dumps(feature_summary(feature), indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def remove_vector(index: int) -> str:
        """Remove a stored vector. Other vectors keep their indices."""
        try:
            require_state(state, body=True)
            removed = state.store.remove_and_unstore(index)
        except (ValueError, IndexError) as e:
            return f"Error: {e}"
        if not removed:
            return f"Error: Vector {index} was already removed."
        return f"Removed vector {index}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def clear_vectors() -> str:
        """Remove every stored vector (the footprint is untouched)."""
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        state.store.remove_and_unstore_all()
        return "All vectors removed."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def find_vector(key: str, value: str | int | float | bool) -> str:
        """Find stored vectors whose attribute ``key`` equals ``value``."""
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        matches = state.store.find_by_attribute(key, value)
        return json.dumps([feature_summary(f) for f in matches], indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def highlight_vector(index: int, highlight: bool = True) -> str:
        """Switch a vector between the selection style and its own color."""
        try:
            require_state(state, body=True)
            if highlight:
                state.store.unhighlight_all()
                changed = state.store.highlight(index)
            else:
                changed = state.store.unhighlight(index)
        except (ValueError, IndexError) as e:
            return f"Error: {e}"
        if not changed:
            return f"Vector {index} is not drawn in the current projection."
        return f"Vector {index} {'highlighted' if highlight else 'unhighlighted'}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_vectors() -> str:
        """List every stored vector with its WKT and split form."""
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        return json.dumps(
            [feature_summary(f) for f in state.store.live_features()], indent=2,
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def measure_line(wkt: str) -> str:
        """Length in km of a LINESTRING or MULTILINESTRING on the target body.

        Uses the Vincenty formula on a sphere of the equatorial radius.
        """
        try:
            require_state(state, body=True)
            geometry = parse(wkt)
            length = line_length_km(geometry, state.body)
        except (ValueError, PlanetVectorsError) as e:
            return f"Error: {e}"
        return json.dumps({"length_km": length, "body": state.body.name})
