"""Map setup tools: set_target, switch_projection, set_display_options, convert_coordinate."""

import json

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..bodies import KNOWN_BODIES, lookup_body
from ..core.coords import lonlat_to_polar, normalize_longitude, to_display
from ..models import PROJECTIONS, BodyRadii, pole_of
from ..state import state
from ._prereqs import require_state


def register_map_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def set_target(
        name: str,
        equatorial_radius_km: float | None = None,
        polar_radius_km: float | None = None,
    ) -> str:
        """Choose the planetary body to map.

        Known bodies (Mars, Moon, Mercury, Venus, Ceres, Vesta, ...) are looked
        up by name; anything else needs both radii. Switching target clears all
        drawn vectors and the footprint.

        **Next:** draw_vector or draw_footprint_from_corners.

        Args:
            name: Body name, e.g. "Mars".
            equatorial_radius_km: Override or supply the equatorial (a) radius.
            polar_radius_km: Override or supply the polar (c) radius.
        """
        known = lookup_body(name)
        if equatorial_radius_km is None and polar_radius_km is None:
            if known is None:
                names = ", ".join(sorted(b.name for b in KNOWN_BODIES.values()))
                return f"Error: Unknown body '{name}'. Known: {names}. Or pass both radii."
            body = known
        else:
            a = equatorial_radius_km if equatorial_radius_km is not None else (
                known.equatorial_radius_km if known else None)
            c = polar_radius_km if polar_radius_km is not None else (
                known.polar_radius_km if known else None)
            if a is None or c is None:
                return "Error: Provide both equatorial_radius_km and polar_radius_km."
            try:
                body = BodyRadii(name=name.strip(), equatorial_radius_km=a, polar_radius_km=c)
            except ValidationError as e:
                return f"Error: {e}"

        state.set_body(body)
        return (
            f"Target set to {body.name} "
            f"(a={body.equatorial_radius_km} km, c={body.polar_radius_km} km)."
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def switch_projection(projection: str) -> str:
        """Switch the map projection and redraw every stored vector.

        Vectors outside the polar cap (poleward of 60 degrees) stay stored but
        are not drawn until the projection changes back.

        Args:
            projection: "cylindrical", "north-polar stereographic" or
                "south-polar stereographic".
        """
        if projection not in PROJECTIONS:
            return f"Error: projection must be one of {', '.join(PROJECTIONS)}."
        drawn = state.switch_projection(projection)
        stored = len(list(state.store.live_features())) if state.store else 0
        return f"Projection set to {projection}. {drawn} feature(s) drawn, {stored} vector(s) stored."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_display_options(
        longitude_direction: str | None = None,
        longitude_domain: str | None = None,
        latitude_type: str | None = None,
        decimal_places: int | None = None,
        multi_footprint: bool | None = None,
    ) -> str:
        """Set how coordinates are reported back.

        Args:
            longitude_direction: "PositiveEast" or "PositiveWest".
            longitude_domain: "0to360" or "-180to180".
            latitude_type: "Planetocentric" or "Planetographic".
            decimal_places: Round reported coordinates to this many places (0-10).
            multi_footprint: When true, new footprints are merged with the current one.
        """
        try:
            if longitude_direction is not None:
                state.settings.longitude_direction = longitude_direction
            if longitude_domain is not None:
                state.settings.longitude_domain = longitude_domain
            if latitude_type is not None:
                state.settings.latitude_type = latitude_type
            if decimal_places is not None:
                state.settings.decimal_places = decimal_places
            if multi_footprint is not None:
                state.settings.multi_footprint = multi_footprint
        except ValidationError as e:
            return f"Error: {e}"
        if state.footprint is not None:
            state.footprint.merge_mode = state.settings.multi_footprint
        return "Display options updated: " + json.dumps(state.settings.model_dump())

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def convert_coordinate(lon: float, lat: float) -> str:
        """Report a canonical lon/lat (0-360 positive east, planetocentric) in display conventions.

        Also gives the polar stereographic position in meters when the map is polar.
        """
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
        if not -90 <= lat <= 90:
            return "Error: lat must be between -90 and 90."

        lon = float(normalize_longitude(lon, "0to360"))
        display_lon, display_lat = to_display(lon, lat, state.settings, state.body)
        result = {"lon": display_lon, "lat": display_lat}
        if state.projection in PROJECTIONS[1:]:
            x, y = lonlat_to_polar(lon, lat, pole_of(state.projection), state.body.polar_radius_km)
            result["x_m"] = float(x)
            result["y_m"] = float(y)
        return json.dumps(result)
