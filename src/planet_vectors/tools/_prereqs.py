"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, body: bool = False, footprint: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, body=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if body and (state.body is None or state.store is None):
        raise ValueError(
            "Set a target body first with set_target."
        )
    if footprint and (state.footprint is None or state.footprint.footprint is None):
        raise ValueError(
            "Draw a footprint first with draw_footprint_from_corners or draw_footprint_from_wkt."
        )
