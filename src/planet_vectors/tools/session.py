"""Session persistence tools: save_session, load_session."""

import json
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..core.wkt import serialize
from ..errors import PlanetVectorsError
from ..models import BodyRadii, DisplaySettings
from ..state import Colors, state

logger = logging.getLogger(__name__)


def _default_path() -> Path:
    return Path.home() / ".cache" / "planet-vectors" / "session.json"


def register_session_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def save_session(path: str | None = None) -> str:
        """Save the current session to a JSON file for later resumption.

        Saves the target body, projection, display options, colors, every
        stored vector (as lat/lon WKT) and the footprint. Removed vector slots
        are kept so indices survive a reload.
        **Next:** load_session in a future session to restore it.

        Args:
            path: Where to save. Default: ~/.cache/planet-vectors/session.json
        """
        save_path = Path(path) if path else _default_path()
        save_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict = {
            "body": state.body.model_dump() if state.body else None,
            "projection": state.projection,
            "settings": state.settings.model_dump(),
            "colors": state.colors.model_dump(),
            "vectors": [],
            "footprint": None,
        }

        if state.store is not None:
            data["vectors"] = [
                None if f is None else {
                    "wkt": serialize(f.search_geometry),
                    "color": f.color,
                    "feature_id": f.feature_id,
                    "attributes": f.attributes,
                    "dateline_shift": f.dateline_shift,
                }
                for f in state.store.features
            ]

        if state.footprint is not None and state.footprint.footprint is not None:
            data["footprint"] = serialize(state.footprint.footprint.search_geometry)

        with open(save_path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info("Session saved to %s", save_path)
        return f"Session saved to {save_path}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def load_session(path: str | None = None) -> str:
        """Load a previously saved session from a JSON file.

        Replaces the target body, all vectors and the footprint, then redraws
        everything in the saved projection.

        Args:
            path: Path to load from. Default: ~/.cache/planet-vectors/session.json
        """
        load_path = Path(path) if path else _default_path()

        if not load_path.exists():
            return f"Error: Session file not found at {load_path}"

        try:
            with open(load_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return f"Error: Invalid session file: {e}"

        try:
            if data.get("settings"):
                state.settings = DisplaySettings(**data["settings"])
            if data.get("colors"):
                state.colors = Colors(**data["colors"])
            if data.get("projection"):
                state.projection = data["projection"]
            if not data.get("body"):
                return f"Session restored from {load_path}. No target body was saved."
            state.set_body(BodyRadii(**data["body"]))
        except ValidationError as e:
            return f"Error: Invalid session file: {e}"

        vectors = data.get("vectors") or []
        try:
            for entry in vectors:
                if entry is None:
                    # keep the removed slot so later indices line up
                    placeholder = state.store.draw_and_store("POINT(0 0)")
                    state.store.remove_and_unstore(placeholder.index)
                    continue
                state.store.draw_and_store(
                    entry["wkt"],
                    attributes=entry.get("attributes"),
                    color=entry.get("color") or state.colors.vector,
                    feature_id=entry.get("feature_id"),
                    shift=entry.get("dateline_shift", False),
                )
            if data.get("footprint"):
                state.footprint.draw_and_store(data["footprint"], merge=False)
        except (PlanetVectorsError, ValidationError, KeyError) as e:
            return f"Error: Invalid session file: {e}"

        stored = len(list(state.store.live_features()))
        restored = [state.body.name, state.projection, f"{stored} vector(s)"]
        if state.footprint.footprint is not None:
            restored.append("footprint")
        logger.info("Session loaded from %s", load_path)
        return f"Session restored from {load_path}. Restored: {', '.join(restored)}."
