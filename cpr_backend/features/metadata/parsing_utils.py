"""
Shared parsing utilities for metadata extraction (used by both the PNG and the
MP4 extractors).
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from ...shared import MalformedMetadataJson

PLAUSIBLE_WRAPPER_KEYS: tuple[str, ...] = ("extra_data", "extra_pnginfo", "prompt", "workflow")


@dataclass(frozen=True)
class TextCandidate:
    """A decoded text blob that may hold the embedded graph JSON."""

    keyword: str
    text: str
    offset: int = 0


def parse_json_text(text: str) -> Any:
    """
    Parse JSON text, raising `MalformedMetadataJson` on failure.

    Some writers store the graph as a JSON-encoded string; one such level is
    unwrapped when it holds an object.
    """
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        raise MalformedMetadataJson(f"Metadata is not valid JSON: {exc}") from exc
    if isinstance(parsed, str) and parsed.strip().startswith("{"):
        try:
            nested = json.loads(parsed)
        except ValueError:
            return parsed
        if isinstance(nested, dict):
            return nested
    return parsed


def try_parse_json_object(text: str) -> Optional[dict[str, Any]]:
    """Parse a JSON object the way `parse_json_text` does; None for anything else."""
    if not isinstance(text, str) or not text.strip():
        return None
    try:
        parsed = parse_json_text(text)
    except MalformedMetadataJson:
        return None
    return parsed if isinstance(parsed, dict) else None


def looks_like_api_graph(value: Any) -> bool:
    """A parsed object that is an execution graph rather than a UI workflow."""
    return isinstance(value, dict) and not isinstance(value.get("nodes"), list)


def _looks_like_api_node(value: Any) -> bool:
    return isinstance(value, dict) and ("inputs" in value or "class_type" in value)


def is_plausible_metadata(value: Any) -> bool:
    """
    Gate for brace-matched blobs: other embedded JSON (encoder settings,
    XMP fragments) must not be mistaken for a graph.
    """
    if not isinstance(value, dict):
        return False
    if isinstance(value.get("nodes"), list):
        return True
    if any(key in value for key in PLAUSIBLE_WRAPPER_KEYS):
        return True
    return any(_looks_like_api_node(v) for v in value.values())
