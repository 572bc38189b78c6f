"""Graph normalization and format classification for embedded node graphs.

ComfyUI writes two incompatible serializations of the same graph:

- the *API* (execution) format, a flat ``{node_id: {class_type, inputs}}``
  mapping where linked inputs are ``[source_id, slot]`` pairs;
- the *UI* workflow format, ``{nodes: [...], links: [...]}`` where each node
  only carries positional ``widgets_values``.

Either may arrive wrapped (``{"prompt": {...}, "workflow": {...}}``, queue
payloads with ``extra_data.extra_pnginfo``). `classify_graph` unwraps and
normalizes them into a `NodeGraph` keyed by string node id.

Known limitation: the rule is order dependent. A document carrying a ``nodes``
array is always treated as UI format, even if it also contains API-shaped
entries.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ...shared import GraphFormat

GRAPH_WRAPPER_KEYS: tuple[str, ...] = ("prompt", "workflow")
NESTED_WRAPPER_KEYS: tuple[str, ...] = ("extra_pnginfo", "extra_data")
MAX_UNWRAP_DEPTH = 4


@dataclass
class NodeGraph:
    """Index of node id -> raw node dict, tagged with its serialization format."""

    format: GraphFormat
    nodes: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def is_api(self) -> bool:
        return self.format is GraphFormat.API

    def get(self, node_id: Any) -> dict[str, Any] | None:
        if node_id is None:
            return None
        return self.nodes.get(str(node_id).strip())

    def __len__(self) -> int:
        return len(self.nodes)


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _looks_like_node_id(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if not isinstance(value, str):
        return False
    s = value.strip()
    if not s:
        return False
    parts = s.split(":")
    return all(p.isdigit() for p in parts if p != "")


def _is_link(value: Any) -> bool:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return False
    a, b = value[0], value[1]
    return _looks_like_node_id(a) and _to_int(b) is not None


def _resolve_link(value: Any) -> tuple[str, int] | None:
    if not _is_link(value):
        return None
    a, b = value[0], value[1]
    return str(a).strip(), int(_to_int(b) or 0)


def _node_type(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    return str(node.get("class_type") or node.get("type") or "")


def _inputs(node: Any) -> dict[str, Any]:
    if not isinstance(node, dict):
        return {}
    ins = node.get("inputs")
    return ins if isinstance(ins, dict) else {}


def _widgets(node: Any) -> list[Any]:
    """Positional widget values; some frontend versions store them as a mapping."""
    if not isinstance(node, dict):
        return []
    widgets = node.get("widgets_values")
    if isinstance(widgets, list):
        return widgets
    if isinstance(widgets, dict):
        return list(widgets.values())
    return []


def _lower(s: Any) -> str:
    return str(s or "").lower()


def _decode_wrapped(value: Any) -> Any | None:
    """Return a wrapper field as an object, decoding JSON-encoded strings."""
    if isinstance(value, dict):
        return value
    if not isinstance(value, str) or not value.strip().startswith("{"):
        return None
    try:
        parsed = json.loads(value)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def unwrap_graph_document(value: Any, depth: int = 0) -> Any:
    """Descend through known wrapper objects until a graph document remains."""
    if not isinstance(value, dict) or depth >= MAX_UNWRAP_DEPTH:
        return value
    if isinstance(value.get("nodes"), list):
        return value

    for key in GRAPH_WRAPPER_KEYS:
        inner = _decode_wrapped(value.get(key))
        if inner is not None:
            return unwrap_graph_document(inner, depth + 1)

    for key in NESTED_WRAPPER_KEYS:
        inner = _decode_wrapped(value.get(key))
        if inner is None:
            continue
        unwrapped = unwrap_graph_document(inner, depth + 1)
        if unwrapped is not inner:
            return unwrapped

    return value


def _ui_nodes_by_id(nodes: list[Any]) -> dict[str, dict[str, Any]]:
    out: dict[str, dict[str, Any]] = {}
    for index, node in enumerate(nodes):
        if not isinstance(node, dict):
            continue
        node_id = node.get("id", index)
        out[str(node_id).strip()] = node
    return out


def classify_graph(value: Any) -> NodeGraph | None:
    """
    Classify a parsed metadata document and build its node index.

    Returns None for values that cannot hold a graph (arrays, scalars).
    """
    doc = unwrap_graph_document(value)
    if not isinstance(doc, dict):
        return None

    nodes = doc.get("nodes")
    if isinstance(nodes, list):
        return NodeGraph(GraphFormat.UI, _ui_nodes_by_id(nodes))

    api_nodes = {str(k).strip(): v for k, v in doc.items() if isinstance(v, dict)}
    return NodeGraph(GraphFormat.API, api_nodes)
