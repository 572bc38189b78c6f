"""Best-effort bag of every plausible text value in a graph."""

from __future__ import annotations

from typing import Any

from ... import config
from .graph_converter import NodeGraph, _inputs, _widgets

MODEL_WEIGHT_EXTENSIONS: tuple[str, ...] = (".safetensors", ".ckpt", ".pt", ".pth", ".bin", ".gguf")


def is_text_leaf(value: Any, min_length: int | None = None) -> bool:
    """Heuristic noise filter: long enough and not a model weight filename."""
    if not isinstance(value, str):
        return False
    limit = config.MIN_TEXT_LEAF_LENGTH if min_length is None else min_length
    text = value.strip()
    if len(text) < limit:
        return False
    return not text.lower().endswith(MODEL_WEIGHT_EXTENSIONS)


def collect_text_leaves(graph: NodeGraph, min_length: int | None = None) -> tuple[str, ...]:
    """
    Collect string inputs and widget values of every node.

    Duplicates are dropped; first-seen order is kept so callers render a
    stable list.
    """
    seen: dict[str, None] = {}
    for node in graph.nodes.values():
        for value in _inputs(node).values():
            if is_text_leaf(value, min_length):
                seen.setdefault(value.strip(), None)
        for value in _widgets(node):
            if is_text_leaf(value, min_length):
                seen.setdefault(value.strip(), None)
    return tuple(seen)
