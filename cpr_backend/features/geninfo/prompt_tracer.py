"""Prompt tracing: follow a node input back through the graph to its text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ... import config
from ...shared import GraphFormat
from .graph_converter import NodeGraph, _inputs, _is_link, _lower, _node_type, _resolve_link, _widgets

# Consulted in order; the first text literal wins.
TEXT_INPUT_KEYS: tuple[str, ...] = (
    "text",
    "text_g",
    "text_l",
    "positive",
    "negative",
    "caption",
    "string",
    "prompt",
    "value",
    "input_text",
    "string_field",
    "text_positive",
    "text_negative",
    "text_a",
    "text_b",
)

PASSTHROUGH_MARKERS: tuple[str, ...] = ("reroute", "primitive", "node", "pipe", "bus")
COMBINER_MARKERS: tuple[str, ...] = ("combine", "concat", "average")
COMBINER_INPUT_PAIRS: tuple[tuple[str, str], ...] = (
    ("conditioning_1", "conditioning_2"),
    ("conditioning_to", "conditioning_from"),
    ("text_a", "text_b"),
    ("string_a", "string_b"),
)
COMBINED_SEPARATOR = "\n\n"
MIN_WIDGET_TEXT_LENGTH = 3

_MISSING = object()


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_passthrough_type(ct: str) -> bool:
    return any(marker in ct for marker in PASSTHROUGH_MARKERS)


def _is_combiner_type(ct: str) -> bool:
    return any(marker in ct for marker in COMBINER_MARKERS)


def _first_widget_text(node: dict[str, Any]) -> str | None:
    for value in _widgets(node):
        if isinstance(value, str) and len(value) >= MIN_WIDGET_TEXT_LENGTH:
            return value
    return None



@dataclass
class ResolveContext:
    """
    State shared by every lookup of one graph resolution.

    `memo` caches ``(node_id, input_name)`` results so a node reachable
    through many routes is resolved once; without it a chain of diamonds
    costs 2**n lookups.
    """

    graph: NodeGraph
    max_depth: int
    max_text_chars: int
    memo: dict[tuple[str, str], str | None] = field(default_factory=dict)


def new_context(
    graph: NodeGraph,
    max_depth: int | None = None,
    max_text_chars: int | None = None,
) -> ResolveContext:
    return ResolveContext(
        graph=graph,
        max_depth=config.MAX_RESOLVE_DEPTH if max_depth is None else max_depth,
        max_text_chars=config.MAX_PROMPT_CHARS if max_text_chars is None else max_text_chars,
    )


def resolve_input(
    graph: NodeGraph,
    node_id: Any,
    input_name: str,
    visited: frozenset[str] = frozenset(),
    depth: int = 0,
    max_depth: int | None = None,
    ctx: ResolveContext | None = None,
) -> str | None:
    """
    Resolve ``node.inputs[input_name]`` to a text value.

    `visited` holds the ids already on the current path; re-entering one of
    them yields None, which is how cycles terminate. Pass the same `ctx` to
    related calls to share its cache. Never raises.
    """
    if ctx is None:
        ctx = new_context(graph, max_depth)
    return _resolve(ctx, str(node_id).strip(), input_name, visited, depth)


def _resolve(ctx: ResolveContext, nid: str, input_name: str, visited: frozenset[str], depth: int) -> str | None:
    if nid in visited or depth > ctx.max_depth:
        return None
    key = (nid, input_name)
    if key in ctx.memo:
        return ctx.memo[key]
    result = _resolve_uncached(ctx, nid, input_name, visited | {nid}, depth)
    ctx.memo[key] = result
    return result


def _resolve_uncached(
    ctx: ResolveContext,
    nid: str,
    input_name: str,
    visited: frozenset[str],
    depth: int,
) -> str | None:
    graph = ctx.graph
    node = graph.get(nid)
    if node is None:
        return None

    value = _inputs(node).get(input_name, _MISSING)
    if value is _MISSING:
        if graph.format is GraphFormat.UI:
            return _first_widget_text(node)
        return None

    if isinstance(value, str):
        return value
    if graph.is_api and _is_link(value):
        return _resolve_link_source(ctx, value, visited, depth + 1)
    return None


def _resolve_link_source(ctx: ResolveContext, link: Any, visited: frozenset[str], depth: int) -> str | None:
    resolved = _resolve_link(link)
    if not resolved:
        return None
    src_id, _slot = resolved
    if src_id in visited:
        return None
    source = ctx.graph.get(src_id)
    if source is None:
        return None

    text = _text_field_value(ctx, src_id, source, visited, depth)
    if text is not None:
        return text

    ct = _lower(_node_type(source))
    if _is_passthrough_type(ct):
        return _resolve_passthrough(ctx, src_id, source, visited, depth)
    if _is_combiner_type(ct):
        return _resolve_combiner(ctx, src_id, visited, depth)
    return None


def _text_field_value(
    ctx: ResolveContext,
    src_id: str,
    source: dict[str, Any],
    visited: frozenset[str],
    depth: int,
) -> str | None:
    ins = _inputs(source)
    for key in TEXT_INPUT_KEYS:
        value = ins.get(key)
        if _has_text(value):
            return value
    # Text encoders fed by a string primitive carry a link in the text field.
    for key in TEXT_INPUT_KEYS:
        if not _is_link(ins.get(key)):
            continue
        value = _resolve(ctx, src_id, key, visited, depth)
        if _has_text(value):
            return value
    return None


def _resolve_passthrough(
    ctx: ResolveContext,
    src_id: str,
    source: dict[str, Any],
    visited: frozenset[str],
    depth: int,
) -> str | None:
    for key in _inputs(source):
        value = _resolve(ctx, src_id, key, visited, depth)
        if _has_text(value):
            return value
    return None


def _resolve_combiner(ctx: ResolveContext, src_id: str, visited: frozenset[str], depth: int) -> str | None:
    for first, second in COMBINER_INPUT_PAIRS:
        a = _resolve(ctx, src_id, first, visited, depth)
        b = _resolve(ctx, src_id, second, visited, depth)
        a = a if _has_text(a) else None
        b = b if _has_text(b) else None
        if a and b:
            if len(a) + len(COMBINED_SEPARATOR) + len(b) > ctx.max_text_chars:
                # Keep the first side rather than growing past the cap.
                return a
            return f"{a}{COMBINED_SEPARATOR}{b}"
        if a or b:
            return a or b
    return None
