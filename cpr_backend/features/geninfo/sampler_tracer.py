"""Sampler discovery and per-sampler prompt assignment."""

from __future__ import annotations

from typing import Any

from .graph_converter import NodeGraph, _inputs, _is_link, _lower, _node_type, _resolve_link
from .prompt_tracer import ResolveContext, new_context, resolve_input

SAMPLER_MARKERS: tuple[str, ...] = ("sampler", "generate")
SAMPLER_EXCLUDE_MARKERS: tuple[str, ...] = ("save", "load", "image")

POSITIVE_INPUTS: tuple[str, ...] = ("positive", "conditioning")
NEGATIVE_INPUTS: tuple[str, ...] = ("negative",)


def _is_sampler(node: Any) -> bool:
    ct = _lower(_node_type(node))
    if not ct:
        return False
    if not any(marker in ct for marker in SAMPLER_MARKERS):
        return False
    return not any(marker in ct for marker in SAMPLER_EXCLUDE_MARKERS)


def find_sampler_ids(graph: NodeGraph) -> list[str]:
    """Sampler-like node ids in graph insertion order (API format only)."""
    if not graph.is_api:
        return []
    return [nid for nid, node in graph.nodes.items() if _is_sampler(node)]


def _clean(value: str | None) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _resolve_named(
    graph: NodeGraph,
    node_id: str,
    names: tuple[str, ...],
    visited: frozenset[str] = frozenset(),
    ctx: ResolveContext | None = None,
) -> str | None:
    """Resolve the first of `names` present on the node; later names are fallbacks for absent inputs."""
    ins = _inputs(graph.get(node_id))
    for name in names:
        if name in ins:
            return _clean(resolve_input(graph, node_id, name, visited, ctx=ctx))
    return None


def _guider_id(graph: NodeGraph, sampler_id: str) -> str | None:
    link = _inputs(graph.get(sampler_id)).get("guider")
    if not _is_link(link):
        return None
    resolved = _resolve_link(link)
    return resolved[0] if resolved else None


def resolve_sampler_prompts(
    graph: NodeGraph,
    sampler_id: str,
    ctx: ResolveContext | None = None,
) -> tuple[str | None, str | None]:
    """Return the (positive, negative) text feeding one sampler."""
    if ctx is None:
        ctx = new_context(graph)
    positive = _resolve_named(graph, sampler_id, POSITIVE_INPUTS, ctx=ctx)
    negative = _resolve_named(graph, sampler_id, NEGATIVE_INPUTS, ctx=ctx)

    # SamplerCustomAdvanced and friends take conditioning through a guider node.
    if positive is None or negative is None:
        guider_id = _guider_id(graph, sampler_id)
        if guider_id and guider_id != sampler_id:
            visited = frozenset({sampler_id})
            positive = positive or _resolve_named(graph, guider_id, POSITIVE_INPUTS, visited, ctx)
            negative = negative or _resolve_named(graph, guider_id, NEGATIVE_INPUTS, visited, ctx)

    return positive, negative


def resolve_prompts(graph: NodeGraph) -> tuple[str | None, str | None]:
    """
    Walk samplers in insertion order; the first non-empty positive and the
    first non-empty negative win independently.
    """
    positive: str | None = None
    negative: str | None = None
    # One cache per graph: samplers commonly share their text encoders.
    ctx = new_context(graph)
    for sampler_id in find_sampler_ids(graph):
        pos, neg = resolve_sampler_prompts(graph, sampler_id, ctx)
        if pos and not positive:
            positive = pos
        if neg and not negative:
            negative = neg
        if positive and negative:
            break
    return positive, negative
