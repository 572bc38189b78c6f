"""Entry point of the graph resolver: classify, trace samplers, collect leaves."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...shared import GraphFormat, get_logger
from .graph_converter import classify_graph
from .leaf_collector import collect_text_leaves
from .sampler_tracer import find_sampler_ids, resolve_prompts

logger = get_logger(__name__)


@dataclass(frozen=True)
class GraphResolution:
    positive: str | None = None
    negative: str | None = None
    text_leaves: tuple[str, ...] = ()
    graph_format: GraphFormat | None = None

    @property
    def has_prompt(self) -> bool:
        return bool(self.positive or self.negative)


def resolve_graph(value: Any, min_leaf_length: int | None = None) -> GraphResolution:
    """
    Resolve positive/negative prompts and the text leaf bag of a parsed document.

    Never raises: graphs come from an open-ended universe of custom nodes, so
    anything unexpected degrades to an empty resolution.
    """
    try:
        graph = classify_graph(value)
        if graph is None:
            return GraphResolution()

        positive, negative = resolve_prompts(graph)
        leaves = collect_text_leaves(graph, min_leaf_length)
        logger.debug(
            "Resolved %s graph: nodes=%d samplers=%d positive=%s negative=%s leaves=%d",
            graph.format.value,
            len(graph),
            len(find_sampler_ids(graph)),
            bool(positive),
            bool(negative),
            len(leaves),
        )
        return GraphResolution(positive, negative, leaves, graph.format)
    except Exception as exc:
        logger.debug("Graph resolution failed: %s", exc, exc_info=True)
        return GraphResolution()
