"""Node graph classification and prompt resolution."""

from .graph_converter import NodeGraph, classify_graph, unwrap_graph_document
from .leaf_collector import collect_text_leaves
from .parser import GraphResolution, resolve_graph
from .payload_builder import ExtractionResult, build_extraction_result
from .prompt_tracer import resolve_input
from .sampler_tracer import find_sampler_ids, resolve_prompts

__all__ = [
    "NodeGraph",
    "classify_graph",
    "unwrap_graph_document",
    "collect_text_leaves",
    "GraphResolution",
    "resolve_graph",
    "ExtractionResult",
    "build_extraction_result",
    "resolve_input",
    "find_sampler_ids",
    "resolve_prompts",
]
