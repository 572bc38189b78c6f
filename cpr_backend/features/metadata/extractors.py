"""
Per-container metadata extractors.

Both return an `ExtractionResult` or raise an `ExtractionError` subclass; the
Result-returning facade lives in `service.py`.
"""
from __future__ import annotations

from typing import Any

from ...shared import ErrorCode, GraphFormat, MalformedMetadataJson, NoMetadataFound, TruncatedContainer, get_logger
from ..geninfo.parser import GraphResolution, resolve_graph
from ..geninfo.payload_builder import ExtractionResult, build_extraction_result
from .json_candidates import iter_json_candidates
from .mp4_scan import decode_scan_text
from .parsing_utils import (
    TextCandidate,
    is_plausible_metadata,
    looks_like_api_graph,
    parse_json_text,
    try_parse_json_object,
)
from .png_chunks import iter_text_candidates

logger = get_logger(__name__)


# -- PNG ---------------------------------------------------------------------

def read_png_candidates(data: bytes | bytearray | memoryview) -> tuple[list[TextCandidate], bool]:
    """
    Collect `prompt`/`workflow` text chunks in file order.

    A truncated chunk walk keeps what was read before the break; it only
    fails when nothing was found.
    """
    candidates: list[TextCandidate] = []
    try:
        for candidate in iter_text_candidates(data):
            candidates.append(candidate)
    except TruncatedContainer as exc:
        if not candidates:
            raise
        logger.debug("PNG chunk walk truncated after %d candidate(s): %s", len(candidates), exc)
        return candidates, True
    return candidates, False


def select_png_candidate(candidates: list[TextCandidate]) -> TextCandidate:
    """
    Prefer the API execution graph (explicit links), then anything that looks
    like a JSON object, then any non-empty text.
    """
    for candidate in candidates:
        if looks_like_api_graph(try_parse_json_object(candidate.text)):
            return candidate
    for candidate in candidates:
        if candidate.text.strip().startswith("{"):
            return candidate
    for candidate in candidates:
        if candidate.text.strip():
            return candidate
    raise NoMetadataFound("No ComfyUI metadata found in PNG chunks")


def extract_png(data: bytes | bytearray | memoryview, min_leaf_length: int | None = None) -> ExtractionResult:
    candidates, truncated = read_png_candidates(data)
    if not candidates:
        raise NoMetadataFound("No ComfyUI metadata found in PNG chunks")

    chosen = select_png_candidate(candidates)
    source = f"png:{chosen.keyword}"
    warnings: tuple[str, ...] = (ErrorCode.TRUNCATED_CONTAINER.value,) if truncated else ()
    raw_text = chosen.text.strip()

    try:
        parsed = parse_json_text(raw_text)
    except MalformedMetadataJson as exc:
        # One authoritative slot per keyword: raw text beats a hard failure.
        logger.debug("PNG %s chunk is not valid JSON: %s", chosen.keyword, exc)
        warnings += (ErrorCode.MALFORMED_METADATA_JSON.value,)
        return build_extraction_result(raw_text, None, source=source, warnings=warnings)

    resolution = resolve_graph(parsed, min_leaf_length)
    return build_extraction_result(raw_text, resolution, parsed=parsed, source=source, warnings=warnings)


# -- MP4 ---------------------------------------------------------------------

def extract_mp4(
    data: bytes | bytearray | memoryview,
    full_scan_max_bytes: int | None = None,
    window_bytes: int | None = None,
    max_scan_chars: int | None = None,
    min_leaf_length: int | None = None,
) -> ExtractionResult:
    """
    Return the best brace-matched graph: an API graph with a resolved prompt
    wins immediately, else the first API graph, else the first UI workflow.
    """
    text = decode_scan_text(data, full_scan_max_bytes, window_bytes)

    fallback_api: tuple[TextCandidate, Any, GraphResolution] | None = None
    fallback_other: tuple[TextCandidate, Any, GraphResolution] | None = None
    tried = 0

    for candidate in iter_json_candidates(text, max_scan_chars):
        tried += 1
        parsed = try_parse_json_object(candidate.text)
        if parsed is None or not is_plausible_metadata(parsed):
            continue
        resolution = resolve_graph(parsed, min_leaf_length)
        if resolution.graph_format is GraphFormat.API:
            if resolution.has_prompt:
                return build_extraction_result(candidate.text, resolution, parsed=parsed, source="mp4")
            if fallback_api is None:
                fallback_api = (candidate, parsed, resolution)
        elif fallback_other is None:
            fallback_other = (candidate, parsed, resolution)

    chosen = fallback_api or fallback_other
    if chosen is None:
        raise NoMetadataFound("Could not find recognizable ComfyUI metadata in MP4", candidates=tried)
    candidate, parsed, resolution = chosen
    return build_extraction_result(candidate.text, resolution, parsed=parsed, source="mp4")
