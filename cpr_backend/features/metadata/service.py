"""
Metadata extraction service: the single entry point called by the host
application once per ingested file.

The core is pure and stateless; callers may run any number of extractions in
parallel, each on its own buffer.
"""
from __future__ import annotations

import logging
import mimetypes
from typing import Any

from ...shared import (
    ExtractionError,
    MediaKind,
    Result,
    UnsupportedMediaKind,
    classify_file,
    get_logger,
    log_structured,
    sanitize_error_message,
    timer,
)
from ..geninfo.payload_builder import ExtractionResult
from .extractors import extract_mp4, extract_png

logger = get_logger(__name__)

SUPPORTED_KINDS: tuple[str, ...] = ("image", "video")


def _normalize_kind(declared_kind: Any) -> str:
    """Accept bare kinds ("image") as well as MIME types ("video/mp4")."""
    kind = str(declared_kind or "").strip().lower()
    return kind.split("/", 1)[0]


def guess_media_kind(filename: str = "", mime_type: str | None = None) -> MediaKind:
    """Derive the declared kind from a MIME type, falling back to the file extension."""
    mime = (mime_type or "").strip().lower()
    if not mime and filename:
        mime = (mimetypes.guess_type(filename)[0] or "").lower()
    if mime in ("image/png", "image/apng"):
        return "image"
    if mime in ("video/mp4", "video/quicktime", "video/x-m4v"):
        return "video"
    return classify_file(filename or "")


def extract_or_raise(
    data: bytes | bytearray | memoryview,
    declared_kind: str,
    **options: Any,
) -> ExtractionResult:
    """
    Extract provenance metadata, raising `ExtractionError` subclasses.

    `options` are forwarded to the container extractor (scan thresholds,
    minimum leaf length).
    """
    kind = _normalize_kind(declared_kind)
    if kind == "image":
        return extract_png(data, min_leaf_length=options.get("min_leaf_length"))
    if kind == "video":
        return extract_mp4(data, **options)
    raise UnsupportedMediaKind(
        f"Unsupported media kind {declared_kind!r}; expected one of {', '.join(SUPPORTED_KINDS)}",
        declared_kind=str(declared_kind),
    )


def extract(
    data: bytes | bytearray | memoryview,
    declared_kind: str,
    **options: Any,
) -> Result[ExtractionResult]:
    """
    Extract provenance metadata without raising for bad input.

    Returns:
        Result.Ok(ExtractionResult) or Result.Err with an `ErrorCode` value.
    """
    try:
        with timer(f"extract {declared_kind} ({len(data)} bytes)", logger):
            result = extract_or_raise(data, declared_kind, **options)
    except ExtractionError as exc:
        logger.debug("Extraction failed [%s]: %s", exc.code.value, exc)
        return Result.Err(exc.code, sanitize_error_message(exc, "Metadata extraction failed"), **exc.context)

    log_structured(
        logger,
        logging.INFO,
        "metadata extracted",
        source=result.source,
        graph_format=result.graph_format.value if result.graph_format else None,
        has_positive=bool(result.positive_prompt),
        has_negative=bool(result.negative_prompt),
        leaves=len(result.all_text_leaves),
        warnings=list(result.warnings),
    )
    return Result.Ok(result, source=result.source, warnings=list(result.warnings))
