"""Metadata extraction feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..geninfo.payload_builder import ExtractionResult

__all__ = ["ExtractionResult", "extract", "extract_or_raise", "guess_media_kind", "extract_png", "extract_mp4"]


def __getattr__(name: str):
    if name == "ExtractionResult":
        from ..geninfo.payload_builder import ExtractionResult as _ExtractionResult

        return _ExtractionResult
    if name in ("extract", "extract_or_raise", "guess_media_kind"):
        from . import service

        return getattr(service, name)
    if name in ("extract_png", "extract_mp4"):
        from . import extractors

        return getattr(extractors, name)
    raise AttributeError(name)
