"""
Extraction error hierarchy and helpers for sanitizing error messages before
they reach clients.
"""
from __future__ import annotations

import os
import re
from typing import Any

from .log import get_logger
from .types import ErrorCode

logger = get_logger(__name__)
_DEBUG_MODE = os.getenv("CPR_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")
_WINDOWS_PATH_RE = re.compile(r"[A-Za-z]:\\[^\s]+")
_UNC_PATH_RE = re.compile(r"\\\\[^\s\\]+\\[^\s]+")
_UNIX_PATH_RE = re.compile(r"(?<![A-Za-z0-9:/?&=#%])/(?!/)[^\s#?]+")


class ExtractionError(Exception):
    """Base class for container-level and total extraction failures."""

    code: ErrorCode = ErrorCode.NO_METADATA_FOUND

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context


class UnsupportedMediaKind(ExtractionError):
    """The declared media kind is neither image nor video."""

    code = ErrorCode.UNSUPPORTED_MEDIA_KIND


class InvalidContainer(ExtractionError):
    """The bytes do not carry the expected container signature."""

    code = ErrorCode.INVALID_CONTAINER


class TruncatedContainer(ExtractionError):
    """A chunk header or payload runs past the end of the buffer."""

    code = ErrorCode.TRUNCATED_CONTAINER


class NoMetadataFound(ExtractionError):
    """The container is readable but holds no usable graph metadata."""

    code = ErrorCode.NO_METADATA_FOUND


class MalformedMetadataJson(ExtractionError):
    """A located candidate failed to parse as JSON."""

    code = ErrorCode.MALFORMED_METADATA_JSON


def _mask_paths(value: str) -> str:
    """Mask path-looking substrings to avoid leaking filesystem structure."""
    cleaned = _WINDOWS_PATH_RE.sub("[path]", value)
    cleaned = _UNC_PATH_RE.sub("[path]", cleaned)
    cleaned = _UNIX_PATH_RE.sub("[path]", cleaned)
    return cleaned


def sanitize_error_message(exc: Any, fallback: str) -> str:
    """
    Build a safe error message for clients.

    Args:
        exc: Exception or raw value to sanitize.
        fallback: Fallback message to show when nothing meaningful remains.

    Returns:
        A string suitable for display in the UI layer.
    """
    if not fallback:
        fallback = "An error occurred"

    if exc is None:
        return fallback

    try:
        raw = str(exc)
    except Exception:
        raw = ""

    if not raw:
        return fallback

    sanitized = _mask_paths(raw.replace(os.getcwd(), "[cwd]"))
    sanitized = " ".join(sanitized.splitlines()).strip()

    if _DEBUG_MODE:
        logger.debug("Sanitized error payload: %s", sanitized, exc_info=True)

    if sanitized:
        return f"{fallback}: {sanitized[:200]}"
    return fallback
