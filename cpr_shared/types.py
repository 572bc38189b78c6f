"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final, Literal

# Media kinds accepted by the extraction entry point
MediaKind = Literal["image", "video", "unknown"]


class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Caller errors
    UNSUPPORTED_MEDIA_KIND = "UNSUPPORTED_MEDIA_KIND"

    # Container level
    INVALID_CONTAINER = "INVALID_CONTAINER"
    TRUNCATED_CONTAINER = "TRUNCATED_CONTAINER"

    # Metadata level
    NO_METADATA_FOUND = "NO_METADATA_FOUND"
    MALFORMED_METADATA_JSON = "MALFORMED_METADATA_JSON"


class GraphFormat(str, Enum):
    """Serialization flavour of an embedded node graph."""

    API = "api"  # flat id -> {class_type, inputs}
    UI = "ui"    # {nodes: [...], links: [...]}


# File extensions by media kind
EXTENSIONS: Final[dict[MediaKind, set[str]]] = {
    "image": {".png"},
    "video": {".mp4", ".m4v", ".mov"},
    "unknown": set(),
}


def classify_file(filename: str) -> MediaKind:
    """
    Classify file by extension.

    Args:
        filename: File name or path

    Returns:
        Media kind (image, video, unknown)
    """
    ext = os.path.splitext(filename)[1].lower()

    for kind, exts in EXTENSIONS.items():
        if ext in exts:
            return kind

    return "unknown"
