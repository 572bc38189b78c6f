"""Shared utilities for the ComfyUI provenance reader."""
from .errors import (
    ExtractionError,
    InvalidContainer,
    MalformedMetadataJson,
    NoMetadataFound,
    TruncatedContainer,
    UnsupportedMediaKind,
    sanitize_error_message,
)
from .log import get_logger, log_structured, request_id_var
from .result import Result
from .time import timer
from .types import EXTENSIONS, ErrorCode, GraphFormat, MediaKind, classify_file

__all__ = [
    "Result",
    "get_logger",
    "log_structured",
    "request_id_var",
    "timer",
    "MediaKind",
    "GraphFormat",
    "ErrorCode",
    "EXTENSIONS",
    "classify_file",
    "sanitize_error_message",
    "ExtractionError",
    "UnsupportedMediaKind",
    "InvalidContainer",
    "TruncatedContainer",
    "NoMetadataFound",
    "MalformedMetadataJson",
]
