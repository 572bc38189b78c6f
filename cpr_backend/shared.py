"""Backend-facing alias for shared utilities.

Feature modules import from here (``from ...shared import Result``) so they do
not depend on where `cpr_shared` sits relative to the backend package.
"""

from __future__ import annotations

import cpr_shared as _root_shared

Result = _root_shared.Result
ErrorCode = _root_shared.ErrorCode
GraphFormat = _root_shared.GraphFormat
MediaKind = _root_shared.MediaKind
EXTENSIONS = _root_shared.EXTENSIONS
get_logger = _root_shared.get_logger
log_structured = _root_shared.log_structured
request_id_var = _root_shared.request_id_var
classify_file = _root_shared.classify_file
sanitize_error_message = _root_shared.sanitize_error_message
timer = _root_shared.timer

ExtractionError = _root_shared.ExtractionError
UnsupportedMediaKind = _root_shared.UnsupportedMediaKind
InvalidContainer = _root_shared.InvalidContainer
TruncatedContainer = _root_shared.TruncatedContainer
NoMetadataFound = _root_shared.NoMetadataFound
MalformedMetadataJson = _root_shared.MalformedMetadataJson

__all__ = [
    "Result",
    "ErrorCode",
    "GraphFormat",
    "MediaKind",
    "EXTENSIONS",
    "get_logger",
    "log_structured",
    "request_id_var",
    "classify_file",
    "sanitize_error_message",
    "timer",
    "ExtractionError",
    "UnsupportedMediaKind",
    "InvalidContainer",
    "TruncatedContainer",
    "NoMetadataFound",
    "MalformedMetadataJson",
]
