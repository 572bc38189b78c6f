"""
Configuration for the ComfyUI provenance reader.

All values are read from the environment once at import time. Extraction
functions accept per-call overrides for each of them.
"""
import os
import logging

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


# MP4 scanning
# Files strictly smaller than this are decoded and scanned wholesale.
MP4_FULL_SCAN_MAX_BYTES = _env_int(50 * MIB, "CPR_MP4_FULL_SCAN_MAX_BYTES", min_value=1024, max_value=4096 * MIB)
# Above the threshold only a head window and a tail window of this size are scanned.
MP4_WINDOW_BYTES = _env_int(15 * MIB, "CPR_MP4_WINDOW_BYTES", min_value=1024, max_value=1024 * MIB)
# Upper bound on how far brace matching walks forward from one anchor.
MAX_BRACE_SCAN_CHARS = _env_int(10 * MIB, "CPR_MAX_BRACE_SCAN_CHARS", min_value=1024, max_value=256 * MIB)

# Graph resolution
MIN_TEXT_LEAF_LENGTH = _env_int(4, "CPR_MIN_TEXT_LEAF_LENGTH", min_value=1, max_value=1024)
MAX_RESOLVE_DEPTH = _env_int(64, "CPR_MAX_RESOLVE_DEPTH", min_value=4, max_value=4096)
# Combined prompts stop growing past this many characters.
MAX_PROMPT_CHARS = _env_int(1 * MIB, "CPR_MAX_PROMPT_CHARS", min_value=1024, max_value=64 * MIB)
