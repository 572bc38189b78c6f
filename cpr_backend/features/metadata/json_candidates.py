"""
Keyword-anchored brace matching over scanned container text.

Braces are counted naively (string literals are not tracked), so a blob is
only a candidate; callers still parse it and apply the plausibility gate.
"""
from __future__ import annotations

import re
from collections.abc import Iterator

from ... import config
from ...shared import get_logger
from .parsing_utils import TextCandidate

logger = get_logger(__name__)

ANCHOR_KEYS: tuple[str, ...] = (
    "nodes",
    "extra_data",
    "prompt",
    "workflow",
    "client_id",
    "extra_pnginfo",
    "version",
    "last_node_id",
)
BARE_GRAPH_KEYWORD = "graph"

_ANCHOR_RE = re.compile(
    r'\{\s*"(?P<key>' + "|".join(ANCHOR_KEYS) + r')"\s*:'
    r'|\{\s*"\d+(?::\d+)*"\s*:\s*\{\s*"(?:inputs|class_type)"\s*:'
)
_BRACE_RE = re.compile(r"[{}]")


def find_anchors(text: str) -> list[tuple[int, str]]:
    """Offsets (and anchor keyword) of every keyword-anchored object start."""
    return [(m.start(), m.group("key") or BARE_GRAPH_KEYWORD) for m in _ANCHOR_RE.finditer(text)]


def match_braces(text: str, start: int, max_scan_chars: int | None = None) -> int | None:
    """
    Return the end offset (exclusive) of the object opening at `start`, or
    None if depth does not return to zero within the scan bound.
    """
    limit = config.MAX_BRACE_SCAN_CHARS if max_scan_chars is None else max_scan_chars
    end_pos = min(len(text), start + limit)
    depth = 0
    opened = False
    for m in _BRACE_RE.finditer(text, start, end_pos):
        if m.group() == "{":
            depth += 1
            opened = True
        elif opened:
            depth -= 1
            if depth == 0:
                return m.end()
    return None


def iter_json_candidates(text: str, max_scan_chars: int | None = None) -> Iterator[TextCandidate]:
    for offset, keyword in find_anchors(text):
        end = match_braces(text, offset, max_scan_chars)
        if end is None:
            logger.debug("Unbalanced candidate at offset %d (%s), skipped", offset, keyword)
            continue
        yield TextCandidate(keyword=keyword, text=text[offset:end], offset=offset)
