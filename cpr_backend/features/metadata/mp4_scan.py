"""
Heuristic text scanner for MP4 containers.

No box parsing: the byte stream is decoded as lossy UTF-8 and searched for
JSON. Small files are scanned wholesale. Large files only get a head and a
tail window, because writers put the metadata either in the moov/udta boxes
near the start or append it near the end; the middle is never scanned.
"""
from __future__ import annotations

from dataclasses import dataclass

from ... import config


@dataclass(frozen=True)
class ScanPlan:
    size: int
    full_scan: bool
    head: tuple[int, int]
    tail: tuple[int, int] | None = None


def plan_scan(size: int, full_scan_max_bytes: int | None = None, window_bytes: int | None = None) -> ScanPlan:
    threshold = config.MP4_FULL_SCAN_MAX_BYTES if full_scan_max_bytes is None else full_scan_max_bytes
    window = config.MP4_WINDOW_BYTES if window_bytes is None else window_bytes
    if size < threshold:
        return ScanPlan(size=size, full_scan=True, head=(0, size))
    head_end = min(size, window)
    tail_start = max(0, size - window)
    return ScanPlan(size=size, full_scan=False, head=(0, head_end), tail=(tail_start, size))


def _decode_lossy(view: memoryview) -> str:
    return str(view, "utf-8", "replace")


def decode_scan_text(
    data: bytes | bytearray | memoryview,
    full_scan_max_bytes: int | None = None,
    window_bytes: int | None = None,
) -> str:
    """Decode the scanned byte ranges; windows are decoded independently and concatenated."""
    view = memoryview(data)
    plan = plan_scan(len(view), full_scan_max_bytes, window_bytes)
    text = _decode_lossy(view[plan.head[0]:plan.head[1]])
    if plan.tail is not None:
        text += _decode_lossy(view[plan.tail[0]:plan.tail[1]])
    return text
