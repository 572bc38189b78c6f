"""
Performance measurement helpers.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager


@contextmanager
def timer(label: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """
    Context manager for timing operations.

    Usage:
        with timer("mp4 scan", logger):
            decode_scan_text(data)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        msg = f"{label} took {elapsed:.3f}s"
        if logger:
            logger.debug(msg)
        else:
            print(msg)
