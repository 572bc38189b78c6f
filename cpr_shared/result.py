"""
Result type returned by the extraction entry point, so callers never see a
traceback for a malformed upload.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from .types import ErrorCode

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """
    Outcome of one extraction.

    Usage:
        res = extract(data, "image")
        if res.ok:
            show(res.data.positive_prompt, res.meta["warnings"])
        else:
            report(res.code, res.error)
    """
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: str = "OK"  # OK or an ErrorCode value
    meta: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def Ok(data: T, **meta: Any) -> "Result[T]":
        """Successful result; `meta` carries source and warnings."""
        return Result(ok=True, data=data, code="OK", meta=meta)

    @staticmethod
    def Err(code: ErrorCode | str | Enum, error: str, **meta: Any) -> "Result[T]":
        """Failed result; `meta` carries the error context (offset, chunk, ...)."""
        code_value = code.value if isinstance(code, Enum) else code
        return Result(ok=False, error=error, code=str(code_value), meta=meta)
