"""
Logging utilities with consistent single-line formatting.
"""
import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Final

# Short level markers shown between brackets
LEVEL_TAGS: Final[dict[str, str]] = {
    "DEBUG": "dbg",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "err",
    "CRITICAL": "crit",
}

# Global logger prefix
PREFIX: Final[str] = "ComfyProvenance"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class CorrelationFilter(logging.Filter):
    """Inject `request_id` from `request_id_var` into each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Attach `record.request_id` for correlation; always returns True."""
        record.request_id = request_id_var.get("")
        return True


class PrefixFormatter(logging.Formatter):
    """Formatter that adds the project prefix and a level tag."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single line with a prefix and level tag."""
        tag = LEVEL_TAGS.get(record.levelname, record.levelname.lower())

        # Format: ComfyProvenance [info] features.metadata.service [rid]: message
        rid = str(getattr(record, "request_id", "") or "").strip()
        rid_part = f" [{rid}]" if rid else ""
        log_format = f"{PREFIX} [{tag}] %(name)s{rid_part}: %(message)s"
        formatter = logging.Formatter(log_format)
        return formatter.format(record)


def _ensure_correlation_filter(logger: logging.Logger) -> None:
    if not any(isinstance(f, CorrelationFilter) for f in logger.filters):
        logger.addFilter(CorrelationFilter())


def _short_name(name: str) -> str:
    """`cpr_backend.features.metadata.service` -> `features.metadata.service`."""
    if name.startswith("__main__"):
        return "main"
    parts = name.split(".")
    if "features" in parts:
        return ".".join(parts[parts.index("features"):])
    if len(parts) > 1 and parts[0] in ("cpr_backend", "cpr_shared"):
        return ".".join(parts[1:])
    return name


def get_logger(name: str) -> logging.Logger:
    """
    Return the `cpr.<module>` logger, attaching the prefixed stream handler
    and correlation filter on first use.

    Handled loggers do not propagate, so records are printed once.
    """
    logger = logging.getLogger(f"cpr.{_short_name(name)}")
    _ensure_correlation_filter(logger)

    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setFormatter(PrefixFormatter())
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Emit a structured JSON log entry with contextual fields."""
    payload = {
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "context": context,
    }
    logger.log(level, json.dumps(payload, ensure_ascii=False))
