"""Result assembly: shape resolved values into the caller-facing contract."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ...shared import GraphFormat
from .parser import GraphResolution

_UNPARSED = object()


@dataclass(frozen=True)
class ExtractionResult:
    raw_json: str
    positive_prompt: str | None = None
    negative_prompt: str | None = None
    all_text_leaves: tuple[str, ...] = ()
    source: str = ""
    graph_format: GraphFormat | None = None
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """camelCase payload consumed by the UI layer."""
        return {
            "rawJson": self.raw_json,
            "positivePrompt": self.positive_prompt,
            "negativePrompt": self.negative_prompt,
            "summary": list(self.all_text_leaves),
            "source": self.source,
            "graphFormat": self.graph_format.value if self.graph_format else None,
            "warnings": list(self.warnings),
        }


def format_raw_json(raw_text: str, parsed: Any = _UNPARSED) -> str:
    """Pretty-print JSON source text; text that does not parse is kept verbatim."""
    if parsed is _UNPARSED:
        try:
            parsed = json.loads(raw_text)
        except ValueError:
            return raw_text
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def build_extraction_result(
    raw_text: str,
    resolution: GraphResolution | None,
    *,
    parsed: Any = _UNPARSED,
    source: str = "",
    warnings: tuple[str, ...] = (),
) -> ExtractionResult:
    resolution = resolution or GraphResolution()
    return ExtractionResult(
        raw_json=format_raw_json(raw_text, parsed),
        positive_prompt=resolution.positive or None,
        negative_prompt=resolution.negative or None,
        all_text_leaves=resolution.text_leaves,
        source=source,
        graph_format=resolution.graph_format,
        warnings=warnings,
    )
