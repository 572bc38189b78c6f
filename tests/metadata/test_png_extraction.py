from __future__ import annotations

import io
import json

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from cpr_backend.features.metadata.extractors import extract_png, read_png_candidates, select_png_candidate
from cpr_backend.features.metadata.parsing_utils import TextCandidate
from cpr_backend.shared import ErrorCode, GraphFormat, NoMetadataFound, TruncatedContainer


def _pillow_png(pnginfo: PngInfo) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (16, 8), "black").save(buf, format="PNG", pnginfo=pnginfo)
    return buf.getvalue()


def test_extract_png_resolves_sampler_prompts(png, fox_graph):
    raw = json.dumps(fox_graph)
    result = extract_png(png.build(png.text("prompt", raw)))

    assert result.positive_prompt == "a red fox"
    assert result.negative_prompt == "blurry"
    assert result.raw_json == json.dumps(fox_graph, indent=2)
    assert result.all_text_leaves == ("a red fox", "blurry")
    assert result.source == "png:prompt"
    assert result.graph_format is GraphFormat.API
    assert result.warnings == ()


def test_prompt_chunk_preferred_over_earlier_workflow_chunk(png, fox_graph, ui_workflow):
    data = png.build(
        png.text("workflow", json.dumps(ui_workflow)),
        png.text("prompt", json.dumps(fox_graph)),
    )
    result = extract_png(data)
    assert result.source == "png:prompt"
    assert result.positive_prompt == "a red fox"


def test_workflow_only_png_yields_ui_graph_without_prompts(png, ui_workflow):
    result = extract_png(png.build(png.text("workflow", json.dumps(ui_workflow))))
    assert result.graph_format is GraphFormat.UI
    assert result.positive_prompt is None
    assert result.negative_prompt is None
    assert result.all_text_leaves == ("a watercolor harbor",)
    assert result.source == "png:workflow"


def test_malformed_json_degrades_to_raw_text(png):
    result = extract_png(png.build(png.text("prompt", "{not json")))
    assert result.raw_json == "{not json"
    assert result.positive_prompt is None
    assert result.all_text_leaves == ()
    assert result.graph_format is None
    assert result.warnings == (ErrorCode.MALFORMED_METADATA_JSON.value,)


def test_png_without_metadata_keywords_raises(png):
    with pytest.raises(NoMetadataFound):
        extract_png(png.build(png.text("parameters", "Steps: 20")))


def test_truncation_after_candidate_keeps_partial_result(png, fox_graph):
    data = png.build(png.text("prompt", json.dumps(fox_graph)))
    result = extract_png(data[: len(data) - 12 - 5])
    assert result.positive_prompt == "a red fox"
    assert result.warnings == (ErrorCode.TRUNCATED_CONTAINER.value,)


def test_truncation_before_any_candidate_raises(png, fox_graph):
    data = png.build(png.text("prompt", json.dumps(fox_graph)))
    with pytest.raises(TruncatedContainer):
        extract_png(data[:40])


def test_read_png_candidates_reports_clean_walk(png):
    candidates, truncated = read_png_candidates(png.build(png.text("prompt", "{}")))
    assert truncated is False
    assert [c.keyword for c in candidates] == ["prompt"]


def test_select_png_candidate_order():
    ui = TextCandidate("workflow", '{"nodes": []}')
    api = TextCandidate("prompt", '{"1": {"class_type": "KSampler"}}')
    plain = TextCandidate("prompt", "not json at all")
    blank = TextCandidate("workflow", "   ")

    assert select_png_candidate([ui, api]) is api
    assert select_png_candidate([plain, ui]) is ui
    assert select_png_candidate([blank, plain]) is plain
    with pytest.raises(NoMetadataFound):
        select_png_candidate([blank])


def test_wrapped_prompt_document_is_unwrapped(png, fox_graph, ui_workflow):
    wrapper = {"prompt": fox_graph, "workflow": ui_workflow}
    result = extract_png(png.build(png.text("prompt", json.dumps(wrapper))))
    assert result.graph_format is GraphFormat.API
    assert result.positive_prompt == "a red fox"
    assert json.loads(result.raw_json) == wrapper


def test_pillow_written_text_chunks(fox_graph, ui_workflow):
    info = PngInfo()
    info.add_text("workflow", json.dumps(ui_workflow))
    info.add_text("prompt", json.dumps(fox_graph))

    result = extract_png(_pillow_png(info))
    assert result.positive_prompt == "a red fox"
    assert result.negative_prompt == "blurry"


def test_pillow_non_latin_prompt_goes_through_itxt(fox_graph):
    fox_graph["5"]["inputs"]["text"] = "un renard roux 🦊 dans la neige"
    info = PngInfo()
    info.add_text("prompt", json.dumps(fox_graph, ensure_ascii=False))

    data = _pillow_png(info)
    assert b"iTXt" in data
    result = extract_png(data)
    assert result.positive_prompt == "un renard roux 🦊 dans la neige"


def test_pillow_compressed_itxt_falls_back_to_readable_chunk(fox_graph, ui_workflow):
    info = PngInfo()
    info.add_itxt("prompt", json.dumps(fox_graph), zip=True)
    info.add_text("workflow", json.dumps(ui_workflow))

    result = extract_png(_pillow_png(info))
    assert result.source == "png:workflow"
    assert result.graph_format is GraphFormat.UI


def test_pillow_compressed_itxt_alone_is_reported_malformed(fox_graph):
    info = PngInfo()
    info.add_itxt("prompt", json.dumps(fox_graph), zip=True)

    result = extract_png(_pillow_png(info))
    assert result.positive_prompt is None
    assert ErrorCode.MALFORMED_METADATA_JSON.value in result.warnings


def test_png_ending_after_header_chunk_has_no_metadata(png):
    data = png.signature + png.chunk(b"IHDR", b"\x00" * 13)
    with pytest.raises(NoMetadataFound):
        extract_png(data)


def test_png_ending_after_text_chunk_is_not_truncated(png, fox_graph):
    data = png.signature + png.chunk(b"IHDR", b"\x00" * 13) + png.text("prompt", json.dumps(fox_graph))
    result = extract_png(data)
    assert result.positive_prompt == "a red fox"
    assert result.warnings == ()


def test_doubly_encoded_prompt_chunk_is_resolved(png, fox_graph):
    data = png.build(png.text("prompt", json.dumps(json.dumps(fox_graph))))
    result = extract_png(data)
    assert result.positive_prompt == "a red fox"
    assert result.graph_format is GraphFormat.API
    assert json.loads(result.raw_json) == fox_graph
