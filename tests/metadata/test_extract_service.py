from __future__ import annotations

import json

import pytest

from cpr_backend.features.metadata import extract, extract_or_raise, guess_media_kind
from cpr_backend.shared import ErrorCode, InvalidContainer, UnsupportedMediaKind


def test_extract_png_ok(png, fox_graph):
    res = extract(png.build(png.text("prompt", json.dumps(fox_graph))), "image")
    assert res.ok, res.error
    assert res.code == "OK"
    assert res.data.positive_prompt == "a red fox"
    assert res.meta == {"source": "png:prompt", "warnings": []}


def test_extract_mp4_ok_with_mime_kind(mp4, fox_graph):
    res = extract(mp4.build(json.dumps({"prompt": fox_graph}).encode()), "video/mp4")
    assert res.ok, res.error
    assert res.data.negative_prompt == "blurry"
    assert res.data.source == "mp4"


def test_unsupported_kind_is_an_error_result(png):
    res = extract(png.build(), "audio")
    assert not res.ok
    assert res.code == ErrorCode.UNSUPPORTED_MEDIA_KIND.value
    assert res.meta["declared_kind"] == "audio"


def test_invalid_png_is_an_error_result():
    res = extract(b"not a png at all", "image")
    assert not res.ok
    assert res.code == ErrorCode.INVALID_CONTAINER.value
    assert res.error.startswith("Metadata extraction failed")


def test_truncated_png_is_an_error_result(png, fox_graph):
    data = png.build(png.text("prompt", json.dumps(fox_graph)))
    res = extract(data[:40], "image")
    assert res.code == ErrorCode.TRUNCATED_CONTAINER.value
    assert res.meta["offset"] == 33


def test_no_metadata_is_an_error_result(mp4):
    res = extract(mp4.build(), "video")
    assert res.code == ErrorCode.NO_METADATA_FOUND.value
    assert res.data is None


def test_truncated_png_warning_reaches_meta(png, fox_graph):
    data = png.build(png.text("prompt", json.dumps(fox_graph)))
    res = extract(data[:-17], "image")
    assert res.ok
    assert res.meta["warnings"] == [ErrorCode.TRUNCATED_CONTAINER.value]


def test_extract_or_raise_propagates_typed_errors():
    with pytest.raises(UnsupportedMediaKind):
        extract_or_raise(b"", "document")
    with pytest.raises(InvalidContainer):
        extract_or_raise(b"\x00\x00", "image")


def test_extract_forwards_scan_overrides(mp4, fox_graph, ui_workflow):
    data = json.dumps(ui_workflow).encode() + mp4.filler(8000) + json.dumps(fox_graph).encode() + mp4.filler(8000)
    res = extract(data, "video", full_scan_max_bytes=4096, window_bytes=1024)
    assert res.ok
    assert res.data.positive_prompt is None


@pytest.mark.parametrize(
    "filename, mime, expected",
    [
        ("render.png", None, "image"),
        ("clip.MP4", None, "video"),
        ("clip.mov", None, "video"),
        ("upload.bin", "image/png", "image"),
        ("upload.bin", "video/mp4", "video"),
        ("notes.txt", None, "unknown"),
        ("", None, "unknown"),
    ],
)
def test_guess_media_kind(filename, mime, expected):
    assert guess_media_kind(filename, mime) == expected
