import struct
import sys
import zlib
from pathlib import Path
from types import SimpleNamespace

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def make_chunk(chunk_type: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + chunk_type + payload + struct.pack(">I", crc)


def text_chunk(keyword: str, text: str, encoding: str = "utf-8") -> bytes:
    return make_chunk(b"tEXt", keyword.encode("latin-1") + b"\x00" + text.encode(encoding))


def itxt_chunk(keyword: str, text: str, compressed: bool = False) -> bytes:
    body = text.encode("utf-8")
    if compressed:
        body = zlib.compress(body)
    header = bytes([1 if compressed else 0, 0]) + b"\x00" + b"\x00"
    return make_chunk(b"iTXt", keyword.encode("latin-1") + b"\x00" + header + body)


def make_png(*chunks: bytes) -> bytes:
    ihdr = make_chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0))
    idat = make_chunk(b"IDAT", zlib.compress(b"\x00\x00\x00\x00"))
    iend = make_chunk(b"IEND", b"")
    return PNG_SIGNATURE + ihdr + b"".join(chunks) + idat + iend


# Filler for synthetic MP4 buffers; must never contain brace bytes.
MP4_HEADER = b"\x00\x00\x00\x20ftypisom\x00\x00\x02\x00isomiso2avc1mp41"
BINARY_FILLER = b"\x00\x01\x02\xff\xfe\x80mdat"


def filler(size: int) -> bytes:
    reps = size // len(BINARY_FILLER) + 1
    return (BINARY_FILLER * reps)[:size]


def make_mp4(*payloads: bytes) -> bytes:
    return MP4_HEADER + filler(256) + b"".join(payloads) + filler(256)


@pytest.fixture
def png():
    return SimpleNamespace(
        chunk=make_chunk,
        text=text_chunk,
        itxt=itxt_chunk,
        build=make_png,
        signature=PNG_SIGNATURE,
    )


@pytest.fixture
def mp4():
    return SimpleNamespace(build=make_mp4, filler=filler, header=MP4_HEADER)


@pytest.fixture
def fox_graph():
    """Minimal API graph: one sampler fed by two text encoders."""
    return {
        "3": {"class_type": "KSampler", "inputs": {"positive": ["5", 0], "negative": ["6", 0]}},
        "5": {"class_type": "CLIPTextEncode", "inputs": {"text": "a red fox"}},
        "6": {"class_type": "CLIPTextEncode", "inputs": {"text": "blurry"}},
    }


@pytest.fixture
def ui_workflow():
    return {
        "last_node_id": 2,
        "last_link_id": 0,
        "nodes": [
            {"id": 1, "type": "CLIPTextEncode", "inputs": [], "widgets_values": ["a watercolor harbor"]},
            {"id": 2, "type": "CheckpointLoaderSimple", "widgets_values": ["sdxl_base.safetensors"]},
        ],
        "links": [],
        "version": 0.4,
    }
