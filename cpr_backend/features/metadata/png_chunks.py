"""
PNG chunk walker.

Only the chunk framing is parsed: ``length (4, big endian) | type (4) |
payload (length) | crc (4)``. CRCs are not validated and pixel data is never
decoded.
"""
from __future__ import annotations

import re
import struct
from collections.abc import Iterator
from dataclasses import dataclass

from ...shared import InvalidContainer, TruncatedContainer
from .parsing_utils import TextCandidate

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
PNG_MAGIC = PNG_SIGNATURE[:4]
TEXT_CHUNK_TYPES: tuple[bytes, ...] = (b"tEXt", b"iTXt")
METADATA_KEYWORDS: tuple[str, ...] = ("prompt", "workflow")

_CHUNK_HEADER = struct.Struct(">I4s")
_CHUNK_OVERHEAD = 12  # length + type + crc
# iTXt carries compression flag/method, language and translated keyword
# between the keyword and the text; they are skipped, not parsed.
_LEADING_CONTROL_RE = re.compile(r"^[\x00-\x1f]+")


@dataclass(frozen=True)
class PngChunk:
    type: bytes
    offset: int
    payload: memoryview


def check_png_signature(data: bytes | bytearray | memoryview) -> None:
    if bytes(memoryview(data)[:4]) != PNG_MAGIC:
        raise InvalidContainer("Invalid PNG signature")


def iter_png_chunks(data: bytes | bytearray | memoryview) -> Iterator[PngChunk]:
    """
    Yield chunks in file order.

    Stops at IEND or when the buffer ends on a chunk boundary. Raises
    `TruncatedContainer` as soon as a header, payload or CRC would run past
    the buffer; chunks yielded before that point remain valid.
    """
    view = memoryview(data)
    check_png_signature(view)
    total = len(view)
    offset = len(PNG_SIGNATURE)

    while offset < total:
        if offset + _CHUNK_HEADER.size > total:
            raise TruncatedContainer("Truncated PNG chunk header", offset=offset)
        length, chunk_type = _CHUNK_HEADER.unpack_from(view, offset)
        start = offset + _CHUNK_HEADER.size
        end = start + length
        if end > total:
            raise TruncatedContainer(
                "PNG chunk payload runs past end of buffer",
                offset=offset,
                chunk=chunk_type.decode("latin-1"),
            )
        yield PngChunk(chunk_type, offset, view[start:end])
        if chunk_type == b"IEND":
            return
        if end + 4 > total:
            raise TruncatedContainer("Truncated PNG chunk CRC", offset=offset)
        offset += _CHUNK_OVERHEAD + length


def _decode_text(raw: bytes, chunk_type: bytes) -> str:
    if chunk_type == b"tEXt":
        # tEXt is Latin-1 by the standard, but many writers put UTF-8 there.
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw.decode("latin-1")
    return raw.decode("utf-8", errors="replace")


def decode_text_chunk(chunk: PngChunk) -> TextCandidate | None:
    """Return the candidate carried by a tEXt/iTXt chunk with a metadata keyword."""
    if chunk.type not in TEXT_CHUNK_TYPES:
        return None
    payload = chunk.payload.tobytes()
    sep = payload.find(b"\x00")
    if sep == -1:
        return None
    keyword = payload[:sep].decode("latin-1")
    if keyword not in METADATA_KEYWORDS:
        return None
    text = _decode_text(payload[sep + 1:], chunk.type)
    text = _LEADING_CONTROL_RE.sub("", text)
    return TextCandidate(keyword=keyword, text=text, offset=chunk.offset)


def iter_text_candidates(data: bytes | bytearray | memoryview) -> Iterator[TextCandidate]:
    for chunk in iter_png_chunks(data):
        candidate = decode_text_chunk(chunk)
        if candidate is not None:
            yield candidate
