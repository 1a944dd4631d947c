# src/proofline/rpc/codec.py

"""Content-Length framing for JSON-RPC over a byte stream.

A frame is ``Content-Length: <n>\\r\\n\\r\\n`` followed by exactly ``n`` bytes
of UTF-8 JSON. Other headers are accepted and ignored.
"""

import asyncio
import json
import logging
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

HEADER_SEPARATOR = b"\r\n\r\n"
CONTENT_LENGTH = "content-length"


class ProtocolError(Exception):
    """A frame could not be parsed."""


def encode_message(message: BaseModel | dict[str, Any]) -> bytes:
    """Serialize ``message`` as compact JSON behind a Content-Length header."""
    if isinstance(message, BaseModel):
        payload = message.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        payload = message
    content = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )
    return f"Content-Length: {len(content)}\r\n\r\n".encode("ascii") + content


def _content_length(header: bytes) -> int:
    for raw_line in header.split(b"\r\n"):
        name, sep, value = raw_line.decode("ascii", errors="replace").partition(":")
        if sep and name.strip().lower() == CONTENT_LENGTH:
            try:
                length = int(value.strip())
            except ValueError:
                raise ProtocolError(f"invalid Content-Length: {value.strip()!r}")
            if length < 0:
                raise ProtocolError(f"negative Content-Length: {length}")
            return length
    raise ProtocolError("missing Content-Length header")


def decode_message(frame: bytes) -> tuple[str, bytes]:
    """Split a frame into its method name and JSON content.

    The method is empty for responses and other messages without one.

    Raises:
        ProtocolError: On a bad header, short content, or content that is
            not a JSON object.
    """
    header, sep, rest = frame.partition(HEADER_SEPARATOR)
    if not sep:
        raise ProtocolError("did not find header separator")

    length = _content_length(header)
    content = rest[:length]
    if len(content) < length:
        raise ProtocolError(f"expected {length} content bytes, got {len(content)}")

    try:
        body = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError(f"invalid JSON content: {exc}")
    if not isinstance(body, dict):
        raise ProtocolError("content is not a JSON object")

    method = body.get("method") or ""
    if not isinstance(method, str):
        raise ProtocolError("method is not a string")
    return method, content


async def read_message(reader: asyncio.StreamReader) -> bytes | None:
    """Read one frame from ``reader``.

    Returns:
        The frame bytes, or None at end of stream.

    Raises:
        ProtocolError: If the header is unusable. The header has been
            consumed, so reading can continue with the next frame.
    """
    try:
        header = await reader.readuntil(HEADER_SEPARATOR)
    except asyncio.IncompleteReadError as exc:
        if exc.partial.strip():
            logger.warning("Stream closed inside a header: %r", exc.partial[:80])
        return None
    except asyncio.LimitOverrunError as exc:
        if not await _discard_header(reader, exc.consumed):
            return None
        raise ProtocolError("header block exceeds the stream buffer limit")

    length = _content_length(header[: -len(HEADER_SEPARATOR)])
    try:
        content = await reader.readexactly(length)
    except asyncio.IncompleteReadError as exc:
        logger.warning(
            "Stream closed after %d of %d content bytes", len(exc.partial), length
        )
        return None
    return header + content


async def _discard_header(reader: asyncio.StreamReader, pending: int) -> bool:
    """Drop an over-long header block up to and including its separator.

    ``pending`` is the number of buffered bytes known not to hold the end of
    the separator. Returns False if the stream ends first.
    """
    while True:
        try:
            await reader.readexactly(pending)
            await reader.readuntil(HEADER_SEPARATOR)
            return True
        except asyncio.LimitOverrunError as exc:
            pending = exc.consumed
        except asyncio.IncompleteReadError:
            return False
