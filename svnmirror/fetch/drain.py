"""Bounded draining of response bodies.

A drain always consumes the stream to its end and closes it, so redirect
and error bodies never hold a connection with unread data.
"""

from collections.abc import Iterator
from typing import BinaryIO

import httpx
import structlog

from svnmirror.fetch.constants import DEFAULT_CHUNK_SIZE, DISCARD


logger = structlog.get_logger()

Drainable = httpx.Response | BinaryIO


def _iter_chunks(stream: Drainable, chunk_size: int) -> Iterator[bytes]:
    if isinstance(stream, httpx.Response):
        yield from stream.iter_bytes(chunk_size=chunk_size)
        return
    while chunk := stream.read(chunk_size):
        yield chunk


def drain(
    stream: Drainable | None,
    size: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes | None:
    """Read a stream to its end and close it.

    With ``size >= 0`` a zero-filled buffer of exactly ``size`` bytes is
    returned holding the front of the stream: a short stream leaves the
    zero fill in place, and anything past ``size`` is read and dropped.
    With ``size == DISCARD`` everything is read and ``None`` is returned.

    Read errors are logged and swallowed; whatever was copied so far is
    returned.

    Args:
        stream: Streamed response or binary file object, possibly None.
        size: Expected byte count, or ``DISCARD`` (-1).
        chunk_size: Read granularity.

    Returns:
        The sized buffer, or None when discarding.
    """
    buffer = bytearray(size) if size >= 0 else None
    if stream is None:
        return bytes(buffer) if buffer is not None else None

    offset = 0
    try:
        for chunk in _iter_chunks(stream, chunk_size):
            if buffer is not None and offset < size:
                take = min(size - offset, len(chunk))
                buffer[offset : offset + take] = chunk[:take]
                offset += take
    except (OSError, httpx.HTTPError, httpx.StreamError) as e:
        logger.warning("drain_read_failed", error=str(e), bytes_kept=offset)
    finally:
        _close_quietly(stream)

    return bytes(buffer) if buffer is not None else None


def drain_response(response: httpx.Response | None) -> None:
    """Read and discard a response body, then close it."""
    drain(response, DISCARD)


def _close_quietly(stream: Drainable) -> None:
    try:
        stream.close()
    except (OSError, httpx.HTTPError) as e:
        logger.debug("drain_close_failed", error=str(e))
