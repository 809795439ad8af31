"""Helpers for draining and copying streams."""

from __future__ import annotations

from .contract import StreamInterface

COPY_CHUNK_SIZE = 8192


def copy_to_bytes(stream: StreamInterface, max_length: int = -1) -> bytes:
    """Read ``stream`` into bytes until EOF, or until ``max_length`` bytes.

    A negative ``max_length`` reads everything. The stream is consumed.
    """

    parts: list[bytes] = []
    if max_length < 0:
        while not stream.eof():
            chunk = stream.read(COPY_CHUNK_SIZE)
            if not chunk:
                break
            parts.append(chunk)
        return b"".join(parts)

    remaining = max_length
    while remaining > 0 and not stream.eof():
        chunk = stream.read(min(remaining, COPY_CHUNK_SIZE))
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def copy_to_stream(
    source: StreamInterface, dest: StreamInterface, max_length: int = -1
) -> int:
    """Copy bytes from ``source`` into ``dest`` and return the count written.

    Errors raised by ``dest.write`` (for example a rejecting buffer reaching
    its high-water mark) propagate after the bytes already written. The
    chunk that failed to write has already been read from ``source`` and
    is lost; it is not put back into either stream.
    """

    written = 0
    while max_length < 0 or written < max_length:
        size = COPY_CHUNK_SIZE
        if max_length >= 0:
            size = min(size, max_length - written)
        chunk = source.read(size)
        if not chunk:
            break
        written += dest.write(chunk)
    return written


__all__ = ["COPY_CHUNK_SIZE", "copy_to_bytes", "copy_to_stream"]
