"""Stream capability protocol and the errors streams raise."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


class StreamError(RuntimeError):
    """Base class for failures raised by stream operations."""


class UnsupportedOperationError(StreamError):
    """Raised when a stream structurally cannot perform an operation."""

    def __init__(self, operation: str, stream: str) -> None:
        super().__init__(f"Cannot {operation} a {stream}")
        self.operation = operation
        self.stream = stream


class CapacityExceededError(StreamError):
    """Raised when a rejecting buffer would reach its high-water mark."""

    def __init__(self, size: int, high_water_mark: int) -> None:
        super().__init__(
            f"Buffer would hold {size} bytes, high-water mark is {high_water_mark}"
        )
        self.size = size
        self.high_water_mark = high_water_mark


class DetachedStreamError(StreamError):
    """Raised when querying the position of a closed or detached stream."""

    def __init__(self, stream: str) -> None:
        super().__init__(f"{stream} is detached")
        self.stream = stream


@runtime_checkable
class StreamInterface(Protocol):
    """Capability set shared by every stream in this package.

    ``read`` may return fewer bytes than requested; callers check ``eof()``
    instead of assuming a full-length read.
    """

    def read(self, length: int) -> bytes:
        ...

    def write(self, data: bytes) -> int:
        ...

    def eof(self) -> bool:
        ...

    def tell(self) -> int:
        ...

    def seek(self, offset: int, whence: int = 0) -> None:
        ...

    def rewind(self) -> None:
        ...

    def is_seekable(self) -> bool:
        ...

    def is_readable(self) -> bool:
        ...

    def is_writable(self) -> bool:
        ...

    def get_size(self) -> Optional[int]:
        ...

    def get_contents(self) -> bytes:
        """Drain the stream completely. Destructive."""
        ...

    def close(self) -> None:
        ...

    def detach(self) -> None:
        ...

    def get_metadata(self, key: Optional[str] = None) -> Any:
        ...


def ensure_length(length: int) -> int:
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f"read length must be an int, got {type(length).__name__}")
    if length < 0:
        raise ValueError(f"read length must be non-negative, got {length}")
    return length


def ensure_bytes(data: Any, *, source: str) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"{source} must be bytes-like, got {type(data).__name__}")


__all__ = [
    "CapacityExceededError",
    "DetachedStreamError",
    "StreamError",
    "StreamInterface",
    "UnsupportedOperationError",
    "ensure_bytes",
    "ensure_length",
]
