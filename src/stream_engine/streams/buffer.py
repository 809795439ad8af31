"""FIFO byte buffer with an advisory high-water mark."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from stream_engine.runtime import settings, telemetry

from .contract import (
    CapacityExceededError,
    UnsupportedOperationError,
    ensure_bytes,
    ensure_length,
)


class OverflowPolicy(str, Enum):
    """What ``write`` does once the high-water mark is reached."""

    ADVISORY = "advisory"  # always accept, report pressure via queries
    REJECT = "reject"  # refuse the write with CapacityExceededError


class BoundedBuffer:
    """Byte queue that callers write into and read out of.

    Bytes are appended at the tail by :meth:`write` and consumed from the
    head by :meth:`read`, so reads always return bytes in write order. The
    high-water mark is the preferred maximum size; with the default
    ``ADVISORY`` policy writes keep succeeding past it and
    :meth:`is_over_high_water_mark` tells writers to slow down.
    """

    def __init__(
        self,
        high_water_mark: Optional[int] = None,
        *,
        overflow: OverflowPolicy | str | None = None,
        name: str = "buffer",
        report_pressure: bool = True,
    ) -> None:
        active = settings.get_settings()
        if high_water_mark is None:
            high_water_mark = active.default_high_water_mark
        if isinstance(high_water_mark, bool) or not isinstance(high_water_mark, int):
            raise TypeError("high_water_mark must be an int")
        if high_water_mark <= 0:
            raise ValueError(f"high_water_mark must be positive, got {high_water_mark}")
        self.name = name
        self._report_pressure = report_pressure
        self._hwm = high_water_mark
        self._overflow = OverflowPolicy(overflow or active.default_overflow)
        self._contents = bytearray()

    @property
    def high_water_mark(self) -> int:
        return self._hwm

    @property
    def overflow(self) -> OverflowPolicy:
        return self._overflow

    def __bytes__(self) -> bytes:
        return self.get_contents()

    def __len__(self) -> int:
        return len(self._contents)

    def __repr__(self) -> str:
        return (
            f"BoundedBuffer(name={self.name!r}, size={len(self._contents)}, "
            f"high_water_mark={self._hwm}, overflow={self._overflow.value!r})"
        )

    # -- writing ---------------------------------------------------------

    def write(self, data: bytes) -> int:
        chunk = ensure_bytes(data, source="write data")
        before = len(self._contents)
        after = before + len(chunk)

        if after >= self._hwm and self._overflow is OverflowPolicy.REJECT:
            telemetry.record_event(
                "buffer.rejected",
                level="warning",
                data={"buffer": self.name, "size": after, "hwm": self._hwm},
            )
            raise CapacityExceededError(after, self._hwm)

        self._contents += chunk
        if self._report_pressure and before < self._hwm <= after:
            telemetry.record_event(
                "buffer.high_water",
                level="warning",
                data={"buffer": self.name, "size": after, "hwm": self._hwm},
            )
        return len(chunk)

    def is_over_high_water_mark(self) -> bool:
        return len(self._contents) >= self._hwm

    def remaining_capacity(self) -> int:
        """Bytes that can be added before the high-water mark is reached."""

        return max(self._hwm - len(self._contents), 0)

    # -- reading ---------------------------------------------------------

    def read(self, length: int) -> bytes:
        length = ensure_length(length)
        if length >= len(self._contents):
            return self.drain_all()
        result = bytes(self._contents[:length])
        del self._contents[:length]
        return result

    def drain_all(self) -> bytes:
        result = bytes(self._contents)
        self._contents.clear()
        return result

    def get_contents(self) -> bytes:
        return self.drain_all()

    def size(self) -> int:
        return len(self._contents)

    def get_size(self) -> int:
        return len(self._contents)

    def is_empty(self) -> bool:
        return not self._contents

    def eof(self) -> bool:
        return self.is_empty()

    # -- lifecycle -------------------------------------------------------

    def close(self) -> None:
        self._contents.clear()

    def detach(self) -> None:
        self.close()

    # -- capabilities ----------------------------------------------------

    def is_readable(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return True

    def is_seekable(self) -> bool:
        return False

    def seek(self, offset: int, whence: int = 0) -> None:
        raise UnsupportedOperationError("seek", "BoundedBuffer")

    def rewind(self) -> None:
        self.seek(0)

    def tell(self) -> int:
        raise UnsupportedOperationError("determine the position of", "BoundedBuffer")

    def get_metadata(self, key: Optional[str] = None) -> Any:
        if key is None:
            metadata: Dict[str, Any] = {"hwm": self._hwm}
            return metadata
        if key == "hwm":
            return self._hwm
        return None


__all__ = ["BoundedBuffer", "OverflowPolicy"]
