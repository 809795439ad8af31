"""Read-only stream that pumps bytes out of a producer on demand."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from stream_engine.runtime import settings, telemetry

from .buffer import BoundedBuffer, OverflowPolicy
from .contract import (
    DetachedStreamError,
    UnsupportedOperationError,
    ensure_bytes,
    ensure_length,
)
from .utils import copy_to_bytes

Chunk = Union[bytes, bytearray, memoryview]


@runtime_checkable
class DataProducer(Protocol):
    """Yields up to ``length`` bytes per call, or ``None`` once exhausted.

    The requested length is a hint: returning more or fewer bytes is fine.
    ``None``, ``False`` and an empty chunk all mean no more data will ever
    be produced.
    """

    def produce(self, length: int) -> Optional[Chunk]:
        ...


ProducerLike = Union[DataProducer, Callable[[int], Optional[Chunk]]]


class IterableProducer:
    """Producer serving the chunks of an iterable, one per call."""

    def __init__(self, chunks: Iterable[Chunk]) -> None:
        self._chunks: Iterator[Chunk] = iter(chunks)

    def produce(self, length: int) -> Optional[Chunk]:
        return next(self._chunks, None)

    def __call__(self, length: int) -> Optional[Chunk]:
        return self.produce(length)


def _resolve_producer(producer: ProducerLike) -> Callable[[int], Any]:
    produce = getattr(producer, "produce", None)
    if callable(produce):
        return produce
    if callable(producer):
        return producer
    raise TypeError(
        f"producer must be callable or define produce(), got {type(producer).__name__}"
    )


@dataclass(slots=True)
class PumpOptions:
    size: Optional[int] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "PumpOptions":
        return cls(
            size=options.get("size"),
            metadata=dict(options.get("metadata") or {}),
        )


class PumpState(str, Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    DETACHED = "detached"


class PumpAdapter:
    """Present a pull-based producer as a readable, non-seekable stream.

    Each call to the producer receives the number of bytes still needed.
    Bytes it returns beyond that are staged in an internal
    :class:`BoundedBuffer` and served by later reads without calling the
    producer again. Once the producer signals the end (or the adapter is
    closed) it is dropped and never called again.
    """

    def __init__(
        self,
        producer: ProducerLike,
        options: PumpOptions | Mapping[str, Any] | None = None,
        *,
        size: Optional[int] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if options is None:
            options = PumpOptions()
        elif not isinstance(options, PumpOptions):
            options = PumpOptions.from_mapping(options)
        self._producer: Optional[Callable[[int], Any]] = _resolve_producer(producer)
        self._size = size if size is not None else options.size
        self._metadata: Mapping[str, Any] = MappingProxyType(
            dict(metadata if metadata is not None else options.metadata)
        )
        self._position: Optional[int] = 0
        self._buffer = BoundedBuffer(
            overflow=OverflowPolicy.ADVISORY, name="pump-staging", report_pressure=False
        )

    @classmethod
    def from_iterable(
        cls,
        chunks: Iterable[Chunk],
        *,
        size: Optional[int] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "PumpAdapter":
        return cls(IterableProducer(chunks), size=size, metadata=metadata)

    def __bytes__(self) -> bytes:
        return copy_to_bytes(self)

    def __repr__(self) -> str:
        return f"PumpAdapter(state={self.state.value!r}, position={self._position})"

    @property
    def state(self) -> PumpState:
        if self._position is None:
            return PumpState.DETACHED
        if self._producer is None:
            return PumpState.EXHAUSTED
        return PumpState.ACTIVE

    # -- reading ---------------------------------------------------------

    def read(self, length: int) -> bytes:
        length = ensure_length(length)
        if self._position is None:
            return b""

        data = self._buffer.read(length)
        self._position += len(data)
        remaining = length - len(data)
        if remaining <= 0:
            return data

        self._pump(remaining)
        tail = self._buffer.read(remaining)
        self._position += len(tail)
        return data + tail

    def _pump(self, length: int) -> None:
        if self._producer is None:
            return

        requested = length
        with telemetry.span(
            "pump::fill", component="streams", metadata={"requested": requested}
        ):
            calls = 0
            while self._producer is not None and length > 0:
                chunk = self._producer(length)
                calls += 1
                if chunk is not None and chunk is not False:
                    chunk = ensure_bytes(chunk, source="producer output")
                if not chunk:
                    self._producer = None
                    telemetry.record_event(
                        "pump.exhausted", data={"position": self._position}
                    )
                    break
                self._buffer.write(chunk)
                length -= len(chunk)
            telemetry.record_event(
                "pump.fill", data={"requested": requested, "calls": calls}
            )

    def get_contents(self) -> bytes:
        chunk_size = settings.get_settings().contents_chunk_size
        parts = []
        while not self.eof():
            parts.append(self.read(chunk_size))
        return b"".join(parts)

    def eof(self) -> bool:
        return self._producer is None

    def tell(self) -> int:
        if self._position is None:
            raise DetachedStreamError("PumpAdapter")
        return self._position

    def get_size(self) -> Optional[int]:
        return self._size

    # -- lifecycle -------------------------------------------------------

    def close(self) -> None:
        self.detach()

    def detach(self) -> None:
        if self._position is not None:
            telemetry.record_event("pump.detached", data={"position": self._position})
        self._producer = None
        self._position = None
        self._buffer.close()

    # -- capabilities ----------------------------------------------------

    def is_readable(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return False

    def write(self, data: bytes) -> int:
        raise UnsupportedOperationError("write to", "PumpAdapter")

    def is_seekable(self) -> bool:
        return False

    def seek(self, offset: int, whence: int = 0) -> None:
        raise UnsupportedOperationError("seek", "PumpAdapter")

    def rewind(self) -> None:
        self.seek(0)

    def get_metadata(self, key: Optional[str] = None) -> Any:
        if not key:
            return self._metadata
        return self._metadata.get(key)


__all__ = [
    "DataProducer",
    "IterableProducer",
    "PumpAdapter",
    "PumpOptions",
    "PumpState",
]
