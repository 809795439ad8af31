"""In-memory byte streams: a bounded push buffer and a pull-based pump."""

from .streams import (
    BoundedBuffer,
    CapacityExceededError,
    DataProducer,
    DetachedStreamError,
    IterableProducer,
    OverflowPolicy,
    PumpAdapter,
    PumpOptions,
    PumpState,
    StreamError,
    StreamInterface,
    UnsupportedOperationError,
    copy_to_bytes,
    copy_to_stream,
)

__all__ = [
    "BoundedBuffer",
    "CapacityExceededError",
    "DataProducer",
    "DetachedStreamError",
    "IterableProducer",
    "OverflowPolicy",
    "PumpAdapter",
    "PumpOptions",
    "PumpState",
    "StreamError",
    "StreamInterface",
    "UnsupportedOperationError",
    "copy_to_bytes",
    "copy_to_stream",
]

__version__ = "0.1.0"
