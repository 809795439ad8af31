"""Bounded byte buffers and producer-backed pump streams."""

from .buffer import BoundedBuffer, OverflowPolicy
from .contract import (
    CapacityExceededError,
    DetachedStreamError,
    StreamError,
    StreamInterface,
    UnsupportedOperationError,
)
from .pump import DataProducer, IterableProducer, PumpAdapter, PumpOptions, PumpState
from .utils import copy_to_bytes, copy_to_stream

__all__ = [
    "BoundedBuffer",
    "OverflowPolicy",
    "CapacityExceededError",
    "DetachedStreamError",
    "StreamError",
    "StreamInterface",
    "UnsupportedOperationError",
    "DataProducer",
    "IterableProducer",
    "PumpAdapter",
    "PumpOptions",
    "PumpState",
    "copy_to_bytes",
    "copy_to_stream",
]
