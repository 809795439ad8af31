import pytest

from stream_engine import (
    BoundedBuffer,
    CapacityExceededError,
    PumpAdapter,
    copy_to_bytes,
    copy_to_stream,
)


def make_pump(*chunks: bytes) -> PumpAdapter:
    return PumpAdapter.from_iterable(chunks)


def test_copy_to_bytes_reads_until_eof() -> None:
    stream = make_pump(b"a" * 10000, b"b" * 5)

    assert copy_to_bytes(stream) == b"a" * 10000 + b"b" * 5
    assert stream.eof()


def test_copy_to_bytes_respects_max_length() -> None:
    stream = make_pump(b"abcdef", b"ghij")

    assert copy_to_bytes(stream, 7) == b"abcdefg"
    assert stream.tell() == 7
    assert copy_to_bytes(stream) == b"hij"


def test_copy_to_bytes_from_buffer() -> None:
    buffer = BoundedBuffer()
    buffer.write(b"buffered")

    assert copy_to_bytes(buffer, 3) == b"buf"
    assert copy_to_bytes(buffer) == b"fered"


def test_copy_to_stream_pumps_into_buffer() -> None:
    source = make_pump(b"x" * 20000)
    dest = BoundedBuffer(1024)

    assert copy_to_stream(source, dest) == 20000
    assert dest.is_over_high_water_mark()
    assert dest.drain_all() == b"x" * 20000


def test_copy_to_stream_with_limit() -> None:
    source = make_pump(b"0123456789")
    dest = BoundedBuffer()

    assert copy_to_stream(source, dest, 4) == 4
    assert dest.read(10) == b"0123"
    assert source.read(10) == b"456789"


def test_copy_to_stream_surfaces_capacity_errors() -> None:
    source = make_pump(b"12345", b"67890")
    dest = BoundedBuffer(8, overflow="reject")

    with pytest.raises(CapacityExceededError):
        copy_to_stream(source, dest)

    # the rejected chunk was consumed from the source and never written
    assert dest.is_empty()
    assert source.eof()
    assert source.read(10) == b""
