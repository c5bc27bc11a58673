import pytest

from telemetry_buffer.core.ringbuffer import RingBuffer


def test_ring_buffer_requires_positive_capacity() -> None:
    with pytest.raises(ValueError):
        RingBuffer(0)


def test_ring_buffer_overwrites_oldest_when_full() -> None:
    buf: RingBuffer[int] = RingBuffer(3)
    for value in range(3):
        buf.append(value)
    assert buf.full()

    buf.append(3)

    assert len(buf) == 3
    assert list(buf) == [1, 2, 3]


def test_ring_buffer_clear_keeps_capacity() -> None:
    buf: RingBuffer[int] = RingBuffer(2)
    buf.append(1)
    buf.append(2)
    buf.clear()

    assert len(buf) == 0
    assert list(buf) == []
    assert not buf.full()
    assert buf.capacity == 2
