import numpy as np
import pytest

from telemetry_buffer.core.channel_buffer import ChannelBuffer
from telemetry_buffer.core.models import OverflowPolicy, Record
from telemetry_buffer.errors import BufferOverflow


def _record(ts: float, *values: float) -> Record:
    return Record.create(ts, list(values))


def test_full_after_window_size_records() -> None:
    buf = ChannelBuffer("pos", capacity=2)
    buf.push(_record(0.0, 1.0))
    assert not buf.full()
    buf.push(_record(0.1, 2.0))

    assert buf.full()
    assert buf.size() == 2
    assert [r.timestamp for r in buf] == [0.0, 0.1]


def test_iteration_is_restartable_and_ordered() -> None:
    buf = ChannelBuffer("pos", capacity=3)
    for i in range(3):
        buf.push(_record(float(i), float(i)))

    first = [r.timestamp for r in buf]
    second = [r.timestamp for r in buf]
    assert first == second == [0.0, 1.0, 2.0]


def test_evict_oldest_keeps_latest_window() -> None:
    buf = ChannelBuffer("pos", capacity=2)
    for i in range(5):
        buf.push(_record(float(i), float(i)))

    assert buf.size() == 2
    assert [r.timestamp for r in buf.snapshot()] == [3.0, 4.0]
    assert buf.evicted == 3


def test_reject_policy_raises_and_leaves_buffer_unchanged() -> None:
    buf = ChannelBuffer("pos", capacity=1, overflow=OverflowPolicy.REJECT)
    buf.push(_record(0.0, 1.0))

    with pytest.raises(BufferOverflow):
        buf.push(_record(1.0, 2.0))

    assert [r.timestamp for r in buf] == [0.0]


def test_clear_restores_empty_state() -> None:
    buf = ChannelBuffer("pos", capacity=2)
    buf.push(_record(0.0, 1.0))
    buf.push(_record(0.1, 1.0))
    buf.clear()

    assert buf.size() == 0
    assert not buf.full()
    assert buf.capacity == 2


def test_record_datum_is_read_only_copy() -> None:
    source = np.array([1.0, 2.0, 3.0])
    record = Record.create(1.0, source)
    source[0] = 99.0

    assert record.datum[0] == 1.0
    with pytest.raises(ValueError):
        record.datum[0] = 5.0
