import pytest

from telemetry_buffer.core.buffer_manager import BufferManager
from telemetry_buffer.core.clock import MonotonicClock, SystemClock, clock_from_name, read_clock
from telemetry_buffer.errors import ConfigurationError


def test_named_clocks() -> None:
    assert isinstance(clock_from_name("system"), SystemClock)
    assert isinstance(clock_from_name(" Monotonic "), MonotonicClock)
    with pytest.raises(ConfigurationError):
        clock_from_name("sundial")


def test_read_clock_accepts_plain_callable() -> None:
    assert read_clock(lambda: 3.5) == 3.5
    first = read_clock(MonotonicClock())
    assert read_clock(MonotonicClock()) >= first


def test_manager_stamps_with_callable_clock() -> None:
    ticks = iter([1.0, 2.0])
    manager = BufferManager("run.mat", [("x", 1, 1)], 2, clock=lambda: next(ticks))
    manager.push([0.5], "x")
    manager.push([0.7], "x")

    assert [r.timestamp for r in manager.snapshot("x")] == [1.0, 2.0]
