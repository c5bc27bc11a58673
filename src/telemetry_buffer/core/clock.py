"""Time sources used to stamp incoming samples."""

from __future__ import annotations

import time
from typing import Callable, Protocol, Union

from ..errors import ConfigurationError


class Clock(Protocol):
    """Anything with a ``now()`` returning seconds as a float."""

    def now(self) -> float:  # pragma: no cover - protocol
        ...


class SystemClock:
    """Wall-clock seconds since the epoch."""

    def now(self) -> float:
        return time.time()


class MonotonicClock:
    """Monotonic seconds; immune to wall-clock adjustments."""

    def now(self) -> float:
        return time.monotonic()


ClockLike = Union[Clock, Callable[[], float]]

_NAMED_CLOCKS = {
    "system": SystemClock,
    "wall": SystemClock,
    "monotonic": MonotonicClock,
}


def clock_from_name(name: str) -> Clock:
    key = str(name).strip().lower()
    try:
        return _NAMED_CLOCKS[key]()
    except KeyError:
        raise ConfigurationError(f"unknown clock {name!r}") from None


def read_clock(clock: ClockLike) -> float:
    if hasattr(clock, "now"):
        return float(clock.now())  # type: ignore[union-attr]
    return float(clock())  # type: ignore[operator]


__all__ = ["Clock", "ClockLike", "SystemClock", "MonotonicClock", "clock_from_name", "read_clock"]
