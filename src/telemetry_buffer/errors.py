"""Exception hierarchy for buffer configuration, ingest, and persistence."""

from __future__ import annotations


class TelemetryBufferError(Exception):
    """Base class for every error raised by :mod:`telemetry_buffer`."""


class ConfigurationError(TelemetryBufferError, ValueError):
    """Invalid construction arguments (no channels, empty filename, duplicates...)."""


class UnknownChannel(TelemetryBufferError, KeyError):
    """A push or lookup referenced a channel that is not registered."""

    def __init__(self, channel: object) -> None:
        super().__init__(channel)
        self.channel = channel

    def __str__(self) -> str:
        return f"unknown channel {self.channel!r}"


class DimensionMismatch(TelemetryBufferError, ValueError):
    """A sample's length does not match ``rows * cols`` of its channel."""

    def __init__(
        self,
        channel: str,
        expected: int,
        actual: int,
        shape: tuple[int, ...] | None = None,
    ) -> None:
        if shape is None:
            message = f"channel {channel!r} expects {expected} values per sample, got {actual}"
        else:
            message = f"channel {channel!r} cannot take a sample of shape {tuple(shape)}"
        super().__init__(message)
        self.channel = channel
        self.expected = expected
        self.actual = actual
        self.shape = shape


class BufferOverflow(TelemetryBufferError):
    """A full channel buffer refused a new record (reject overflow policy)."""

    def __init__(self, channel: str, capacity: int) -> None:
        super().__init__(
            f"channel {channel!r} already holds {capacity} samples; flush before pushing more"
        )
        self.channel = channel
        self.capacity = capacity


class WriteFailure(TelemetryBufferError, OSError):
    """The structured-file writer could not persist a flush."""


class ManagerClosed(TelemetryBufferError, RuntimeError):
    """The buffer manager was used after :meth:`close`."""


__all__ = [
    "TelemetryBufferError",
    "ConfigurationError",
    "UnknownChannel",
    "DimensionMismatch",
    "BufferOverflow",
    "WriteFailure",
    "ManagerClosed",
]
