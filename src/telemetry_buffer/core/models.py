"""Shared dataclasses for channels, handles, and buffered records."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import numpy as np

from ..errors import ConfigurationError

# MATLAB variable and struct field names; savemat silently drops anything else.
_FIELD_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
MAX_FIELD_NAME_LENGTH = 63


def is_valid_field_name(name: str) -> bool:
    return (
        isinstance(name, str)
        and len(name) <= MAX_FIELD_NAME_LENGTH
        and _FIELD_NAME_RE.fullmatch(name) is not None
    )


class OverflowPolicy(str, Enum):
    """What a channel buffer does when pushed past its window size."""

    EVICT_OLDEST = "evict_oldest"
    REJECT = "reject"

    @classmethod
    def parse(cls, value: "OverflowPolicy | str") -> "OverflowPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ConfigurationError(
                f"unknown overflow policy {value!r} (expected one of: {choices})"
            ) from None


@dataclass(frozen=True)
class ChannelSpec:
    """Name and per-sample shape of one channel."""

    name: str
    rows: int = 1
    cols: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError("channel name must be a non-empty string")
        if not is_valid_field_name(self.name):
            raise ConfigurationError(
                f"channel name {self.name!r} must start with a letter, contain only letters, "
                f"digits and underscores, and be at most {MAX_FIELD_NAME_LENGTH} characters"
            )
        for label in ("rows", "cols"):
            value = getattr(self, label)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
                raise ConfigurationError(
                    f"channel {self.name!r}: {label} must be a positive integer, got {value!r}"
                )
            object.__setattr__(self, label, int(value))

    @property
    def dimensions(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def size(self) -> int:
        """Number of values one sample of this channel carries."""
        return self.rows * self.cols

    @classmethod
    def coerce(cls, value: "ChannelLike") -> "ChannelSpec":
        """
        Build a spec from a spec, a ``(name, rows, cols)`` sequence, or a mapping.

        Mappings accept either ``dimensions: [rows, cols]`` or separate
        ``rows``/``cols`` keys.
        """
        if isinstance(value, ChannelSpec):
            return value
        if isinstance(value, Mapping):
            return cls._from_mapping(value)
        if isinstance(value, Sequence) and not isinstance(value, str):
            if len(value) == 1:
                return cls(value[0])
            if len(value) == 2:
                name, dims = value
                rows, cols = _split_dimensions(name, dims)
                return cls(name, rows, cols)
            if len(value) == 3:
                return cls(value[0], value[1], value[2])
        raise ConfigurationError(f"cannot interpret {value!r} as a channel descriptor")

    @classmethod
    def _from_mapping(cls, data: Mapping[str, Any]) -> "ChannelSpec":
        name = data.get("name")
        if "dimensions" in data:
            rows, cols = _split_dimensions(name, data["dimensions"])
        else:
            rows, cols = data.get("rows", 1), data.get("cols", 1)
        return cls(name, rows, cols)  # type: ignore[arg-type]


ChannelLike = Union[ChannelSpec, Mapping[str, Any], Sequence[Any]]


def _split_dimensions(name: Any, dims: Any) -> tuple[Any, Any]:
    if isinstance(dims, Sequence) and not isinstance(dims, str) and len(dims) == 2:
        return dims[0], dims[1]
    raise ConfigurationError(f"channel {name!r}: dimensions must be [rows, cols], got {dims!r}")


@dataclass(frozen=True)
class ChannelHandle:
    """
    Resolved reference to a registered channel.

    Handles are issued by :class:`~telemetry_buffer.core.registry.ChannelRegistry`
    and skip the name lookup on every push.
    """

    name: str
    index: int
    registry_id: int


@dataclass(frozen=True)
class Record:
    """One time-stamped sample; ``datum`` is a read-only 1-D array."""

    timestamp: float
    datum: np.ndarray

    @classmethod
    def create(cls, timestamp: float, values: Any, dtype: Any = np.float64) -> "Record":
        datum = np.array(values, dtype=dtype, copy=True).reshape(-1)
        datum.setflags(write=False)
        return cls(float(timestamp), datum)


__all__ = [
    "is_valid_field_name",
    "OverflowPolicy",
    "ChannelSpec",
    "ChannelLike",
    "ChannelHandle",
    "Record",
]
