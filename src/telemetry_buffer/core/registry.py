"""Channel registry: declared shapes plus one buffer per channel."""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator
from typing import Any, Dict, List, Tuple, Union

import numpy as np

from ..errors import ConfigurationError, DimensionMismatch, UnknownChannel
from .channel_buffer import ChannelBuffer
from .models import ChannelHandle, ChannelLike, ChannelSpec, OverflowPolicy

ChannelRef = Union[str, ChannelHandle]

_registry_ids = itertools.count(1)


class ChannelRegistry:
    """
    Fixed set of channels, keyed by name, in declaration order.

    The name -> spec and name -> buffer mappings are populated once here and
    never change afterwards.
    """

    def __init__(
        self,
        channels: Iterable[ChannelLike],
        window_size: int,
        overflow: OverflowPolicy = OverflowPolicy.EVICT_OLDEST,
    ) -> None:
        specs = [ChannelSpec.coerce(ch) for ch in channels]
        if not specs:
            raise ConfigurationError("at least one channel must be declared")

        self._id = next(_registry_ids)
        self._specs: Dict[str, ChannelSpec] = {}
        self._buffers: Dict[str, ChannelBuffer] = {}
        self._handles: List[ChannelHandle] = []
        self._by_name: Dict[str, ChannelHandle] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ConfigurationError(f"duplicate channel name {spec.name!r}")
            handle = ChannelHandle(spec.name, len(self._handles), self._id)
            self._specs[spec.name] = spec
            self._buffers[spec.name] = ChannelBuffer(spec.name, window_size, overflow)
            self._handles.append(handle)
            self._by_name[spec.name] = handle

    # ----------------------------------------------------------------- lookup
    def resolve(self, channel: ChannelRef) -> ChannelHandle:
        """Return the handle for a channel name or validate a handle."""
        if isinstance(channel, ChannelHandle):
            if (
                channel.registry_id != self._id
                or channel.index >= len(self._handles)
                or self._handles[channel.index] != channel
            ):
                raise UnknownChannel(channel.name)
            return channel
        if isinstance(channel, str):
            handle = self._by_name.get(channel)
            if handle is not None:
                return handle
        raise UnknownChannel(channel)

    def handle(self, name: str) -> ChannelHandle:
        return self.resolve(name)

    def names(self) -> List[str]:
        return list(self._specs)

    def spec(self, channel: ChannelRef) -> ChannelSpec:
        return self._specs[self.resolve(channel).name]

    def dimensions(self, channel: ChannelRef) -> Tuple[int, int]:
        return self.spec(channel).dimensions

    def buffer(self, channel: ChannelRef) -> ChannelBuffer:
        return self._buffers[self.resolve(channel).name]

    # ------------------------------------------------------------- validation
    def validate(self, channel: ChannelRef, sample: Any, dtype: Any = np.float64) -> np.ndarray:
        """
        Flatten ``sample`` and check it carries ``rows * cols`` values.

        Flat samples are taken as column-major (first row index fastest).
        Multi-dimensional samples must have shape ``(rows, cols)`` and are
        flattened column-major so ``data[:, :, t]`` reproduces them.

        Returns the flattened array (not yet copied into a record).
        """
        spec = self.spec(channel)
        try:
            arr = np.asarray(sample, dtype=dtype)
        except (TypeError, ValueError) as exc:
            raise DimensionMismatch(spec.name, spec.size, _length_of(sample)) from exc
        if arr.ndim > 1:
            if arr.shape != spec.dimensions:
                raise DimensionMismatch(spec.name, spec.size, int(arr.size), shape=arr.shape)
            return np.ravel(arr, order="F")
        values = np.ravel(arr)
        if values.size != spec.size:
            raise DimensionMismatch(spec.name, spec.size, int(values.size))
        return values

    # -------------------------------------------------------------- iteration
    def __iter__(self) -> Iterator[Tuple[ChannelSpec, ChannelBuffer]]:
        for name, spec in self._specs.items():
            yield spec, self._buffers[name]

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, channel: object) -> bool:
        try:
            self.resolve(channel)  # type: ignore[arg-type]
        except UnknownChannel:
            return False
        return True


def _length_of(sample: Any) -> int:
    try:
        return len(sample)
    except TypeError:
        return 1


__all__ = ["ChannelRegistry", "ChannelRef"]
