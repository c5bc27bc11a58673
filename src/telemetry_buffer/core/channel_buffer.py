"""Bounded per-channel record queue used by the buffer manager."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..errors import BufferOverflow
from .models import OverflowPolicy, Record
from .ringbuffer import RingBuffer

logger = logging.getLogger(__name__)


class ChannelBuffer:
    """
    Window of :class:`Record` objects for one channel.

    ``capacity`` is the flush window: once ``full()`` the buffer is eligible
    for the next flush. The buffer never grows past it; further pushes either
    evict the oldest record or raise :class:`BufferOverflow`, depending on
    ``overflow``.

    The buffer itself is not synchronised; :class:`BufferManager` serialises
    access to it.
    """

    __slots__ = ("_name", "_buffer", "_overflow", "_evicted")

    def __init__(
        self,
        name: str,
        capacity: int,
        overflow: OverflowPolicy = OverflowPolicy.EVICT_OLDEST,
    ) -> None:
        self._name = name
        self._buffer: RingBuffer[Record] = RingBuffer(capacity)
        self._overflow = overflow
        self._evicted = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    @property
    def evicted(self) -> int:
        """Records dropped by the evict-oldest policy since construction."""
        return self._evicted

    def push(self, record: Record) -> None:
        if self._buffer.full():
            if self._overflow is OverflowPolicy.REJECT:
                raise BufferOverflow(self._name, self.capacity)
            self._evicted += 1
            if self._evicted == 1 or self._evicted % self.capacity == 0:
                logger.warning(
                    "Channel %s overflowed its window of %d samples; %d oldest dropped so far",
                    self._name,
                    self.capacity,
                    self._evicted,
                )
        self._buffer.append(record)

    def full(self) -> bool:
        return self._buffer.full()

    def size(self) -> int:
        return len(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()

    def snapshot(self) -> list[Record]:
        """Return a copy of the buffered records, oldest first."""
        return list(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._buffer)

    def __repr__(self) -> str:
        return f"ChannelBuffer(name={self._name!r}, size={self.size()}, capacity={self.capacity})"
