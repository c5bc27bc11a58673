from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """
    Fixed-size ring buffer holding the most recent ``capacity`` items.
    Appending to a full buffer overwrites the oldest entry.
    """

    __slots__ = ("_capacity", "_data", "_start", "_size")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._data: list[T | None] = [None] * self._capacity
        self._start = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def full(self) -> bool:
        return self._size >= self._capacity

    def append(self, item: T) -> None:
        idx = (self._start + self._size) % self._capacity
        if self._size < self._capacity:
            self._size += 1
        else:
            self._start = (self._start + 1) % self._capacity
        self._data[idx] = item

    def clear(self) -> None:
        self._data = [None] * self._capacity
        self._start = 0
        self._size = 0

    def __len__(self) -> int:  # pragma: no cover - trivial
        return self._size

    def __iter__(self) -> Iterator[T]:
        for i in range(self._size):
            item = self._data[(self._start + i) % self._capacity]
            if item is not None:
                yield item
