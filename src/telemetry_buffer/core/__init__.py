"""Core buffering engine: channel buffers, the registry, and the manager.

Samples pushed into :class:`BufferManager` are validated against the
:class:`ChannelRegistry`, time-stamped, and queued in a per-channel
:class:`ChannelBuffer` until a flush packages every full window.
"""

from .ringbuffer import RingBuffer
from .models import ChannelHandle, ChannelSpec, OverflowPolicy, Record
from .channel_buffer import ChannelBuffer
from .registry import ChannelRegistry
from .clock import Clock, MonotonicClock, SystemClock
from .buffer_manager import BufferManager, container_name_for

__all__ = [
    "RingBuffer",
    "ChannelHandle",
    "ChannelSpec",
    "OverflowPolicy",
    "Record",
    "ChannelBuffer",
    "ChannelRegistry",
    "Clock",
    "MonotonicClock",
    "SystemClock",
    "BufferManager",
    "container_name_for",
]
