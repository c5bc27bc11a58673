"""Buffer multi-channel telemetry samples and flush full windows to ``.mat`` files."""

from .core import (
    BufferManager,
    ChannelBuffer,
    ChannelHandle,
    ChannelRegistry,
    ChannelSpec,
    MonotonicClock,
    OverflowPolicy,
    Record,
    SystemClock,
)
from .config import BufferManagerConfig, config_from_mapping, load_config
from .dataio import MatFileWriter, load_container
from .errors import (
    BufferOverflow,
    ConfigurationError,
    DimensionMismatch,
    ManagerClosed,
    TelemetryBufferError,
    UnknownChannel,
    WriteFailure,
)

__version__ = "0.1.0"

__all__ = [
    "BufferManager",
    "ChannelBuffer",
    "ChannelHandle",
    "ChannelRegistry",
    "ChannelSpec",
    "MonotonicClock",
    "OverflowPolicy",
    "Record",
    "SystemClock",
    "BufferManagerConfig",
    "config_from_mapping",
    "load_config",
    "MatFileWriter",
    "load_container",
    "BufferOverflow",
    "ConfigurationError",
    "DimensionMismatch",
    "ManagerClosed",
    "TelemetryBufferError",
    "UnknownChannel",
    "WriteFailure",
]
