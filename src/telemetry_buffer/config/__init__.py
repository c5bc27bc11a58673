"""Configuration objects and helpers.

:mod:`runtime` loads YAML descriptors of a buffer manager (output file,
channels and their shapes, window size, auto-save) into a typed dataclass
that :meth:`BufferManager.from_config` consumes.
"""

from .runtime import BufferManagerConfig, config_from_mapping, load_config

__all__ = ["BufferManagerConfig", "config_from_mapping", "load_config"]
