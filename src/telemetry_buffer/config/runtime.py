"""Runtime configuration for building a :class:`BufferManager` from YAML."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Tuple

import yaml

from ..core.clock import Clock, clock_from_name
from ..core.models import ChannelSpec, OverflowPolicy
from ..errors import ConfigurationError


@dataclass(slots=True)
class BufferManagerConfig:
    """
    Settings for one buffer manager.

    ``channels`` entries accept ``{name, dimensions: [rows, cols]}`` or
    ``{name, rows, cols}`` mappings as well as :class:`ChannelSpec` objects.
    """

    filename: str = ""
    channels: Tuple[ChannelSpec, ...] = ()
    window_size: int = 100
    auto_save: bool = False
    overflow: OverflowPolicy = OverflowPolicy.EVICT_OLDEST
    clock: str = "system"
    compress: bool = False

    def sanitized(self) -> BufferManagerConfig:
        """Return a copy with coerced types; raises :class:`ConfigurationError` on bad values."""
        channels = self.channels
        if isinstance(channels, (str, bytes)) or not hasattr(channels, "__iter__"):
            raise ConfigurationError(f"channels must be a list, got {type(channels).__name__}")
        try:
            window_size = int(self.window_size)
        except (TypeError, ValueError):
            raise ConfigurationError(f"window_size must be an integer, got {self.window_size!r}") from None
        clock_name = str(self.clock).strip().lower()
        clock_from_name(clock_name)
        return BufferManagerConfig(
            filename=str(self.filename or ""),
            channels=tuple(ChannelSpec.coerce(ch) for ch in channels),
            window_size=window_size,
            auto_save=bool(self.auto_save),
            overflow=OverflowPolicy.parse(self.overflow),
            clock=clock_name,
            compress=bool(self.compress),
        )

    def make_clock(self) -> Clock:
        return clock_from_name(self.clock)


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`BufferManagerConfig`."""
    return {f.name for f in fields(BufferManagerConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``buffer_manager`` block into the root mapping."""
    if "buffer_manager" in data and isinstance(data["buffer_manager"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "buffer_manager":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> BufferManagerConfig:
    """Build :class:`BufferManagerConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return BufferManagerConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return BufferManagerConfig(**payload).sanitized()


def load_config(path: str | Path) -> BufferManagerConfig:
    """Load configuration from the YAML file at ``path``."""
    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise ConfigurationError(f"configuration file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid YAML in {cfg_path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["BufferManagerConfig", "config_from_mapping", "load_config"]
