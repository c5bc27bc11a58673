"""Multi-channel sample buffering with windowed flushes to a structured file."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..dataio.container import NumericArray, StringField, Struct
from ..dataio.mat_writer import MatFileWriter, StructuredFileWriter
from ..errors import ConfigurationError, ManagerClosed, WriteFailure
from .channel_buffer import ChannelBuffer
from .clock import ClockLike, SystemClock, read_clock
from .models import (
    ChannelHandle,
    ChannelLike,
    ChannelSpec,
    OverflowPolicy,
    Record,
    is_valid_field_name,
)
from .registry import ChannelRef, ChannelRegistry

if TYPE_CHECKING:  # pragma: no cover
    from ..config.runtime import BufferManagerConfig

logger = logging.getLogger(__name__)


def container_name_for(filename: str | Path) -> str:
    """Top-level struct name for ``filename``: its base name up to the first ``.``."""
    return Path(filename).name.split(".", 1)[0]


@dataclass(frozen=True)
class _StagedChannel:
    spec: ChannelSpec
    buffer: ChannelBuffer
    entry: Struct


class BufferManager:
    """
    Buffer samples per channel and flush full windows to one file.

    Every channel shares the same ``window_size``. :meth:`flush` packages each
    channel whose buffer holds a full window into a struct containing
    ``data`` (``rows x cols x T``), ``dimensions``, ``name``, and
    ``timestamps``, wraps them in a top-level struct named after
    ``filename``, and hands it to the writer. Channels that are not yet full
    are left untouched for the next flush.

    Buffers are cleared only after the writer reports success, so a failed
    write never loses data.

    A single re-entrant lock serialises :meth:`push`, :meth:`flush`, and
    :meth:`close`, so producers on several threads may share one manager.
    The write runs while holding the lock.

    With ``auto_save`` enabled, :meth:`close` (or leaving a ``with`` block)
    performs a final flush. A manager that is garbage collected without being
    closed makes one best-effort flush and only logs failures.
    """

    def __init__(
        self,
        filename: str | Path,
        channels: Iterable[ChannelLike],
        window_size: int,
        auto_save: bool = False,
        *,
        clock: Optional[ClockLike] = None,
        writer: Optional[StructuredFileWriter] = None,
        overflow: OverflowPolicy | str = OverflowPolicy.EVICT_OLDEST,
        dtype: Any = np.float64,
    ) -> None:
        # Set first so __del__ is safe if validation below fails.
        self._closed = True
        self._auto_save = bool(auto_save)

        filename_str = str(filename) if filename is not None else ""
        if not filename_str:
            raise ConfigurationError("filename must not be empty")
        container_name = container_name_for(filename_str)
        if not is_valid_field_name(container_name):
            raise ConfigurationError(
                f"container name {container_name!r} derived from {filename_str!r} is not a "
                "valid MATLAB variable name"
            )
        if isinstance(window_size, bool) or not isinstance(window_size, (int, np.integer)) or window_size < 1:
            raise ConfigurationError(f"window_size must be a positive integer, got {window_size!r}")

        self._filename = filename_str
        self._container_name = container_name
        self._window_size = int(window_size)
        self._overflow = OverflowPolicy.parse(overflow)
        self._dtype = np.dtype(dtype)
        self._registry = ChannelRegistry(channels, self._window_size, self._overflow)
        self._clock: ClockLike = clock if clock is not None else SystemClock()
        self._writer: StructuredFileWriter = writer if writer is not None else MatFileWriter()
        self._lock = threading.RLock()
        self._closed = False

        logger.debug(
            "BufferManager for %s: channels=%s window=%d auto_save=%s",
            self._filename,
            self._registry.names(),
            self._window_size,
            self._auto_save,
        )

    @classmethod
    def from_config(cls, config: "BufferManagerConfig", **overrides: Any) -> "BufferManager":
        """Build a manager from a :class:`~telemetry_buffer.config.BufferManagerConfig`."""
        kwargs: dict[str, Any] = {
            "clock": config.make_clock(),
            "writer": MatFileWriter(compress=config.compress),
            "overflow": config.overflow,
        }
        kwargs.update(overrides)
        return cls(config.filename, config.channels, config.window_size, config.auto_save, **kwargs)

    # -------------------------------------------------------------- properties
    @property
    def filename(self) -> str:
        return self._filename

    @property
    def container_name(self) -> str:
        return self._container_name

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def auto_save(self) -> bool:
        return self._auto_save

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def channels(self) -> List[ChannelSpec]:
        return [spec for spec, _ in self._registry]

    def handle(self, name: str) -> ChannelHandle:
        """Resolve ``name`` once; pushing with the handle skips the name lookup."""
        return self._registry.handle(name)

    def size(self, channel: ChannelRef) -> int:
        with self._lock:
            return self._registry.buffer(channel).size()

    def full(self, channel: ChannelRef) -> bool:
        with self._lock:
            return self._registry.buffer(channel).full()

    def full_channels(self) -> List[str]:
        with self._lock:
            return [spec.name for spec, buf in self._registry if buf.full()]

    def snapshot(self, channel: ChannelRef) -> List[Record]:
        with self._lock:
            return self._registry.buffer(channel).snapshot()

    # ------------------------------------------------------------------ ingest
    def push(self, sample: Sequence[float] | np.ndarray, channel: ChannelRef) -> None:
        """
        Time-stamp ``sample`` and append it to ``channel``.

        Raises
        ------
        UnknownChannel
            ``channel`` is not registered with this manager.
        DimensionMismatch
            ``sample`` does not hold ``rows * cols`` values.
        BufferOverflow
            The channel is full and the overflow policy is ``reject``.
        """
        with self._lock:
            if self._closed:
                raise ManagerClosed(f"BufferManager for {self._filename} is closed")
            handle = self._registry.resolve(channel)
            values = self._registry.validate(handle, sample, self._dtype)
            record = Record.create(read_clock(self._clock), values, self._dtype)
            self._registry.buffer(handle).push(record)

    # ------------------------------------------------------------------- flush
    def flush(self) -> bool:
        """
        Write every full channel to ``filename`` and clear those buffers.

        Returns ``True`` on success, including when no channel was full and
        nothing needed writing. Returns ``False`` when the writer failed; the
        buffers then keep their samples.
        """
        try:
            return self._flush()
        except WriteFailure:
            return False

    save_to_file = flush

    def flush_or_raise(self) -> None:
        """Like :meth:`flush` but raise :class:`WriteFailure` on failure."""
        self._flush()

    def _flush(self) -> bool:
        with self._lock:
            staged = self._stage()
            if not staged:
                logger.debug("Nothing to flush for %s", self._filename)
                return True

            container = Struct(self._container_name, tuple(s.entry for s in staged))
            self._write(container)

            for item in staged:
                item.buffer.clear()
            logger.info(
                "Flushed %d channel(s) to %s: %s",
                len(staged),
                self._filename,
                ", ".join(item.spec.name for item in staged),
            )
            return True

    def _stage(self) -> List[_StagedChannel]:
        staged: List[_StagedChannel] = []
        for spec, buf in self._registry:
            if not buf.full():
                logger.debug(
                    "not enough data points collected for %s (%d/%d)",
                    spec.name,
                    buf.size(),
                    buf.capacity,
                )
                continue
            staged.append(_StagedChannel(spec, buf, self._build_entry(spec, buf)))
        return staged

    def _build_entry(self, spec: ChannelSpec, buf: ChannelBuffer) -> Struct:
        records = buf.snapshot()
        num_timesteps = len(records)
        linear, timestamps = _flatten(records, spec.size, self._dtype)
        dims = (spec.rows, spec.cols, num_timesteps)
        return Struct(
            spec.name,
            (
                NumericArray("data", linear, dims),
                NumericArray.vector("dimensions", dims, dtype=np.int32),
                StringField("name", spec.name),
                NumericArray.vector("timestamps", timestamps, dtype=np.float64),
            ),
        )

    def _write(self, container: Struct) -> None:
        try:
            handle = self._writer.create(self._filename)
            ok = self._writer.write(handle, container)
        except WriteFailure:
            logger.warning("Write to %s failed; buffered samples kept", self._filename)
            raise
        except OSError as exc:
            logger.warning("Write to %s failed (%s); buffered samples kept", self._filename, exc)
            raise WriteFailure(f"could not write {self._filename}: {exc}") from exc
        if not ok:
            logger.warning("Writer reported failure for %s; buffered samples kept", self._filename)
            raise WriteFailure(f"writer reported failure for {self._filename}")

    # --------------------------------------------------------------- lifecycle
    def close(self) -> bool:
        """
        Close the manager, flushing first when ``auto_save`` is set.

        Returns the flush result (``True`` when no flush was needed). Calling
        ``close`` again is a no-op returning ``True``.
        """
        with self._lock:
            if self._closed:
                return True
            try:
                return self.flush() if self._auto_save else True
            finally:
                self._closed = True

    def __enter__(self) -> "BufferManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        ok = self.close()
        if not ok and exc_type is None:
            raise WriteFailure(f"auto-save flush to {self._filename} failed")

    def __del__(self) -> None:
        if getattr(self, "_closed", True) or not getattr(self, "_auto_save", False):
            return
        try:
            if not self.close():
                logger.error("Auto-save flush of %s failed during teardown", self._filename)
        except Exception:
            logger.exception("Auto-save flush of %s raised during teardown", self._filename)

    def __repr__(self) -> str:
        return (
            f"BufferManager(filename={self._filename!r}, channels={self._registry.names()!r}, "
            f"window_size={self._window_size}, auto_save={self._auto_save})"
        )


def _flatten(records: Sequence[Record], sample_size: int, dtype: Any) -> Tuple[np.ndarray, np.ndarray]:
    """Concatenate record data in push order and collect the matching timestamps."""
    count = len(records)
    linear = np.empty(count * sample_size, dtype=dtype)
    timestamps = np.empty(count, dtype=np.float64)
    for i, record in enumerate(records):
        linear[i * sample_size : (i + 1) * sample_size] = record.datum
        timestamps[i] = record.timestamp
    return linear, timestamps


__all__ = ["BufferManager", "container_name_for"]
