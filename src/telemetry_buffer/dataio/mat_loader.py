"""Utilities for loading flushed ``.mat`` files back into numpy arrays."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import numpy as np
from scipy.io import loadmat


@dataclass
class ChannelSeries:
    """One channel's window: ``data`` is ``(rows, cols, T)``, ``timestamps`` is ``(T,)``."""

    name: str
    data: np.ndarray
    timestamps: np.ndarray

    @property
    def num_samples(self) -> int:
        return int(self.timestamps.size)

    def samples(self) -> np.ndarray:
        """Return the window as ``(T, rows * cols)`` in push order."""
        rows, cols, steps = self.data.shape
        return np.reshape(self.data, (rows * cols, steps), order="F").T


def load_container(path: str | Path, name: Optional[str] = None) -> Dict[str, ChannelSeries]:
    """
    Load the channels stored in a flushed file.

    ``name`` selects the top-level struct; when omitted the file must hold
    exactly one variable.
    """
    raw = loadmat(str(Path(path)), simplify_cells=True)
    variables = {key: value for key, value in raw.items() if not key.startswith("__")}
    if name is None:
        if len(variables) != 1:
            raise ValueError(
                f"Expected a single top-level struct in {path}, found {sorted(variables)}"
            )
        name = next(iter(variables))
    if name not in variables:
        raise KeyError(name)

    container = variables[name]
    if not isinstance(container, Mapping):
        raise ValueError(f"{name!r} in {path} is not a struct")
    return {key: _channel_from_cell(key, entry) for key, entry in container.items()}


def _channel_from_cell(key: str, entry: Any) -> ChannelSeries:
    if not isinstance(entry, Mapping):
        raise ValueError(f"Channel entry {key!r} is not a struct")
    # loadmat squeezes singleton axes; restore them from the dimensions field.
    dims = tuple(int(d) for d in np.atleast_1d(entry["dimensions"]))
    data = np.reshape(np.asarray(entry["data"]), dims, order="F")
    timestamps = np.atleast_1d(np.asarray(entry["timestamps"], dtype=np.float64))
    return ChannelSeries(name=str(entry.get("name", key)), data=data, timestamps=timestamps)


__all__ = ["ChannelSeries", "load_container"]
