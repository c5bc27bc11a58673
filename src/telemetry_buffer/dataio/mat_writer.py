"""MATLAB ``.mat`` implementation of the structured-file writer."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from scipy.io import savemat
from scipy.io.matlab import MatWriteWarning

from .container import Struct

logger = logging.getLogger(__name__)


class StructuredFileWriter(Protocol):
    """Persistence backend used by :class:`~telemetry_buffer.core.BufferManager`."""

    def create(self, path: str | Path) -> Any:  # pragma: no cover - protocol
        ...

    def write(self, handle: Any, container: Struct) -> bool:  # pragma: no cover - protocol
        ...


@dataclass(frozen=True)
class MatFileHandle:
    path: Path


class MatFileWriter:
    """
    Write a container as one top-level MATLAB struct variable.

    Parameters
    ----------
    compress:
        Enable zlib compression of the MAT v5 payload.
    """

    def __init__(self, *, compress: bool = False) -> None:
        self.compress = bool(compress)

    def create(self, path: str | Path) -> MatFileHandle:
        """Prepare ``path`` for writing; parent directories are created as needed."""
        target = Path(path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        return MatFileHandle(target)

    def write(self, handle: MatFileHandle, container: Struct) -> bool:
        try:
            with warnings.catch_warnings():
                # savemat skips invalid names with only a warning
                warnings.simplefilter("error", MatWriteWarning)
                savemat(
                    str(handle.path),
                    {container.name: container.to_mapping()},
                    appendmat=False,
                    format="5",
                    long_field_names=True,
                    do_compression=self.compress,
                    oned_as="column",
                )
        except (OSError, ValueError, TypeError, MatWriteWarning):
            logger.exception("Failed to write %s to %s", container.name, handle.path)
            return False
        logger.debug("Wrote struct %s (%d fields) to %s", container.name, len(container.fields), handle.path)
        return True


__all__ = ["StructuredFileWriter", "MatFileHandle", "MatFileWriter"]
