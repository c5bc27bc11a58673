"""
Hierarchical container handed to structured-file writers.

A container is a named :class:`Struct` whose fields are numeric arrays,
strings, or further structs. Numeric arrays keep their values flat and carry
explicit per-axis dimensions; the flat values are laid out column-major
(first axis fastest), which is what MATLAB-style readers expect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class NumericArray:
    name: str
    values: np.ndarray
    dimensions: Tuple[int, ...]

    def __post_init__(self) -> None:
        values = np.asarray(self.values).reshape(-1)
        dims = tuple(int(d) for d in self.dimensions)
        expected = int(np.prod(dims)) if dims else 1
        if values.size != expected:
            raise ValueError(
                f"{self.name!r}: {values.size} values do not fill dimensions {list(dims)}"
            )
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "dimensions", dims)

    @classmethod
    def vector(cls, name: str, values: Any, dtype: Any = None) -> "NumericArray":
        arr = np.asarray(values, dtype=dtype).reshape(-1)
        return cls(name, arr, (arr.size,))

    def as_array(self) -> np.ndarray:
        """Return the values shaped to ``dimensions``."""
        return np.reshape(self.values, self.dimensions, order="F")


@dataclass(frozen=True)
class StringField:
    name: str
    value: str


@dataclass(frozen=True)
class Struct:
    name: str
    fields: Tuple["Entry", ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def __getitem__(self, name: str) -> "Entry":
        for entry in self.fields:
            if entry.name == name:
                return entry
        raise KeyError(name)

    def names(self) -> list[str]:
        return [entry.name for entry in self.fields]

    def to_mapping(self) -> Dict[str, Any]:
        """Nested ``dict`` view with numpy arrays and ``str`` leaves."""
        out: Dict[str, Any] = {}
        for entry in self.fields:
            if isinstance(entry, Struct):
                out[entry.name] = entry.to_mapping()
            elif isinstance(entry, NumericArray):
                out[entry.name] = entry.as_array()
            else:
                out[entry.name] = entry.value
        return out


Entry = Union[NumericArray, StringField, Struct]

__all__ = ["NumericArray", "StringField", "Struct", "Entry"]
