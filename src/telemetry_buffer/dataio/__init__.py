"""Structured-file output and input.

- :mod:`container` defines the struct/array/string tree handed to writers.
- :mod:`mat_writer` persists a container as a MATLAB ``.mat`` struct.
- :mod:`mat_loader` reads flushed files back for offline analysis.
"""

from .container import Entry, NumericArray, StringField, Struct
from .mat_loader import ChannelSeries, load_container
from .mat_writer import MatFileHandle, MatFileWriter, StructuredFileWriter

__all__ = [
    "Entry",
    "NumericArray",
    "StringField",
    "Struct",
    "ChannelSeries",
    "load_container",
    "MatFileHandle",
    "MatFileWriter",
    "StructuredFileWriter",
]
