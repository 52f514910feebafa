"""Diagnostic items accepted by the bundle writer.

The item types form a closed set; the placement dispatcher handles each of
them explicitly.
"""

from dataclasses import dataclass
from typing import Any, BinaryIO, Union


@dataclass(frozen=True)
class ObjectItem:
    """Single structured object, written into its own nested directory."""
    obj: Any


@dataclass(frozen=True)
class ObjectListItem:
    """List of structured objects, each written into its own nested directory."""
    objects: Any


@dataclass(frozen=True)
class OpaqueItem:
    """Object without usable identity, written as a file named after its kind."""
    obj: Any


@dataclass(frozen=True)
class LogItem:
    """Closable byte stream holding the log of pod ``name``."""
    stream: BinaryIO
    name: str


@dataclass(frozen=True)
class ValueItem:
    """Arbitrary YAML-representable value dumped as ``<name>.yaml``."""
    value: Any
    name: str


@dataclass(frozen=True)
class ErrorItem:
    """Already-known error recorded as ``<name>.err``."""
    error: BaseException
    name: str


DiagnosticItem = Union[ObjectItem, ObjectListItem, OpaqueItem, LogItem, ValueItem, ErrorItem]
