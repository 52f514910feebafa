"""Bundle placement, serialization and the error-accumulating writer."""

from .placement import (
    Placement,
    PlacementDispatcher,
    PrintMode,
    flat_placement,
    nested_placement,
)
from .serializers import render_yaml, write_bytes, write_log, write_yaml
from .writer import BundleWriter

__all__ = [
    "BundleWriter",
    "Placement",
    "PlacementDispatcher",
    "PrintMode",
    "flat_placement",
    "nested_placement",
    "render_yaml",
    "write_bytes",
    "write_log",
    "write_yaml",
]
