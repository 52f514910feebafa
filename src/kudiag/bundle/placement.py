"""Placement rules deciding where each diagnostic item is written.

Three layouts exist below a parent directory:

- nested by identity: ``<parent>/<kind>_<name>/<name>.yaml``
- nested list: the nested layout applied to every element of a list
- flat by kind: ``<parent>/<kind>.yaml``

Kinds are lowercased in paths. Logs, values and error records use their own
fixed layouts (see ``kudiag.bundle.serializers``).
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List

from kudiag.bundle.serializers import (
    object_manifest,
    render_yaml,
    write_bytes,
    write_log,
    write_yaml,
)
from kudiag.config import KudiagConfig
from kudiag.errors import KindResolutionError, MarshalError, MissingIdentityError
from kudiag.models.items import (
    DiagnosticItem,
    ErrorItem,
    LogItem,
    ObjectItem,
    ObjectListItem,
    OpaqueItem,
    ValueItem,
)
from kudiag.models.objects import GroupVersionKind, KubeObject
from kudiag.scheme import Scheme
from kudiag.utils.fs import FileSystem

logger = logging.getLogger(__name__)


class PrintMode(str, Enum):
    """How a structured object is laid out in the bundle."""
    OBJECT_WITH_DIR = "object_with_dir"              # own nested directory from kind and name
    OBJECT_LIST_WITH_DIRS = "object_list_with_dirs"  # nested directory per list element
    RUNTIME_OBJECT = "runtime_object"                # single file named after the kind


@dataclass(frozen=True)
class Placement:
    """Target directory and file name of one written artifact."""
    directory: Path
    file_name: str

    @property
    def path(self) -> Path:
        return self.directory / self.file_name


def nested_placement(parent_dir: str | Path, kind: str, name: str) -> Placement:
    """Placement of an identified object: ``<parent>/<kind>_<name>/<name>.yaml``."""
    directory = Path(parent_dir) / f"{kind.lower()}_{name}"
    return Placement(directory=directory, file_name=f"{name}.yaml")


def flat_placement(parent_dir: str | Path, kind: str) -> Placement:
    """Placement of an unidentified object: ``<parent>/<kind>.yaml``."""
    return Placement(directory=Path(parent_dir), file_name=f"{kind.lower()}.yaml")


def object_name(obj: Any) -> str | None:
    """Return ``metadata.name`` of ``obj`` if it exposes one."""
    if isinstance(obj, KubeObject):
        return obj.name

    if isinstance(obj, Mapping):
        metadata = obj.get("metadata")
    else:
        metadata = getattr(obj, "metadata", None)

    if isinstance(metadata, Mapping):
        name = metadata.get("name")
    else:
        name = getattr(metadata, "name", None)
    return name if isinstance(name, str) and name else None


def list_items(objects: Any) -> List[Any]:
    """Return the elements of a list object.

    Accepts list models exposing an ``items`` list, mappings with an ``items``
    key and plain lists or tuples.

    Raises:
        KindResolutionError: If ``objects`` is not a list
    """
    if isinstance(objects, Mapping):
        items = objects.get("items")
    elif isinstance(objects, (list, tuple)):
        items = objects
    else:
        items = getattr(objects, "items", None)

    if isinstance(items, (list, tuple)):
        return list(items)
    raise KindResolutionError(f"object of type {type(objects).__name__} is not a list")


def item_for_mode(obj: Any, mode: PrintMode) -> DiagnosticItem:
    """Wrap a structured object in the item matching ``mode``."""
    if mode == PrintMode.OBJECT_WITH_DIR:
        return ObjectItem(obj)
    if mode == PrintMode.OBJECT_LIST_WITH_DIRS:
        return ObjectListItem(obj)
    return OpaqueItem(obj)


def describe_target(item: DiagnosticItem, parent_dir: str | Path) -> str:
    """Short description of where ``item`` would go, for error messages."""
    parent = Path(parent_dir)
    if isinstance(item, LogItem):
        return str(parent / f"pod_{item.name}" / f"{item.name}.log.gz")
    if isinstance(item, ValueItem):
        return str(parent / f"{item.name}.yaml")
    if isinstance(item, ErrorItem):
        return str(parent / f"{item.name}.err")
    return str(parent)


class PlacementDispatcher:
    """Resolves kinds, derives placements and invokes the serializers."""

    def __init__(self, fs: FileSystem, scheme: Scheme, config: KudiagConfig):
        self.fs = fs
        self.scheme = scheme
        self.config = config

    @property
    def dir_mode(self) -> int:
        return self.config.output.dir_mode

    def is_pre_resolved(self, obj: Any) -> bool:
        """Whether ``obj`` is a domain object that already carries its kind."""
        return (
            isinstance(obj, KubeObject)
            and bool(obj.kind)
            and obj.group() in self.config.scheme.pre_resolved_groups
        )

    def resolve_kind(self, obj: Any, parent_dir: str | Path) -> GroupVersionKind:
        """Resolve the kind of ``obj``, consulting the scheme unless pre-resolved.

        Raises:
            KindResolutionError: If the scheme does not know the type of ``obj``
        """
        if self.is_pre_resolved(obj):
            logger.debug(f"Using declared kind {obj.kind} of pre-resolved object")
            return GroupVersionKind.from_api_version(obj.api_version, obj.kind)
        try:
            return self.scheme.object_kind(obj)
        except KindResolutionError as e:
            raise KindResolutionError(
                f"failed to resolve kind of object in {parent_dir}: {e}"
            ) from e

    def expand(self, item: DiagnosticItem) -> List[DiagnosticItem]:
        """Split an item into independently written items.

        Lists become one ObjectItem per element; every other item is returned
        unchanged.
        """
        if isinstance(item, ObjectListItem):
            return [ObjectItem(element) for element in list_items(item.objects)]
        return [item]

    def dispatch(self, item: DiagnosticItem, parent_dir: str | Path) -> Path:
        """Write one item below ``parent_dir``.

        Lists are not written here; split them with ``expand`` first so each
        element succeeds or fails on its own.

        Returns:
            Path of the written file

        Raises:
            BundleError: If the item cannot be written
            TypeError: If ``item`` is not a known diagnostic item
        """
        if isinstance(item, ObjectItem):
            return self.write_nested(item.obj, parent_dir)
        if isinstance(item, ObjectListItem):
            raise TypeError("object lists must be expanded before dispatching")
        if isinstance(item, OpaqueItem):
            return self.write_flat(item.obj, parent_dir)
        if isinstance(item, LogItem):
            return write_log(
                self.fs,
                item.stream,
                parent_dir,
                item.name,
                buffer_size=self.config.log.buffer_size,
                mode=self.dir_mode,
            )
        if isinstance(item, ValueItem):
            return write_yaml(self.fs, item.value, parent_dir, item.name, self.dir_mode)
        if isinstance(item, ErrorItem):
            data = str(item.error).encode("utf-8")
            return write_bytes(self.fs, data, parent_dir, f"{item.name}.err", self.dir_mode)
        raise TypeError(f"unsupported diagnostic item: {type(item).__name__}")

    def write_nested(self, obj: Any, parent_dir: str | Path) -> Path:
        gvk = self.resolve_kind(obj, parent_dir)
        name = object_name(obj)
        if not name:
            raise MissingIdentityError(
                f"failed to place {gvk.kind} object in {parent_dir}: object has no metadata.name"
            )
        placement = nested_placement(parent_dir, gvk.kind, name)
        return self._write_manifest(obj, gvk, placement)

    def write_flat(self, obj: Any, parent_dir: str | Path) -> Path:
        gvk = self.resolve_kind(obj, parent_dir)
        placement = flat_placement(parent_dir, gvk.kind)
        return self._write_manifest(obj, gvk, placement)

    def _write_manifest(self, obj: Any, gvk: GroupVersionKind, placement: Placement) -> Path:
        try:
            data = render_yaml(object_manifest(obj, gvk))
        except MarshalError as e:
            raise MarshalError(f"failed to marshal object to {placement.path}: {e}") from e
        return write_bytes(self.fs, data, placement.directory, placement.file_name, self.dir_mode)
