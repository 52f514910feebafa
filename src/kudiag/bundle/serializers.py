"""Serializers turning bundle items into bytes on a FileSystem."""

import gzip
import logging
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, BinaryIO

import yaml
from pydantic import BaseModel

from kudiag.errors import BundleIOError, MarshalError
from kudiag.models.objects import GroupVersionKind, KubeObject
from kudiag.utils.fs import FileSystem

logger = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o700
DEFAULT_BUFFER_SIZE = 2048

# Keys that carry type metadata and are replaced by the resolved kind.
_TYPE_KEYS = ("apiVersion", "api_version", "kind")


class _BundleDumper(yaml.SafeDumper):
    """Safe dumper that never emits anchors, so cycles fail instead of aliasing."""

    def ignore_aliases(self, data):
        return True


def _convert(value: Any) -> Any:
    """Convert one model-like value without descending into its contents."""
    if isinstance(value, KubeObject):
        return value.to_manifest()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in fields(value)}
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return value


def to_plain(value: Any) -> Any:
    """Convert models to plain data that YAML can represent, at every level.

    Tuples become lists; mappings keep their key order.
    """
    value = _convert(value)
    if isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


def render_yaml(value: Any) -> bytes:
    """Render ``value`` as a block-style YAML document.

    Raises:
        MarshalError: If the value cannot be represented
    """
    try:
        text = yaml.dump(
            to_plain(value),
            Dumper=_BundleDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    except (yaml.YAMLError, RecursionError, TypeError, ValueError) as e:
        raise MarshalError(str(e) or type(e).__name__) from e
    return text.encode("utf-8")


def object_manifest(obj: Any, gvk: GroupVersionKind) -> dict[str, Any]:
    """Build the manifest of ``obj`` with its resolved apiVersion and kind first."""
    plain = _convert(obj)
    if not isinstance(plain, Mapping):
        raise MarshalError(f"object of type {type(obj).__name__} is not a mapping")

    manifest: dict[str, Any] = {"apiVersion": gvk.api_version, "kind": gvk.kind}
    for key, value in plain.items():
        if key not in _TYPE_KEYS:
            manifest[key] = value
    return manifest


def mkdir_all(fs: FileSystem, directory: Path, mode: int = DEFAULT_DIR_MODE) -> None:
    try:
        fs.mkdir_all(directory, mode)
    except OSError as e:
        raise BundleIOError(f"failed to create directory {directory}: {e}") from e


def create_file(fs: FileSystem, path: Path) -> BinaryIO:
    try:
        return fs.create(path)
    except OSError as e:
        raise BundleIOError(f"failed to create file {path}: {e}") from e


def write_bytes(
    fs: FileSystem,
    data: bytes,
    directory: str | Path,
    name: str,
    mode: int = DEFAULT_DIR_MODE,
) -> Path:
    """Write ``data`` to ``<directory>/<name>``, creating missing directories.

    Returns:
        Path of the written file

    Raises:
        BundleIOError: If the directory or file cannot be created or written
    """
    directory = Path(directory)
    mkdir_all(fs, directory, mode)

    path = directory / name
    handle = create_file(fs, path)
    try:
        with handle:
            handle.write(data)
    except OSError as e:
        raise BundleIOError(f"failed to write to file {path}: {e}") from e

    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return path


def write_yaml(
    fs: FileSystem,
    value: Any,
    directory: str | Path,
    name: str,
    mode: int = DEFAULT_DIR_MODE,
) -> Path:
    """Dump an arbitrary value to ``<directory>/<name>.yaml``."""
    try:
        data = render_yaml(value)
    except MarshalError as e:
        raise MarshalError(f"failed to marshal object to {Path(directory) / name}.yaml: {e}") from e
    return write_bytes(fs, data, directory, f"{name}.yaml", mode)


def write_log(
    fs: FileSystem,
    log: BinaryIO,
    parent_dir: str | Path,
    pod_name: str,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    mode: int = DEFAULT_DIR_MODE,
) -> Path:
    """Copy a log stream gzip-compressed to ``<parent_dir>/pod_<name>/<name>.log.gz``.

    The log stream is closed exactly once, whether or not the copy succeeds.
    A failure after the archive was created leaves a truncated file behind.

    Raises:
        BundleIOError: If the directory or file cannot be created, or reading
            the stream or writing the archive fails
    """
    try:
        directory = Path(parent_dir) / f"pod_{pod_name}"
        mkdir_all(fs, directory, mode)

        path = directory / f"{pod_name}.log.gz"
        handle = create_file(fs, path)
        copied = 0
        try:
            with handle:
                with gzip.GzipFile(filename=f"{pod_name}.log", mode="wb", fileobj=handle) as archive:
                    while True:
                        chunk = log.read(buffer_size)
                        if not chunk:
                            break
                        archive.write(chunk)
                        copied += len(chunk)
        except OSError as e:
            raise BundleIOError(f"failed to write to file {path}: {e}") from e

        logger.debug(f"Compressed {copied} log bytes to {path}")
        return path
    finally:
        try:
            log.close()
        except Exception:
            logger.debug(f"Failed to close log stream of pod {pod_name}", exc_info=True)
