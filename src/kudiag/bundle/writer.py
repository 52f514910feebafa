"""Best-effort diagnostic bundle writer."""

import logging
from pathlib import Path
from typing import Any, BinaryIO, List

from kudiag.bundle.placement import (
    PlacementDispatcher,
    PrintMode,
    describe_target,
    item_for_mode,
)
from kudiag.config import KudiagConfig
from kudiag.diagnostics import ErrorAccumulator
from kudiag.errors import BundleError
from kudiag.models.items import DiagnosticItem, ErrorItem, LogItem, ValueItem
from kudiag.scheme import Scheme, default_scheme
from kudiag.utils.fs import FileSystem, OsFileSystem

logger = logging.getLogger(__name__)


class BundleWriter:
    """Writes diagnostic items below a directory, accumulating errors.

    Every public operation is total: a failure is recorded as text in
    ``errors`` and processing continues with the next item. One writer is
    meant to be used for one bundle run and is not thread-safe.
    """

    def __init__(
        self,
        fs: FileSystem | None = None,
        config: KudiagConfig | None = None,
        scheme: Scheme | None = None,
    ):
        """Initialize bundle writer.

        Args:
            fs: Filesystem to write to (default: local disk)
            config: kudiag configuration (default: built-in defaults)
            scheme: Kind registry for objects without type metadata
        """
        self.fs = fs or OsFileSystem()
        self.config = config or KudiagConfig()
        self.scheme = scheme or default_scheme()
        self.accumulator = ErrorAccumulator()
        self._dispatcher = PlacementDispatcher(self.fs, self.scheme, self.config)

    @property
    def errors(self) -> List[str]:
        """Errors recorded so far, in order."""
        return self.accumulator.messages

    def has_errors(self) -> bool:
        return self.accumulator.has_errors()

    def write(self, item: DiagnosticItem, parent_dir: str | Path) -> None:
        """Write any diagnostic item below ``parent_dir``.

        Lists are split first so that each element is written, or fails,
        independently of the others.
        """
        try:
            items = self._dispatcher.expand(item)
        except BundleError as e:
            self._record(str(e))
            return
        except Exception as e:
            self._record(f"failed to write {describe_target(item, parent_dir)}: {e}")
            return

        for sub_item in items:
            self._attempt(sub_item, parent_dir)

    def print_object(
        self,
        obj: Any,
        parent_dir: str | Path,
        mode: PrintMode = PrintMode.OBJECT_WITH_DIR,
    ) -> None:
        """Write a structured object (or list of them) using ``mode``."""
        self.write(item_for_mode(obj, mode), parent_dir)

    def print_error(self, err: BaseException, parent_dir: str | Path, name: str) -> None:
        """Record an already-known error as ``<parent_dir>/<name>.err``."""
        self.write(ErrorItem(err, name), parent_dir)

    def print_log(self, log: BinaryIO, parent_dir: str | Path, name: str) -> None:
        """Copy a pod log compressed to ``<parent_dir>/pod_<name>/<name>.log.gz``."""
        self.write(LogItem(log, name), parent_dir)

    def print_value(self, value: Any, parent_dir: str | Path, name: str) -> None:
        """Dump an arbitrary value as ``<parent_dir>/<name>.yaml``."""
        self.write(ValueItem(value, name), parent_dir)

    print_yaml = print_value

    def _attempt(self, item: DiagnosticItem, parent_dir: str | Path) -> None:
        try:
            path = self._dispatcher.dispatch(item, parent_dir)
        except BundleError as e:
            self._record(str(e))
        except Exception as e:
            target = describe_target(item, parent_dir)
            logger.debug(f"Unexpected error writing {target}", exc_info=True)
            self._record(f"failed to write {target}: {e}")
        else:
            logger.debug(f"Wrote {path}")

    def _record(self, message: str) -> None:
        logger.warning(message)
        self.accumulator.collect(message)
