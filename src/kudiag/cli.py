"""CLI interface for kudiag using Typer framework."""

import logging
from pathlib import Path
from typing import Annotated, Any, List, Optional, Tuple

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from kudiag import __description__, __version__
from kudiag.bundle import BundleWriter, PrintMode
from kudiag.config import KudiagConfig, LogLevel, load_config
from kudiag.models.objects import KubeObject, KubeObjectList
from kudiag.scheme import default_scheme

app = typer.Typer(
    name="kudiag",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"kudiag version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """kudiag - Best-effort diagnostic bundle writer."""


def _setup_logging(config: KudiagConfig) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(config.logging.level, logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _parse_pair(value: str, option: str) -> Tuple[str, Path]:
    """Split a NAME=PATH option value."""
    name, sep, path = value.partition("=")
    if not sep or not name or not path:
        console.print(f"[red]Error:[/red] {option} expects NAME=PATH, got: {value}")
        raise typer.Exit(1)
    return name, Path(path)


def _to_object(document: dict[str, Any]) -> Tuple[Any, bool]:
    """Build a KubeObject, or a KubeObjectList for documents with items."""
    if isinstance(document.get("items"), list):
        items = [
            KubeObject.model_validate(item) if isinstance(item, dict) else item
            for item in document["items"]
        ]
        return KubeObjectList.model_validate({**document, "items": items}), True
    return KubeObject.model_validate(document), False


def _load_manifests(path: Path) -> List[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        documents = [doc for doc in yaml.safe_load_all(f) if doc is not None]
    for doc in documents:
        if not isinstance(doc, dict):
            raise ValueError(f"{path}: expected a mapping, got {type(doc).__name__}")
    return documents


@app.command()
def bundle(
    manifests: Annotated[
        Optional[List[Path]],
        typer.Argument(help="YAML manifest files (multi-document files and lists are supported)")
    ] = None,
    logs: Annotated[
        Optional[List[str]],
        typer.Option("--log", help="Pod log to include as POD=PATH (can be used multiple times)")
    ] = None,
    values: Annotated[
        Optional[List[str]],
        typer.Option("--value", help="YAML/JSON value to dump as NAME=PATH (can be used multiple times)")
    ] = None,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Bundle root directory (default: diag)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .kudiag.json)")
    ] = None,
    flat: Annotated[
        bool,
        typer.Option("--flat", help="Write single objects as <kind>.yaml without nested directories")
    ] = False,
) -> None:
    """Write manifests, logs and values into a diagnostic bundle.

    Every item is written independently; failures are collected and reported
    at the end, and the command exits with status 1 if any occurred.
    """
    try:
        cfg = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if out:
        cfg.output.dir = str(out)
    _setup_logging(cfg)

    root = Path(cfg.output.dir)
    writer = BundleWriter(config=cfg, scheme=default_scheme(trust_declared_kind=True))
    single_mode = PrintMode.RUNTIME_OBJECT if flat else PrintMode.OBJECT_WITH_DIR

    submitted = 0
    collection_failures = 0

    for manifest in manifests or []:
        try:
            documents = _load_manifests(manifest)
        except (OSError, ValueError, yaml.YAMLError) as e:
            console.print(f"[yellow]WARN[/yellow] Could not read {manifest}: {e}")
            writer.print_error(e, root, manifest.stem)
            collection_failures += 1
            continue

        for document in documents:
            try:
                obj, is_list = _to_object(document)
            except ValueError as e:
                writer.print_error(e, root, manifest.stem)
                collection_failures += 1
                continue
            mode = PrintMode.OBJECT_LIST_WITH_DIRS if is_list else single_mode
            writer.print_object(obj, root, mode)
            submitted += 1

    for value in logs or []:
        pod, path = _parse_pair(value, "--log")
        try:
            stream = open(path, "rb")
        except OSError as e:
            writer.print_error(e, root / f"pod_{pod}", pod)
            collection_failures += 1
            continue
        writer.print_log(stream, root, pod)
        submitted += 1

    for value in values or []:
        name, path = _parse_pair(value, "--value")
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            writer.print_error(e, root, name)
            collection_failures += 1
            continue
        writer.print_value(data, root, name)
        submitted += 1

    table = Table(title="Diagnostic bundle")
    table.add_column("Output", style="cyan")
    table.add_column("Items", justify="right")
    table.add_column("Collection failures", justify="right")
    table.add_column("Write errors", justify="right")
    table.add_row(str(root), str(submitted), str(collection_failures), str(len(writer.accumulator)))
    console.print(table)

    if writer.has_errors():
        console.print("[red]Errors while writing the bundle:[/red]")
        for message in writer.accumulator:
            console.print(f"  - {message}", markup=False, highlight=False)
        raise typer.Exit(1)

    if collection_failures:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
