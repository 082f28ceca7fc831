"""Implementation of the ``luminatex store`` command group."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from luminatex.core.exceptions import StoreError
from luminatex.core.storage import SourceStore

from .._options import ConfigOption, OutputPathOption
from ..state import emit_error, get_cli_state
from ..utils import read_source, resolve_config, write_output_file


app = typer.Typer(help="Persist and restore source documents verbatim.", no_args_is_help=True)

KeyArgument = Annotated[str, typer.Argument(help="Name the source is stored under.")]


def _open_store(config_path: Path | None) -> SourceStore:
    return SourceStore(resolve_config(config_path).resolved_store_path())


@app.command("save")
def save(
    key: KeyArgument,
    input_path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Source document to store."),
    ],
    config_path: ConfigOption = None,
) -> None:
    """Store a source document under KEY."""
    store = _open_store(config_path)
    try:
        name = store.save(key, read_source(input_path))
    except StoreError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    get_cli_state().console.print(f"[green]Saved[/] {input_path.name} as '{name}'")


@app.command("load")
def load(
    key: KeyArgument,
    output: OutputPathOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Restore the source document stored under KEY."""
    store = _open_store(config_path)
    try:
        source = store.load(key)
    except StoreError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(source, nl=False)
        return
    write_output_file(output, source)


@app.command("list")
def list_sources(config_path: ConfigOption = None) -> None:
    """List stored source documents."""
    store = _open_store(config_path)
    try:
        keys = store.keys()
    except StoreError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    for key in keys:
        typer.echo(key)


__all__ = ["app"]
