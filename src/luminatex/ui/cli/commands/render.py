"""Implementation of the ``luminatex render`` command."""

from __future__ import annotations

import typer

from luminatex.api.service import RenderService
from luminatex.core.exceptions import LuminaError

from .._options import ConfigOption, InputPathArgument, OutputPathOption, StandaloneOption
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import read_source, resolve_config, write_output_file


def render(
    input_path: InputPathArgument,
    output: OutputPathOption = None,
    standalone: StandaloneOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Render a source document to HTML."""
    state = get_cli_state()
    config = resolve_config(config_path)
    if standalone:
        config.render.standalone_html = True

    service = RenderService(config, emitter=CliEmitter(state))
    source = read_source(input_path)
    try:
        document = service.render(source, name=input_path.stem)
    except LuminaError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    html = service.to_html(document)
    if output is None:
        typer.echo(html)
        return

    write_output_file(output, html)
    state.console.print(f"[green]Wrote[/] {output}")


__all__ = ["render"]
