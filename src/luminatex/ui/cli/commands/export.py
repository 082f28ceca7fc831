"""Implementation of the ``luminatex export`` command."""

from __future__ import annotations

from pydantic import ValidationError
import typer

from luminatex.api.service import RenderService
from luminatex.core.config import ExportConfig
from luminatex.core.exceptions import ExportError, LuminaError, exception_hint

from .._options import (
    ConfigOption,
    InputPathArgument,
    LandscapeOption,
    OutputPathOption,
    PaperOption,
    ScaleOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import default_pdf_path, read_source, resolve_config


def export(
    input_path: InputPathArgument,
    output: OutputPathOption = None,
    paper: PaperOption = None,
    landscape: LandscapeOption = False,
    scale: ScaleOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Render a source document and export it as a paginated PDF."""
    state = get_cli_state()
    config = resolve_config(config_path)

    overrides: dict[str, object] = {}
    if paper is not None:
        overrides["paper"] = paper
    if landscape:
        overrides["orientation"] = "landscape"
    if scale is not None:
        overrides["scale"] = scale
    if overrides:
        try:
            config.export = ExportConfig.model_validate(
                {**config.export.model_dump(), **overrides}
            )
        except ValidationError as exc:
            raise typer.BadParameter(str(exc)) from exc

    target = output or default_pdf_path(input_path)
    service = RenderService(config, emitter=CliEmitter(state))
    source = read_source(input_path)

    try:
        document = service.render(source, name=input_path.stem)
        result = service.export_pdf(document, target)
    except ExportError as exc:
        emit_error(f"PDF export failed: {exception_hint(exc)}", exception=exc)
        raise typer.Exit(code=2) from exc
    except LuminaError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    state.console.print(f"[green]Exported[/] {result.path} ({result.pages} page(s))")


__all__ = ["export"]
