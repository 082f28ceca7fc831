"""Typer application wiring for the LuminaTeX CLI."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from luminatex.core.exceptions import LuminaError
from luminatex.version import get_version

from .commands import export, new, render, store_app, symbols
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Render a LaTeX subset to HTML and paginated PDF.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def configure(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase diagnostic detail."),
    ] = 0,
    debug: Annotated[bool, typer.Option("--debug", help="Show full tracebacks on errors.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version."),
    ] = False,
) -> None:
    """Configure diagnostics shared by every command."""
    _ = version
    set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


app.command()(render)
app.command()(export)
app.command()(new)
app.command()(symbols)
app.add_typer(store_app, name="store")


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        elif isinstance(exc, LuminaError):
            emit_error(str(exc), exception=exc)
        else:
            emit_error(f"Unexpected failure: {exc}", exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
