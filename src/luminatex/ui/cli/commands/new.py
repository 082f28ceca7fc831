"""Implementation of the ``luminatex new`` and ``luminatex symbols`` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from luminatex.core.exceptions import PreconditionError
from luminatex.core.templates import DEFAULT_TEMPLATE, TEMPLATES, get_template, iter_symbols

from ..state import get_cli_state
from ..utils import write_output_file


def new(
    name: Annotated[str, typer.Argument(help="Document name; '.tex' is appended when missing.")],
    template: Annotated[
        str,
        typer.Option("--template", "-t", help=f"Starter template ({', '.join(TEMPLATES)})."),
    ] = DEFAULT_TEMPLATE,
    directory: Annotated[
        Path,
        typer.Option("--directory", "-d", help="Directory receiving the new document.", file_okay=False),
    ] = Path(),
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file.")] = False,
) -> None:
    """Create a new source document from a starter template."""
    try:
        content = get_template(template)
    except PreconditionError as exc:
        raise typer.BadParameter(str(exc), param_hint="--template") from exc

    filename = name if name.endswith(".tex") else f"{name}.tex"
    target = directory / filename
    if target.exists() and not force:
        raise typer.BadParameter(f"'{target}' already exists. Use --force to overwrite.")

    write_output_file(target, content)
    get_cli_state().console.print(f"[green]Created[/] {target} from the '{template}' template")


def symbols() -> None:
    """List the math symbol palette."""
    from rich.table import Table

    table = Table("Category", "Snippet")
    for category, snippet in iter_symbols():
        table.add_row(category, snippet)
    get_cli_state().console.print(table)


__all__ = ["new", "symbols"]
