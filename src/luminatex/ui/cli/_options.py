"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
EXPORT_PANEL = "Export"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="LaTeX-subset source document (.tex).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML configuration file.",
        exists=True,
        dir_okay=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output file. Defaults to stdout for text or next to the input for PDF.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

StandaloneOption = Annotated[
    bool,
    typer.Option(
        "--standalone/--fragment",
        help="Wrap HTML in a complete page with the paper stylesheet.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

PaperOption = Annotated[
    str | None,
    typer.Option(
        "--paper",
        help="Page format of the exported PDF (a4, a5, letter, legal).",
        rich_help_panel=EXPORT_PANEL,
    ),
]

LandscapeOption = Annotated[
    bool,
    typer.Option(
        "--landscape",
        help="Export pages in landscape orientation.",
        rich_help_panel=EXPORT_PANEL,
    ),
]

ScaleOption = Annotated[
    float | None,
    typer.Option(
        "--scale",
        help="Raster scale factor used before embedding the page image.",
        min=0.1,
        max=8.0,
        rich_help_panel=EXPORT_PANEL,
    ),
]

__all__ = [
    "ConfigOption",
    "EXPORT_PANEL",
    "INPUTS_PANEL",
    "InputPathArgument",
    "LandscapeOption",
    "OUTPUT_PANEL",
    "OutputPathOption",
    "PaperOption",
    "ScaleOption",
    "StandaloneOption",
]
