"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer

from luminatex.core.config import LuminaConfig, load_config
from luminatex.core.exceptions import ConfigError

from .state import emit_error


def read_source(path: Path) -> str:
    """Return the text of a source document."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        emit_error(f"Unable to read '{path}'.", exception=exc)
        raise typer.Exit(code=1) from exc


def write_output_file(target: Path, content: str) -> None:
    """Persist text output to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors
        raise OSError(f"Failed to write output to '{target}': {exc}") from exc


def resolve_config(path: Path | None) -> LuminaConfig:
    """Load the configuration file given on the command line."""
    try:
        return load_config(path)
    except ConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def default_pdf_path(source: Path) -> Path:
    """Return the PDF written next to ``source`` when no output is given."""
    return source.with_suffix(".pdf")


__all__ = ["default_pdf_path", "read_source", "resolve_config", "write_output_file"]
