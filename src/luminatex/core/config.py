"""Configuration models used by the renderer and the exporter.

RenderConfig

`math_backend` (`str`)
: Name of the math typesetting backend. Only ``"mathml"`` ships with the
  package.

`standalone_html` (`bool`)
: Wrap HTML output in a complete page with the paper stylesheet.

ExportConfig

`paper` (`str`)
: Physical page format of the exported PDF: ``a4`` (default), ``a5``,
  ``letter`` or ``legal``.

`orientation` (`str`)
: ``portrait`` (default) or ``landscape``.

`scale` (`float`)
: Raster scale factor applied to the surface width. ``2`` doubles the pixel
  density of the embedded image.

`surface_width` (`int`)
: Width of the rendered surface in CSS pixels before scaling.

`margin` (`int`)
: Inner padding of the surface in CSS pixels.

`background` (`str`)
: Surface background colour, any colour Pillow understands (``#ffffff``,
  ``white``, ``rgb(255, 255, 255)``).

LuminaConfig

`render` (`RenderConfig`)
: Rendering options.

`export` (`ExportConfig`)
: PDF export options.

`store_path` (`Path | None`)
: JSON file holding persisted sources. Defaults to ``sources.json`` under
  ``$LUMINATEX_HOME`` (``~/.luminatex``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigError


KNOWN_PAPERS = ("a4", "a5", "letter", "legal")
HOME_ENV = "LUMINATEX_HOME"


def default_home() -> Path:
    """Return the user directory holding persisted sources."""
    env_root = os.environ.get(HOME_ENV)
    if env_root:
        return Path(env_root).expanduser()
    return Path.home() / ".luminatex"


class RenderConfig(BaseModel):
    """Options applied when rendering a source document."""

    model_config = ConfigDict(extra="forbid")

    math_backend: Literal["mathml"] = "mathml"
    standalone_html: bool = False


class ExportConfig(BaseModel):
    """Options applied when exporting a rendered surface to PDF."""

    model_config = ConfigDict(extra="forbid")

    paper: str = "a4"
    orientation: Literal["portrait", "landscape"] = "portrait"
    scale: float = Field(default=2.0, gt=0, le=8)
    surface_width: int = Field(default=794, gt=0)
    margin: int = Field(default=48, ge=0)
    background: str = "#ffffff"

    @field_validator("paper", mode="before")
    @classmethod
    def _normalise_paper(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("paper must be a string")
        cleaned = value.strip().lower()
        if cleaned.endswith("paper"):
            cleaned = cleaned[: -len("paper")]
        if cleaned not in KNOWN_PAPERS:
            raise ValueError(
                f"Unsupported paper format '{value}'. Expected one of: {', '.join(KNOWN_PAPERS)}."
            )
        return cleaned

    @field_validator("background")
    @classmethod
    def _check_background(cls, value: str) -> str:
        try:
            ImageColor.getrgb(value)
        except ValueError as exc:
            raise ValueError(f"Unsupported background colour '{value}'.") from exc
        return value


class LuminaConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid")

    render: RenderConfig = Field(default_factory=RenderConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    store_path: Path | None = None

    def resolved_store_path(self) -> Path:
        """Return the store location, falling back to the user directory."""
        if self.store_path is not None:
            return self.store_path.expanduser()
        return default_home() / "sources.json"


def load_config(path: Path | str | None = None) -> LuminaConfig:
    """Load a YAML configuration file, returning defaults when ``path`` is None."""
    if path is None:
        return LuminaConfig()

    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{config_path}'.") from exc

    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration file '{config_path}'.") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration file '{config_path}' must contain a mapping.")

    try:
        return LuminaConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in '{config_path}': {exc}") from exc


__all__ = [
    "ExportConfig",
    "HOME_ENV",
    "KNOWN_PAPERS",
    "LuminaConfig",
    "RenderConfig",
    "default_home",
    "load_config",
]
