"""CLI command implementations exposed via `luminatex.ui.cli`."""

from __future__ import annotations

from .export import export
from .new import new, symbols
from .render import render
from .store import app as store_app


__all__ = ["export", "new", "render", "store_app", "symbols"]
