"""Public façade for embedding LuminaTeX in other applications."""

from __future__ import annotations

from .service import RenderedDocument, RenderService


__all__ = ["RenderService", "RenderedDocument"]
