"""High-level façade bundling rendering, presentation, and export.

Architecture
: `RenderService` owns a :class:`~luminatex.core.pipeline.RenderPipeline`
  and the configuration shared by every call. Each call re-derives the tree
  from scratch; the service never caches renders.
: `RenderedDocument` pairs the source with its render tree so presentation and
  export work from the same snapshot.
: Exports are guarded by a non-blocking lock: a second export requested while
  one is running fails fast with ``ExportInProgressError`` instead of queuing.

Usage Example
:
    >>> from luminatex.api.service import RenderService
    >>> service = RenderService()
    >>> document = service.render("\\\\section{Intro}")
    >>> service.to_html(document)
    '<div class="latex-document"><h1 class="latex-h1">Intro</h1></div>'
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from threading import Lock

from luminatex.adapters.export import ExportResult, RasterSurface, export_pdf, rasterize
from luminatex.adapters.html import render_html
from luminatex.core.config import LuminaConfig
from luminatex.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from luminatex.core.exceptions import (
    ExportError,
    ExportInProgressError,
    LuminaError,
    PreconditionError,
)
from luminatex.core.nodes import MATH_TYPES, ListItem, RenderNode, Text, walk
from luminatex.core.pipeline import RenderPipeline
from luminatex.core.resolver import MathBackend
from luminatex.core.storage import SourceStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderedDocument:
    """A source document and the render tree derived from it."""

    source: str
    nodes: tuple[RenderNode, ...]
    name: str = "document"

    @property
    def math_failures(self) -> int:
        return sum(1 for node in walk(self.nodes) if isinstance(node, MATH_TYPES) and node.failed)

    @property
    def is_empty(self) -> bool:
        """Return True when nothing in the tree would be drawn."""
        return not any(_is_visible(node) for node in walk(self.nodes))


def _is_visible(node: RenderNode) -> bool:
    if isinstance(node, Text):
        return bool(node.text.strip())
    if isinstance(node, MATH_TYPES):
        return node.failed or bool(node.source.strip())
    return isinstance(node, ListItem)


class RenderService:
    """Render sources and export the result using one configuration."""

    def __init__(
        self,
        config: LuminaConfig | None = None,
        *,
        backend: MathBackend | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or LuminaConfig()
        self.emitter = emitter if emitter is not None else LoggingEmitter()
        self.pipeline = RenderPipeline(backend, emitter=self.emitter)
        self._export_lock = Lock()

    def render(self, source: str, *, name: str = "document") -> RenderedDocument:
        """Render ``source`` into a :class:`RenderedDocument`."""
        nodes = self.pipeline.render(source)
        return RenderedDocument(source=source, nodes=nodes, name=name)

    def to_html(self, document: RenderedDocument, *, standalone: bool | None = None) -> str:
        """Present a rendered document as HTML."""
        if standalone is None:
            standalone = self.config.render.standalone_html
        return render_html(document.nodes, standalone=standalone, title=document.name)

    def rasterize(self, document: RenderedDocument) -> RasterSurface:
        """Draw a rendered document onto a raster surface."""
        if document.is_empty:
            raise PreconditionError("Cannot rasterize an empty document.")
        try:
            return rasterize(document.nodes, self.config.export)
        except LuminaError:
            raise
        except Exception as exc:
            raise ExportError(f"Could not rasterize '{document.name}'.") from exc

    def export_pdf(self, document: RenderedDocument, output_path: Path | str) -> ExportResult:
        """Rasterize ``document`` and write it to ``output_path`` as a PDF."""
        if not self._export_lock.acquire(blocking=False):
            raise ExportInProgressError("An export is already in progress.")
        try:
            surface = self.rasterize(document)
            return export_pdf(surface, output_path, self.config.export, emitter=self.emitter)
        except ExportError:
            logger.warning("PDF export failed: %s", output_path)
            raise
        finally:
            self._export_lock.release()

    def open_store(self) -> SourceStore:
        """Return the source store configured for this service."""
        return SourceStore(self.config.resolved_store_path())


__all__ = ["RenderService", "RenderedDocument"]
