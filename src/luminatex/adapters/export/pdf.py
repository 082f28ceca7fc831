"""Place a raster surface on PDF pages using ReportLab.

The surface is scaled so its width matches the page width; its height follows
the surface aspect ratio. When the scaled image is taller than one page the
same image is drawn again on the next page, shifted up by one page height, so
each page shows the next slice.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from pathlib import Path

from reportlab.lib.pagesizes import A4, A5, landscape, legal, letter, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from luminatex.core.config import ExportConfig
from luminatex.core.diagnostics import DiagnosticEmitter, record_event
from luminatex.core.exceptions import ExportError, PreconditionError

from .raster import RasterSurface


logger = logging.getLogger(__name__)

PAGE_SIZES: dict[str, tuple[float, float]] = {
    "a4": A4,
    "a5": A5,
    "letter": letter,
    "legal": legal,
}


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Where an export was written and how it was laid out."""

    path: Path
    pages: int
    page_size: tuple[float, float]
    image_height: float


def page_size(config: ExportConfig) -> tuple[float, float]:
    """Return the page size in points for the configured paper and orientation."""
    size = PAGE_SIZES[config.paper]
    return landscape(size) if config.orientation == "landscape" else portrait(size)


def export_pdf(
    surface: RasterSurface,
    output_path: Path | str,
    config: ExportConfig | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> ExportResult:
    """Write ``surface`` to ``output_path`` as a paginated PDF."""
    if surface is None or surface.width <= 0 or surface.height <= 0:
        raise PreconditionError("Cannot export an empty surface; render the document first.")

    settings = config or ExportConfig()
    target = Path(output_path)
    page_width, page_height = page_size(settings)
    image_height = surface.height * page_width / surface.width
    pages = max(1, math.ceil(round(image_height / page_height, 6)))

    record_event(emitter, "export_start", {"path": str(target)})
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        pdf = canvas.Canvas(str(target), pagesize=(page_width, page_height))
        pdf.setTitle(target.stem)
        reader = ImageReader(surface.image)
        for index in range(pages):
            # ReportLab's origin is the bottom-left corner of the page.
            y = page_height - image_height + index * page_height
            pdf.drawImage(reader, 0, y, width=page_width, height=image_height)
            pdf.showPage()
        pdf.save()
    except Exception as exc:
        logger.error("PDF export failed for %s", target)
        raise ExportError(f"PDF export failed: {target}") from exc

    logger.info("Exported %d page(s) to %s", pages, target)
    record_event(emitter, "export_complete", {"path": str(target), "pages": pages})
    return ExportResult(
        path=target,
        pages=pages,
        page_size=(page_width, page_height),
        image_height=image_height,
    )


__all__ = ["ExportResult", "PAGE_SIZES", "export_pdf", "page_size"]
