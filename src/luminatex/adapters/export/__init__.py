"""Rasterize-and-paginate export of rendered documents."""

from __future__ import annotations

from .pdf import PAGE_SIZES, ExportResult, export_pdf, page_size
from .raster import RasterSurface, rasterize


__all__ = [
    "PAGE_SIZES",
    "ExportResult",
    "RasterSurface",
    "export_pdf",
    "page_size",
    "rasterize",
]
