from __future__ import annotations

from collections.abc import Mapping
import math
from pathlib import Path

from PIL import Image
import pytest
from reportlab.lib.pagesizes import A4

from luminatex.adapters.export import RasterSurface, export_pdf, page_size, rasterize
import luminatex.adapters.export.pdf as pdf_module
from luminatex.core.config import ExportConfig
from luminatex.core.exceptions import ExportError, PreconditionError
from luminatex.core.pipeline import render
from luminatex.core.resolver import Typeset


class FakeBackend:
    def typeset(self, content: str, *, display: bool) -> Typeset:
        if content == "bad":
            return Typeset(error="unsupported")
        return Typeset(markup=f"<math>{content}</math>")


class RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, object]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, object]) -> None:
        self.events.append((name, dict(payload)))


SAMPLE = (
    "\\section{Report}\n"
    "\\subsection{Findings}\n"
    "Plain text with \\textbf{bold}, \\textit{italic} and \\underline{underlined} words.\n"
    "\n"
    "\\begin{itemize}\n"
    "\\item First point with $x^2$\n"
    "\\item Second point\n"
    "\\end{itemize}\n"
    "\\[ a + b \\] and $bad$"
)


def test_rasterize_uses_scaled_surface_width() -> None:
    surface = rasterize(render(SAMPLE, FakeBackend()), ExportConfig(scale=1.5))
    assert surface.width == round(794 * 1.5)
    assert surface.height > 0
    assert surface.to_png().startswith(b"\x89PNG")


def test_longer_documents_produce_taller_surfaces() -> None:
    backend = FakeBackend()
    short = rasterize(render("One line.", backend))
    long = rasterize(render("\n\n".join(["A paragraph of text."] * 30), backend))
    assert long.height > short.height
    assert long.width == short.width


def test_export_single_page(tmp_path: Path) -> None:
    surface = rasterize(render(SAMPLE, FakeBackend()))
    target = tmp_path / "out" / "report.pdf"
    result = export_pdf(surface, target)

    assert result.path == target
    assert result.pages == 1
    assert target.read_bytes().startswith(b"%PDF")


def test_export_paginates_tall_surfaces(tmp_path: Path) -> None:
    surface = RasterSurface(Image.new("RGB", (100, 1000), "white"))
    result = export_pdf(surface, tmp_path / "tall.pdf")

    page_width, page_height = A4
    image_height = 1000 * page_width / 100
    assert result.image_height == pytest.approx(image_height)
    assert result.pages == math.ceil(image_height / page_height)
    assert result.page_size == pytest.approx(A4)


def test_landscape_page_size() -> None:
    width, height = page_size(ExportConfig(paper="letter", orientation="landscape"))
    assert width > height


def test_export_emits_start_and_complete_events(tmp_path: Path) -> None:
    emitter = RecordingEmitter()
    surface = RasterSurface(Image.new("RGB", (10, 10), "white"))
    target = tmp_path / "events.pdf"
    export_pdf(surface, target, emitter=emitter)

    assert emitter.events == [
        ("export_start", {"path": str(target)}),
        ("export_complete", {"path": str(target), "pages": 1}),
    ]


def test_export_requires_a_surface(tmp_path: Path) -> None:
    with pytest.raises(PreconditionError):
        export_pdf(None, tmp_path / "none.pdf")  # type: ignore[arg-type]


def test_export_failure_is_wrapped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_canvas(*_args: object, **_kwargs: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(pdf_module.canvas, "Canvas", broken_canvas)
    surface = RasterSurface(Image.new("RGB", (10, 10), "white"))

    with pytest.raises(ExportError) as excinfo:
        export_pdf(surface, tmp_path / "broken.pdf")
    assert isinstance(excinfo.value.__cause__, OSError)
