from __future__ import annotations

import logging
from pathlib import Path

import pytest

from luminatex.api import RenderedDocument, RenderService
from luminatex.core.config import ExportConfig, LuminaConfig, RenderConfig
from luminatex.core.diagnostics import LoggingEmitter
from luminatex.core.exceptions import ExportError, ExportInProgressError, PreconditionError
from luminatex.core.resolver import Typeset


class FakeBackend:
    def typeset(self, content: str, *, display: bool) -> Typeset:
        if content == "bad":
            return Typeset(error="unsupported")
        return Typeset(markup=f"<math>{content}</math>")


@pytest.fixture
def service(tmp_path: Path) -> RenderService:
    config = LuminaConfig(
        export=ExportConfig(scale=1.0),
        store_path=tmp_path / "store.json",
    )
    return RenderService(config, backend=FakeBackend())


def test_render_returns_document(service: RenderService) -> None:
    document = service.render("$a$ and $bad$", name="sample")
    assert isinstance(document, RenderedDocument)
    assert document.name == "sample"
    assert document.source == "$a$ and $bad$"
    assert document.math_failures == 1
    assert not document.is_empty


def test_to_html_follows_config() -> None:
    config = LuminaConfig(render=RenderConfig(standalone_html=True))
    service = RenderService(config, backend=FakeBackend())
    document = service.render("\\section{Intro}", name="intro")

    assert service.to_html(document).startswith("<!DOCTYPE html>")
    assert service.to_html(document, standalone=False) == (
        '<div class="latex-document"><h1 class="latex-h1">Intro</h1></div>'
    )


def test_export_pdf_writes_file(service: RenderService, tmp_path: Path) -> None:
    document = service.render("\\section{Export}\nBody text.")
    result = service.export_pdf(document, tmp_path / "doc.pdf")
    assert result.pages == 1
    assert (tmp_path / "doc.pdf").exists()


def test_empty_document_cannot_be_exported(service: RenderService, tmp_path: Path) -> None:
    document = service.render("")
    with pytest.raises(PreconditionError):
        service.export_pdf(document, tmp_path / "empty.pdf")
    assert not (tmp_path / "empty.pdf").exists()


def test_concurrent_export_is_rejected(service: RenderService, tmp_path: Path) -> None:
    document = service.render("text")
    service._export_lock.acquire()
    try:
        with pytest.raises(ExportInProgressError):
            service.export_pdf(document, tmp_path / "busy.pdf")
    finally:
        service._export_lock.release()

    assert service.export_pdf(document, tmp_path / "later.pdf").pages == 1


def test_open_store_uses_configured_path(service: RenderService, tmp_path: Path) -> None:
    store = service.open_store()
    store.save("draft", "\\section{Draft}")
    assert store.path == tmp_path / "store.json"
    assert service.open_store().load("draft") == "\\section{Draft}"


@pytest.mark.parametrize("source", ["   \n\n  ", "\\end{itemize}", "\\section{}\n\n"])
def test_documents_without_visible_content_are_empty(service: RenderService, source: str) -> None:
    document = service.render(source)
    assert document.is_empty
    with pytest.raises(PreconditionError):
        service.export_pdf(document, "unused.pdf")


def test_rasterize_failure_becomes_export_error(tmp_path: Path) -> None:
    broken = ExportConfig.model_construct(background="not-a-colour")
    service = RenderService(LuminaConfig(export=broken), backend=FakeBackend())
    document = service.render("text", name="broken")

    with pytest.raises(ExportError) as excinfo:
        service.export_pdf(document, tmp_path / "broken.pdf")
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert not (tmp_path / "broken.pdf").exists()


def test_default_emitter_logs_events(caplog: pytest.LogCaptureFixture) -> None:
    service = RenderService(backend=FakeBackend())
    assert isinstance(service.emitter, LoggingEmitter)
    with caplog.at_level(logging.INFO):
        service.render("$a$ and $bad$")
    assert "Re-rendered 3 node(s), 1 math error(s)" in caplog.messages
