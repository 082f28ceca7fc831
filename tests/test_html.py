from __future__ import annotations

from bs4 import BeautifulSoup
import pytest

from luminatex.adapters.html import render_html
from luminatex.core.nodes import ListClose, MathBlock, MathInline, ParagraphBreak, Text
from luminatex.core.pipeline import render
from luminatex.core.resolver import Typeset


class FakeBackend:
    def typeset(self, content: str, *, display: bool) -> Typeset:
        if content == "bad":
            return Typeset(error="unsupported")
        return Typeset(markup=f"<math><mi>{content}</mi></math>")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_headings_carry_level_classes(backend: FakeBackend) -> None:
    html = render_html(render("\\section{One}\\subsection{Two}", backend))
    soup = _soup(html)
    assert soup.find("h1", class_="latex-h1").get_text() == "One"
    assert soup.find("h2", class_="latex-h2").get_text() == "Two"


def test_emphasis_tags(backend: FakeBackend) -> None:
    html = render_html(render("\\textbf{b}\\textit{i}\\underline{u}", backend))
    assert html == '<div class="latex-document"><strong>b</strong><em>i</em><u>u</u></div>'


def test_list_renders_items(backend: FakeBackend) -> None:
    source = "\\begin{itemize}\n\\item One\n\\item Two\n\\end{itemize}"
    soup = _soup(render_html(render(source, backend)))
    items = soup.select("ul.latex-ul > li")
    assert [item.get_text() for item in items] == ["One", "Two"]


def test_orphan_list_close_renders_nothing() -> None:
    assert render_html((ListClose(),)) == '<div class="latex-document"></div>'


def test_paragraph_break_renders_two_line_breaks() -> None:
    html = render_html((Text("a"), ParagraphBreak(), Text("b")))
    assert html == '<div class="latex-document">a<br/><br/>b</div>'


def test_text_is_escaped(backend: FakeBackend) -> None:
    html = render_html(render("\\textbf{<script>alert(1)</script>} & more", backend))
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&amp; more" in html


def test_math_markup_is_embedded(backend: FakeBackend) -> None:
    soup = _soup(render_html(render("$x$ and \\[y\\]", backend)))
    inline = soup.find("span", class_="math-inline")
    block = soup.find("div", class_="math-block")
    assert inline.find("mi").get_text() == "x"
    assert block.find("mi").get_text() == "y"


def test_failed_math_renders_error_placeholder() -> None:
    node = MathInline(source="\\frac{a}{", error="NoAvailableTokensError")
    soup = _soup(render_html((node,)))
    placeholder = soup.find("span", class_="math-error")
    assert placeholder.get_text() == "\\frac{a}{"
    assert placeholder["title"] == "NoAvailableTokensError"


def test_failed_block_math_uses_same_placeholder(backend: FakeBackend) -> None:
    nodes = render("\\[bad\\]", backend)
    assert isinstance(nodes[0], MathBlock)
    soup = _soup(render_html(nodes))
    assert soup.find("span", class_="math-error")["title"] == "unsupported"
    assert soup.find("div", class_="math-block") is None


def test_standalone_page_wraps_fragment(backend: FakeBackend) -> None:
    html = render_html(render("\\section{Page}", backend), standalone=True, title="Paper")
    assert html.startswith("<!DOCTYPE html>")
    soup = _soup(html)
    assert soup.title.get_text() == "Paper"
    assert soup.find("div", class_="paper").find("h1").get_text() == "Page"
    assert ".latex-h1" in soup.style.get_text()
