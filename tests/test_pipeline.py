from __future__ import annotations

from collections.abc import Mapping

import pytest

from luminatex.adapters.mathml import MathMLBackend
from luminatex.core.exceptions import PreconditionError
from luminatex.core.nodes import (
    MATH_TYPES,
    Heading,
    ListBlock,
    ListItem,
    MathBlock,
    MathInline,
    ParagraphBreak,
    Text,
    walk,
)
from luminatex.core.pipeline import RenderPipeline, render
from luminatex.core.resolver import Typeset


class CountingBackend:
    def __init__(self) -> None:
        self.calls = 0

    def typeset(self, content: str, *, display: bool) -> Typeset:
        self.calls += 1
        return Typeset(markup=f"<m>{content}</m>")


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


def test_heading_text_and_inline_math() -> None:
    nodes = render("\\section{Intro} Energy is $E=mc^2$.")

    heading, text, math, tail = nodes
    assert heading == Heading(1, (Text("Intro"),))
    assert text == Text(" Energy is ")
    assert isinstance(math, MathInline)
    assert math.source == "E=mc^2"
    assert math.markup is not None and "<math" in math.markup
    assert "<msup>" in math.markup
    assert tail == Text(".")


def test_render_is_idempotent() -> None:
    source = (
        "\\section{Report}\n"
        "\\begin{itemize}\n"
        "\\item \\textbf{Bold} and $x^2$\n"
        "\\end{itemize}\n"
        "\n"
        "\\[ \\frac{a}{b} \\]"
    )
    pipeline = RenderPipeline()
    assert pipeline.render(source) == pipeline.render(source)
    assert render(source) == render(source)


def test_math_failure_is_isolated() -> None:
    nodes = render("Before \\[ \\frac{a}{ \\] after $x$")

    block = next(node for node in nodes if isinstance(node, MathBlock))
    inline = next(node for node in nodes if isinstance(node, MathInline))
    assert block.failed is True
    assert block.error
    assert block.source == " \\frac{a}{ "
    assert inline.failed is False
    assert Text("Before ") in nodes
    assert Text(" after ") in nodes


def test_math_spans_index_original_source() -> None:
    source = "\\section{Heading $a$}\ntext \\(b\\) and $$c$$"
    nodes = render(source, CountingBackend())
    spans = [node.span for node in walk(nodes) if isinstance(node, MATH_TYPES)]
    assert [source[start:end] for start, end in spans] == ["$a$", "\\(b\\)", "$$c$$"]


def test_math_inside_list_item_is_resolved() -> None:
    nodes = render("\\begin{itemize}\n\\item value $x$\n\\end{itemize}", CountingBackend())
    (block,) = nodes
    assert isinstance(block, ListBlock)
    (item,) = [child for child in block.children if isinstance(child, ListItem)]
    assert item.children == (Text("value "), MathInline(source="x", markup="<m>x</m>", span=(28, 31)))


def test_source_without_math_skips_backend() -> None:
    backend = CountingBackend()
    nodes = render("\\section{Plain}\nJust words.", backend)
    assert not any(isinstance(node, MATH_TYPES) for node in walk(nodes))
    assert backend.calls == 0


def test_empty_source_renders_nothing() -> None:
    assert render("", CountingBackend()) == ()


def test_missing_source_is_a_precondition_error() -> None:
    with pytest.raises(PreconditionError):
        render(None, CountingBackend())  # type: ignore[arg-type]


def test_render_complete_event_reports_failures() -> None:
    emitter = RecordingEmitter()
    RenderPipeline(MathMLBackend(), emitter=emitter).render("$\\frac{a}{$ and $b$")

    names = [name for name, _ in emitter.events]
    assert names == ["math_failure", "render_complete"]
    assert emitter.events[-1][1]["math_failures"] == 1


def test_mathml_backend_returns_empty_math_for_blank_content() -> None:
    result = MathMLBackend().typeset("   ", display=True)
    assert result.ok
    assert result.markup is not None and 'display="block"' in result.markup


def test_intro_section_scenario() -> None:
    heading, paragraph, block = render("\\section{Intro}\n\n\\[ E = mc^2 \\]")

    assert heading == Heading(1, (Text("Intro"),))
    assert paragraph == ParagraphBreak()
    assert isinstance(block, MathBlock)
    assert block.source == " E = mc^2 "
    assert block.markup is not None and 'display="block"' in block.markup


def test_dangling_double_dollar_stays_literal() -> None:
    backend = CountingBackend()
    assert render("cost $$x", backend) == (Text("cost $$x"),)
    assert backend.calls == 0
