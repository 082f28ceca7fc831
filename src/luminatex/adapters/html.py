"""HTML presentation of a render tree.

The tree is turned into markup by building BeautifulSoup tags, never by string
interpolation: every text node is inserted as a ``NavigableString`` and is
escaped on output. The only markup parsed back in verbatim is the typeset output
of the math backend.
"""

from __future__ import annotations

from collections.abc import Iterable

from bs4 import BeautifulSoup
from bs4.element import Tag

from luminatex.core.nodes import (
    Emphasis,
    EmphasisKind,
    Heading,
    ListBlock,
    ListClose,
    ListItem,
    MathBlock,
    MathInline,
    ParagraphBreak,
    RenderNode,
    Text,
)


PARSER = "html.parser"

EMPHASIS_TAGS = {
    EmphasisKind.BOLD: "strong",
    EmphasisKind.ITALIC: "em",
    EmphasisKind.UNDERLINE: "u",
}

PAPER_STYLESHEET = """
body { background: #e5e7eb; margin: 0; padding: 2rem 0; }
.paper { background: #ffffff; color: #111827; width: 794px; margin: 0 auto;
  padding: 48px; box-sizing: border-box; font-family: "Latin Modern Roman", serif; }
.latex-h1 { font-size: 1.8rem; margin: 0 0 1rem; }
.latex-h2 { font-size: 1.35rem; margin: 1.2rem 0 0.6rem; }
.latex-ul { margin: 0.5rem 0 0.5rem 1.5rem; }
.math-block { text-align: center; margin: 1rem 0; }
.math-error { color: #dc2626; font-family: monospace; }
"""


class HtmlPresenter:
    """Append render nodes to a BeautifulSoup document."""

    def __init__(self) -> None:
        self.soup = BeautifulSoup("", PARSER)

    def present(self, nodes: Iterable[RenderNode]) -> Tag:
        container = self.soup.new_tag("div", attrs={"class": "latex-document"})
        self._append_all(container, nodes)
        return container

    def _append_all(self, parent: Tag, nodes: Iterable[RenderNode]) -> None:
        for node in nodes:
            self._append(parent, node)

    def _append(self, parent: Tag, node: RenderNode) -> None:
        soup = self.soup
        match node:
            case Text(text=text):
                parent.append(soup.new_string(text))
            case Heading(level=level, children=children):
                tag = soup.new_tag(f"h{level}", attrs={"class": f"latex-h{level}"})
                self._append_all(tag, children)
                parent.append(tag)
            case Emphasis(kind=kind, children=children):
                tag = soup.new_tag(EMPHASIS_TAGS[kind])
                self._append_all(tag, children)
                parent.append(tag)
            case ListBlock(children=children):
                tag = soup.new_tag("ul", attrs={"class": "latex-ul"})
                self._append_all(tag, children)
                parent.append(tag)
            case ListItem(children=children):
                tag = soup.new_tag("li")
                self._append_all(tag, children)
                parent.append(tag)
            case ListClose():
                # An orphan list terminator has nothing to close.
                return
            case ParagraphBreak():
                parent.append(soup.new_tag("br"))
                parent.append(soup.new_tag("br"))
            case MathBlock() | MathInline():
                parent.append(self._math(node))
            case _:
                raise TypeError(f"Unsupported render node: {node!r}")

    def _math(self, node: MathBlock | MathInline) -> Tag:
        block = isinstance(node, MathBlock)
        if node.failed:
            tag = self.soup.new_tag("span", attrs={"class": "math-error"})
            if node.error:
                tag["title"] = node.error
            tag.string = node.source
            return tag

        tag = self.soup.new_tag(
            "div" if block else "span",
            attrs={"class": "math-block" if block else "math-inline"},
        )
        fragment = BeautifulSoup(node.markup or "", PARSER)
        for child in list(fragment.contents):
            tag.append(child.extract())
        return tag


def render_html(
    nodes: Iterable[RenderNode],
    *,
    standalone: bool = False,
    title: str = "Document",
) -> str:
    """Serialise render nodes to HTML, optionally as a complete page."""
    presenter = HtmlPresenter()
    container = presenter.present(nodes)
    if not standalone:
        return str(container)

    soup = presenter.soup
    page = BeautifulSoup("<!DOCTYPE html><html><head></head><body></body></html>", PARSER)
    head = page.head
    body = page.body
    assert head is not None and body is not None
    meta = page.new_tag("meta", attrs={"charset": "utf-8"})
    head.append(meta)
    title_tag = page.new_tag("title")
    title_tag.string = title
    head.append(title_tag)
    style = page.new_tag("style")
    style.string = PAPER_STYLESHEET
    head.append(style)
    paper = soup.new_tag("div", attrs={"class": "paper"})
    paper.append(container)
    body.append(paper)
    return str(page)


__all__ = ["EMPHASIS_TAGS", "HtmlPresenter", "PAPER_STYLESHEET", "render_html"]
