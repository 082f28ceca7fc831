"""Render tree produced by the pipeline.

The tree is a closed set of frozen dataclasses. Presentation layers dispatch on
the concrete type with ``match`` statements instead of calling methods on the
nodes, which keeps the nodes plain data and makes structural comparison of two
renders a simple equality check.

Node kinds

`Heading`
: ``\\section`` (level 1) or ``\\subsection`` (level 2).

`Emphasis`
: ``\\textbf``, ``\\textit`` or ``\\underline``.

`ListBlock` / `ListItem` / `ListClose`
: ``itemize`` environments, their ``\\item`` lines, and the marker emitted for
  an ``\\end{itemize}`` that closes nothing.

`MathBlock` / `MathInline`
: typeset math, or an error placeholder when ``error`` is set.

`Text` / `ParagraphBreak`
: literal text and blank-line paragraph separators.

`RawFragment` is not a render node: it is the text unit the translator hands to
the math resolver, still carrying its offset in the original source.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Union


class EmphasisKind(Enum):
    """Inline emphasis flavours."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"


@dataclass(frozen=True, slots=True)
class RawFragment:
    """Source text that has not been scanned for math yet."""

    text: str
    offset: int


@dataclass(frozen=True, slots=True)
class Text:
    text: str


@dataclass(frozen=True, slots=True)
class ParagraphBreak:
    pass


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Emphasis:
    kind: EmphasisKind
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class ListItem:
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class ListBlock:
    """An itemize environment; ``closed`` is False when the source never ends it."""

    children: tuple[Node, ...] = ()
    closed: bool = True


@dataclass(frozen=True, slots=True)
class ListClose:
    """An ``\\end{itemize}`` without a matching ``\\begin{itemize}``."""


@dataclass(frozen=True, slots=True)
class _Math:
    source: str
    markup: str | None = None
    error: str | None = None
    span: tuple[int, int] = (0, 0)

    @property
    def failed(self) -> bool:
        """Return True when the node is an error placeholder."""
        return self.markup is None


@dataclass(frozen=True, slots=True)
class MathBlock(_Math):
    """Display math rendered on its own line."""


@dataclass(frozen=True, slots=True)
class MathInline(_Math):
    """Math flowing with the surrounding text."""


RenderNode = Union[
    Heading,
    Text,
    Emphasis,
    ListBlock,
    ListItem,
    ListClose,
    MathBlock,
    MathInline,
    ParagraphBreak,
]
Node = Union[RenderNode, RawFragment]

CONTAINER_TYPES = (Heading, Emphasis, ListBlock, ListItem)
MATH_TYPES = (MathBlock, MathInline)


def walk(nodes: tuple[Node, ...] | list[Node]) -> Iterator[Node]:
    """Yield every node depth-first in document order."""
    for node in nodes:
        yield node
        if isinstance(node, CONTAINER_TYPES):
            yield from walk(node.children)


def plain_text(nodes: tuple[Node, ...] | list[Node]) -> str:
    """Return the concatenated textual content of a node sequence."""
    parts: list[str] = []
    for node in walk(nodes):
        if isinstance(node, (Text, RawFragment)):
            parts.append(node.text)
        elif isinstance(node, MATH_TYPES):
            parts.append(node.source)
    return "".join(parts)


__all__ = [
    "CONTAINER_TYPES",
    "MATH_TYPES",
    "Emphasis",
    "EmphasisKind",
    "Heading",
    "ListBlock",
    "ListClose",
    "ListItem",
    "MathBlock",
    "MathInline",
    "Node",
    "ParagraphBreak",
    "RawFragment",
    "RenderNode",
    "Text",
    "plain_text",
    "walk",
]
