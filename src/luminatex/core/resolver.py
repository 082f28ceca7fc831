"""Math delimiter resolver.

Math regions are located in the text fragments left by the translator and
replaced with typeset nodes. Delimiters are handled in a fixed sequence of
passes, one per :class:`DelimiterStyle`, in declaration order:

1. ``\\[ ... \\]`` (block)
2. ``$$ ... $$`` (block)
3. ``\\( ... \\)`` (inline)
4. ``$ ... $`` (inline, a dangling ``$$`` is never read as two of these)

Block forms run before inline forms so that ``$$x$$`` is never split into two
``$`` regions. Every pass only scans text that earlier passes left untouched: a
resolved region leaves the segment list as a :class:`MathRegion` and is never
seen again, so regions cannot overlap.

The typesetting engine sits behind the :class:`MathBackend` protocol. Backends
report failures as values; a failed region becomes an error placeholder and the
rest of the document renders normally.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
import re
from typing import Protocol, runtime_checkable

from .diagnostics import DiagnosticEmitter, record_event
from .nodes import (
    CONTAINER_TYPES,
    MathBlock,
    MathInline,
    Node,
    RawFragment,
    RenderNode,
    Text,
)


class DelimiterStyle(Enum):
    """Math delimiters, declared in resolution order."""

    BLOCK_BRACKET = ("\\[", "\\]", True)
    BLOCK_DOLLAR = ("$$", "$$", True)
    INLINE_PAREN = ("\\(", "\\)", False)
    INLINE_DOLLAR = ("$", "$", False)

    def __init__(self, opening: str, closing: str, display: bool) -> None:
        self.opening = opening
        self.closing = closing
        self.display = display

    @property
    def pattern(self) -> re.Pattern[str]:
        return _PATTERNS[self]


def _delimiter(token: str) -> str:
    # A dollar preceded by a backslash is an escaped literal. A lone dollar
    # never matches half of a ``$$`` left over by the block pass.
    escaped = re.escape(token)
    if token == "$":
        return rf"(?<![\\$]){escaped}(?!\$)"
    return rf"(?<!\\){escaped}" if token.startswith("$") else escaped


_PATTERNS: dict[DelimiterStyle, re.Pattern[str]] = {
    style: re.compile(
        _delimiter(style.opening) + r"(?P<content>[\s\S]*?)" + _delimiter(style.closing)
    )
    for style in DelimiterStyle
}


@dataclass(frozen=True, slots=True)
class MathRegion:
    """A delimited span of source text routed to the math backend."""

    style: DelimiterStyle
    content: str
    span: tuple[int, int]

    @property
    def display(self) -> bool:
        return self.style.display


@dataclass(frozen=True, slots=True)
class Typeset:
    """Outcome of a typesetting request: markup on success, error otherwise."""

    markup: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.markup is not None


@runtime_checkable
class MathBackend(Protocol):
    """Engine turning math source into visual markup. Must never raise."""

    def typeset(self, content: str, *, display: bool) -> Typeset: ...


Segment = RawFragment | MathRegion


def split_regions(fragment: RawFragment, style: DelimiterStyle) -> list[Segment]:
    """Split one text fragment around the regions matched by ``style``."""
    segments: list[Segment] = []
    position = 0
    text = fragment.text
    for match in style.pattern.finditer(text):
        if match.start() > position:
            segments.append(RawFragment(text[position : match.start()], fragment.offset + position))
        segments.append(
            MathRegion(
                style=style,
                content=match.group("content"),
                span=(fragment.offset + match.start(), fragment.offset + match.end()),
            )
        )
        position = match.end()
    if not segments:
        return [fragment]
    if position < len(text):
        segments.append(RawFragment(text[position:], fragment.offset + position))
    return segments


def find_regions(fragment: RawFragment) -> list[Segment]:
    """Run every delimiter pass over a fragment and return the final segments."""
    segments: list[Segment] = [fragment]
    for style in DelimiterStyle:
        next_segments: list[Segment] = []
        for segment in segments:
            if isinstance(segment, MathRegion):
                next_segments.append(segment)
            else:
                next_segments.extend(split_regions(segment, style))
        segments = next_segments
    return segments


class MathResolver:
    """Substitute math regions in a translated tree with typeset nodes."""

    def __init__(self, backend: MathBackend, *, emitter: DiagnosticEmitter | None = None) -> None:
        self.backend = backend
        self.emitter = emitter
        self.failures = 0

    def resolve(self, nodes: Iterable[Node]) -> tuple[RenderNode, ...]:
        resolved: list[RenderNode] = []
        for node in nodes:
            if isinstance(node, RawFragment):
                resolved.extend(self._resolve_fragment(node))
            elif isinstance(node, CONTAINER_TYPES):
                resolved.append(replace(node, children=self.resolve(node.children)))
            else:
                resolved.append(node)
        return tuple(resolved)

    def _resolve_fragment(self, fragment: RawFragment) -> list[RenderNode]:
        nodes: list[RenderNode] = []
        for segment in find_regions(fragment):
            if isinstance(segment, RawFragment):
                nodes.append(Text(segment.text))
            else:
                nodes.append(self._typeset(segment))
        return nodes

    def _typeset(self, region: MathRegion) -> MathBlock | MathInline:
        node_type = MathBlock if region.display else MathInline
        result = self.backend.typeset(region.content, display=region.display)
        if result.ok:
            return node_type(source=region.content, markup=result.markup, span=region.span)

        self.failures += 1
        error = result.error or "typesetting failed"
        record_event(
            self.emitter,
            "math_failure",
            {"style": region.style.name.lower(), "span": region.span, "error": error},
        )
        return node_type(source=region.content, error=error, span=region.span)


def resolve(
    nodes: Iterable[Node],
    backend: MathBackend,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[RenderNode, ...]:
    """Replace every math region in ``nodes`` with typeset or placeholder nodes."""
    return MathResolver(backend, emitter=emitter).resolve(nodes)


__all__ = [
    "DelimiterStyle",
    "MathBackend",
    "MathRegion",
    "MathResolver",
    "Segment",
    "Typeset",
    "find_regions",
    "resolve",
    "split_regions",
]
