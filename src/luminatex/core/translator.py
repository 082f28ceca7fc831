"""Structural markup translator.

The translator works in two explicit stages:

`tokenize`
: scan the source once and yield typed :class:`Command` tokens interleaved with
  :class:`~luminatex.core.nodes.RawFragment` text, each carrying its offsets in
  the original source.

`translate`
: fold the token stream into a tree of render nodes. Text is left as
  ``RawFragment`` so the math resolver can run on it afterwards.

Only a closed vocabulary is recognised. Anything else, including unterminated
arguments, stays literal text. List environments are never validated: an
``\\end{itemize}`` that closes nothing becomes a ``ListClose`` marker and an
environment that is never closed runs to the end of the document.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
import re

from .exceptions import PreconditionError
from .nodes import (
    Emphasis,
    EmphasisKind,
    Heading,
    ListBlock,
    ListClose,
    ListItem,
    Node,
    ParagraphBreak,
    RawFragment,
)


class CommandKind(Enum):
    """Closed set of structural directives."""

    SECTION = "section"
    SUBSECTION = "subsection"
    BOLD = "textbf"
    ITALIC = "textit"
    UNDERLINE = "underline"
    LIST_BEGIN = "begin{itemize}"
    LIST_END = "end{itemize}"
    LIST_ITEM = "item"


HEADING_LEVELS = {CommandKind.SECTION: 1, CommandKind.SUBSECTION: 2}
EMPHASIS_KINDS = {
    CommandKind.BOLD: EmphasisKind.BOLD,
    CommandKind.ITALIC: EmphasisKind.ITALIC,
    CommandKind.UNDERLINE: EmphasisKind.UNDERLINE,
}
INLINE_COMMANDS = frozenset(EMPHASIS_KINDS)

PARAGRAPH_BREAK = "\n\n"

_COMMAND_PATTERN = re.compile(
    r"""
    \\(?P<braced>subsection|section|textbf|textit|underline)\{
    |\\(?P<environment>begin|end)\{itemize\}
    |\\(?P<item>item)(?![A-Za-z])[ \t]*
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class Command:
    """A recognised structural directive and where it sits in the source."""

    kind: CommandKind
    span: tuple[int, int]
    argument: str | None = None
    argument_offset: int = field(default=0, compare=False)


Token = Command | RawFragment


def find_closing_brace(source: str, start: int) -> int | None:
    """Return the index of the brace closing the group opened before ``start``.

    Braces escaped with a backslash are ignored. ``None`` means the group is
    never closed.
    """
    depth = 1
    index = start
    length = len(source)
    while index < length:
        char = source[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


def tokenize(
    source: str,
    *,
    offset: int = 0,
    allowed: frozenset[CommandKind] | None = None,
) -> Iterator[Token]:
    """Yield commands and text fragments in source order.

    ``allowed`` restricts recognition to a subset of commands; everything else
    is passed through as text. ``offset`` is added to every reported position.
    """
    cursor = 0
    text_start = 0
    length = len(source)

    while cursor < length:
        match = _COMMAND_PATTERN.search(source, cursor)
        if match is None:
            break

        command = _read_command(source, match, offset)
        if command is None or (allowed is not None and command.kind not in allowed):
            cursor = match.start() + 1
            continue

        if match.start() > text_start:
            yield RawFragment(source[text_start : match.start()], offset + text_start)
        yield command
        cursor = text_start = command.span[1] - offset

    if text_start < length:
        yield RawFragment(source[text_start:], offset + text_start)


def _read_command(source: str, match: re.Match[str], offset: int) -> Command | None:
    if match.group("braced"):
        kind = CommandKind(match.group("braced"))
        closing = find_closing_brace(source, match.end())
        if closing is None:
            return None
        return Command(
            kind=kind,
            span=(offset + match.start(), offset + closing + 1),
            argument=source[match.end() : closing],
            argument_offset=offset + match.end(),
        )

    if match.group("environment"):
        kind = CommandKind.LIST_BEGIN if match.group("environment") == "begin" else CommandKind.LIST_END
        return Command(kind=kind, span=(offset + match.start(), offset + match.end()))

    # \item runs to the end of the current line.
    line_end = source.find("\n", match.end())
    if line_end == -1:
        line_end = len(source)
    return Command(
        kind=CommandKind.LIST_ITEM,
        span=(offset + match.start(), offset + line_end),
        argument=source[match.end() : line_end],
        argument_offset=offset + match.end(),
    )


@dataclass(slots=True)
class _ListFrame:
    children: list[Node] = field(default_factory=list)


class _TreeBuilder:
    """Fold a token stream into nested render nodes."""

    def __init__(self) -> None:
        self.root: list[Node] = []
        self.stack: list[_ListFrame] = []

    @property
    def target(self) -> list[Node]:
        return self.stack[-1].children if self.stack else self.root

    def feed(self, token: Token) -> None:
        if isinstance(token, RawFragment):
            self.target.extend(split_paragraphs(token))
            return

        kind = token.kind
        if kind in HEADING_LEVELS:
            self.target.append(Heading(HEADING_LEVELS[kind], _argument_children(token)))
        elif kind in EMPHASIS_KINDS:
            self.target.append(Emphasis(EMPHASIS_KINDS[kind], _argument_children(token)))
        elif kind is CommandKind.LIST_ITEM:
            self.target.append(ListItem(_item_children(token)))
        elif kind is CommandKind.LIST_BEGIN:
            self.stack.append(_ListFrame())
        elif kind is CommandKind.LIST_END:
            if self.stack:
                frame = self.stack.pop()
                self.target.append(ListBlock(tuple(frame.children), closed=True))
            else:
                self.target.append(ListClose())

    def finish(self) -> tuple[Node, ...]:
        while self.stack:
            frame = self.stack.pop()
            self.target.append(ListBlock(tuple(frame.children), closed=False))
        return tuple(self.root)


def split_paragraphs(fragment: RawFragment) -> list[Node]:
    """Split a text fragment on blank lines, keeping source offsets."""
    pieces: list[Node] = []
    position = 0
    text = fragment.text
    while True:
        index = text.find(PARAGRAPH_BREAK, position)
        if index == -1:
            break
        if index > position:
            pieces.append(RawFragment(text[position:index], fragment.offset + position))
        pieces.append(ParagraphBreak())
        position = index + len(PARAGRAPH_BREAK)
    if position < len(text):
        pieces.append(RawFragment(text[position:], fragment.offset + position))
    return pieces


def _argument_children(command: Command) -> tuple[Node, ...]:
    if not command.argument:
        return ()
    return (RawFragment(command.argument, command.argument_offset),)


def _item_children(command: Command) -> tuple[Node, ...]:
    if not command.argument:
        return ()
    children: list[Node] = []
    for token in tokenize(
        command.argument, offset=command.argument_offset, allowed=INLINE_COMMANDS
    ):
        if isinstance(token, RawFragment):
            children.append(token)
        else:
            children.append(Emphasis(EMPHASIS_KINDS[token.kind], _argument_children(token)))
    return tuple(children)


def translate(source: str) -> tuple[Node, ...]:
    """Translate structural commands into render nodes and raw text fragments."""
    if not isinstance(source, str):
        raise PreconditionError(
            f"Source document must be a string, got {type(source).__name__}."
        )
    builder = _TreeBuilder()
    for token in tokenize(source):
        builder.feed(token)
    return builder.finish()


__all__ = [
    "Command",
    "CommandKind",
    "INLINE_COMMANDS",
    "Token",
    "find_closing_brace",
    "split_paragraphs",
    "tokenize",
    "translate",
]
