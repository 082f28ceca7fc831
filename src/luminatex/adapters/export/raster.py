"""Rasterize a render tree into a single image surface.

The layout is intentionally simple: blocks stack vertically, words wrap at the
surface width, list items are indented with a bullet, and display math is
centred. Math is drawn from its source text (typeset MathML cannot be drawn by
Pillow); error placeholders are drawn in red. Pillow's bundled font has no
italic face, so italic runs use a muted colour instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from functools import lru_cache
import io
import re

from PIL import Image, ImageDraw, ImageFont

from luminatex.core.config import ExportConfig
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


TEXT_COLOR = "#111827"
ITALIC_COLOR = "#4b5563"
MATH_COLOR = "#1d4ed8"
ERROR_COLOR = "#dc2626"

BODY_SIZE = 16
HEADING_SIZES = {1: 28, 2: 22}
LINE_SPACING = 1.4
INDENT = 28
BULLET = "•"

_WHITESPACE = re.compile(r"(\s+)")


@dataclass(frozen=True, slots=True)
class _Style:
    size: int
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: str = TEXT_COLOR


@dataclass(slots=True)
class _Run:
    text: str
    style: _Style
    atomic: bool = False


@dataclass(slots=True)
class _Block:
    runs: list[_Run] = field(default_factory=list)
    depth: int = 0
    bullet: bool = False
    centered: bool = False
    spacer: bool = False
    space_before: float = 0.0


@dataclass(slots=True)
class RasterSurface:
    """A rendered page-width image ready for export."""

    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()


@lru_cache(maxsize=32)
def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


class _LayoutBuilder:
    """Flatten render nodes into stacked text blocks."""

    def __init__(self, scale: float) -> None:
        self.scale = scale
        self.blocks: list[_Block] = []
        self.current: list[_Run] = []
        self.depth = 0

    def size(self, points: int) -> int:
        return max(1, round(points * self.scale))

    def flush(self, **options: object) -> None:
        runs, self.current = self.current, []
        if any(run.text.strip() for run in runs):
            self.blocks.append(_Block(runs=runs, depth=self.depth, **options))  # type: ignore[arg-type]

    def collect(self, nodes: Iterable[RenderNode], style: _Style) -> None:
        for node in nodes:
            match node:
                case Text(text=text):
                    self.current.append(_Run(text, style))
                case Emphasis(kind=kind, children=children):
                    self.collect(children, _emphasise(style, kind))
                case Heading(level=level, children=children):
                    self.flush()
                    heading_style = _Style(size=self.size(HEADING_SIZES.get(level, BODY_SIZE)), bold=True)
                    self.collect(children, heading_style)
                    self.flush(space_before=heading_style.size * 0.5)
                case ListBlock(children=children):
                    self.flush()
                    self.depth += 1
                    self.collect(children, style)
                    self.flush()
                    self.depth -= 1
                case ListItem(children=children):
                    self.flush()
                    self.collect(children, style)
                    depth = self.depth
                    self.depth = max(depth, 1)
                    self.flush(bullet=True)
                    self.depth = depth
                case ListClose():
                    continue
                case ParagraphBreak():
                    self.flush()
                    self.blocks.append(_Block(spacer=True))
                case MathInline():
                    self.current.append(_Run(node.source, _math_style(style, node.failed), atomic=True))
                case MathBlock():
                    self.flush()
                    self.current.append(_Run(node.source.strip(), _math_style(style, node.failed), atomic=True))
                    self.flush(centered=True)
                case _:
                    raise TypeError(f"Unsupported render node: {node!r}")


def _emphasise(style: _Style, kind: EmphasisKind) -> _Style:
    if kind is EmphasisKind.BOLD:
        return replace(style, bold=True)
    if kind is EmphasisKind.ITALIC:
        return replace(style, italic=True, color=ITALIC_COLOR)
    return replace(style, underline=True)


def _math_style(style: _Style, failed: bool) -> _Style:
    return replace(style, color=ERROR_COLOR if failed else MATH_COLOR)


Line = list[tuple[str, _Run, float]]


def _wrap(block: _Block, available: float) -> list[Line]:
    pieces: list[tuple[str, _Run]] = []
    for run in block.runs:
        if run.atomic:
            pieces.append((run.text, run))
            continue
        for piece in _WHITESPACE.split(run.text):
            if not piece:
                continue
            pieces.append((" " if piece.isspace() else piece, run))

    lines: list[Line] = []
    line: Line = []
    line_width = 0.0
    for text, run in pieces:
        if text == " " and (not line or line[-1][0] == " "):
            continue
        width = _font(run.style.size).getlength(text)
        if text != " " and line and line_width + width > available:
            while line and line[-1][0] == " ":
                line_width -= line.pop()[2]
            lines.append(line)
            line, line_width = [], 0.0
        line.append((text, run, width))
        line_width += width
    while line and line[-1][0] == " ":
        line.pop()
    if line:
        lines.append(line)
    return lines


def rasterize(nodes: Iterable[RenderNode], config: ExportConfig | None = None) -> RasterSurface:
    """Draw ``nodes`` onto a white page-width image."""
    settings = config or ExportConfig()
    scale = settings.scale
    builder = _LayoutBuilder(scale)
    builder.collect(nodes, _Style(size=builder.size(BODY_SIZE)))
    builder.flush()

    width = max(1, round(settings.surface_width * scale))
    margin = round(settings.margin * scale)
    indent = round(INDENT * scale)
    body_line = builder.size(BODY_SIZE) * LINE_SPACING

    laid_out: list[tuple[_Block, list[Line]]] = []
    height = float(margin)
    for block in builder.blocks:
        height += block.space_before
        if block.spacer:
            laid_out.append((block, []))
            height += body_line
            continue
        lines = _wrap(block, max(1, width - 2 * margin - block.depth * indent))
        laid_out.append((block, lines))
        height += sum(_line_height(line) for line in lines)
    height += margin

    image = Image.new("RGB", (width, max(1, round(height))), settings.background)
    draw = ImageDraw.Draw(image)
    y = float(margin)
    for block, lines in laid_out:
        y += block.space_before
        if block.spacer:
            y += body_line
            continue
        left = margin + block.depth * indent
        available = width - margin - left
        for index, line in enumerate(lines):
            line_width = sum(item[2] for item in line)
            x = left + (available - line_width) / 2 if block.centered else float(left)
            if block.bullet and index == 0:
                bullet_font = _font(line[0][1].style.size)
                draw.text((left - indent * 0.6, y), BULLET, font=bullet_font, fill=TEXT_COLOR)
            for text, run, text_width in line:
                _draw_piece(draw, (x, y), text, run, text_width, scale)
                x += text_width
            y += _line_height(line)

    return RasterSurface(image)


def _line_height(line: Line) -> float:
    return max(run.style.size for _text, run, _width in line) * LINE_SPACING


def _draw_piece(
    draw: ImageDraw.ImageDraw,
    origin: tuple[float, float],
    text: str,
    run: _Run,
    width: float,
    scale: float,
) -> None:
    x, y = origin
    style = run.style
    font = _font(style.size)
    draw.text((x, y), text, font=font, fill=style.color)
    if style.bold:
        draw.text((x + max(1.0, scale / 2), y), text, font=font, fill=style.color)
    if style.underline:
        baseline = y + style.size + max(1.0, scale)
        draw.line([(x, baseline), (x + width, baseline)], fill=style.color, width=max(1, round(scale)))


__all__ = ["RasterSurface", "rasterize"]
