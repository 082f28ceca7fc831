"""LuminaTeX: render a LaTeX subset to HTML and paginated PDF."""

from __future__ import annotations

from .core.exceptions import (
    ExportError,
    ExportInProgressError,
    LuminaError,
    PreconditionError,
    StoreError,
)
from .core.nodes import (
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
from .core.pipeline import RenderPipeline, render
from .core.resolver import DelimiterStyle, MathBackend, Typeset, resolve
from .core.translator import translate


__all__ = [
    "DelimiterStyle",
    "Emphasis",
    "EmphasisKind",
    "ExportError",
    "ExportInProgressError",
    "Heading",
    "ListBlock",
    "ListClose",
    "ListItem",
    "LuminaError",
    "MathBackend",
    "MathBlock",
    "MathInline",
    "ParagraphBreak",
    "PreconditionError",
    "RenderNode",
    "RenderPipeline",
    "StoreError",
    "Text",
    "Typeset",
    "render",
    "resolve",
    "translate",
]
