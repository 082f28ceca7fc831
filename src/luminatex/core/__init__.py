"""Core rendering pipeline: translation, math resolution, and shared models."""

from __future__ import annotations

from .exceptions import LuminaError, PreconditionError
from .pipeline import RenderPipeline, render
from .resolver import DelimiterStyle, MathBackend, Typeset, resolve
from .translator import CommandKind, tokenize, translate


__all__ = [
    "CommandKind",
    "DelimiterStyle",
    "LuminaError",
    "MathBackend",
    "PreconditionError",
    "RenderPipeline",
    "Typeset",
    "render",
    "resolve",
    "tokenize",
    "translate",
]
