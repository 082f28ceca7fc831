"""Render pipeline composing structural translation and math resolution.

``render`` is a pure function of its input text: it keeps no state between
calls, performs no I/O, and two calls with the same source return equal trees.
Neither stage escalates errors to the other. Malformed structure degrades in
the translator and math failures become placeholders in the resolver, so the
only fatal condition is an absent or non-string source.
"""

from __future__ import annotations

import logging

from .diagnostics import DiagnosticEmitter, record_event
from .exceptions import PreconditionError
from .nodes import RenderNode
from .resolver import MathBackend, MathResolver
from .translator import translate


logger = logging.getLogger(__name__)


class RenderPipeline:
    """Bind a math backend and emitter, then render any number of sources."""

    def __init__(
        self,
        backend: MathBackend | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        if backend is None:
            from luminatex.adapters.mathml import MathMLBackend

            backend = MathMLBackend()
        self.backend = backend
        self.emitter = emitter

    def render(self, source: str) -> tuple[RenderNode, ...]:
        """Translate ``source`` and resolve its math regions."""
        if source is None:
            raise PreconditionError("No source document supplied.")
        structure = translate(source)
        resolver = MathResolver(self.backend, emitter=self.emitter)
        nodes = resolver.resolve(structure)
        logger.debug(
            "Rendered %d characters into %d top-level node(s)", len(source), len(nodes)
        )
        record_event(
            self.emitter,
            "render_complete",
            {"nodes": len(nodes), "math_failures": resolver.failures},
        )
        return nodes


def render(
    source: str,
    backend: MathBackend | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[RenderNode, ...]:
    """Render ``source`` into a tuple of render nodes."""
    return RenderPipeline(backend, emitter=emitter).render(source)


__all__ = ["RenderPipeline", "render"]
