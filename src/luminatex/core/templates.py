"""Starter documents and the math symbol palette."""

from __future__ import annotations

from collections.abc import Iterator

from .exceptions import PreconditionError
from .nodes import MathInline
from .resolver import MathBackend


TEMPLATES: dict[str, str] = {
    "basic": (
        "\\section{Untitled Document}\n"
        "\\subsection{Introduction}\n"
        "Start typing your professional LaTeX content here.\n"
        "\n"
        "\\[ E = mc^2 \\]"
    ),
    "report": (
        "\\section{Technical Report}\n"
        "\\subsection{Abstract}\n"
        "This report outlines real-time typesetting with the LuminaTeX engine.\n"
        "\n"
        "\\subsection{System Architecture}\n"
        "\\begin{itemize}\n"
        "  \\item Structural markup translation\n"
        "  \\item Math typesetting through \\textbf{MathML}\n"
        "  \\item Paginated PDF export\n"
        "\\end{itemize}\n"
        "\n"
        "\\[ \\nabla \\times \\mathbf{E} = -\\frac{\\partial \\mathbf{B}}{\\partial t} \\]"
    ),
    "memo": (
        "\\section{Internal Memorandum}\n"
        "\\textbf{To:} Scientific Community\n"
        "\\textbf{From:} Engineering\n"
        "\\textbf{Subject:} Typesetting Standards\n"
        "\n"
        "\\subsection{Key Message}\n"
        "The standard for online LaTeX editing has been elevated.\n"
        "\n"
        "\\textit{Signed, Engineering}"
    ),
}

DEFAULT_TEMPLATE = "report"

SYMBOLS: dict[str, tuple[str, ...]] = {
    "Greek": (
        "\\alpha",
        "\\beta",
        "\\gamma",
        "\\delta",
        "\\epsilon",
        "\\theta",
        "\\lambda",
        "\\pi",
        "\\sigma",
        "\\phi",
        "\\omega",
        "\\Omega",
    ),
    "Operators": (
        "\\sum",
        "\\int",
        "\\prod",
        "\\sqrt{x}",
        "\\frac{a}{b}",
        "\\lim_{x\\to\\infty}",
    ),
    "Relations": ("\\le", "\\ge", "\\in", "\\notin", "\\subset", "\\approx", "\\neq", "\\equiv"),
    "Arrows": ("\\to", "\\Rightarrow", "\\leftrightarrow", "\\uparrow", "\\downarrow"),
}


def get_template(name: str) -> str:
    """Return the starter document registered under ``name``."""
    try:
        return TEMPLATES[name]
    except KeyError:
        available = ", ".join(sorted(TEMPLATES))
        raise PreconditionError(
            f"Unknown template '{name}'. Available templates: {available}."
        ) from None


def iter_symbols() -> Iterator[tuple[str, str]]:
    """Yield ``(category, snippet)`` pairs in palette order."""
    for category, snippets in SYMBOLS.items():
        for snippet in snippets:
            yield category, snippet


def preview_symbol(snippet: str, backend: MathBackend) -> MathInline:
    """Typeset a palette snippet as inline math."""
    result = backend.typeset(snippet, display=False)
    return MathInline(
        source=snippet,
        markup=result.markup,
        error=result.error,
        span=(0, len(snippet)),
    )


__all__ = [
    "DEFAULT_TEMPLATE",
    "SYMBOLS",
    "TEMPLATES",
    "get_template",
    "iter_symbols",
    "preview_symbol",
]
