"""MathML typesetting backend built on latex2mathml."""

from __future__ import annotations

from functools import lru_cache
import logging

from latex2mathml.converter import convert as latex_to_mathml

from luminatex.core.resolver import Typeset


logger = logging.getLogger(__name__)

MATHML_NAMESPACE = "http://www.w3.org/1998/Math/MathML"


def _empty_math(display: bool) -> str:
    mode = "block" if display else "inline"
    return f'<math xmlns="{MATHML_NAMESPACE}" display="{mode}"></math>'


@lru_cache(maxsize=512)
def _typeset(content: str, display: bool) -> Typeset:
    if not content.strip():
        return Typeset(markup=_empty_math(display))
    try:
        markup = latex_to_mathml(content, display="block" if display else "inline")
    except Exception as exc:  # latex2mathml signals syntax errors with bare exceptions
        detail = str(exc).strip()
        reason = type(exc).__name__ + (f": {detail}" if detail else "")
        logger.debug("latex2mathml rejected %r: %s", content, reason)
        return Typeset(error=reason)
    return Typeset(markup=markup)


class MathMLBackend:
    """Typeset math into MathML markup; failures are returned, never raised."""

    name = "mathml"

    def typeset(self, content: str, *, display: bool) -> Typeset:
        return _typeset(content, display)


__all__ = ["MATHML_NAMESPACE", "MathMLBackend"]
