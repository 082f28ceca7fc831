"""Custom exception hierarchy for the LuminaTeX rendering pipeline.

Per-region and per-command problems (unbalanced lists, math the backend cannot
typeset) are never raised: they degrade inside the stage that detects them.
Only whole-call preconditions and export failures reach the caller.
"""

from __future__ import annotations


class LuminaError(RuntimeError):
    """Base exception for LuminaTeX failures."""


class PreconditionError(LuminaError, ValueError):
    """Raised when a call receives an absent or invalid input."""


class ConfigError(LuminaError):
    """Raised when a configuration file cannot be loaded or validated."""


class ExportError(LuminaError):
    """Raised when rasterizing or writing an exported document fails."""


class ExportInProgressError(ExportError):
    """Raised when an export is requested while another one is running."""


class StoreError(LuminaError):
    """Raised when a persisted source cannot be read or written."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "ExportError",
    "ExportInProgressError",
    "LuminaError",
    "PreconditionError",
    "StoreError",
    "exception_hint",
    "exception_messages",
]
