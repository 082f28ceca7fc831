"""Per-invocation CLI state: verbosity, traceback mode, consoles, and events.

The state lives on the click context object of the root command so every
subcommand sees the one configured by the global ``--verbose`` / ``--debug``
options. Outside a click context (library use, tests) a context variable holds
a fallback instance.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import IO, TYPE_CHECKING, Any

import click

from luminatex.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]

LEVEL_STYLES = {"warning": "yellow", "error": "red"}


def _bind_console(console: Console | None, stream: IO[str], **options: Any) -> Console:
    # CliRunner and capsys swap the process streams; follow them.
    if console is not None and console.file is stream:
        return console
    from rich.console import Console

    return Console(file=stream, **options)


@dataclass(slots=True)
class CLIState:
    """Diagnostics settings and recorded events for one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    events: dict[str, list[dict[str, Any]]] = field(default_factory=dict, init=False)
    _out: Console | None = field(default=None, init=False, repr=False)
    _err: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        self._out = _bind_console(self._out, sys.stdout)
        return self._out

    @property
    def err_console(self) -> Console:
        self._err = _bind_console(self._err, sys.stderr, highlight=False)
        return self._err

    def record_event(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        self.events.setdefault(name, []).append(dict(payload or {}))

    def consume_events(self, name: str) -> list[dict[str, Any]]:
        """Return the events recorded under ``name`` and forget them."""
        return self.events.pop(name, [])


_FALLBACK: ContextVar[CLIState | None] = ContextVar("luminatex_cli_state", default=None)


def _state_on(ctx: click.Context) -> CLIState | None:
    current: click.Context | None = ctx
    while current is not None:
        if isinstance(current.obj, CLIState):
            return current.obj
        current = current.parent
    return None


def get_cli_state(ctx: click.Context | None = None, *, create: bool = True) -> CLIState:
    """Return the state of the running command, creating it when allowed."""
    ctx = ctx or click.get_current_context(silent=True)
    if ctx is not None:
        state = _state_on(ctx)
        if state is None and create:
            state = CLIState()
            ctx.find_root().obj = state
        if state is not None:
            _FALLBACK.set(state)
            return state

    state = _FALLBACK.get()
    if state is None:
        if not create:
            raise RuntimeError("No CLI state is active.")
        state = CLIState()
        _FALLBACK.set(state)
    return state


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Apply the global diagnostic options and return the active state."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message``; warnings and errors go to stderr with optional detail.

    At ``-v`` the exception type and message are appended, at ``-vv`` the chain
    of underlying causes as well.
    """
    state = get_cli_state()
    if level not in LEVEL_STYLES:
        state.console.log(message)
        return

    from rich.text import Text

    style = LEVEL_STYLES[level]
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))

    details: list[str] = []
    if exception is not None and state.verbosity >= 1:
        own, *causes = exception_messages(exception) or [""]
        if own and own not in message:
            details.append(own)
        details.append(f"type: {type(exception).__name__}")
        if causes and state.verbosity >= 2:
            details.append("caused by:")
            details.extend(f"  {cause}" for cause in causes)

    if details:
        text.append("\n" + "\n".join(details), style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether ``--debug`` asked for full tracebacks."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
