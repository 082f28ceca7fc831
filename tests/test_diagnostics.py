from __future__ import annotations

import logging

import pytest

from luminatex.core.diagnostics import (
    LoggingEmitter,
    NullEmitter,
    format_event_message,
    record_event,
)
from luminatex.core.exceptions import (
    ExportError,
    ExportInProgressError,
    LuminaError,
    PreconditionError,
    exception_hint,
    exception_messages,
)
from luminatex.ui.cli.diagnostics import CliEmitter
from luminatex.ui.cli.state import set_cli_state


def _raise_chained() -> None:
    try:
        raise OSError("disk full")
    except OSError as exc:
        raise ExportError("PDF export failed: out.pdf") from exc


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.ERROR):
        emitter.error("boom")
    assert any(record.message == "boom" for record in caplog.records)
    assert emitter.debug_enabled is True


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.INFO):
        record_event(emitter, "export_complete", {"path": "out.pdf", "pages": 3})
    assert [record.message for record in caplog.records] == [
        "PDF export successful: out.pdf (3 page(s))"
    ]


def test_record_event_without_emitter_is_safe() -> None:
    record_event(None, "render_complete", {"nodes": 1})


@pytest.mark.parametrize(
    ("name", "payload", "expected"),
    [
        (
            "math_failure",
            {"style": "inline_dollar", "span": (4, 9), "error": "bad token"},
            "Could not typeset inline_dollar region at offset 4: bad token",
        ),
        ("render_complete", {"nodes": 5, "math_failures": 0}, "Re-rendered 5 node(s)"),
        (
            "render_complete",
            {"nodes": 5, "math_failures": 2},
            "Re-rendered 5 node(s), 2 math error(s)",
        ),
        ("export_start", {"path": "a.pdf"}, "Starting PDF generation: a.pdf"),
        ("unknown", {}, None),
    ],
)
def test_format_event_message(name: str, payload: dict[str, object], expected: str | None) -> None:
    assert format_event_message(name, payload) == expected


def test_cli_emitter_bridges_state(capsys: pytest.CaptureFixture[str]) -> None:
    state = set_cli_state(verbosity=1, debug=False)
    emitter = CliEmitter(state=state)

    emitter.warning("Heads up", exc=None)
    emitter.error("Boom", exc=None)
    emitter.event("math_failure", {"style": "inline_dollar", "span": (0, 3), "error": "bad"})
    emitter.event("custom", {"flag": True})

    captured = capsys.readouterr()
    combined_output = f"{captured.out}\n{captured.err}"
    assert "Heads up" in combined_output
    assert "Boom" in combined_output
    assert "Could not typeset" in combined_output
    assert state.consume_events("custom") == [{"flag": True}]
    assert len(state.consume_events("math_failure")) == 1


def test_exception_hierarchy() -> None:
    assert issubclass(PreconditionError, ValueError)
    assert issubclass(ExportInProgressError, ExportError)
    assert issubclass(ExportError, LuminaError)


def test_exception_messages_follow_cause_chain() -> None:
    with pytest.raises(ExportError) as excinfo:
        _raise_chained()
    assert exception_messages(excinfo.value) == ["PDF export failed: out.pdf", "disk full"]
    assert exception_hint(excinfo.value) == "disk full"
