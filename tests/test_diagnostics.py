"""Tests for the diagnostics sink."""

import io

import pytest
from rich.console import Console

from cubepath.diagnostics import NULL_SINK, DiagnosticsSink, resolve_sink


def test_level_filtering():
    sink = DiagnosticsSink("t", level="warn")
    sink.info("ignored")
    sink.warn("kept", x=1)
    sink.error("also_kept")
    assert [e.event for e in sink.events] == ["kept", "also_kept"]


def test_unknown_level():
    with pytest.raises(ValueError):
        DiagnosticsSink(level="loud")


def test_child_shares_events():
    parent = DiagnosticsSink("root", level="debug")
    child = parent.child("snake")
    child.debug("layer", index=2)
    assert parent.events[0].component == "snake"
    assert parent.find("layer")[0].fields == {"index": 2}


def test_format():
    sink = DiagnosticsSink("gen", level="debug")
    sink.info("done", covered=27, note="all cells", skipped=None)
    assert sink.events[0].format() == "[gen] done covered=27 note=all_cells"


def test_echo_to_console():
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=200)
    sink = DiagnosticsSink("gen", echo=True, console=console)
    sink.warn("incomplete_path", covered="20/27")
    assert "[gen] incomplete_path covered=20/27" in buffer.getvalue()


def test_null_sink_discards():
    NULL_SINK.error("boom")
    assert NULL_SINK.events == []
    assert resolve_sink(None, "x") is NULL_SINK


def test_clear():
    sink = DiagnosticsSink()
    sink.info("a")
    sink.clear()
    assert sink.events == []
