"""
Structured diagnostics sink.

Events are a name plus key=value fields at one of four levels. They are kept
in memory so callers and tests can inspect what happened during a run, and can
be echoed to a rich console as ``[component] event key=value`` lines.

Usage:
    sink = DiagnosticsSink("snake", echo=True)
    sink.info("layer_done", layer=2, covered=18)
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rich.console import Console

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}

_LEVEL_STYLES = {
    "debug": "dim",
    "info": "cyan",
    "warn": "yellow",
    "error": "bold red",
}


@dataclass
class DiagnosticEvent:
    """A single recorded event."""
    level: str
    component: str
    event: str
    fields: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0

    def format(self) -> str:
        parts = [f"[{self.component}]", self.event]
        for key, value in self.fields.items():
            if value is None:
                continue
            if isinstance(value, (int, float)):
                parts.append(f"{key}={value}")
            else:
                parts.append(f"{key}={str(value).replace(' ', '_')}")
        return " ".join(parts)


class DiagnosticsSink:
    """
    Leveled event recorder with optional console echo.

    Child sinks created with ``child()`` share the parent's event list and
    console, and only change the component tag.
    """

    def __init__(
        self,
        component: str = "cubepath",
        level: str = "info",
        echo: bool = False,
        console: Optional[Console] = None,
        events: Optional[List[DiagnosticEvent]] = None,
    ):
        if level not in LEVELS:
            raise ValueError(f"Unknown diagnostics level: {level}")
        self.component = component
        self.level = level
        self.echo = echo
        self.console = console if console is not None else (Console(stderr=True) if echo else None)
        self.events: List[DiagnosticEvent] = events if events is not None else []

    def child(self, component: str) -> "DiagnosticsSink":
        return DiagnosticsSink(
            component=component,
            level=self.level,
            echo=self.echo,
            console=self.console,
            events=self.events,
        )

    def _emit(self, level: str, event: str, fields: Dict[str, Any]):
        if LEVELS[level] < LEVELS[self.level]:
            return
        record = DiagnosticEvent(
            level=level,
            component=self.component,
            event=event,
            fields=fields,
            timestamp=time.time(),
        )
        self.events.append(record)
        if self.echo and self.console is not None:
            self.console.print(record.format(), style=_LEVEL_STYLES[level], markup=False, highlight=False)

    def debug(self, event: str, **fields):
        self._emit("debug", event, fields)

    def info(self, event: str, **fields):
        self._emit("info", event, fields)

    def warn(self, event: str, **fields):
        self._emit("warn", event, fields)

    def error(self, event: str, **fields):
        self._emit("error", event, fields)

    def find(self, event: str) -> List[DiagnosticEvent]:
        """Return every recorded event with the given name."""
        return [e for e in self.events if e.event == event]

    def clear(self):
        del self.events[:]


class NullSink(DiagnosticsSink):
    """Sink that discards every event."""

    def __init__(self):
        super().__init__(component="null", level="error", echo=False)

    def child(self, component: str) -> "NullSink":
        return self

    def _emit(self, level: str, event: str, fields: Dict[str, Any]):
        return


NULL_SINK = NullSink()


def resolve_sink(sink: Optional[DiagnosticsSink], component: str) -> DiagnosticsSink:
    """Child of ``sink`` tagged with ``component``, or the null sink."""
    if sink is None:
        return NULL_SINK
    return sink.child(component)
