"""Structural event vocabulary and the event source protocol."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

Listener = Callable[..., Any]


class ParserEvent(str, Enum):
    """Events emitted by a TAP event source, one per structural element."""

    VERSION = "version"  # (version: int)
    PLAN = "plan"  # (plan: TapPlan)
    COMMENT = "comment"  # (line: str)
    EXTRA = "extra"  # (line: str)
    BAILOUT = "bailout"  # (reason: str)
    CHILD = "child"  # (child: EventSource)
    ASSERT = "assert"  # (result: TapResult)
    COMPLETE = "complete"  # (summary: TapSummary)

    # Generic stream lifecycle
    PIPE = "pipe"
    PREFINISH = "prefinish"
    FINISH = "finish"
    UNPIPE = "unpipe"
    CLOSE = "close"


STREAM_EVENTS: tuple[ParserEvent, ...] = (
    ParserEvent.PIPE,
    ParserEvent.PREFINISH,
    ParserEvent.FINISH,
    ParserEvent.UNPIPE,
    ParserEvent.CLOSE,
)


class EventSource(Protocol):
    """Protocol for TAP line parsers.

    A source turns raw TAP text into ``ParserEvent`` callbacks. Nested
    subtests are announced with ``ParserEvent.CHILD`` carrying another
    ``EventSource`` that emits the same vocabulary for the nested stream.
    """

    def on(self, event: ParserEvent, listener: Listener) -> None:
        """Register a listener for one event."""
        ...

    def write(self, chunk: str | bytes) -> bool:
        """Feed raw input. Returns False when the caller should back off."""
        ...

    def end(self, chunk: str | bytes | None = None) -> None:
        """Signal end of input, flushing any buffered line."""
        ...
