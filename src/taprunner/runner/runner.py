"""Runner facade: TAP input in, test-runner lifecycle events out.

Usage::

    from taprunner.runner import Runner, RunnerEventKind

    runner = Runner()
    runner.on(RunnerEventKind.FAIL, lambda test, err: print(test.full_title(), err))
    runner.write("TAP version 13\\nnot ok 1 - broken\\n1..1\\n")
    runner.end()
"""

from __future__ import annotations

import sys
from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TextIO

from taprunner.config.models import RunnerConfig
from taprunner.runner.events import RunnerEvent, RunnerEventKind
from taprunner.runner.group import Group
from taprunner.tap.events import EventSource, Listener
from taprunner.tap.models import TapSummary
from taprunner.tap.parser import TapParser

Subscriber = Callable[[RunnerEvent], Any]


class Runner:
    """Translate a TAP stream into start/suite/test/pass/fail/... events.

    Listeners run synchronously inside ``write``/``end``; an exception
    raised by a listener propagates to the caller.
    """

    def __init__(
        self,
        source: EventSource | None = None,
        *,
        config: RunnerConfig | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.config = config or RunnerConfig()
        self.source: EventSource = source if source is not None else TapParser()
        self.stderr = stderr if stderr is not None else sys.stderr
        self.start_time = datetime.now()

        self._listeners: dict[RunnerEventKind, list[Listener]] = defaultdict(list)
        self._subscribers: list[Subscriber] = []
        self._emitted_start = False

        self.root = Group(self, self.source)

    @property
    def echo_extra(self) -> bool:
        return self.config.echo_extra

    @property
    def summary(self) -> TapSummary | None:
        """Root stream summary, available once the stream completed."""
        return self.root.summary

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def on(self, kind: RunnerEventKind | str, listener: Listener) -> None:
        """Call ``listener`` with the event payload whenever ``kind`` fires."""
        self._listeners[RunnerEventKind(kind)].append(listener)

    def subscribe(self, subscriber: Subscriber) -> None:
        """Receive every event as a ``RunnerEvent``."""
        self._subscribers.append(subscriber)

    def emit(self, kind: RunnerEventKind, *args: Any) -> None:
        for listener in list(self._listeners[kind]):
            listener(*args)
        if self._subscribers:
            event = RunnerEvent(kind, args)
            for subscriber in list(self._subscribers):
                subscriber(event)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def write(self, chunk: str | bytes) -> bool:
        self._ensure_started()
        return self.source.write(chunk)

    def end(self, chunk: str | bytes | None = None) -> None:
        if chunk is not None:
            self.write(chunk)
        self._ensure_started()
        self.source.end()

    def feed(self, lines: Iterable[str | bytes]) -> None:
        """Write every chunk from ``lines`` (e.g. an open file), then end."""
        for chunk in lines:
            self.write(chunk)
        self.end()

    def _ensure_started(self) -> None:
        if not self._emitted_start:
            self._emitted_start = True
            self.emit(RunnerEventKind.START)
