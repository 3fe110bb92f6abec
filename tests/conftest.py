"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides shared fixtures for driving a Runner.
"""

import io
import logging
import sys
from collections import defaultdict
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from taprunner.runner.events import RunnerEvent, RunnerEventKind  # noqa: E402
from taprunner.runner.runner import Runner  # noqa: E402
from taprunner.tap.events import ParserEvent  # noqa: E402

LIFECYCLE_KINDS = frozenset(
    {
        RunnerEventKind.START,
        RunnerEventKind.SUITE,
        RunnerEventKind.TEST,
        RunnerEventKind.PASS,
        RunnerEventKind.FAIL,
        RunnerEventKind.PENDING,
        RunnerEventKind.TEST_END,
        RunnerEventKind.SUITE_END,
        RunnerEventKind.END,
    }
)


class EventLog:
    """Records every event a Runner emits."""

    def __init__(self, runner: Runner) -> None:
        self.runner = runner
        self.events: list[RunnerEvent] = []
        runner.subscribe(self.events.append)

    @property
    def kinds(self) -> list[str]:
        return [event.kind.value for event in self.events]

    @property
    def lifecycle(self) -> list[str]:
        """Event kinds excluding pass-through and stream events."""
        return [event.kind.value for event in self.events if event.kind in LIFECYCLE_KINDS]

    def of(self, kind: RunnerEventKind) -> list[tuple[Any, ...]]:
        return [event.args for event in self.events if event.kind == kind]

    def titles(self, kind: RunnerEventKind) -> list[str]:
        return [args[0].title for args in self.of(kind)]


class FakeSource:
    """In-memory EventSource: tests fire parser events by hand."""

    def __init__(self, backpressure: bool = True) -> None:
        self.listeners: dict[ParserEvent, list[Callable[..., Any]]] = defaultdict(list)
        self.written: list[str | bytes] = []
        self.ended = False
        self.backpressure = backpressure

    def on(self, event: ParserEvent, listener: Callable[..., Any]) -> None:
        self.listeners[ParserEvent(event)].append(listener)

    def write(self, chunk: str | bytes) -> bool:
        self.written.append(chunk)
        return self.backpressure

    def end(self, chunk: str | bytes | None = None) -> None:
        if chunk is not None:
            self.written.append(chunk)
        self.ended = True

    def fire(self, event: ParserEvent, *args: Any) -> None:
        for listener in list(self.listeners[event]):
            listener(*args)


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Drop handlers bound to captured streams between tests."""
    yield
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()


@pytest.fixture
def make_source() -> Callable[..., FakeSource]:
    return FakeSource


@pytest.fixture
def record() -> Callable[[Runner], EventLog]:
    """Attach an EventLog to a runner."""
    return EventLog


@pytest.fixture
def run_tap() -> Callable[..., EventLog]:
    """Feed TAP text through a fresh Runner and return the recorded events."""

    def _run(text: str | bytes, **kwargs: Any) -> EventLog:
        kwargs.setdefault("stderr", io.StringIO())
        runner = Runner(**kwargs)
        log = EventLog(runner)
        runner.write(text)
        runner.end()
        return log

    return _run
