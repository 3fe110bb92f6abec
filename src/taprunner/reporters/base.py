"""Shared reporter plumbing: stats bookkeeping and failure collection."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TextIO

from taprunner.config.models import ReporterConfig
from taprunner.runner.events import RunnerEventKind
from taprunner.runner.records import Suite, Test
from taprunner.runner.runner import Runner


@dataclass
class ReporterStats:
    """Counters maintained from runner events."""

    suites: int = 0
    tests: int = 0
    passes: int = 0
    pending: int = 0
    failures: int = 0
    start: datetime | None = None
    end: datetime | None = None

    @property
    def duration_ms(self) -> float:
        if self.start is None or self.end is None:
            return 0.0
        return (self.end - self.start).total_seconds() * 1000


class Reporter:
    """Base class wiring stats to a runner. Subclasses render output."""

    def __init__(
        self,
        runner: Runner,
        *,
        config: ReporterConfig | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.runner = runner
        self.config = config or ReporterConfig()
        self.stream = stream if stream is not None else sys.stdout
        self.stats = ReporterStats()
        self.failures: list[tuple[Test, Any]] = []

        runner.on(RunnerEventKind.START, self._count_start)
        runner.on(RunnerEventKind.SUITE, self._count_suite)
        runner.on(RunnerEventKind.TEST_END, self._count_test)
        runner.on(RunnerEventKind.PASS, self._count_pass)
        runner.on(RunnerEventKind.PENDING, self._count_pending)
        runner.on(RunnerEventKind.FAIL, self._count_fail)
        runner.on(RunnerEventKind.END, self._count_end)

    @property
    def failed(self) -> bool:
        return self.stats.failures > 0

    def _count_start(self) -> None:
        self.stats.start = self.runner.start_time

    def _count_suite(self, suite: Suite) -> None:  # noqa: ARG002
        self.stats.suites += 1

    def _count_test(self, test: Test) -> None:  # noqa: ARG002
        self.stats.tests += 1

    def _count_pass(self, test: Test) -> None:  # noqa: ARG002
        self.stats.passes += 1

    def _count_pending(self, test: Test) -> None:  # noqa: ARG002
        self.stats.pending += 1

    def _count_fail(self, test: Test, error: Any) -> None:
        self.stats.failures += 1
        self.failures.append((test, error))

    def _count_end(self) -> None:
        self.stats.end = datetime.now()
