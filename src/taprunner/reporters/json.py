"""JSON reporter: one document with stats and every test, written on end."""

from __future__ import annotations

import json
from typing import Any, TextIO

from taprunner.config.models import ReporterConfig
from taprunner.reporters.base import Reporter
from taprunner.runner.events import RunnerEventKind
from taprunner.runner.failures import TestError
from taprunner.runner.records import Test
from taprunner.runner.runner import Runner


def _error_dict(error: Any) -> dict[str, Any]:
    if isinstance(error, TestError):
        data: dict[str, Any] = {"message": error.message}
        if error.stack is not None:
            data["stack"] = error.stack
        if error.has_actual:
            data["actual"] = error.actual
        if error.has_expected:
            data["expected"] = error.expected
        if error.show_diff:
            data["showDiff"] = True
        return data
    if isinstance(error, dict):
        return error
    return {"message": str(error)}


def _test_dict(test: Test, error: Any = None) -> dict[str, Any]:
    return {
        "title": test.title,
        "fullTitle": test.full_title(),
        "duration": test.duration,
        "state": test.state,
        "err": _error_dict(error) if error is not None else {},
    }


class JsonReporter(Reporter):
    """Collects results and dumps them as JSON when the stream ends."""

    def __init__(
        self,
        runner: Runner,
        *,
        config: ReporterConfig | None = None,
        stream: TextIO | None = None,
    ) -> None:
        super().__init__(runner, config=config, stream=stream)
        self.tests: list[dict[str, Any]] = []
        self.passes: list[dict[str, Any]] = []
        self.pending: list[dict[str, Any]] = []
        self.failure_entries: list[dict[str, Any]] = []

        runner.on(RunnerEventKind.PASS, self._on_pass)
        runner.on(RunnerEventKind.PENDING, self._on_pending)
        runner.on(RunnerEventKind.FAIL, self._on_fail)
        runner.on(RunnerEventKind.END, self._on_end)

    def _on_pass(self, test: Test) -> None:
        entry = _test_dict(test)
        self.tests.append(entry)
        self.passes.append(entry)

    def _on_pending(self, test: Test) -> None:
        entry = _test_dict(test)
        self.tests.append(entry)
        self.pending.append(entry)

    def _on_fail(self, test: Test, error: Any) -> None:
        entry = _test_dict(test, error)
        self.tests.append(entry)
        self.failure_entries.append(entry)

    def to_dict(self) -> dict[str, Any]:
        stats = self.stats
        return {
            "stats": {
                "suites": stats.suites,
                "tests": stats.tests,
                "passes": stats.passes,
                "pending": stats.pending,
                "failures": stats.failures,
                "start": stats.start.isoformat() if stats.start else None,
                "end": stats.end.isoformat() if stats.end else None,
                "duration": stats.duration_ms,
            },
            "tests": self.tests,
            "pending": self.pending,
            "failures": self.failure_entries,
            "passes": self.passes,
        }

    def _on_end(self) -> None:
        self.stream.write(json.dumps(self.to_dict(), indent=2, default=str) + "\n")
