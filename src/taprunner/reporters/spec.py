"""Hierarchical console reporter.

Prints suites as an indented tree with one line per test, then a summary
of counts and the details of every failure::

      outer
        ✓ inner
        1) broken

      1 passing (4ms)
      1 failing

      1) outer broken:
         Error: broken
"""

from __future__ import annotations

from typing import Any, TextIO

from rich.console import Console
from rich.text import Text

from taprunner.config.models import ReporterConfig
from taprunner.reporters.base import Reporter
from taprunner.runner.events import RunnerEventKind
from taprunner.runner.failures import TestError
from taprunner.runner.records import Suite, Test
from taprunner.runner.runner import Runner

_MARKS = {
    "passed": ("✓", "green"),
    "pending": ("-", "cyan"),
}


class SpecReporter(Reporter):
    """Indented tree of suites and tests, failure details at the end."""

    def __init__(
        self,
        runner: Runner,
        *,
        config: ReporterConfig | None = None,
        stream: TextIO | None = None,
        console: Console | None = None,
    ) -> None:
        super().__init__(runner, config=config, stream=stream)
        self.console = console or Console(
            file=self.stream,
            force_terminal=self.config.color,
            no_color=self.config.color is False,
            highlight=False,
        )
        self._indent = 0

        runner.on(RunnerEventKind.START, self._on_start)
        runner.on(RunnerEventKind.SUITE, self._on_suite)
        runner.on(RunnerEventKind.SUITE_END, self._on_suite_end)
        runner.on(RunnerEventKind.PASS, self._on_pass)
        runner.on(RunnerEventKind.PENDING, self._on_pending)
        runner.on(RunnerEventKind.FAIL, self._on_fail)
        runner.on(RunnerEventKind.END, self._on_end)

    def _pad(self) -> str:
        return "  " * (self._indent + 1)

    def _on_start(self) -> None:
        self.console.print()

    def _on_suite(self, suite: Suite) -> None:
        self.console.print(Text(self._pad() + suite.title))
        self._indent += 1

    def _on_suite_end(self, suite: Suite) -> None:  # noqa: ARG002
        self._indent = max(self._indent - 1, 0)
        if self._indent == 0:
            self.console.print()

    def _on_pass(self, test: Test) -> None:
        mark, style = _MARKS["passed"]
        line = Text.assemble(self._pad(), (mark, style), " ", (test.title, "dim"))
        if test.is_slow():
            line.append(f" ({test.duration:.0f}ms)", style="yellow")
        self.console.print(line)

    def _on_pending(self, test: Test) -> None:
        mark, style = _MARKS["pending"]
        self.console.print(Text.assemble(self._pad(), (f"{mark} {test.title}", style)))

    def _on_fail(self, test: Test, error: Any) -> None:  # noqa: ARG002
        index = len(self.failures)
        self.console.print(Text.assemble(self._pad(), (f"{index}) {test.title}", "red")))

    def _on_end(self) -> None:
        stats = self.stats
        self.console.print()
        self.console.print(
            Text.assemble(
                ("  ", ""),
                (f"{stats.passes} passing", "green"),
                (f" ({stats.duration_ms:.0f}ms)", "dim"),
            )
        )
        if stats.pending:
            self.console.print(Text(f"  {stats.pending} pending", style="cyan"))
        plan = self.runner.summary.plan if self.runner.summary else None
        if plan is not None and plan.skip_all:
            reason = f": {plan.comment}" if plan.comment else ""
            self.console.print(Text(f"  all tests skipped{reason}", style="cyan"))
        if stats.failures:
            self.console.print(Text(f"  {stats.failures} failing", style="red"))
            self.console.print()
            for index, (test, error) in enumerate(self.failures, start=1):
                self._print_failure(index, test, error)
        self.console.print()

    def _print_failure(self, index: int, test: Test, error: Any) -> None:
        self.console.print(Text(f"  {index}) {test.full_title()}:"))

        if isinstance(error, TestError):
            stack = error.stack if self.config.show_stack else None
            body = stack or str(error)
            # A synthesized stack starts with the message; don't print it twice
            if stack and not stack.startswith(str(error)):
                body = f"{error}\n{stack}"
            self.console.print(Text(_indent_block(body, "     "), style="red"))
            if error.show_diff:
                self.console.print(Text("     + expected - actual", style="dim"))
                self.console.print(Text(f"     +{error.expected!r}", style="green"))
                self.console.print(Text(f"     -{error.actual!r}", style="red"))
        else:
            self.console.print(Text(_indent_block(str(error), "     "), style="red"))
        self.console.print()


def _indent_block(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.splitlines())
