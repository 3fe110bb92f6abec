"""Per-level state machine turning parser events into runner events.

A TAP stream does not say up front that a subtest is a suite. The
``# Subtest: name`` header names the group, but the suite only exists once a
result arrives inside it (or a nested subtest opens, which guarantees a
trailing result). Each nesting level therefore gets one ``Group`` that keeps
the deferred state:

    name          set by a subtest header comment seen before any result,
                  frozen afterwards
    announced     a Suite was materialized and the ``suite`` event fired
    has_recorded  at least one result (or nested subtest) was seen here
    doing_child   the nested group currently open, if any

After a nested group completes, the parent stream repeats its outcome as a
plain ``ok``/``not ok`` line named after the subtest. That trailing line is
matched against ``doing_child`` and swallowed; otherwise it would show up as
an extra test. Matching is by name only, so two sibling subtests sharing a
name can have the wrong trailing line consumed.
"""

from __future__ import annotations

import re
import weakref
from functools import partial
from typing import TYPE_CHECKING

from taprunner.core.logging import get_logger
from taprunner.runner.events import RunnerEventKind
from taprunner.runner.failures import synthesize_error
from taprunner.runner.records import Suite, Test
from taprunner.tap.events import STREAM_EVENTS, EventSource, ParserEvent

if TYPE_CHECKING:
    from taprunner.runner.runner import Runner
    from taprunner.tap.models import TapResult, TapSummary

log = get_logger("runner.group")

SUBTEST_COMMENT = re.compile(r"^# Subtest: ")


class Group:
    """Translation state for one nesting level of a TAP stream."""

    def __init__(
        self,
        runner: Runner,
        source: EventSource,
        parent: Group | None = None,
    ) -> None:
        self._runner = runner
        self.source = source
        self._parent = weakref.ref(parent) if parent is not None else None
        self.level = parent.level + 1 if parent is not None else 0
        self.children: list[Group] = []

        self.name = ""
        self.announced = False
        self.has_recorded = False
        self.doing_child: Group | None = None
        self.suite: Suite | None = None
        self.summary: TapSummary | None = None

        self._attach()

    @property
    def parent(self) -> Group | None:
        return self._parent() if self._parent is not None else None

    @property
    def is_root(self) -> bool:
        return self.level == 0

    def full_title(self) -> str:
        parent = self.parent
        if parent is None:
            return self.name
        return f"{parent.full_title()} {self.name.strip()}".strip()

    def _attach(self) -> None:
        on = self.source.on
        emit = self._runner.emit

        if self.is_root:
            on(ParserEvent.VERSION, partial(emit, RunnerEventKind.VERSION))
            for event in STREAM_EVENTS:
                on(event, partial(emit, RunnerEventKind(event.value)))

        on(ParserEvent.PLAN, partial(emit, RunnerEventKind.PLAN))
        on(ParserEvent.COMMENT, self._on_comment)
        on(ParserEvent.EXTRA, self._on_extra)
        on(ParserEvent.BAILOUT, self._on_bailout)
        on(ParserEvent.CHILD, self._on_child)
        on(ParserEvent.ASSERT, self._on_assert)
        on(ParserEvent.COMPLETE, self._on_complete)

    # -------------------------------------------------------------------------
    # Parser event handlers
    # -------------------------------------------------------------------------

    def _on_child(self, source: EventSource) -> None:
        child = Group(self._runner, source, parent=self)
        self.children.append(child)

        # A nested subtest is always followed by a trailing result here,
        # so this level is a suite whether or not other results follow.
        self._announce()
        self.has_recorded = True
        self.doing_child = child

    def _on_comment(self, text: str) -> None:
        self._runner.emit(RunnerEventKind.COMMENT, text)
        if self.is_root or self.announced or self.has_recorded or self.name:
            return
        if SUBTEST_COMMENT.match(text):
            self.name = SUBTEST_COMMENT.sub("", text, count=1).strip()

    def _on_extra(self, text: str) -> None:
        self._runner.emit(RunnerEventKind.EXTRA, text)
        if self._runner.echo_extra:
            self._runner.stderr.write(text)

    def _on_bailout(self, reason: str) -> None:
        self._runner.emit(RunnerEventKind.BAILOUT, reason)
        if self._runner.echo_extra:
            self._runner.stderr.write(f"Bail out! {reason}\n")

    def _on_assert(self, result: TapResult) -> None:
        self._announce()

        child = self.doing_child
        if child is not None and child.has_recorded and child.name == result.name:
            self.doing_child = None
            log.debug("trailing_result_suppressed", name=result.name, level=self.level)
            return

        self.has_recorded = True
        self.doing_child = None
        self._emit_test(result)

    def _on_complete(self, summary: TapSummary) -> None:
        self.summary = summary
        if self.suite is not None:
            log.debug("suite_completed", title=self.suite.title, level=self.level)
            self._runner.emit(RunnerEventKind.SUITE_END, self.suite)
        if self.is_root:
            self._runner.emit(RunnerEventKind.END)

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def _announce(self) -> None:
        if self.announced or not self.name or self.is_root:
            return

        parent = self.parent
        self.announced = True
        self.suite = Suite(title=self.name, parent=parent)
        if parent is not None and parent.suite is not None:
            parent.suite.suites.append(self.suite)

        log.debug("suite_announced", title=self.name, level=self.level)
        self._runner.emit(RunnerEventKind.SUITE, self.suite)

    def _emit_test(self, result: TapResult) -> None:
        emit = self._runner.emit
        test = Test(result=result, parent=self, slow_ms=self._runner.config.slow_threshold_ms)
        if self.suite is not None:
            self.suite.tests.append(test)

        emit(RunnerEventKind.TEST, test)
        if result.skip or result.todo:
            test.state = "pending"
            emit(RunnerEventKind.PENDING, test)
        elif result.ok:
            test.state = "passed"
            emit(RunnerEventKind.PASS, test)
        else:
            test.state = "failed"
            emit(RunnerEventKind.FAIL, test, synthesize_error(result))
        emit(RunnerEventKind.TEST_END, test)
