"""TAP records produced by an event source.

These are read-only to the translator: the runner never mutates a
``TapResult`` it receives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TapResult:
    """A single ``ok`` / ``not ok`` line plus its YAML diagnostic block."""

    ok: bool
    number: int | None = None
    name: str = ""
    skip: bool | str = False  # str carries the directive reason
    todo: bool | str = False
    time: float | None = None  # milliseconds
    diag: dict[str, Any] | None = None

    @property
    def counts_as_failure(self) -> bool:
        return not self.ok and not self.skip and not self.todo


@dataclass
class TapPlan:
    """A ``1..N`` plan line."""

    start: int
    end: int
    comment: str = ""

    @property
    def skip_all(self) -> bool:
        return self.end < self.start

    @property
    def expected(self) -> int:
        return max(self.end - self.start + 1, 0)


@dataclass
class TapSummary:
    """Final state of one (sub-)stream, carried by the ``complete`` event."""

    ok: bool = True
    count: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    todo: int = 0
    plan: TapPlan | None = None
    bailout: str | bool = False
    failures: list[TapResult] = field(default_factory=list)

    def record(self, result: TapResult) -> None:
        self.count += 1
        if result.skip:
            self.skipped += 1
        if result.todo:
            self.todo += 1
        if result.ok:
            self.passed += 1
        elif result.counts_as_failure:
            self.failed += 1
            self.failures.append(result)

    def finalize(self) -> None:
        """Compute ``ok`` from the counters, the plan and the bailout state."""
        self.ok = self.failed == 0 and not self.bailout
        if self.plan is not None and self.count != self.plan.expected:
            self.ok = False
