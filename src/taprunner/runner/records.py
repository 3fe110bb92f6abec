"""Suite and Test records handed to reporters.

Reporters written against the classic test-runner object model expect
suites that hold tests and tests that know their suite. These records carry
exactly that shape; they hold no behavior beyond title derivation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Protocol

if TYPE_CHECKING:
    from taprunner.tap.models import TapResult

DEFAULT_SLOW_MS = 75

TestState = Literal["passed", "failed", "pending"]


class Titled(Protocol):
    """Anything that can render the title path leading to it."""

    def full_title(self) -> str: ...


@dataclass(eq=False)
class Suite:
    """A named subtest with at least one result."""

    title: str
    parent: Titled | None = field(default=None, repr=False)
    tests: list[Test] = field(default_factory=list)
    suites: list[Suite] = field(default_factory=list)

    def full_title(self) -> str:
        if self.parent is None:
            return self.title
        return f"{self.parent.full_title()} {self.title}".strip()


@dataclass(eq=False)
class Test:
    """One reported test point."""

    __test__ = False  # not a pytest test class

    result: TapResult
    parent: Titled = field(repr=False)
    slow_ms: int = DEFAULT_SLOW_MS
    state: TestState | None = None

    @property
    def title(self) -> str:
        return self.result.name

    @property
    def duration(self) -> float | None:
        return self.result.time

    @property
    def pending(self) -> bool:
        return bool(self.result.skip or self.result.todo)

    def slow(self) -> int:
        return self.slow_ms

    def is_slow(self) -> bool:
        return self.duration is not None and self.duration > self.slow_ms

    def full_title(self) -> str:
        return f"{self.parent.full_title()} {self.title or ''}".strip()
