"""Error values for failing test points.

Diagnostics on a ``not ok`` line are free-form YAML, so every field used
here is optional. ``synthesize_error`` always returns something a reporter
can print.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Final

from taprunner.tap.models import TapResult

UNNAMED_ERROR: Final = "(unnamed error)"
STACK_FRAME_PREFIX: Final = "    at "

_ERROR_PREFIX = re.compile(r"^Error: ")


class _Unset:
    """Marker for a diagnostic field that was not present at all."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass
class TestError:
    """Normalized failure for a ``fail`` event."""

    __test__ = False  # not a pytest test class

    message: str
    stack: str | None = None
    actual: Any = UNSET
    expected: Any = UNSET
    show_diff: bool = False

    @property
    def has_actual(self) -> bool:
        return self.actual is not UNSET

    @property
    def has_expected(self) -> bool:
        return self.expected is not UNSET

    def __str__(self) -> str:
        return f"Error: {self.message}"


def synthesize_error(result: TapResult) -> Any:
    """Build the error value reported with a failing result.

    A pre-built ``error`` in the diagnostics is passed through unchanged;
    otherwise a ``TestError`` is assembled from the result name and the
    ``stack``/``found``/``wanted`` diagnostic fields.
    """
    diag = result.diag or {}
    if diag.get("error"):
        return diag["error"]

    err = TestError(message=_ERROR_PREFIX.sub("", result.name or UNNAMED_ERROR, count=1))

    stack = diag.get("stack")
    if isinstance(stack, str):
        err.stack = stack
    elif isinstance(stack, list | tuple):
        frames = "\n".join(f"{STACK_FRAME_PREFIX}{frame}" for frame in stack)
        err.stack = f"{err}\n{frames}"

    if "found" in diag:
        err.actual = diag["found"]
    if "wanted" in diag:
        err.expected = diag["wanted"]
    err.show_diff = err.has_actual and err.has_expected

    return err
