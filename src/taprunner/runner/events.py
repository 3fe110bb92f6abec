"""Runner lifecycle event vocabulary.

The set of events a ``Runner`` can emit is closed. Payloads per kind:

    start()                     once, before the first input chunk
    version(version)            root stream only
    plan(plan) / comment(line) / extra(line) / bailout(reason)
                                passed through unchanged
    suite(suite)                first result of a named subtest
    test(test)                  every non-trailing result
    pending(test) / pass(test) / fail(test, error)
                                exactly one per test
    test end(test)              immediately after the classification
    suite end(suite)            subtest completed
    end()                       root stream completed
    pipe / prefinish / finish / unpipe / close
                                proxied from the root source
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RunnerEventKind(str, Enum):
    """Every event a Runner emits."""

    START = "start"
    END = "end"
    VERSION = "version"
    PLAN = "plan"
    COMMENT = "comment"
    EXTRA = "extra"
    BAILOUT = "bailout"
    SUITE = "suite"
    SUITE_END = "suite end"
    TEST = "test"
    TEST_END = "test end"
    PASS = "pass"
    FAIL = "fail"
    PENDING = "pending"

    # Proxied stream lifecycle
    PIPE = "pipe"
    PREFINISH = "prefinish"
    FINISH = "finish"
    UNPIPE = "unpipe"
    CLOSE = "close"


@dataclass(frozen=True, slots=True)
class RunnerEvent:
    """One emitted event, as seen by ``Runner.subscribe`` listeners."""

    kind: RunnerEventKind
    args: tuple[Any, ...] = ()
