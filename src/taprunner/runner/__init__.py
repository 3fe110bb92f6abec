"""TAP to test-runner event translation."""

from taprunner.runner.events import RunnerEvent, RunnerEventKind
from taprunner.runner.failures import UNSET, TestError, synthesize_error
from taprunner.runner.group import Group
from taprunner.runner.records import Suite, Test
from taprunner.runner.runner import Runner

__all__ = [
    "Group",
    "Runner",
    "RunnerEvent",
    "RunnerEventKind",
    "Suite",
    "Test",
    "TestError",
    "UNSET",
    "synthesize_error",
]
