"""taprunner - translate TAP streams into test-runner lifecycle events."""

from taprunner.runner import Runner, RunnerEvent, RunnerEventKind, Suite, Test, TestError
from taprunner.tap import TapParser, TapResult

__version__ = "0.1.0"

__all__ = [
    "Runner",
    "RunnerEvent",
    "RunnerEventKind",
    "Suite",
    "TapParser",
    "TapResult",
    "Test",
    "TestError",
    "__version__",
]
