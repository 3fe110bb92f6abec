"""Config module exports."""

from taprunner.config.loader import load_config
from taprunner.config.models import (
    LoggingConfig,
    LogOutputConfig,
    ReporterConfig,
    RunnerConfig,
    TapRunnerConfig,
)

__all__ = [
    "load_config",
    "TapRunnerConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RunnerConfig",
    "ReporterConfig",
]
