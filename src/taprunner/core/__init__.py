"""Core module exports."""

from taprunner.core.errors import (
    ConfigError,
    ErrorCode,
    StreamError,
    TapRunnerError,
)
from taprunner.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "TapRunnerError",
    "ConfigError",
    "StreamError",
    "ErrorCode",
    # Logging
    "configure_logging",
    "get_logger",
]
