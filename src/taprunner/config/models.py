"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TAPRUNNER__SECTION__KEY)
3. YAML files (explicit path merged over ~/.config/taprunner/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    TAPRUNNER__<SECTION>__<KEY>=<VALUE>

Examples:
    TAPRUNNER__LOGGING__LEVEL=DEBUG
    TAPRUNNER__RUNNER__SLOW_THRESHOLD_MS=200
    TAPRUNNER__REPORTER__NAME=json
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ReporterName = Literal["spec", "json"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TAPRUNNER__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every suite and suppressed trailing result.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RunnerConfig(BaseModel):
    """Event translator configuration.

    Env vars:
        TAPRUNNER__RUNNER__SLOW_THRESHOLD_MS: Duration above which a test is slow
        TAPRUNNER__RUNNER__ECHO_EXTRA: Copy non-TAP lines and bailouts to stderr
    """

    slow_threshold_ms: int = Field(
        default=75,
        description="Threshold returned by Test.slow(). Reporters flag tests slower than this.",
    )
    echo_extra: bool = Field(
        default=True,
        description="Write non-TAP output and bailout reasons to the error stream.",
    )

    @field_validator("slow_threshold_ms")
    @classmethod
    def validate_slow_threshold(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"slow_threshold_ms must be >= 0, got {v}")
        return v


class ReporterConfig(BaseModel):
    """Reporter configuration.

    Env vars:
        TAPRUNNER__REPORTER__NAME: Reporter to use (spec, json)
        TAPRUNNER__REPORTER__COLOR: Force color on/off (unset = auto-detect)
    """

    name: ReporterName = "spec"
    color: bool | None = None
    show_stack: bool = Field(
        default=True,
        description="Print stack traces in the failure summary.",
    )


class TapRunnerConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    reporter: ReporterConfig = Field(default_factory=ReporterConfig)
