"""Reporters consuming runner events."""

from taprunner.core.errors import ConfigError
from taprunner.reporters.base import Reporter, ReporterStats
from taprunner.reporters.json import JsonReporter
from taprunner.reporters.spec import SpecReporter

REPORTERS: dict[str, type[Reporter]] = {
    "spec": SpecReporter,
    "json": JsonReporter,
}


def get_reporter(name: str) -> type[Reporter]:
    """Resolve a reporter class by name."""
    try:
        return REPORTERS[name]
    except KeyError:
        raise ConfigError.invalid_value(
            "reporter.name", name, f"unknown reporter, expected one of {sorted(REPORTERS)}"
        ) from None


__all__ = [
    "REPORTERS",
    "JsonReporter",
    "Reporter",
    "ReporterStats",
    "SpecReporter",
    "get_reporter",
]
