"""TAP input: records, event vocabulary and the default streaming parser."""

from taprunner.tap.events import STREAM_EVENTS, EventSource, Listener, ParserEvent
from taprunner.tap.models import TapPlan, TapResult, TapSummary
from taprunner.tap.parser import TapParser, parse_result

__all__ = [
    "EventSource",
    "Listener",
    "ParserEvent",
    "STREAM_EVENTS",
    "TapParser",
    "TapPlan",
    "TapResult",
    "TapSummary",
    "parse_result",
]
