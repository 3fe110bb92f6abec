"""Streaming TAP reader.

Default ``EventSource`` implementation for TAP 13/14 text. Input is pushed
in arbitrary chunks; each complete line is classified immediately and the
matching ``ParserEvent`` fires synchronously.

Subtests are recognized in both layouts seen in the wild:

- node-tap / TAP 13: the ``# Subtest: name`` header is indented with the body
- TAP 14: the header sits at the parent level, the body is indented

Either way the header becomes the first comment of a child ``TapParser``
announced through ``ParserEvent.CHILD``. Indented lines are fed to the
active child; the first line back at this level completes it.
"""

from __future__ import annotations

import codecs
import re
from collections import defaultdict

import yaml

from taprunner.core.errors import StreamError
from taprunner.core.logging import get_logger
from taprunner.tap.events import Listener, ParserEvent
from taprunner.tap.models import TapPlan, TapResult, TapSummary

log = get_logger("tap.parser")

INDENT = "    "
YAML_START = "  ---"
YAML_END = "  ..."

SUBTEST_LINE = re.compile(r"^# Subtest\b")
VERSION_LINE = re.compile(r"^TAP version (\d+)\s*$", re.IGNORECASE)
PLAN_LINE = re.compile(r"^(\d+)\.\.(\d+)\s*(?:#\s*(.*))?$")
ASSERT_LINE = re.compile(r"^(not )?ok\b(?:\s+(\d+))?\s*(?:-\s*)?(.*)$")
BAILOUT_LINE = re.compile(r"^Bail out!\s*(.*)$")
SKIP_TODO_DIRECTIVE = re.compile(r"^(skip|todo)\S*(?:\s+(.*))?$", re.IGNORECASE)
TIME_DIRECTIVE = re.compile(r"^time=\s*([\d.]+)\s*(ms|s)?$", re.IGNORECASE)


def _split_directive(text: str) -> tuple[str, str]:
    """Split ``name # directive`` into its two halves."""
    text = text.strip()
    if text.startswith("#"):
        return "", text[1:].strip()
    idx = text.find(" # ")
    if idx < 0:
        return text, ""
    return text[:idx].strip(), text[idx + 3 :].strip()


def parse_result(line: str) -> TapResult | None:
    """Parse a single ``ok``/``not ok`` line, or None if it isn't one."""
    match = ASSERT_LINE.match(line)
    if match is None:
        return None

    not_ok, number, rest = match.groups()
    name, directive = _split_directive(rest)
    result = TapResult(
        ok=not not_ok,
        number=int(number) if number else None,
        name=name,
    )

    if time_match := TIME_DIRECTIVE.match(directive):
        value = float(time_match.group(1))
        unit = (time_match.group(2) or "ms").lower()
        result.time = value * 1000 if unit == "s" else value
    elif skip_match := SKIP_TODO_DIRECTIVE.match(directive):
        kind, reason = skip_match.groups()
        flag: bool | str = reason.strip() if reason and reason.strip() else True
        if kind.lower() == "skip":
            result.skip = flag
        else:
            result.todo = flag

    return result


class TapParser:
    """Push-driven TAP parser for one nesting level."""

    def __init__(self, *, level: int = 0, parent: TapParser | None = None) -> None:
        self.level = level
        self.parent = parent
        self.summary = TapSummary()
        self._listeners: dict[ParserEvent, list[Listener]] = defaultdict(list)
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._child: TapParser | None = None
        self._pending: TapResult | None = None
        self._yaml_lines: list[str] | None = None
        self._lines_seen = 0
        self._bailed = False
        self._ended = False

    # -------------------------------------------------------------------------
    # EventSource
    # -------------------------------------------------------------------------

    def on(self, event: ParserEvent, listener: Listener) -> None:
        self._listeners[ParserEvent(event)].append(listener)

    def write(self, chunk: str | bytes) -> bool:
        if self._ended:
            raise StreamError.write_after_end(self.level)

        text = self._decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        for line in lines:
            self._line(line.rstrip("\r"))
        return True

    def end(self, chunk: str | bytes | None = None) -> None:
        if chunk is not None:
            self.write(chunk)
        if self._ended:
            return

        self._buffer += self._decoder.decode(b"", final=True)
        if self._buffer:
            line, self._buffer = self._buffer, ""
            self._line(line.rstrip("\r"))

        self._finish()
        self._emit(ParserEvent.PREFINISH)
        self._emit(ParserEvent.FINISH)
        self._emit(ParserEvent.CLOSE)

    # -------------------------------------------------------------------------
    # Line handling
    # -------------------------------------------------------------------------

    def _emit(self, event: ParserEvent, *args: object) -> None:
        for listener in list(self._listeners[event]):
            listener(*args)

    def _line(self, line: str) -> None:
        if self._bailed:
            return

        if self._yaml_lines is not None:
            if line.rstrip() == YAML_END:
                self._end_yaml()
                self._flush_pending()
                return
            if line.startswith("  ") or not line.strip():
                self._yaml_lines.append(line[2:])
                return
            # Unterminated block; keep what we have and carry on
            self._end_yaml()

        if self._pending is not None and line.rstrip() == YAML_START:
            self._yaml_lines = []
            return

        if self._child is not None:
            if line.startswith(INDENT) or not line.strip():
                self._child._line(line[len(INDENT) :])
                return
            self._close_child()
        elif line.startswith(INDENT):
            self._open_child()
            assert self._child is not None
            self._child._line(line[len(INDENT) :])
            return

        self._parse(line)

    def _parse(self, line: str) -> None:
        if not line.strip():
            return

        self._flush_pending()

        # The first line of a nested stream is its own header
        is_header = self.level > 0 and self._lines_seen == 0
        self._lines_seen += 1

        if SUBTEST_LINE.match(line) and not is_header:
            self._open_child()
            assert self._child is not None
            self._child._line(line)
            return

        if match := VERSION_LINE.match(line):
            self._emit(ParserEvent.VERSION, int(match.group(1)))
        elif match := PLAN_LINE.match(line):
            plan = TapPlan(
                start=int(match.group(1)),
                end=int(match.group(2)),
                comment=(match.group(3) or "").strip(),
            )
            self.summary.plan = plan
            self._emit(ParserEvent.PLAN, plan)
        elif (result := parse_result(line)) is not None:
            self._pending = result
        elif match := BAILOUT_LINE.match(line):
            self._bail(match.group(1).strip())
        elif line.startswith("#"):
            self._emit(ParserEvent.COMMENT, line + "\n")
        else:
            self._emit(ParserEvent.EXTRA, line + "\n")

    def _end_yaml(self) -> None:
        lines, self._yaml_lines = self._yaml_lines or [], None
        try:
            data = yaml.safe_load("\n".join(lines))
        except yaml.YAMLError as e:
            log.warning("yaml_diag_parse_failed", level=self.level, error=str(e))
            self._emit(ParserEvent.EXTRA, "".join(f"  {line}\n" for line in lines))
            return
        if isinstance(data, dict) and self._pending is not None:
            self._pending.diag = data

    def _flush_pending(self) -> None:
        if self._yaml_lines is not None:
            self._end_yaml()
        if self._pending is None:
            return
        result, self._pending = self._pending, None
        self.summary.record(result)
        self._emit(ParserEvent.ASSERT, result)

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def _open_child(self) -> None:
        self._flush_pending()
        child = TapParser(level=self.level + 1, parent=self)
        self._child = child
        log.debug("child_opened", level=child.level)
        self._emit(ParserEvent.CHILD, child)

    def _close_child(self) -> None:
        if self._child is None:
            return
        child, self._child = self._child, None
        child._finish()

    def _bail(self, reason: str) -> None:
        node: TapParser | None = self
        while node is not None:
            node._bailed = True
            node.summary.bailout = reason or True
            node = node.parent
        self._emit(ParserEvent.BAILOUT, reason)

    def _finish(self) -> None:
        if self._ended:
            return
        self._close_child()
        self._flush_pending()
        self._ended = True
        self.summary.finalize()
        self._emit(ParserEvent.COMPLETE, self.summary)
