"""Debug logging with in-app viewer support.

Every ``log`` call made by tfreview, plus records from Python's logging
module, lands in a bounded ring buffer that the F12 viewer reads. Messages
start with a bracketed component (``[Review]``, ``[PlanParse]``,
``[Process]``) so the viewer and exports can be narrowed to one of them.
"""

from __future__ import annotations

import itertools
import logging
import re
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

from tfreview.limits import MAX_LOG_LINES, MAX_LOG_MESSAGE_LENGTH

LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_COMPONENT_PREFIX = re.compile(r"^\[(\w+)\]")


class LogSource(StrEnum):
    """Where an entry came from; the value is the tag shown in exports."""

    TFREVIEW = "TF"
    LOGGING = "PY"


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A captured log entry."""

    sequence: int
    level: str
    message: str
    timestamp: float
    source: LogSource
    component: str | None = None


log_buffer: deque[LogEntry] = deque(maxlen=MAX_LOG_LINES)

_sequence = itertools.count(1)
_buffer_generation: int = 0


def _component_of(message: str) -> str | None:
    match = _COMPONENT_PREFIX.match(message)
    return match.group(1) if match else None


def _append(level: str, message: str, source: LogSource, timestamp: float) -> LogEntry:
    if len(message) > MAX_LOG_MESSAGE_LENGTH:
        message = message[:MAX_LOG_MESSAGE_LENGTH] + "... [truncated]"
    entry = LogEntry(
        sequence=next(_sequence),
        level=level,
        message=message,
        timestamp=timestamp,
        source=source,
        component=_component_of(message),
    )
    log_buffer.append(entry)
    return entry


class ReviewLogger:
    """Structured logger: positional text plus ``key=value`` fields.

    ``log.info("[Review] Approval blocked", reviewed=1, total=3)`` is stored
    as ``[Review] Approval blocked reviewed=1 total=3``.
    """

    def __call__(self, *args: object, **fields: Any) -> None:
        self.info(*args, **fields)

    def _log(self, level: str, *args: object, **fields: Any) -> None:
        output = " ".join(str(arg) for arg in args)
        if fields:
            rendered = " ".join(f"{key}={value!r}" for key, value in fields.items())
            output = f"{output} {rendered}" if output else rendered

        entry = _append(level, output, LogSource.TFREVIEW, time.time())

        try:
            from textual import log as textual_log

            textual_log(entry.message)
        except Exception:
            pass

    def debug(self, *args: object, **fields: Any) -> None:
        self._log("DEBUG", *args, **fields)

    def info(self, *args: object, **fields: Any) -> None:
        self._log("INFO", *args, **fields)

    def warning(self, *args: object, **fields: Any) -> None:
        self._log("WARNING", *args, **fields)

    def error(self, *args: object, **fields: Any) -> None:
        self._log("ERROR", *args, **fields)


class DebugLogHandler(logging.Handler):
    """Routes stdlib logging records into the debug buffer."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            _append(record.levelname, self.format(record), LogSource.LOGGING, record.created)
        except Exception:
            self.handleError(record)


_debug_logging_initialized: bool = False


def setup_debug_logging() -> None:
    """Attach the debug buffer handler to the root logger. Idempotent."""
    global _debug_logging_initialized

    if _debug_logging_initialized:
        return

    handler = DebugLogHandler()
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logging.getLogger().addHandler(handler)

    _debug_logging_initialized = True
    log.info("Debug logging initialized - press F12 to view logs")


def clear_log_buffer() -> None:
    global _buffer_generation
    log_buffer.clear()
    _buffer_generation += 1


def get_buffer_generation() -> int:
    """Incremented on every clear, so viewers know to redraw."""
    return _buffer_generation


def select_entries(
    component: str | None = None,
    min_level: str = "DEBUG",
    after: int = 0,
) -> list[LogEntry]:
    """Buffered entries matching a component and minimum level.

    Args:
        component: Only entries tagged with this component (None = all).
        min_level: Lowest level to include, one of :data:`LEVELS`.
        after: Only entries with a sequence number greater than this.
    """
    threshold = LEVELS.index(min_level)
    return [
        entry
        for entry in log_buffer
        if entry.sequence > after
        and (component is None or entry.component == component)
        and (entry.level not in LEVELS or LEVELS.index(entry.level) >= threshold)
    ]


def components() -> list[str]:
    """Components seen in the buffer, sorted."""
    return sorted({entry.component for entry in log_buffer if entry.component})


def format_entry(entry: LogEntry) -> str:
    ts = datetime.fromtimestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    return f"{ts} [{entry.source}] [{entry.level}] {entry.message}"


def export_logs_to_file(file_path: str | Path, component: str | None = None) -> int:
    """Write buffered entries to ``file_path``.

    Returns:
        Number of entries written.
    """
    entries = select_entries(component)
    output_path = Path(file_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", encoding="utf-8") as f:
        f.write("# tfreview debug log\n")
        f.write(f"# Component: {component or 'all'}\n")
        f.write(f"# Entries: {len(entries)}\n\n")
        for entry in entries:
            f.write(format_entry(entry) + "\n")

    return len(entries)


log = ReviewLogger()
