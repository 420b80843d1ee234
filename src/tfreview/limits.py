"""Numeric limits - no circular dependencies."""

from __future__ import annotations

MAX_LOG_MESSAGE_LENGTH = 4000
"""Log messages longer than this are truncated before buffering."""

MAX_LOG_LINES = 2000
"""Ring buffer size for the in-app debug log."""

OUTPUT_READ_CHUNK = 8192
"""Bytes read from the child process per iteration."""

PROCESS_KILL_TIMEOUT = 5.0
"""Seconds to wait for the child to exit after kill()."""
