"""Unit tests for debug logging."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from tfreview.debug_log import (
    LogSource,
    ReviewLogger,
    clear_log_buffer,
    components,
    export_logs_to_file,
    format_entry,
    get_buffer_generation,
    log_buffer,
    select_entries,
    setup_debug_logging,
)
from tfreview.limits import MAX_LOG_LINES, MAX_LOG_MESSAGE_LENGTH

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_buffer() -> None:
    clear_log_buffer()


@pytest.fixture
def logger() -> ReviewLogger:
    return ReviewLogger()


class TestLogTruncation:
    def test_log_truncates_oversized_messages(self, logger: ReviewLogger):
        """Very large log messages should be truncated to prevent memory bloat."""
        logger.info("x" * 10000)

        logged_message = log_buffer[0].message
        assert len(logged_message) <= MAX_LOG_MESSAGE_LENGTH + 20
        assert logged_message.endswith("... [truncated]")

    def test_log_truncates_at_exact_boundary(self, logger: ReviewLogger):
        """Messages exactly at the limit should not be truncated."""
        exact_message = "y" * MAX_LOG_MESSAGE_LENGTH

        logger.info(exact_message)

        assert log_buffer[0].message == exact_message


class TestStructuredFields:
    def test_fields_rendered_and_component_tagged(self, logger: ReviewLogger):
        logger.warning("[Review] Approval blocked", reviewed=1, total=3)

        entry = log_buffer[0]
        assert entry.level == "WARNING"
        assert entry.source == LogSource.TFREVIEW
        assert entry.component == "Review"
        assert entry.message == "[Review] Approval blocked reviewed=1 total=3"

    def test_string_values_are_quoted(self, logger: ReviewLogger):
        logger.debug("[Process] Sent input", token="yes")
        assert log_buffer[0].message == "[Process] Sent input token='yes'"

    def test_untagged_message(self, logger: ReviewLogger):
        logger("hello")

        assert log_buffer[0].level == "INFO"
        assert log_buffer[0].component is None

    def test_sequence_increases(self, logger: ReviewLogger):
        logger.info("a")
        logger.info("b")
        assert log_buffer[0].sequence < log_buffer[1].sequence


class TestSelection:
    def test_filters_by_component_level_and_sequence(self, logger: ReviewLogger):
        logger.debug("[Review] Toggled reviewed")
        logger.info("[Process] Started")
        logger.error("[Process] Spawn failed")
        first = log_buffer[0].sequence

        assert [e.message for e in select_entries("Process")] == [
            "[Process] Started",
            "[Process] Spawn failed",
        ]
        assert [e.message for e in select_entries(min_level="ERROR")] == [
            "[Process] Spawn failed"
        ]
        assert len(select_entries(after=first)) == 2
        assert components() == ["Process", "Review"]

    def test_sequence_keeps_moving_after_the_buffer_wraps(self, logger: ReviewLogger):
        for n in range(MAX_LOG_LINES + 5):
            logger.info(f"line {n}")
        last_seen = log_buffer[-1].sequence

        logger.info("newest")

        assert len(log_buffer) == MAX_LOG_LINES
        assert [e.message for e in select_entries(after=last_seen)] == ["newest"]


class TestBuffer:
    def test_clear_bumps_generation(self, logger: ReviewLogger):
        generation = get_buffer_generation()
        logger.error("boom")

        clear_log_buffer()

        assert len(log_buffer) == 0
        assert get_buffer_generation() == generation + 1

    def test_python_logging_is_captured(self):
        setup_debug_logging()
        setup_debug_logging()
        clear_log_buffer()

        logging.getLogger("tfreview.test").warning("from stdlib")

        entries = [e for e in log_buffer if e.source == LogSource.LOGGING]
        assert len(entries) == 1
        assert entries[0].message == "tfreview.test: from stdlib"
        assert "[PY] [WARNING]" in format_entry(entries[0])

    def test_export(self, logger: ReviewLogger, tmp_path: Path):
        logger.info("[Review] first")
        logger.info("[Process] second")
        logger.info("[Review] third")
        target = tmp_path / "logs" / "debug.log"

        assert export_logs_to_file(target) == 3
        content = target.read_text(encoding="utf-8")
        assert "# Entries: 3" in content
        assert "[TF] [INFO] [Review] first" in content
        assert content.index("first") < content.index("second")

    def test_export_single_component(self, logger: ReviewLogger, tmp_path: Path):
        logger.info("[Review] first")
        logger.info("[Process] second")
        target = tmp_path / "debug.log"

        assert export_logs_to_file(target, component="Process") == 1
        content = target.read_text(encoding="utf-8")
        assert "# Component: Process" in content
        assert "first" not in content
