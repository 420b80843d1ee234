"""Property-based tests for ANSI stripping."""

from __future__ import annotations

import pytest
from hypothesis import given

from tests.strategies import plain_text, text_with_ansi
from tfreview.ansi import strip_ansi

pytestmark = pytest.mark.unit


class TestStripAnsiProperties:
    @given(plain_text)
    def test_plain_text_unchanged(self, text: str) -> None:
        assert strip_ansi(text) == text

    @given(text_with_ansi())
    def test_no_escape_in_output(self, text: str) -> None:
        assert "\x1b" not in strip_ansi(text)

    @given(text_with_ansi())
    def test_idempotence(self, text: str) -> None:
        once = strip_ansi(text)
        assert strip_ansi(once) == once

    @given(text_with_ansi())
    def test_length_never_increases(self, text: str) -> None:
        assert len(strip_ansi(text)) <= len(text)


def test_coloured_resource_header() -> None:
    line = "  \x1b[1m# aws_instance.web\x1b[0m will be \x1b[32mcreated\x1b[0m"
    assert strip_ansi(line) == "  # aws_instance.web will be created"


def test_empty() -> None:
    assert strip_ansi("") == ""
