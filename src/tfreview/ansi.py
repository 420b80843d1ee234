"""ANSI escape sequence stripper.

Terraform colours its plan output unless ``-no-color`` is passed, so every
captured line goes through :func:`strip_ansi` before classification.
"""

from __future__ import annotations

import re

# CSI (colours, erase line), OSC terminated by BEL (window title), and
# two-byte escapes.
ANSI_ESCAPE = re.compile(r"\x1B(?:\[[0-?]*[ -/]*[@-~]|\][^\x07]*\x07|[@-Z\\^_-])")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text) if text else ""
