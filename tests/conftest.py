"""Pytest fixtures for tfreview tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from tests.helpers import PLAN_OUTPUT, FakeRelay

_TEST_BASE_DIR = Path(tempfile.mkdtemp(prefix="tfreview-tests-"))
os.environ["TFREVIEW_CONFIG_DIR"] = str(_TEST_BASE_DIR / "config")
os.environ["TFREVIEW_STATE_DIR"] = str(_TEST_BASE_DIR / "state")

settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=20,
    deadline=500,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def plan_lines() -> list[str]:
    return list(PLAN_OUTPUT)


@pytest.fixture
def relay() -> FakeRelay:
    return FakeRelay()


@pytest.fixture
def dead_relay() -> FakeRelay:
    return FakeRelay(deliver=False)
