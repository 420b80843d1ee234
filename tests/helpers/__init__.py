"""Test helpers package."""

from tests.helpers.config import write_test_config
from tests.helpers.mocks import FakeRelay, FakeTerraformProcess, fake_process_factory
from tests.helpers.plans import NO_CHANGES_OUTPUT, PLAN_OUTPUT
from tests.helpers.wait import wait_for_screen, wait_until

__all__ = [
    "NO_CHANGES_OUTPUT",
    "PLAN_OUTPUT",
    "FakeRelay",
    "FakeTerraformProcess",
    "fake_process_factory",
    "wait_for_screen",
    "wait_until",
    "write_test_config",
]
