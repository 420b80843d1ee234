"""Tests for the single active review session."""

from __future__ import annotations

import pytest

from tests.helpers import FakeRelay
from tfreview.review import Decision, ReviewCoordinator, ReviewInProgress, ReviewOptions

pytestmark = pytest.mark.unit


@pytest.fixture
def coordinator() -> ReviewCoordinator:
    return ReviewCoordinator()


def test_idle_by_default(coordinator: ReviewCoordinator) -> None:
    assert coordinator.active is None
    assert not coordinator.busy


def test_begin_parses_output(
    coordinator: ReviewCoordinator, plan_lines: list[str], relay: FakeRelay
) -> None:
    session = coordinator.begin(plan_lines, relay)

    assert coordinator.active is session
    assert coordinator.busy
    assert session.total_resources == 3
    assert session.summary.to_destroy == 1


def test_begin_passes_options(plan_lines: list[str], relay: FakeRelay) -> None:
    coordinator = ReviewCoordinator(ReviewOptions(require_review_all=False))
    session = coordinator.begin(plan_lines, relay)
    assert session.can_approve


def test_second_begin_while_pending_is_refused(
    coordinator: ReviewCoordinator, plan_lines: list[str], relay: FakeRelay
) -> None:
    first = coordinator.begin(plan_lines, relay)

    with pytest.raises(ReviewInProgress):
        coordinator.begin(plan_lines, FakeRelay())

    assert coordinator.active is first


def test_begin_allowed_once_previous_is_decided(
    coordinator: ReviewCoordinator, plan_lines: list[str], relay: FakeRelay
) -> None:
    first = coordinator.begin(plan_lines, relay)
    first.reject()

    second = coordinator.begin(plan_lines, relay)

    assert second is not first
    assert coordinator.active is second


def test_finish_clears_decided_session(
    coordinator: ReviewCoordinator, plan_lines: list[str], relay: FakeRelay
) -> None:
    coordinator.begin(plan_lines, relay).reject()

    coordinator.finish()

    assert coordinator.active is None
    assert relay.sent == ["no"]


def test_finish_rejects_pending_session(
    coordinator: ReviewCoordinator, plan_lines: list[str], relay: FakeRelay
) -> None:
    session = coordinator.begin(plan_lines, relay)

    coordinator.finish()

    assert session.decision == Decision.REJECT
    assert relay.sent == ["no"]
    assert coordinator.active is None


def test_abandon_rejects_and_reports_delivery(
    coordinator: ReviewCoordinator, plan_lines: list[str], dead_relay: FakeRelay
) -> None:
    session = coordinator.begin(plan_lines, dead_relay)

    assert coordinator.abandon() is False
    assert session.decision == Decision.REJECT
    assert not coordinator.busy


def test_abandon_when_idle(coordinator: ReviewCoordinator) -> None:
    assert coordinator.abandon() is True
