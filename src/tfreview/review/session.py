"""Review session state machine.

A session starts ``PENDING`` and ends in exactly one of ``APPROVE`` or
``REJECT``. Only ``approve()`` (after the gating check) and ``reject()`` leave
``PENDING``; every operation on a decided session is a silent no-op, since UI
events can still arrive after the decision was taken.

Review and collapse flags live in the session, keyed by block position. The
parsed blocks themselves are never touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING, Protocol

from tfreview.constants import APPROVE_TOKEN, REJECT_TOKEN
from tfreview.debug_log import log

from .errors import PolicyViolation, RelayFailure

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tfreview.plan.models import Block, PlanSummary


class Decision(StrEnum):
    """Outcome of a review session."""

    PENDING = "pending"
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def label(self) -> str:
        return {self.PENDING: "Pending", self.APPROVE: "Approved", self.REJECT: "Rejected"}[self]


class Direction(IntEnum):
    """Navigation direction through resource blocks."""

    PREVIOUS = -1
    NEXT = 1


class ConfirmationRelay(Protocol):
    """Writes the bare confirmation token to terraform's stdin."""

    def send_confirmation(self, token: str) -> bool:
        """Return True when the token was delivered."""
        ...


@dataclass(frozen=True, slots=True)
class ReviewOptions:
    """Policy knobs for a review session."""

    auto_collapse_on_review: bool = True
    require_review_all: bool = True
    default_collapsed: bool = True


class ReviewSession:
    """Mutable review state for one parsed plan."""

    def __init__(
        self,
        blocks: Sequence[Block],
        summary: PlanSummary,
        options: ReviewOptions | None = None,
        relay: ConfirmationRelay | None = None,
    ) -> None:
        self.blocks = blocks
        self.summary = summary
        self.options = options or ReviewOptions()
        self._relay = relay
        self._resource_positions: tuple[int, ...] = tuple(
            position for position, block in enumerate(blocks) if block.is_resource
        )
        self.reviewed: dict[int, bool] = {}
        self.collapsed: dict[int, bool] = {
            position: self.options.default_collapsed for position in self._resource_positions
        }
        self.current: int | None = self._resource_positions[0] if self._resource_positions else None
        self.decision = Decision.PENDING

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.decision != Decision.PENDING

    @property
    def resource_positions(self) -> tuple[int, ...]:
        return self._resource_positions

    @property
    def total_resources(self) -> int:
        return len(self._resource_positions)

    @property
    def reviewed_count(self) -> int:
        return sum(1 for position in self._resource_positions if self.reviewed.get(position))

    @property
    def current_block(self) -> Block | None:
        if self.current is None:
            return None
        return self.blocks[self.current]

    @property
    def can_approve(self) -> bool:
        """Whether ``approve()`` would pass the gating policy right now."""
        if self.is_terminal:
            return False
        if not self.options.require_review_all:
            return True
        return self.reviewed_count >= self.total_resources

    def is_reviewed(self, position: int) -> bool:
        return self.reviewed.get(position, False)

    def is_collapsed(self, position: int) -> bool:
        return self.collapsed.get(position, False)

    def _current_is_resource(self) -> bool:
        block = self.current_block
        return block is not None and block.is_resource

    # ------------------------------------------------------------------
    # Navigation and toggles
    # ------------------------------------------------------------------

    def _find_resource(self, direction: Direction) -> int | None:
        if self.current is None:
            return None
        if direction == Direction.NEXT:
            candidates = (p for p in self._resource_positions if p > self.current)
        else:
            candidates = (p for p in reversed(self._resource_positions) if p < self.current)
        return next(candidates, None)

    def navigate(self, direction: Direction) -> None:
        """Move to the nearest resource in ``direction``; stay put at either end."""
        if self.is_terminal:
            return
        target = self._find_resource(direction)
        if target is not None:
            self.current = target

    def toggle_reviewed(self) -> None:
        """Flip the reviewed flag of the current resource, then move to the next one."""
        if self.is_terminal or not self._current_is_resource():
            return
        assert self.current is not None
        was_reviewed = self.is_reviewed(self.current)
        self.reviewed[self.current] = not was_reviewed
        if not was_reviewed and self.options.auto_collapse_on_review:
            self.collapsed[self.current] = True
        log.debug(
            "[Review] Toggled reviewed",
            position=self.current,
            reviewed=not was_reviewed,
            progress=f"{self.reviewed_count}/{self.total_resources}",
        )
        # Advances after un-reviewing too.
        self.navigate(Direction.NEXT)

    def toggle_collapsed(self) -> None:
        if self.is_terminal or not self._current_is_resource():
            return
        assert self.current is not None
        self.collapsed[self.current] = not self.is_collapsed(self.current)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def approve(self) -> None:
        """Approve the plan and relay ``yes``.

        Raises:
            PolicyViolation: unreviewed resources remain under ``require_review_all``.
                The session stays pending.
            RelayFailure: the token could not be delivered. The session is
                approved regardless.
        """
        if self.is_terminal:
            return
        if self.options.require_review_all:
            reviewed, total = self.reviewed_count, self.total_resources
            if reviewed < total:
                log.info("[Review] Approval blocked", reviewed=reviewed, total=total)
                raise PolicyViolation(reviewed, total)

        self.decision = Decision.APPROVE
        log.info("[Review] Plan approved", resources=self.total_resources)
        if not self._relay_token(APPROVE_TOKEN):
            raise RelayFailure(APPROVE_TOKEN)

    def reject(self) -> bool:
        """Reject the plan and relay ``no``.

        Returns:
            False when the token could not be delivered, True otherwise
            (including when the session was already decided).
        """
        if self.is_terminal:
            return True
        self.decision = Decision.REJECT
        log.info("[Review] Plan rejected")
        delivered = self._relay_token(REJECT_TOKEN)
        if not delivered:
            log.warning("[Review] Rejection was not delivered to terraform")
        return delivered

    def _relay_token(self, token: str) -> bool:
        if self._relay is None:
            log.warning("[Review] No relay attached", token=token)
            return False
        delivered = self._relay.send_confirmation(token)
        log.debug("[Review] Relayed confirmation", token=token, delivered=delivered)
        return delivered
