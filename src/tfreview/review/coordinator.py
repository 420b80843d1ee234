"""Owner of the single active review session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tfreview.debug_log import log
from tfreview.plan import parse_plan

from .errors import ReviewInProgress
from .session import ReviewOptions, ReviewSession

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .session import ConfirmationRelay


class ReviewCoordinator:
    """Holds at most one review session and refuses to start a second.

    Two pending sessions could relay conflicting answers to two terraform
    processes sharing one state lock, so ``begin`` raises while a session is
    still undecided.
    """

    def __init__(self, options: ReviewOptions | None = None) -> None:
        self.options = options or ReviewOptions()
        self._active: ReviewSession | None = None

    @property
    def active(self) -> ReviewSession | None:
        return self._active

    @property
    def busy(self) -> bool:
        return self._active is not None and not self._active.is_terminal

    def begin(self, output_lines: Sequence[str], relay: ConfirmationRelay) -> ReviewSession:
        """Parse captured output and open a session for it.

        Raises:
            ReviewInProgress: a previous session has not reached a decision.
        """
        if self.busy:
            raise ReviewInProgress()
        blocks, summary = parse_plan(output_lines)
        self._active = ReviewSession(blocks, summary, self.options, relay=relay)
        log.info(
            "[Review] Session started",
            resources=self._active.total_resources,
            summary=summary.describe(),
        )
        return self._active

    def finish(self) -> None:
        """Drop the active session once it has been decided."""
        if self._active is not None and not self._active.is_terminal:
            log.warning("[Review] finish() called on a pending session; rejecting")
            self._active.reject()
        self._active = None

    def abandon(self) -> bool:
        """Treat a closed or cancelled review as a rejection.

        Returns:
            Whether the rejection reached terraform. True when idle.
        """
        session = self._active
        if session is None:
            return True
        delivered = session.reject()
        self._active = None
        return delivered
