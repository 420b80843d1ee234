"""Review session errors."""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for review failures reported to the caller."""


class PolicyViolation(ReviewError):
    """Approval attempted while resources are still unreviewed."""

    def __init__(self, reviewed: int, total: int) -> None:
        self.reviewed = reviewed
        self.total = total
        super().__init__(
            f"Review all resources before approving ({reviewed}/{total} reviewed)"
        )

    @property
    def remaining(self) -> int:
        return self.total - self.reviewed


class RelayFailure(ReviewError):
    """The confirmation token could not be delivered to terraform."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(
            f"Failed to send {token!r} to terraform. The process may have terminated."
        )


class ReviewInProgress(ReviewError):
    """A review is already waiting for a decision."""

    def __init__(self) -> None:
        super().__init__("A plan review is already in progress")
