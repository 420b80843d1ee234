"""Interactive review state."""

from tfreview.review.coordinator import ReviewCoordinator
from tfreview.review.errors import PolicyViolation, RelayFailure, ReviewError, ReviewInProgress
from tfreview.review.session import (
    ConfirmationRelay,
    Decision,
    Direction,
    ReviewOptions,
    ReviewSession,
)

__all__ = [
    "ConfirmationRelay",
    "Decision",
    "Direction",
    "PolicyViolation",
    "RelayFailure",
    "ReviewCoordinator",
    "ReviewError",
    "ReviewInProgress",
    "ReviewOptions",
    "ReviewSession",
]
