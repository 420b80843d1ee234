"""PlanReviewModal - step through resource changes before approving an apply."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Footer, Label, Rule, Static

from tfreview.debug_log import log
from tfreview.plan import filter_changed_lines
from tfreview.review import Decision, Direction, PolicyViolation, RelayFailure
from tfreview.ui.keybindings import REVIEW_BINDINGS

if TYPE_CHECKING:
    from textual.app import ComposeResult

    from tfreview.plan import Block
    from tfreview.review import ReviewSession

_ACTION_STYLES = {
    "create": "green",
    "destroy": "red",
    "update": "yellow",
    "replace": "magenta",
    "read": "dim",
    "unknown": "",
}


class PlanReviewModal(ModalScreen[Decision]):
    """Renders a :class:`ReviewSession` and feeds key presses into it.

    All decoration is derived from session state on every refresh; the modal
    keeps no review state of its own.
    """

    BINDINGS = REVIEW_BINDINGS

    DEFAULT_CSS = """
    PlanReviewModal {
        align: center middle;
    }

    PlanReviewModal #review-container {
        width: 90%;
        height: 90%;
        background: $surface;
        border: round $primary;
        padding: 0 1;
    }

    PlanReviewModal .modal-title {
        text-style: bold;
        width: 100%;
        content-align: center middle;
    }

    PlanReviewModal #review-body {
        height: 1fr;
    }

    PlanReviewModal .resource-row {
        padding: 0 0 1 0;
    }

    PlanReviewModal .resource-row.current {
        background: $boost;
    }

    PlanReviewModal #review-progress {
        text-style: bold;
    }

    PlanReviewModal .review-hint {
        color: $text-muted;
    }
    """

    def __init__(
        self,
        session: ReviewSession,
        *,
        show_unchanged: bool = False,
        dim_reviewed: bool = True,
        show_hints: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.session = session
        self._show_unchanged = show_unchanged
        self._dim_reviewed = dim_reviewed
        self._show_hints = show_hints

    def compose(self) -> ComposeResult:
        with Vertical(id="review-container"):
            yield Label("Terraform Plan Review", classes="modal-title")
            yield Static(self.session.summary.describe(), id="review-summary")
            yield Rule()
            with VerticalScroll(id="review-body"):
                if not self.session.resource_positions:
                    yield Static("No resource changes in this plan.", id="review-empty")
                for position in self.session.resource_positions:
                    yield Static("", id=f"resource-{position}", classes="resource-row")
            yield Rule()
            yield Static("", id="review-progress")
            yield Static("", id="review-actions", markup=False)
            if self._show_hints:
                yield Static(
                    "j/k ↓/↑ navigate · space reviewed · enter expand · q/esc reject",
                    classes="review-hint",
                )
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh_view(self) -> None:
        session = self.session
        for position in session.resource_positions:
            row = self.query_one(f"#resource-{position}", Static)
            row.update(self._render_resource(position, session.blocks[position]))
            row.set_class(position == session.current, "current")
            row.set_class(session.is_reviewed(position), "reviewed")

        self.query_one("#review-progress", Static).update(
            f"Progress: {session.reviewed_count} / {session.total_resources} resources reviewed"
        )
        if session.can_approve:
            actions = "[A] Approve and Apply    [R] Reject and Cancel"
        else:
            actions = "Review all resources before approving    [R] Reject and Cancel"
        self.query_one("#review-actions", Static).update(actions)

        if session.current is not None:
            self.query_one(f"#resource-{session.current}", Static).scroll_visible()

    def _render_resource(self, position: int, block: Block) -> Text:
        session = self.session
        reviewed = session.is_reviewed(position)
        collapsed = session.is_collapsed(position)
        action = block.action.value if block.action else "unknown"
        symbol = block.action.symbol if block.action else "?"

        text = Text()
        text.append("→ " if position == session.current else "  ")
        text.append("[✓] " if reviewed else "[ ] ", style="green" if reviewed else "")
        text.append("▶ " if collapsed else "▼ ")
        text.append(block.resource_address or block.header.strip(), style="bold")
        text.append(f" ({symbol} {action})", style=_ACTION_STYLES.get(action, ""))

        if not collapsed:
            body_style = "dim" if reviewed and self._dim_reviewed else ""
            for line in filter_changed_lines(block.lines, self._show_unchanged):
                text.append("\n    ")
                text.append(line, style=body_style)
        return text

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_next_resource(self) -> None:
        self.session.navigate(Direction.NEXT)
        self.refresh_view()

    def action_previous_resource(self) -> None:
        self.session.navigate(Direction.PREVIOUS)
        self.refresh_view()

    def action_toggle_reviewed(self) -> None:
        self.session.toggle_reviewed()
        self.refresh_view()

    def action_toggle_collapsed(self) -> None:
        self.session.toggle_collapsed()
        self.refresh_view()

    def action_approve(self) -> None:
        if self.session.is_terminal:
            return
        try:
            self.session.approve()
        except PolicyViolation as exc:
            self.notify(str(exc), severity="warning")
            return
        except RelayFailure as exc:
            # Approved regardless; terraform now owns the outcome.
            self.notify(str(exc), severity="error")
        self.dismiss(self.session.decision)

    def action_reject(self) -> None:
        if self.session.is_terminal:
            return
        if not self.session.reject():
            log.warning("[Review] Rejection not delivered; closing review anyway")
        self.dismiss(self.session.decision)
