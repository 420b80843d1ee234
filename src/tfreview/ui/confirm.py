"""Plain yes/no prompt used when interactive review is disabled."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Label

from tfreview.ui.keybindings import CONFIRM_BINDINGS

if TYPE_CHECKING:
    from textual.app import ComposeResult


class ConfirmApplyModal(ModalScreen[bool]):
    """Ask whether terraform should go ahead, without per-resource review."""

    BINDINGS = CONFIRM_BINDINGS

    DEFAULT_CSS = """
    ConfirmApplyModal {
        align: center middle;
    }

    ConfirmApplyModal > Container {
        width: 60;
        height: auto;
        background: $surface;
        border: round $warning;
        padding: 1 2;
    }

    ConfirmApplyModal .confirm-title {
        text-style: bold;
    }

    ConfirmApplyModal .confirm-hint {
        color: $text-muted;
        margin-top: 1;
    }
    """

    def __init__(self, summary: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._summary = summary

    def compose(self) -> ComposeResult:
        with Container():
            yield Label("Apply these changes?", classes="confirm-title")
            yield Label(self._summary, classes="confirm-message")
            yield Label("Press Y to apply, N to cancel", classes="confirm-hint")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
