"""Main tfreview TUI application."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

from rich.text import Text
from textual.app import App
from textual.widgets import Footer, Header, RichLog, Static

from tfreview.constants import APPROVE_TOKEN, REJECT_TOKEN
from tfreview.debug_log import log, setup_debug_logging
from tfreview.plan import parse_plan
from tfreview.process import ProcessStartError, TerraformProcess
from tfreview.review import Decision, ReviewCoordinator, ReviewInProgress
from tfreview.ui.confirm import ConfirmApplyModal
from tfreview.ui.debug_log import DebugLogModal
from tfreview.ui.keybindings import APP_BINDINGS
from tfreview.ui.review_modal import PlanReviewModal

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from textual.app import ComposeResult

    from tfreview.config import TfReviewConfig

    ProcessFactory: TypeAlias = Callable[..., TerraformProcess]


class TfReviewApp(App[int]):
    """Streams a terraform command and gates its approval prompt behind a review."""

    TITLE = "tfreview"

    BINDINGS = APP_BINDINGS

    DEFAULT_CSS = """
    #output {
        height: 1fr;
        border: round $primary;
    }

    #status {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        command: Sequence[str],
        config: TfReviewConfig,
        *,
        cwd: str | Path | None = None,
        process_factory: ProcessFactory = TerraformProcess,
    ) -> None:
        super().__init__()
        self.command = list(command)
        self.config = config
        self.cwd = cwd if cwd is not None else config.terraform.cwd
        self.coordinator = ReviewCoordinator(config.review_options())
        self.process = process_factory(
            self.command,
            cwd=self.cwd,
            env=config.terraform.env,
            on_output=self._on_output,
            on_prompt=self._on_prompt,
            on_exit=self._on_exit,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        yield RichLog(id="output", wrap=True, auto_scroll=True)
        yield Static("", id="status")
        yield Footer()

    async def on_mount(self) -> None:
        setup_debug_logging()
        self.sub_title = " ".join(self.command)
        self._set_status(f"Running: {' '.join(self.command)}")
        try:
            await self.process.start()
        except ProcessStartError as exc:
            self._write(str(exc))
            self._set_status("Failed to start terraform")
            self.notify(str(exc), severity="error")

    def _write(self, line: str) -> None:
        self.query_one("#output", RichLog).write(Text(line))

    def _set_status(self, message: str) -> None:
        self.query_one("#status", Static).update(message)

    # ------------------------------------------------------------------
    # Process callbacks
    # ------------------------------------------------------------------

    def _on_output(self, line: str) -> None:
        self._write(line)

    def _on_prompt(self, lines: list[str]) -> None:
        if not self.config.interactive.enabled:
            _, summary = parse_plan(lines)
            self._set_status("Waiting for confirmation")
            self.push_screen(ConfirmApplyModal(summary.describe()), callback=self._on_confirmed)
            return

        try:
            session = self.coordinator.begin(lines, relay=self.process)
        except ReviewInProgress as exc:
            self.notify(str(exc), severity="warning")
            return

        self._set_status("Reviewing plan")
        interactive = self.config.interactive
        self.push_screen(
            PlanReviewModal(
                session,
                show_unchanged=interactive.show_unchanged,
                dim_reviewed=interactive.dim_reviewed,
                show_hints=self.config.ui.show_hints,
            ),
            callback=self._on_review_closed,
        )

    def _on_exit(self, return_code: int) -> None:
        if self.coordinator.busy:
            log.warning("[App] Terraform exited during review", return_code=return_code)
            self.coordinator.abandon()
            if isinstance(self.screen, PlanReviewModal):
                self.pop_screen()

        status = "succeeded" if return_code == 0 else f"failed (exit code {return_code})"
        self._set_status(f"Terraform {status} - press q to close")
        self.notify(f"Terraform {status}", severity="information" if return_code == 0 else "error")

        if return_code == 0 and self.config.ui.auto_close:
            self.set_timer(self.config.ui.auto_close_delay_ms / 1000, lambda: self.exit(0))

    # ------------------------------------------------------------------
    # Decision callbacks
    # ------------------------------------------------------------------

    def _on_review_closed(self, decision: Decision | None) -> None:
        self.coordinator.finish()
        decision = decision or Decision.REJECT
        detail = "applying changes" if decision == Decision.APPROVE else "apply cancelled"
        self._set_status(f"{decision.label} - {detail}")

    def _on_confirmed(self, confirmed: bool | None) -> None:
        token = APPROVE_TOKEN if confirmed else REJECT_TOKEN
        if not self.process.send_confirmation(token) and confirmed:
            self.notify(
                "Failed to send approval to terraform. The process may have terminated.",
                severity="error",
            )
        self._set_status("Applying changes" if confirmed else "Apply cancelled")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def action_quit(self) -> None:
        if self.coordinator.busy:
            self.coordinator.abandon()
        if self.process.is_running:
            await self.process.terminate()
        return_code = self.process.return_code
        self.exit(return_code if return_code is not None else 1)

    def action_toggle_debug_log(self) -> None:
        if isinstance(self.screen, DebugLogModal):
            self.pop_screen()
        else:
            self.push_screen(DebugLogModal())
