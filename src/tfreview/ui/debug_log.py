"""Debug log viewer modal (F12)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.text import Text
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Label, RichLog

from tfreview.debug_log import (
    LogEntry,
    LogSource,
    clear_log_buffer,
    components,
    export_logs_to_file,
    get_buffer_generation,
    select_entries,
)
from tfreview.paths import get_debug_log_path
from tfreview.ui.keybindings import DEBUG_LOG_BINDINGS

if TYPE_CHECKING:
    from textual.app import ComposeResult

_LEVEL_STYLES = {
    "DEBUG": "dim",
    "INFO": "blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold red",
}


class DebugLogModal(ModalScreen[None]):
    """Tails the debug buffer, optionally narrowed to one component."""

    BINDINGS = DEBUG_LOG_BINDINGS

    DEFAULT_CSS = """
    DebugLogModal {
        align: center middle;
    }

    DebugLogModal #debug-log-container {
        width: 90%;
        height: 80%;
        background: $surface;
        border: round $secondary;
    }

    DebugLogModal #debug-log-title {
        text-style: bold;
        width: 100%;
        content-align: center middle;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.component: str | None = None
        self._last_sequence = 0
        self._buffer_generation = get_buffer_generation()

    def compose(self) -> ComposeResult:
        with Vertical(id="debug-log-container"):
            yield Label(self._title(), id="debug-log-title", markup=False)
            yield RichLog(id="debug-log", auto_scroll=True, wrap=True)
        yield Footer()

    def on_mount(self) -> None:
        self._update_logs()
        self.set_interval(0.5, self._update_logs)

    def _title(self) -> str:
        return f"Debug Logs [{self.component or 'all'}]"

    def _redraw(self) -> None:
        self._last_sequence = 0
        self.query_one("#debug-log", RichLog).clear()
        self._update_logs()

    def _update_logs(self) -> None:
        generation = get_buffer_generation()
        if generation != self._buffer_generation:
            self._buffer_generation = generation
            self._redraw()
            return

        rich_log = self.query_one("#debug-log", RichLog)
        for entry in select_entries(self.component, after=self._last_sequence):
            rich_log.write(self._format_entry(entry))
            self._last_sequence = entry.sequence

    def _format_entry(self, entry: LogEntry) -> Text:
        ts = datetime.fromtimestamp(entry.timestamp).strftime("%H:%M:%S")
        text = Text()
        text.append(f"{ts} [{entry.level}]", style=_LEVEL_STYLES.get(entry.level, "white"))
        if entry.source == LogSource.LOGGING:
            text.append(" [PY]", style="dim")
        text.append(f" {entry.message}")
        return text

    def action_close(self) -> None:
        self.dismiss(None)

    def action_clear_logs(self) -> None:
        clear_log_buffer()
        self._update_logs()

    def action_cycle_component(self) -> None:
        """Step through all components seen so far, then back to everything."""
        options: list[str | None] = [None, *components()]
        position = options.index(self.component) if self.component in options else 0
        self.component = options[(position + 1) % len(options)]
        self.query_one("#debug-log-title", Label).update(self._title())
        self._redraw()

    def action_save_logs(self) -> None:
        path = get_debug_log_path()
        count = export_logs_to_file(path, self.component)
        self.notify(f"Saved {count} log entries to {path}")
