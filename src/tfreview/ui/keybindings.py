"""Keybindings for the tfreview TUI, using Textual's Binding class directly."""

from __future__ import annotations

from textual.binding import Binding, BindingType

# =============================================================================
# App Bindings
# =============================================================================

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit"),
    Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    Binding("f12", "toggle_debug_log", "Debug", show=False),
]

# =============================================================================
# Plan Review Bindings
# =============================================================================

REVIEW_BINDINGS: list[BindingType] = [
    # Navigation - vim style
    Binding("j", "next_resource", "Next", show=False),
    Binding("k", "previous_resource", "Previous", show=False),
    # Navigation - arrow keys
    Binding("down", "next_resource", "Next", priority=True),
    Binding("up", "previous_resource", "Previous", priority=True),
    # Review
    Binding("space", "toggle_reviewed", "Reviewed"),
    Binding("enter", "toggle_collapsed", "Expand"),
    # Decision
    Binding("a", "approve", "Approve"),
    Binding("A", "approve", "Approve", show=False),
    Binding("r", "reject", "Reject"),
    Binding("R", "reject", "Reject", show=False),
    Binding("q", "reject", "Reject", show=False),
    Binding("escape", "reject", "Reject", show=False),
]

# =============================================================================
# Confirm Bindings (interactive review disabled)
# =============================================================================

CONFIRM_BINDINGS: list[BindingType] = [
    Binding("y", "confirm", "Yes"),
    Binding("n", "cancel", "No"),
    Binding("escape", "cancel", "Cancel"),
]

# =============================================================================
# Debug Log Bindings
# =============================================================================

DEBUG_LOG_BINDINGS: list[BindingType] = [
    Binding("escape", "close", "Close"),
    Binding("f12", "close", "Close", show=False),
    Binding("c", "clear_logs", "Clear"),
    Binding("f", "cycle_component", "Filter"),
    Binding("s", "save_logs", "Save"),
]
