"""XDG-compliant path helpers for tfreview."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir, user_state_dir


def get_config_dir() -> Path:
    """Get the config directory (config.toml)."""
    override = os.environ.get("TFREVIEW_CONFIG_DIR")
    if override:
        return Path(override)
    return Path(user_config_dir("tfreview"))


def get_state_dir() -> Path:
    """Get the state directory (exported debug logs)."""
    override = os.environ.get("TFREVIEW_STATE_DIR")
    if override:
        return Path(override)
    return Path(user_state_dir("tfreview"))


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def get_debug_log_path() -> Path:
    return get_state_dir() / "debug.log"
