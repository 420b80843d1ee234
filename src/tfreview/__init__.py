"""Interactive review of terraform apply plans."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tfreview")
except PackageNotFoundError:
    __version__ = "dev"
