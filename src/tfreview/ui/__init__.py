"""Textual UI for tfreview."""
