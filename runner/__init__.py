"""Smoke runner for a live faststatus server."""
