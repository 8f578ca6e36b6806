"""Shared helpers (logging, console setup)."""
