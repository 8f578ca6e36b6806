#!/usr/bin/env python3
"""
Console utilities for the bucket validator.

Provides:
- UTF-8 encoding fix for the Windows console (the report prints ✓/✗/⚠)
- ANSI escape support for colorama on legacy Windows terminals

Usage:
    from scoop_bucket.utils.console import setup_console
    setup_console()
"""
import sys
from typing import TextIO

import colorama


def ensure_utf8_console() -> None:
    """
    Ensure stdout and stderr use UTF-8 encoding.

    Safe to call multiple times - streams already in UTF-8 are left alone.
    """
    _fix_stream_encoding(sys.stdout)
    _fix_stream_encoding(sys.stderr)


def _fix_stream_encoding(stream: TextIO | None) -> None:
    """Reconfigure a single text stream to UTF-8 with replacement on errors."""
    if stream is None:
        return

    encoding = getattr(stream, "encoding", None) or ""
    if encoding.lower() in ("utf-8", "utf8"):
        return

    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is None:
        return

    try:
        reconfigure(encoding="utf-8", errors="replace")
    except (OSError, ValueError):
        # Stream already consumed or detached; keep the original encoding
        pass


def setup_console() -> None:
    """
    Complete console setup for the validator CLI.

    Call this at the start of any entry point, before printing the report.
    """
    ensure_utf8_console()
    colorama.just_fix_windows_console()
