#!/usr/bin/env python3
"""Version information for the WhisperJAV Scoop bucket."""

# PEP 440 compliant version for pip/wheel
__version__ = "1.2.0"

# Human-readable version for display in the console report
__version_display__ = "1.2.0"

# Version metadata
__version_info__ = {
    "major": 1,
    "minor": 2,
    "patch": 0,
    "release": "",
}
