"""
Pytest configuration for the bucket validator tests.

Registers custom markers and provides a freshly built, valid bucket
repository for every test that needs one.
"""

import copy
import json
from pathlib import Path

import pytest

from scoop_bucket.validation.config import ValidationConfig

VALID_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

VALID_MANIFEST = {
    "version": "1.7.3",
    "description": "Japanese Adult Video Subtitle Generator",
    "homepage": "https://github.com/meizhong986/WhisperJAV",
    "license": "MIT",
    "depends": ["python", "ffmpeg"],
    "url": "https://github.com/meizhong986/WhisperJAV/archive/refs/tags/v1.7.3.zip",
    "hash": VALID_HASH,
    "extract_dir": "WhisperJAV-1.7.3",
    "installer": {
        "script": [
            "& python -m venv \"$dir\\venv\"",
            "& \"$dir\\venv\\Scripts\\python.exe\" -m pip install \"$dir\"",
        ]
    },
    "uninstaller": {
        "script": "Get-Process whisperjav-gui -ErrorAction SilentlyContinue | Stop-Process -Force"
    },
    "bin": [["venv\\Scripts\\whisperjav.exe", "whisperjav"]],
    "checkver": {"github": "https://github.com/meizhong986/WhisperJAV"},
    "autoupdate": {
        "url": "https://github.com/meizhong986/WhisperJAV/archive/refs/tags/v$version.zip",
        "extract_dir": "WhisperJAV-$version",
    },
}


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that validate the real bucket in this repository"
    )


def write_manifest(root: Path, manifest, app_name: str = "whisperjav") -> Path:
    """Write a manifest dict (or raw text) to <root>/bucket/<app>.json."""
    path = root / "bucket" / f"{app_name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(manifest, str):
        path.write_text(manifest, encoding="utf-8")
    else:
        path.write_text(json.dumps(manifest, indent=4), encoding="utf-8")
    return path


@pytest.fixture
def manifest_data():
    """A deep copy of a valid manifest, safe to mutate."""
    return copy.deepcopy(VALID_MANIFEST)


@pytest.fixture
def bucket_repo(tmp_path):
    """Create a valid bucket repository: bucket/whisperjav.json, README.md, LICENSE."""
    root = tmp_path / "scoop-whisperjav"
    root.mkdir()
    write_manifest(root, VALID_MANIFEST)
    (root / "README.md").write_text("# WhisperJAV bucket\n", encoding="utf-8")
    (root / "LICENSE").write_text("MIT License\n", encoding="utf-8")
    return root


@pytest.fixture
def bucket_config(bucket_repo):
    """ValidationConfig pointing at the bucket_repo fixture."""
    return ValidationConfig(root=bucket_repo, color="never")
