"""
Contamination Validation
========================

Guards the bucket against files that belong somewhere else.

WHY THIS CHECK:
--------------
The bucket is a submodule of the main WhisperJAV repository and sits next
to the Homebrew tap and the VSCode extension tooling. A careless copy or a
merge in the wrong checkout drops their files in here:
- main project sources, installer scripts, build specs
- Homebrew formulae / casks (*.rb, Formula/, Casks/)
- VSCode extension packaging (package.json, *.vsix, node_modules/)

Scoop ignores them, so nothing breaks loudly; the bucket just silently
grows a second copy of another project. This pass reports every such path.

The validator's own packaging files (setup.py, pyproject.toml, setup.cfg)
are allowed unless they declare the main package as the project name.
"""

import configparser
import fnmatch
import os
import re
import sys
from pathlib import Path
from typing import Iterator, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from scoop_bucket.utils.logger import logger
from .config import ValidationConfig
from .results import CheckResult

# Never descended into while matching recursive patterns
EXCLUDED_DIRS = {".git", ".venv", "venv", "__pycache__", ".tox", ".pytest_cache"}

PACKAGING_FILES = ["pyproject.toml", "setup.py", "setup.cfg"]


def _walk(root: Path) -> Iterator[Path]:
    """Yield every path below root, skipping EXCLUDED_DIRS."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
        base = Path(dirpath)
        for name in dirnames:
            yield base / name
        for name in sorted(filenames):
            yield base / name


def find_matches(root: Path, pattern: str) -> List[Path]:
    """
    Resolve a contamination pattern against the repository root.

    Patterns starting with "**/" match the remaining name pattern at any
    depth; everything else is a glob relative to the root.
    """
    if pattern.startswith("**/"):
        name_pattern = pattern[3:]
        return [p for p in _walk(root) if fnmatch.fnmatch(p.name, name_pattern)]
    return sorted(p for p in root.glob(pattern) if not EXCLUDED_DIRS.intersection(p.relative_to(root).parts))


def _normalize(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).strip().lower()


def _declared_name(path: Path) -> Optional[str]:
    """Project name a packaging file declares, or None if it declares none."""
    if path.name == "pyproject.toml":
        with open(path, "rb") as f:
            data = tomllib.load(f)
        project = data.get("project")
        poetry = data.get("tool", {}).get("poetry") if isinstance(data.get("tool"), dict) else None
        name = None
        if isinstance(project, dict):
            name = project.get("name")
        if name is None and isinstance(poetry, dict):
            name = poetry.get("name")
        return name if isinstance(name, str) else None

    if path.name == "setup.cfg":
        parser = configparser.ConfigParser(interpolation=None)
        parser.read(path, encoding="utf-8")
        return parser.get("metadata", "name", fallback=None)

    # setup.py: the name= keyword of the setup() call
    text = path.read_text(encoding="utf-8", errors="replace")
    match = re.search(r"""\bname\s*=\s*["']([^"']+)["']""", text)
    return match.group(1) if match else None


def declares_main_package(path: Path, package: str) -> bool:
    """True if a packaging file names the main package as its project."""
    try:
        name = _declared_name(path)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, configparser.Error) as e:
        logger.warning(f"Could not read {path}: {e}")
        return False
    return name is not None and _normalize(name) == _normalize(package)


def _rel(path: Path, root: Path) -> str:
    rel = path.relative_to(root).as_posix()
    return rel + "/" if path.is_dir() else rel


def validate_main_project_contamination(config: ValidationConfig) -> List[CheckResult]:
    """
    Ensure no files from the main project were merged into the bucket.

    Returns:
        List of check results (one FAIL per offending path)
    """
    root = config.root
    results: List[CheckResult] = []

    for pattern in config.resolved_main_project_paths():
        for path in find_matches(root, pattern):
            results.append(CheckResult.fail(
                "Main project file",
                f"{_rel(path, root)} belongs to the main project",
                path=path,
                details=["Remove it from the bucket; it lives in the main repository"],
            ))

    for filename in PACKAGING_FILES:
        path = root / filename
        if path.is_file() and declares_main_package(path, config.main_package):
            results.append(CheckResult.fail(
                "Main project packaging",
                f"{filename} declares the '{config.main_package}' project",
                path=path,
                details=["This is the main project's packaging file, not the bucket's"],
            ))

    if not results:
        results.append(CheckResult.ok(
            "Main project files", f"No {config.main_package} project files found"
        ))

    logger.debug(f"Main project contamination: {len(results)} result(s)")
    return results


def validate_package_manager_contamination(config: ValidationConfig) -> List[CheckResult]:
    """
    Ensure no Homebrew / VSCode extension files were merged into the bucket.

    Returns:
        List of check results (one FAIL per offending path, one PASS per clean manager)
    """
    root = config.root
    results: List[CheckResult] = []

    for manager, patterns in config.package_manager_paths.items():
        found = []
        for pattern in patterns:
            for path in find_matches(root, pattern):
                if path not in found:
                    found.append(path)

        if not found:
            results.append(CheckResult.ok(manager, f"No {manager} files found"))
            continue

        for path in found:
            results.append(CheckResult.fail(
                manager,
                f"{_rel(path, root)} belongs to {manager} packaging",
                path=path,
            ))

    logger.debug(f"Package manager contamination: {len(results)} result(s)")
    return results


__all__ = [
    "EXCLUDED_DIRS",
    "find_matches",
    "declares_main_package",
    "validate_main_project_contamination",
    "validate_package_manager_contamination",
]
