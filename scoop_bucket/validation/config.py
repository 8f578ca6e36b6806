"""
Validator Configuration
=======================

Everything the validation passes need to know about the bucket:
where it lives, which app it hosts, which paths must never appear in it,
and how the report should be rendered (color / CI mode).

Sources, lowest to highest priority:
1. Built-in defaults (the WhisperJAV bucket)
2. .scoop-bucket.yaml at the repository root (or --config FILE)
3. Explicit overrides (CLI flags)

The repository root itself comes from the explicit argument, the
SCOOP_BUCKET_ROOT environment variable, or a walk up from the current
directory.

Usage:
    from scoop_bucket.validation.config import load_config

    config = load_config(color="never")
    print(config.manifest_path)
"""

import os
from enum import Enum
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Dict, List, Mapping, Optional, TextIO, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from scoop_bucket.utils.logger import logger
from .errors import ConfigLoadError

CONFIG_FILENAME = ".scoop-bucket.yaml"
ROOT_ENV_VAR = "SCOOP_BUCKET_ROOT"

# Paths owned by the main WhisperJAV repository. "{package}" is replaced by
# the configured main package name.
DEFAULT_MAIN_PROJECT_PATHS: List[str] = [
    "{package}",
    "installer",
    "install.py",
    "build_exe.py",
    "requirements.txt",
    "MANIFEST.in",
    "{package}.spec",
    ".github/workflows/release.yml",
]

# Glob patterns per foreign package manager, matched from the root
DEFAULT_PACKAGE_MANAGER_PATHS: Dict[str, List[str]] = {
    "Homebrew": [
        "Formula",
        "Casks",
        "Brewfile",
        "Brewfile.lock.json",
        "**/*.rb",
    ],
    "VSCode extension": [
        "package.json",
        "package-lock.json",
        ".vscodeignore",
        "**/*.vsix",
        "vsc-extension-quickstart.md",
        "tsconfig.json",
        "node_modules",
    ],
}

DEFAULT_REQUIRED_MANIFEST_FIELDS: List[str] = [
    "version",
    "description",
    "homepage",
    "license",
    "url",
    "hash",
    "depends",
    "installer",
    "uninstaller",
]


class ColorMode(str, Enum):
    """When the console report uses ANSI colors."""
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def _relative_pattern(value: str) -> str:
    """Reject empty, absolute or parent-escaping paths; they must stay inside the root."""
    if not value.strip():
        raise ValueError("path patterns must not be empty")
    if PurePosixPath(value).is_absolute() or PureWindowsPath(value).anchor:
        raise ValueError(f"'{value}' must be relative to the repository root")
    if ".." in PurePosixPath(value.replace("\\", "/")).parts:
        raise ValueError(f"'{value}' must not point outside the repository root")
    return value


class ValidationConfig(BaseModel):
    """
    Validated configuration for one validation run.

    Unknown keys are rejected so typos in .scoop-bucket.yaml surface
    immediately instead of silently falling back to defaults.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        use_enum_values=True,
    )

    root: Path = Field(default_factory=Path.cwd)
    app_name: str = "whisperjav"
    manifest_dir: str = "bucket"
    main_package: str = "whisperjav"
    required_files: List[str] = Field(default_factory=lambda: ["README.md", "LICENSE"])
    main_project_paths: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MAIN_PROJECT_PATHS)
    )
    package_manager_paths: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PACKAGE_MANAGER_PATHS.items()}
    )
    required_manifest_fields: List[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_MANIFEST_FIELDS)
    )
    color: ColorMode = ColorMode.AUTO
    strict: bool = False
    verbose: bool = False
    log_file: Optional[Path] = None

    @field_validator("app_name", "main_package")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        if "/" in value or "\\" in value:
            raise ValueError("must be a bare name, not a path")
        return value

    @field_validator("manifest_dir")
    @classmethod
    def _relative_dir(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return _relative_pattern(value)

    @field_validator("main_project_paths")
    @classmethod
    def _main_project_patterns(cls, value: List[str]) -> List[str]:
        return [_relative_pattern(p) for p in value]

    @field_validator("package_manager_paths")
    @classmethod
    def _package_manager_patterns(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        for manager, patterns in value.items():
            if not manager.strip():
                raise ValueError("package manager name must not be empty")
            value[manager] = [_relative_pattern(p) for p in patterns]
        return value

    @property
    def manifest_path(self) -> Path:
        """Path of the hosted manifest: <root>/<manifest_dir>/<app_name>.json"""
        return self.root / self.manifest_dir / f"{self.app_name}.json"

    def resolved_main_project_paths(self) -> List[str]:
        """Main-project paths with the package placeholder filled in."""
        return [p.replace("{package}", self.main_package) for p in self.main_project_paths]


def find_bucket_root(start: Optional[Path] = None) -> Path:
    """
    Find the bucket repository root.

    Walks up from start (default: current directory) and returns the first
    directory holding a .scoop-bucket.yaml or a bucket/ directory.
    Falls back to start itself when nothing matches.
    """
    start = Path(start or Path.cwd()).resolve()
    for parent in [start] + list(start.parents):
        if (parent / CONFIG_FILENAME).is_file() or (parent / "bucket").is_dir():
            return parent
    return start


def _load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML mapping with safe_load, reporting line/column on syntax errors."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigLoadError(f"Cannot read config file: {e}", file_path=file_path)
    except yaml.YAMLError as e:
        line = column = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
            column = mark.column + 1
        raise ConfigLoadError(
            f"YAML syntax error: {e}",
            file_path=file_path,
            line=line,
            column=column,
        )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            "Config root must be a mapping (dict)",
            file_path=file_path,
        )
    return data


def load_config(
    root: Optional[Union[str, Path]] = None,
    config_file: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ValidationConfig:
    """
    Build the configuration for a validation run.

    Args:
        root: Repository root (default: SCOOP_BUCKET_ROOT or discovered)
        config_file: Explicit YAML config file (must exist when given)
        environ: Environment mapping (default: os.environ)
        **overrides: Field values that win over the config file; None is ignored

    Returns:
        Validated ValidationConfig

    Raises:
        ConfigLoadError: Root missing, config file unreadable or invalid
    """
    environ = os.environ if environ is None else environ

    if root is None and environ.get(ROOT_ENV_VAR):
        root = environ[ROOT_ENV_VAR]
    root_path = Path(root).resolve() if root is not None else find_bucket_root()

    if not root_path.is_dir():
        raise ConfigLoadError(
            f"Repository root does not exist or is not a directory: {root_path}",
            suggestion=f"Pass --root or set {ROOT_ENV_VAR}",
        )

    data: Dict[str, Any] = {}
    if config_file is not None:
        config_path = Path(config_file)
        if not config_path.is_file():
            raise ConfigLoadError(f"Config file not found: {config_path}", file_path=config_path)
        data = _load_yaml_file(config_path)
    elif (root_path / CONFIG_FILENAME).is_file():
        config_path = root_path / CONFIG_FILENAME
        data = _load_yaml_file(config_path)
    else:
        config_path = None

    if "root" in data:
        raise ConfigLoadError(
            "'root' cannot be set from the config file",
            file_path=config_path,
            suggestion="Pass --root or set " + ROOT_ENV_VAR,
        )

    data.update({k: v for k, v in overrides.items() if v is not None})
    data["root"] = root_path

    try:
        config = ValidationConfig(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field_path = ".".join(str(p) for p in first["loc"])
        raise ConfigLoadError(
            f"Invalid configuration for '{field_path}': {first['msg']}",
            file_path=config_path,
        )

    logger.debug(f"Loaded configuration for {config.app_name} at {config.root}"
                 + (f" (from {config_path})" if config_path else ""))
    return config


def is_ci(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when running under a CI service (CI or GITHUB_ACTIONS set)."""
    environ = os.environ if environ is None else environ
    return bool(environ.get("CI")) or bool(environ.get("GITHUB_ACTIONS"))


def resolve_color(
    mode: Union[ColorMode, str],
    stream: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Decide whether the report uses ANSI colors.

    auto disables colors when NO_COLOR is set, when running in CI,
    or when the output stream is not a terminal.
    """
    environ = os.environ if environ is None else environ
    mode = ColorMode(mode)

    if mode == ColorMode.ALWAYS:
        return True
    if mode == ColorMode.NEVER:
        return False

    if "NO_COLOR" in environ or is_ci(environ):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


__all__ = [
    "CONFIG_FILENAME",
    "ROOT_ENV_VAR",
    "ColorMode",
    "ValidationConfig",
    "find_bucket_root",
    "load_config",
    "is_ci",
    "resolve_color",
]
