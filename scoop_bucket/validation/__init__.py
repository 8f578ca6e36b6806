"""
Scoop Bucket Validation System
==============================

This subpackage checks the bucket before anything is pushed.

WHY VALIDATION EXISTS:
---------------------
The bucket is a git submodule of the main WhisperJAV repository, living
next to the Homebrew tap and the VSCode extension tooling. Two things go
wrong over time:
- the manifest loses a field or gets a malformed hash during a version bump
- files from the main project or another package manager get merged in

VALIDATION PASSES:
-----------------
1. structure.py     - bucket/<app>.json, README.md, LICENSE present
2. contamination.py - no main project / Homebrew / VSCode extension files
3. manifest.py      - manifest schema and field content

CI/CD INTEGRATION:
-----------------
Run validation as part of CI:
    python -m scoop_bucket.validation --strict

A non-zero exit code blocks the merge.
"""

from .__main__ import (
    run_all_validations,
    main,
)
from .config import (
    ValidationConfig,
    load_config,
    find_bucket_root,
    resolve_color,
)
from .contamination import (
    validate_main_project_contamination,
    validate_package_manager_contamination,
)
from .errors import (
    BucketValidationError,
    ConfigLoadError,
    ManifestLoadError,
)
from .manifest import (
    load_manifest,
    validate_manifest_content,
)
from .results import (
    CheckResult,
    CheckStatus,
    PassResult,
    ValidationReport,
)
from .structure import (
    validate_structure,
)

__all__ = [
    # Main runner
    "run_all_validations",
    "main",
    # Configuration
    "ValidationConfig",
    "load_config",
    "find_bucket_root",
    "resolve_color",
    # Passes
    "validate_structure",
    "validate_main_project_contamination",
    "validate_package_manager_contamination",
    "validate_manifest_content",
    "load_manifest",
    # Results
    "CheckResult",
    "CheckStatus",
    "PassResult",
    "ValidationReport",
    # Errors
    "BucketValidationError",
    "ConfigLoadError",
    "ManifestLoadError",
]
