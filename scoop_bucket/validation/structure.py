"""
Structure Validation
====================

Checks the bucket has the shape Scoop expects:
- bucket/ directory holding <app>.json
- README.md and LICENSE (configurable)

Scoop reads manifests only from bucket/ when that directory exists, so a
stray manifest at the root is dead weight and gets a warning. The bucket
hosts a single app; other manifests in bucket/ are warned about too.
"""

from typing import List

from scoop_bucket.utils.logger import logger
from .config import ValidationConfig
from .results import CheckResult


def validate_structure(config: ValidationConfig) -> List[CheckResult]:
    """
    Validate the bucket layout.

    Returns:
        List of check results (FAIL for missing required paths)
    """
    root = config.root
    results: List[CheckResult] = []

    if not root.is_dir():
        return [CheckResult.fail(
            "Repository root", "Not a directory", path=root,
            details=[f"Looked at: {root}"],
        )]

    manifest_dir = root / config.manifest_dir
    if manifest_dir.is_dir():
        results.append(CheckResult.ok(
            "Manifest directory", f"{config.manifest_dir}/ present", path=manifest_dir
        ))
    else:
        results.append(CheckResult.fail(
            "Manifest directory", f"{config.manifest_dir}/ not found", path=manifest_dir,
            details=["Scoop buckets keep their manifests in a bucket/ directory"],
        ))

    manifest_path = config.manifest_path
    rel_manifest = manifest_path.relative_to(root).as_posix()
    if manifest_path.is_file():
        results.append(CheckResult.ok("Manifest file", f"{rel_manifest} present", path=manifest_path))
    elif manifest_path.exists():
        results.append(CheckResult.fail(
            "Manifest file", f"{rel_manifest} is not a regular file", path=manifest_path
        ))
    else:
        results.append(CheckResult.fail(
            "Manifest file", f"{rel_manifest} not found", path=manifest_path,
            details=[f"Expected the manifest for app '{config.app_name}'"],
        ))

    for filename in config.required_files:
        path = root / filename
        if path.exists():
            results.append(CheckResult.ok("Required file", f"{filename} present", path=path))
        else:
            results.append(CheckResult.fail("Required file", f"{filename} not found", path=path))

    if manifest_dir.is_dir():
        # Files owned by other package managers are reported by the contamination pass
        foreign = {p for patterns in config.package_manager_paths.values() for p in patterns}
        for stray in sorted(root.glob("*.json")):
            if stray.name in foreign:
                continue
            results.append(CheckResult.warn(
                "Stray manifest", f"{stray.name} at repository root", path=stray,
                details=[
                    f"Scoop only reads {config.manifest_dir}/ when it exists;",
                    f"move the file into {config.manifest_dir}/ or delete it",
                ],
            ))

        for other in sorted(manifest_dir.glob("*.json")):
            if other.stem == config.app_name:
                continue
            results.append(CheckResult.warn(
                "Unexpected manifest",
                f"{config.manifest_dir}/{other.name} is not the '{config.app_name}' manifest",
                path=other,
                details=["This bucket hosts a single application"],
            ))

    logger.debug(f"Structure pass produced {len(results)} result(s)")
    return results


__all__ = ["validate_structure"]
