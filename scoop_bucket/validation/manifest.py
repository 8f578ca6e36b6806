"""
Manifest Validation
===================

Validates the content of the Scoop manifest (bucket/<app>.json).

WHAT WE CHECK:
-------------
1. The file is valid JSON, a single object, UTF-8 (BOM is warned about)
2. Schema: known keys only, correct types (jsonschema, Draft 7)
3. Required fields present (url/hash may live under "architecture")
4. Field content:
   - version has no leading "v" and no whitespace
   - every download URL is https
   - every hash is a well-formed sha256 / sha1 / sha512 / md5 digest
   - URL and hash lists line up
   - installer / uninstaller carry a script or a file
   - autoupdate URLs use $version-style variables
5. checkver / autoupdate present (warnings only - the bucket still works
   without them, it just has to be bumped by hand)

Nothing is downloaded; URLs and hashes are checked for form only.

Usage:
    from scoop_bucket.validation.manifest import load_manifest, validate_manifest_content

    manifest = load_manifest(Path("bucket/whisperjav.json"))
"""

import codecs
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import jsonschema

from scoop_bucket.utils.logger import logger
from .config import ValidationConfig
from .errors import ManifestLoadError
from .results import CheckResult

ARCHITECTURES = ("64bit", "32bit", "arm64")

# Digest lengths per algorithm; a bare hash is sha256
HASH_PATTERNS = {
    "sha256": re.compile(r"^(?:sha256:)?[0-9a-fA-F]{64}$"),
    "sha1": re.compile(r"^sha1:[0-9a-fA-F]{40}$"),
    "sha512": re.compile(r"^sha512:[0-9a-fA-F]{128}$"),
    "md5": re.compile(r"^md5:[0-9a-fA-F]{32}$"),
}

_STRING_OR_ARRAY = {
    "anyOf": [
        {"type": "string", "minLength": 1},
        {"type": "array", "items": {"type": "string", "minLength": 1}, "minItems": 1},
    ]
}

# Script lines may be empty strings (blank lines inside a PowerShell block)
_SCRIPT = {
    "anyOf": [
        {"type": "string"},
        {"type": "array", "items": {"type": "string"}, "minItems": 1},
    ]
}

_ARCH_ENTRY = {
    "type": "object",
    "properties": {
        "url": {"$ref": "#/definitions/stringOrArray"},
        "hash": {"$ref": "#/definitions/stringOrArray"},
        "bin": {"$ref": "#/definitions/bin"},
        "extract_dir": {"$ref": "#/definitions/stringOrArray"},
        "installer": {"$ref": "#/definitions/installer"},
        "uninstaller": {"$ref": "#/definitions/installer"},
        "pre_install": {"$ref": "#/definitions/script"},
        "post_install": {"$ref": "#/definitions/script"},
        "shortcuts": {"$ref": "#/definitions/shortcuts"},
        "env_add_path": {"$ref": "#/definitions/stringOrArray"},
        "env_set": {"type": "object"},
        "checkver": {},
        "autoupdate": {"type": "object"},
    },
    "additionalProperties": False,
}

MANIFEST_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "definitions": {
        "stringOrArray": _STRING_OR_ARRAY,
        "script": _SCRIPT,
        "bin": {
            "anyOf": [
                {"type": "string", "minLength": 1},
                {
                    "type": "array",
                    "minItems": 1,
                    "items": {"anyOf": [
                        {"type": "string", "minLength": 1},
                        {"type": "array", "items": {"type": "string"}, "minItems": 1},
                    ]},
                },
            ]
        },
        "shortcuts": {
            "type": "array",
            "items": {"type": "array", "items": {"type": "string"}, "minItems": 2, "maxItems": 4},
        },
        "installer": {
            "type": "object",
            "properties": {
                "script": {"$ref": "#/definitions/script"},
                "file": {"type": "string", "minLength": 1},
                "args": {"$ref": "#/definitions/stringOrArray"},
                "keep": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
    },
    "properties": {
        "##": {"$ref": "#/definitions/stringOrArray"},
        "version": {"type": "string", "minLength": 1},
        "description": {"type": "string", "minLength": 1},
        "homepage": {"type": "string", "pattern": "^https?://"},
        "license": {
            "anyOf": [
                {"type": "string", "minLength": 1},
                {
                    "type": "object",
                    "properties": {
                        "identifier": {"type": "string", "minLength": 1},
                        "url": {"type": "string", "pattern": "^https?://"},
                    },
                    "required": ["identifier"],
                    "additionalProperties": False,
                },
            ]
        },
        "notes": {"$ref": "#/definitions/script"},
        "depends": {"$ref": "#/definitions/stringOrArray"},
        "suggest": {"type": "object", "additionalProperties": {"$ref": "#/definitions/stringOrArray"}},
        "url": {"$ref": "#/definitions/stringOrArray"},
        "hash": {"$ref": "#/definitions/stringOrArray"},
        "extract_dir": {"$ref": "#/definitions/stringOrArray"},
        "extract_to": {"$ref": "#/definitions/stringOrArray"},
        "architecture": {
            "type": "object",
            "properties": {arch: _ARCH_ENTRY for arch in ARCHITECTURES},
            "additionalProperties": False,
        },
        "pre_install": {"$ref": "#/definitions/script"},
        "post_install": {"$ref": "#/definitions/script"},
        "installer": {"$ref": "#/definitions/installer"},
        "pre_uninstall": {"$ref": "#/definitions/script"},
        "post_uninstall": {"$ref": "#/definitions/script"},
        "uninstaller": {"$ref": "#/definitions/installer"},
        "bin": {"$ref": "#/definitions/bin"},
        "shortcuts": {"$ref": "#/definitions/shortcuts"},
        "env_add_path": {"$ref": "#/definitions/stringOrArray"},
        "env_set": {"type": "object", "additionalProperties": {"type": "string"}},
        "persist": {"$ref": "#/definitions/bin"},
        "innosetup": {"type": "boolean"},
        "checkver": {
            "anyOf": [
                {"type": "string", "minLength": 1},
                {"type": "object"},
            ]
        },
        "autoupdate": {"type": "object"},
    },
    # "$schema" and friends are allowed alongside the Scoop keys
    "patternProperties": {r"^\$": {}},
    "additionalProperties": False,
}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def has_utf8_bom(path: Path) -> bool:
    """True if the file starts with a UTF-8 byte order mark."""
    with open(path, "rb") as f:
        return f.read(len(codecs.BOM_UTF8)) == codecs.BOM_UTF8


def load_manifest(path: Path) -> Dict[str, Any]:
    """
    Load a Scoop manifest.

    A leading UTF-8 BOM is tolerated (and stripped) here; the content pass
    reports it separately.

    Raises:
        ManifestLoadError: File unreadable, not UTF-8, invalid JSON or not an object
    """
    path = Path(path)
    if not path.is_file():
        raise ManifestLoadError(f"Manifest not found: {path}", file_path=path)

    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ManifestLoadError(f"Manifest is not valid UTF-8: {e}", file_path=path)
    except OSError as e:
        raise ManifestLoadError(f"Cannot read manifest: {e}", file_path=path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestLoadError(
            f"JSON syntax error: {e.msg}",
            file_path=path,
            line=e.lineno,
            column=e.colno,
        )

    if not isinstance(data, dict):
        raise ManifestLoadError("Manifest root must be a JSON object", file_path=path)

    logger.debug(f"Loaded manifest {path} ({len(data)} top-level keys)")
    return data


def _url_hash_locations(manifest: Dict[str, Any]) -> List[Tuple[str, Any, Any]]:
    """(label, url, hash) for the top level and every architecture that sets them."""
    locations = []
    if "url" in manifest or "hash" in manifest:
        locations.append(("", manifest.get("url"), manifest.get("hash")))
    architecture = manifest.get("architecture")
    if isinstance(architecture, dict):
        for arch, entry in architecture.items():
            if isinstance(entry, dict) and ("url" in entry or "hash" in entry):
                locations.append((f"architecture.{arch}.", entry.get("url"), entry.get("hash")))
    return locations


def check_schema(manifest: Dict[str, Any], path: Optional[Path] = None) -> List[CheckResult]:
    """Validate manifest types and keys against MANIFEST_SCHEMA."""
    validator = jsonschema.Draft7Validator(MANIFEST_SCHEMA)
    errors = sorted(validator.iter_errors(manifest), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return [CheckResult.ok("Schema", "Manifest matches the Scoop manifest schema", path=path)]

    results = []
    for error in errors:
        location = "/".join(str(p) for p in error.absolute_path) or "(root)"
        results.append(CheckResult.fail("Schema", f"{location}: {error.message}", path=path))
    return results


def check_required_fields(
    manifest: Dict[str, Any],
    required: List[str],
    path: Optional[Path] = None,
) -> List[CheckResult]:
    """
    Check required top-level keys are present.

    url and hash also count as present when every architecture entry
    defines them.
    """
    architecture = manifest.get("architecture")
    arch_entries = list(architecture.values()) if isinstance(architecture, dict) else []

    missing = []
    for field in required:
        if field in manifest:
            continue
        if field in ("url", "hash") and arch_entries and all(
            isinstance(entry, dict) and field in entry for entry in arch_entries
        ):
            continue
        missing.append(field)

    if not missing:
        return [CheckResult.ok(
            "Required fields", f"All {len(required)} required fields present", path=path
        )]
    return [
        CheckResult.fail("Required fields", f"Missing required field '{field}'", path=path)
        for field in missing
    ]


def check_version(manifest: Dict[str, Any], path: Optional[Path] = None) -> List[CheckResult]:
    version = manifest.get("version")
    if not isinstance(version, str) or not version:
        return []
    if version[0] in "vV":
        return [CheckResult.fail(
            "Version", f"'{version}' has a leading 'v'", path=path,
            details=["Scoop compares versions numerically; drop the prefix"],
        )]
    if re.search(r"\s", version):
        return [CheckResult.fail("Version", f"'{version}' contains whitespace", path=path)]
    return [CheckResult.ok("Version", version, path=path)]


def check_downloads(manifest: Dict[str, Any], path: Optional[Path] = None) -> List[CheckResult]:
    """Check download URLs, hashes and that the two line up."""
    results: List[CheckResult] = []
    version = manifest.get("version")
    all_urls: List[str] = []
    all_hashes: List[str] = []

    for label, url, hash_value in _url_hash_locations(manifest):
        urls = [u for u in _as_list(url) if isinstance(u, str)]
        hashes = [h for h in _as_list(hash_value) if isinstance(h, str)]
        all_urls.extend(urls)
        all_hashes.extend(hashes)

        for u in urls:
            if not u.lower().startswith("https://"):
                results.append(CheckResult.fail(
                    "Download URL", f"{label}url is not https: {u}", path=path
                ))

        for h in hashes:
            if not any(p.match(h) for p in HASH_PATTERNS.values()):
                results.append(CheckResult.fail(
                    "Hash", f"{label}hash is malformed: {h}", path=path,
                    details=["Expected a sha256 hex digest, or sha1:/sha512:/md5: prefixed digest"],
                ))

        if urls and hashes and len(urls) != len(hashes):
            results.append(CheckResult.fail(
                "Hash", f"{label}url has {len(urls)} entries but {label}hash has {len(hashes)}",
                path=path,
            ))

    if not any(r.name == "Download URL" for r in results) and all_urls:
        results.append(CheckResult.ok("Download URL", f"{len(all_urls)} https URL(s)", path=path))
    if not any(r.name == "Hash" for r in results) and all_hashes:
        results.append(CheckResult.ok("Hash", "Hashes well-formed and aligned with URLs", path=path))

    if isinstance(version, str) and version and all_urls:
        if not any(version in u for u in all_urls):
            results.append(CheckResult.warn(
                "Version in URL", f"No download URL contains version {version}", path=path,
                details=["A stale URL usually means the version was bumped but the URL was not"],
            ))
    return results


def check_dependencies(manifest: Dict[str, Any], path: Optional[Path] = None) -> List[CheckResult]:
    depends = _as_list(manifest.get("depends"))
    names = [d for d in depends if isinstance(d, str) and d.strip()]
    if not names:
        return []
    if len(names) != len(depends):
        return [CheckResult.fail("Dependencies", "depends contains empty entries", path=path)]
    return [CheckResult.ok("Dependencies", ", ".join(names), path=path)]


def check_hooks(manifest: Dict[str, Any], path: Optional[Path] = None) -> List[CheckResult]:
    """installer / uninstaller must actually do something."""
    results = []
    for hook in ("installer", "uninstaller"):
        value = manifest.get(hook)
        if not isinstance(value, dict):
            continue
        if "script" in value or "file" in value:
            results.append(CheckResult.ok(
                "Install hooks", f"{hook} defines {'script' if 'script' in value else 'file'}", path=path
            ))
        else:
            results.append(CheckResult.fail(
                "Install hooks", f"{hook} has neither 'script' nor 'file'", path=path
            ))
    return results


def check_autoupdate(manifest: Dict[str, Any], path: Optional[Path] = None) -> List[CheckResult]:
    """checkver/autoupdate presence and $version placeholders in autoupdate URLs."""
    results = []
    if "checkver" not in manifest:
        results.append(CheckResult.warn(
            "Checkver", "No 'checkver' - new releases will not be detected", path=path
        ))
    autoupdate = manifest.get("autoupdate")
    if autoupdate is None:
        results.append(CheckResult.warn(
            "Autoupdate", "No 'autoupdate' - the manifest must be bumped by hand", path=path
        ))
        return results
    if not isinstance(autoupdate, dict):
        return results

    templates = [("autoupdate.url", u) for u in _as_list(autoupdate.get("url"))]
    architecture = autoupdate.get("architecture")
    if isinstance(architecture, dict):
        for arch, entry in architecture.items():
            if isinstance(entry, dict):
                templates.extend(
                    (f"autoupdate.architecture.{arch}.url", u) for u in _as_list(entry.get("url"))
                )

    if not templates:
        results.append(CheckResult.fail("Autoupdate", "autoupdate defines no url", path=path))
        return results

    bad = [(label, u) for label, u in templates if not isinstance(u, str) or "$" not in u]
    for label, u in bad:
        results.append(CheckResult.fail(
            "Autoupdate", f"{label} has no $version placeholder: {u}", path=path
        ))
    if not bad:
        results.append(CheckResult.ok("Autoupdate", f"{len(templates)} URL template(s)", path=path))
    return results


def validate_manifest_content(
    config: ValidationConfig,
    manifest_path: Optional[Path] = None,
) -> List[CheckResult]:
    """
    Run every manifest content check.

    A manifest that cannot be loaded yields a single FAIL and ends the pass.

    Args:
        config: Validation configuration
        manifest_path: Override for config.manifest_path

    Returns:
        List of check results
    """
    path = Path(manifest_path) if manifest_path is not None else config.manifest_path

    try:
        manifest = load_manifest(path)
    except ManifestLoadError as e:
        logger.debug(f"Manifest load failed: {e}")
        details = [e.suggestion] if e.suggestion else None
        return [CheckResult.fail("Manifest", e.message, path=path, details=details)]

    results: List[CheckResult] = [CheckResult.ok("Manifest", "Valid JSON object", path=path)]
    if has_utf8_bom(path):
        results.append(CheckResult.warn(
            "Encoding", "Manifest starts with a UTF-8 BOM", path=path,
            details=["Save the file as UTF-8 without BOM"],
        ))

    results.extend(check_schema(manifest, path))
    results.extend(check_required_fields(manifest, config.required_manifest_fields, path))
    results.extend(check_version(manifest, path))
    results.extend(check_downloads(manifest, path))
    results.extend(check_dependencies(manifest, path))
    results.extend(check_hooks(manifest, path))
    results.extend(check_autoupdate(manifest, path))
    return results


__all__ = [
    "MANIFEST_SCHEMA",
    "HASH_PATTERNS",
    "has_utf8_bom",
    "load_manifest",
    "check_schema",
    "check_required_fields",
    "check_version",
    "check_downloads",
    "check_dependencies",
    "check_hooks",
    "check_autoupdate",
    "validate_manifest_content",
]
