"""
Scoop Bucket Validation Runner
==============================

Run all validation checks:
    python -m scoop_bucket.validation
    scoop-bucket-validate --root path/to/bucket

This module is designed to run in CI/CD pipelines to catch a broken
manifest or a contaminated bucket before it is pushed.

VALIDATION PASSES:
-----------------
1. Structure: bucket/<app>.json, README.md, LICENSE present
2. Main project contamination: no WhisperJAV sources/installer files
3. Package manager contamination: no Homebrew or VSCode extension files
4. Manifest content: schema, required fields, URLs, hashes, hooks

EXIT CODES:
-----------
0: All validations passed (warnings allowed unless --strict)
1: Validation failed
2: Configuration error (bad --root, malformed .scoop-bucket.yaml)
"""

import argparse
import os
import sys
from typing import Callable, List, Optional, Sequence, Tuple

from scoop_bucket.__version__ import __version__
from scoop_bucket.utils.console import setup_console
from scoop_bucket.utils.logger import logger, setup_logger
from .config import ValidationConfig, is_ci, load_config, resolve_color
from .contamination import (
    validate_main_project_contamination,
    validate_package_manager_contamination,
)
from .errors import ConfigLoadError
from .manifest import validate_manifest_content
from .reporter import ConsoleReporter
from .results import CheckResult, PassResult, ValidationReport
from .structure import validate_structure

PASSES: List[Tuple[str, Callable[[ValidationConfig], List[CheckResult]]]] = [
    ("Checking bucket structure", validate_structure),
    ("Checking for main project files", validate_main_project_contamination),
    ("Checking for other package manager files", validate_package_manager_contamination),
    ("Validating manifest content", validate_manifest_content),
]


def run_all_validations(
    config: ValidationConfig,
    reporter: Optional[ConsoleReporter] = None,
) -> ValidationReport:
    """
    Run all validation passes in order.

    Args:
        config: Validation configuration
        reporter: Where to print results (default: stdout, color per config)

    Returns:
        ValidationReport with every pass result; use .exit_code
    """
    if reporter is None:
        reporter = ConsoleReporter(
            color=resolve_color(config.color, sys.stdout),
            verbose=config.verbose,
            annotations=os.environ.get("GITHUB_ACTIONS") == "true",
            root=config.root,
        )

    reporter.header(f"Scoop Bucket Validation: {config.app_name}")
    logger.info(f"Validating bucket at {config.root}")

    report = ValidationReport(strict=config.strict)
    total = len(PASSES)
    for index, (title, validate) in enumerate(PASSES, 1):
        reporter.pass_started(index, total, title)
        pass_result = PassResult(title=title, results=validate(config))
        report.passes.append(pass_result)
        reporter.pass_finished(pass_result)
        logger.debug(
            f"{title}: {pass_result.error_count} error(s), {pass_result.warning_count} warning(s)"
        )

    reporter.summary(report)
    return report


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="scoop-bucket-validate",
        description="Validate the WhisperJAV Scoop bucket",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  scoop-bucket-validate                      # Validate the bucket containing the current directory
  scoop-bucket-validate --root ../scoop      # Validate another checkout
  scoop-bucket-validate --strict --no-color  # CI mode: warnings fail the build

Environment:
  SCOOP_BUCKET_ROOT   Repository root (when --root is not given)
  NO_COLOR, CI        Disable colors in --color auto mode
"""
    )

    parser.add_argument(
        '--root', '-r',
        metavar='PATH',
        help='Repository root to validate (default: discovered from the current directory)'
    )

    parser.add_argument(
        '--config', '-c',
        metavar='FILE',
        help='Config file (default: <root>/.scoop-bucket.yaml if present)'
    )

    parser.add_argument(
        '--app',
        metavar='NAME',
        help='App name; the manifest is <manifest-dir>/<NAME>.json'
    )

    parser.add_argument(
        '--manifest-dir',
        metavar='DIR',
        help='Directory holding manifests (default: bucket)'
    )

    parser.add_argument(
        '--color',
        choices=['auto', 'always', 'never'],
        help='Colorize output (default: auto)'
    )

    parser.add_argument(
        '--no-color',
        dest='color',
        action='store_const',
        const='never',
        help='Same as --color never'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        default=None,
        help='Treat warnings as errors'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        default=None,
        help='Show details for every check and debug logging'
    )

    parser.add_argument(
        '--log-file',
        metavar='FILE',
        help='Also write logs to FILE'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the bucket validator."""
    args = parse_args(argv)
    setup_console()

    try:
        config = load_config(
            root=args.root,
            config_file=args.config,
            app_name=args.app,
            manifest_dir=args.manifest_dir,
            color=args.color,
            strict=args.strict,
            verbose=args.verbose,
            log_file=args.log_file,
        )
    except ConfigLoadError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logger(
        log_level="DEBUG" if config.verbose else "WARNING",
        log_file=str(config.log_file) if config.log_file else None,
    )
    if is_ci():
        logger.debug("CI environment detected")

    report = run_all_validations(config)
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
