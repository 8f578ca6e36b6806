"""Console reporting for validation runs."""

import sys
from pathlib import Path
from typing import Optional, TextIO

from colorama import Fore, Style

from .results import CheckResult, CheckStatus, PassResult, ValidationReport

STATUS_LABELS = {
    CheckStatus.PASS: "✓ PASS",
    CheckStatus.FAIL: "✗ FAIL",
    CheckStatus.WARN: "⚠ WARN",
    CheckStatus.INFO: "ℹ INFO",
}

STATUS_COLORS = {
    CheckStatus.PASS: Fore.GREEN,
    CheckStatus.FAIL: Fore.RED,
    CheckStatus.WARN: Fore.YELLOW,
    CheckStatus.INFO: Fore.CYAN,
}


class ConsoleReporter:
    """
    Prints validation results in a formatted manner.

    Details are shown for failures and warnings, and for every check
    in verbose mode. Under GitHub Actions each failure and warning is also
    emitted as a workflow annotation so it shows up on the PR diff.
    """

    def __init__(
        self,
        color: bool = False,
        verbose: bool = False,
        annotations: bool = False,
        root: Optional[Path] = None,
        stream: Optional[TextIO] = None,
    ):
        self.color = color
        self.verbose = verbose
        self.annotations = annotations
        self.root = root
        self.stream = stream

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream or sys.stdout)

    def _paint(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def header(self, title: str) -> None:
        """Print the run banner."""
        self._print("=" * 70)
        self._print(self._paint(title, Fore.CYAN + Style.BRIGHT))
        self._print("=" * 70)
        self._print()

    def pass_started(self, index: int, total: int, title: str) -> None:
        self._print(f"[{index}/{total}] {title}...")

    def pass_finished(self, pass_result: PassResult) -> None:
        """Print every check of a finished pass."""
        for result in pass_result.results:
            self.check(result)
        self._print()

    def check(self, result: CheckResult) -> None:
        """Print a check result with formatting"""
        label = self._paint(STATUS_LABELS[result.status], STATUS_COLORS[result.status])
        self._print(f"  [{label}] {result.name}: {result.message}")

        show_details = self.verbose or result.status in (CheckStatus.FAIL, CheckStatus.WARN)
        if result.details and show_details:
            for detail in result.details:
                self._print(f"          {detail}")

        if self.annotations and result.status in (CheckStatus.FAIL, CheckStatus.WARN):
            self._print(self.annotation(result))

    def annotation(self, result: CheckResult) -> str:
        """GitHub Actions workflow command for a failed or warned check."""
        level = "error" if result.status == CheckStatus.FAIL else "warning"
        message = f"{result.name}: {result.message}"
        # Workflow commands are single-line; escape per the runner's rules
        message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        if result.path is None:
            return f"::{level}::{message}"
        path = result.path
        if self.root is not None:
            try:
                path = path.relative_to(self.root)
            except ValueError:
                pass
        # Property values additionally escape ":" and ","
        file_value = (
            path.as_posix()
            .replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
            .replace(":", "%3A").replace(",", "%2C")
        )
        return f"::{level} file={file_value}::{message}"

    def summary(self, report: ValidationReport) -> None:
        """Print the final error/warning tally."""
        self._print("=" * 70)
        if report.error_count:
            text = f"✗ VALIDATION FAILED: {report.error_count} error(s)"
            if report.strict and report.warning_count:
                text += f" (including {report.warning_count} warning(s), strict mode)"
            self._print(self._paint(text, Fore.RED))
        elif report.warning_count:
            self._print(self._paint(
                f"⚠ VALIDATION PASSED with {report.warning_count} warning(s)", Fore.YELLOW
            ))
        else:
            self._print(self._paint("✓ VALIDATION PASSED: All checks passed", Fore.GREEN))
        self._print("=" * 70)
