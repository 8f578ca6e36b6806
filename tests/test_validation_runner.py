#!/usr/bin/env python3
"""
Validation Runner and CLI Tests
===============================

Tests for:
- run_all_validations() (pass order, error aggregation, exit code)
- ConsoleReporter (labels, colors, GitHub Actions annotations)
- main() / argument parsing (exit codes 0, 1, 2)

Run with: pytest tests/test_validation_runner.py -v
"""

import io
from pathlib import Path

import pytest
from colorama import Fore

import scoop_bucket
from scoop_bucket.validation import __main__ as runner
from scoop_bucket.validation.config import ValidationConfig
from scoop_bucket.validation.reporter import ConsoleReporter
from scoop_bucket.utils.logger import setup_logger
from scoop_bucket.validation.results import (
    CheckResult,
    CheckStatus,
    PassResult,
    ValidationReport,
)

from conftest import write_manifest

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's / CI runner's environment out of the tests."""
    for name in ("SCOOP_BUCKET_ROOT", "GITHUB_ACTIONS", "CI", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)
    yield
    # main() reconfigures the shared logger; put the default back
    setup_logger()


def _quiet_reporter():
    return ConsoleReporter(color=False, stream=io.StringIO())


class TestValidationReport:
    """Test error aggregation."""

    def test_counts(self):
        report = ValidationReport(passes=[
            PassResult("one", [CheckResult.ok("a", "ok"), CheckResult.fail("b", "bad")]),
            PassResult("two", [CheckResult.warn("c", "meh"), CheckResult.fail("d", "bad")]),
        ])

        assert report.error_count == 2
        assert report.warning_count == 1
        assert report.exit_code == 1
        assert [p.passed for p in report.passes] == [False, False]

    def test_warnings_pass_unless_strict(self):
        passes = [PassResult("one", [CheckResult.warn("a", "meh")])]

        assert ValidationReport(passes=passes).exit_code == 0
        strict = ValidationReport(passes=passes, strict=True)
        assert strict.error_count == 1
        assert strict.exit_code == 1

    def test_empty_report_passes(self):
        assert ValidationReport().exit_code == 0


class TestRunAllValidations:
    """Test the four-pass runner."""

    def test_valid_bucket(self, bucket_config):
        report = runner.run_all_validations(bucket_config, _quiet_reporter())

        assert report.exit_code == 0
        assert report.error_count == 0
        assert [p.title for p in report.passes] == [title for title, _ in runner.PASSES]
        assert len(report.passes) == 4

    def test_errors_from_every_pass_are_counted(self, bucket_repo, bucket_config, manifest_data):
        (bucket_repo / "LICENSE").unlink()                      # structure
        (bucket_repo / "install.py").write_text("", encoding="utf-8")  # main project
        (bucket_repo / "Brewfile").write_text("", encoding="utf-8")    # homebrew
        manifest_data["hash"] = "nothex"                         # manifest
        write_manifest(bucket_repo, manifest_data)

        report = runner.run_all_validations(bucket_config, _quiet_reporter())

        assert [p.error_count for p in report.passes] == [1, 1, 1, 1]
        assert report.error_count == 4
        assert report.exit_code == 1

    def test_passes_run_even_after_failures(self, bucket_repo, bucket_config):
        (bucket_repo / "bucket" / "whisperjav.json").unlink()
        report = runner.run_all_validations(bucket_config, _quiet_reporter())

        assert len(report.passes) == 4
        assert report.passes[1].passed and report.passes[2].passed
        assert not report.passes[3].passed

    def test_strict_mode(self, bucket_repo, manifest_data):
        del manifest_data["checkver"]
        write_manifest(bucket_repo, manifest_data)

        lenient = ValidationConfig(root=bucket_repo)
        strict = ValidationConfig(root=bucket_repo, strict=True)

        assert runner.run_all_validations(lenient, _quiet_reporter()).exit_code == 0
        assert runner.run_all_validations(strict, _quiet_reporter()).exit_code == 1

    def test_default_reporter_prints_to_stdout(self, bucket_config, capsys):
        runner.run_all_validations(bucket_config)
        out = capsys.readouterr().out

        assert "Scoop Bucket Validation: whisperjav" in out
        assert "[1/4] Checking bucket structure..." in out
        assert "[4/4] Validating manifest content..." in out
        assert "VALIDATION PASSED" in out
        assert "\x1b[" not in out


class TestConsoleReporter:
    """Test report formatting."""

    def test_failure_shows_details(self):
        stream = io.StringIO()
        reporter = ConsoleReporter(stream=stream)
        reporter.check(CheckResult.fail("Hash", "malformed", details=["use sha256"]))
        reporter.check(CheckResult.ok("Version", "1.0", details=["hidden"]))

        out = stream.getvalue()
        assert "[✗ FAIL] Hash: malformed" in out
        assert "use sha256" in out
        assert "[✓ PASS] Version: 1.0" in out
        assert "hidden" not in out

    def test_verbose_shows_pass_details(self):
        stream = io.StringIO()
        ConsoleReporter(verbose=True, stream=stream).check(
            CheckResult.ok("Version", "1.0", details=["shown"])
        )
        assert "shown" in stream.getvalue()

    def test_color(self):
        stream = io.StringIO()
        ConsoleReporter(color=True, stream=stream).check(CheckResult.fail("Hash", "bad"))
        assert Fore.RED in stream.getvalue()

    def test_annotations(self, tmp_path):
        stream = io.StringIO()
        reporter = ConsoleReporter(annotations=True, root=tmp_path, stream=stream)
        reporter.check(CheckResult.fail("Hash", "bad", path=tmp_path / "bucket" / "app.json"))
        reporter.check(CheckResult.warn("Checkver", "missing"))
        reporter.check(CheckResult.ok("Version", "1.0"))

        lines = stream.getvalue().splitlines()
        assert "::error file=bucket/app.json::Hash: bad" in lines
        assert "::warning::Checkver: missing" in lines
        assert not any(line.startswith("::") and "Version" in line for line in lines)

    def test_annotation_escapes_file_property(self, tmp_path):
        reporter = ConsoleReporter(annotations=True, root=tmp_path)
        line = reporter.annotation(
            CheckResult.fail("Stray", "x", path=tmp_path / "bucket" / "a,b:c%.json")
        )
        assert line == "::error file=bucket/a%2Cb%3Ac%25.json::Stray: x"

    def test_annotation_escapes_newlines(self):
        reporter = ConsoleReporter(annotations=True)
        line = reporter.annotation(CheckResult.fail("Manifest", "line one\nline two 100%"))
        assert line == "::error::Manifest: line one%0Aline two 100%25"

    def test_summary_strict(self):
        stream = io.StringIO()
        report = ValidationReport(passes=[PassResult("p", [CheckResult.warn("a", "b")])], strict=True)
        ConsoleReporter(stream=stream).summary(report)

        assert "VALIDATION FAILED: 1 error(s)" in stream.getvalue()
        assert "strict mode" in stream.getvalue()


class TestParseArgs:
    """Tests for parse_args()."""

    def test_no_args(self):
        args = runner.parse_args([])
        assert args.root is None
        assert args.color is None
        assert args.strict is None
        assert args.verbose is None

    def test_no_color_alias(self):
        assert runner.parse_args(["--no-color"]).color == "never"

    def test_all_options(self):
        args = runner.parse_args([
            "--root", "x", "--config", "c.yaml", "--app", "demo", "--manifest-dir", "m",
            "--color", "always", "--strict", "-v", "--log-file", "out.log",
        ])
        assert (args.root, args.config, args.app, args.manifest_dir) == ("x", "c.yaml", "demo", "m")
        assert args.color == "always"
        assert args.strict is True and args.verbose is True
        assert args.log_file == "out.log"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            runner.parse_args(["--version"])
        assert exc_info.value.code == 0
        assert scoop_bucket.__version__ in capsys.readouterr().out


class TestMain:
    """Tests for main() exit codes."""

    def test_valid_bucket_exits_zero(self, bucket_repo, capsys):
        assert runner.main(["--root", str(bucket_repo), "--no-color"]) == 0
        assert "VALIDATION PASSED" in capsys.readouterr().out

    def test_broken_bucket_exits_one(self, bucket_repo, capsys):
        (bucket_repo / "package.json").write_text("{}", encoding="utf-8")
        assert runner.main(["--root", str(bucket_repo), "--no-color"]) == 1
        assert "VALIDATION FAILED" in capsys.readouterr().out

    def test_bad_root_exits_two(self, tmp_path, capsys):
        assert runner.main(["--root", str(tmp_path / "missing")]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_manifest_dir_outside_root_exits_two(self, bucket_repo, tmp_path, capsys):
        code = runner.main([
            "--root", str(bucket_repo), "--manifest-dir", str(tmp_path / "elsewhere"), "--no-color",
        ])
        assert code == 2
        assert "manifest_dir" in capsys.readouterr().err

    def test_empty_pattern_in_config_file_exits_two(self, bucket_repo, capsys):
        (bucket_repo / ".scoop-bucket.yaml").write_text(
            "main_project_paths: ['installer', '']\n", encoding="utf-8"
        )
        assert runner.main(["--root", str(bucket_repo), "--no-color"]) == 2
        assert "main_project_paths" in capsys.readouterr().err

    def test_root_from_environment(self, bucket_repo, monkeypatch):
        monkeypatch.setenv("SCOOP_BUCKET_ROOT", str(bucket_repo))
        assert runner.main(["--no-color"]) == 0

    def test_app_override(self, bucket_repo):
        assert runner.main(["--root", str(bucket_repo), "--app", "missing", "--no-color"]) == 1

    def test_log_file(self, bucket_repo, tmp_path):
        log_file = tmp_path / "logs" / "validate.log"
        assert runner.main([
            "--root", str(bucket_repo), "--no-color", "-v", "--log-file", str(log_file),
        ]) == 0
        assert log_file.exists()
        assert "Validating bucket at" in log_file.read_text(encoding="utf-8")

    def test_github_actions_annotations(self, bucket_repo, monkeypatch, capsys):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        (bucket_repo / "Brewfile").write_text("", encoding="utf-8")

        assert runner.main(["--root", str(bucket_repo)]) == 1
        out = capsys.readouterr().out
        assert "::error file=Brewfile::Homebrew: Brewfile belongs to Homebrew packaging" in out
        # CI disables colors in auto mode
        assert "\x1b[" not in out


@pytest.mark.integration
class TestRepositoryBucket:
    """The bucket shipped in this repository must validate cleanly."""

    def test_repository_bucket_is_valid(self):
        config = ValidationConfig(root=REPO_ROOT, strict=True)
        report = runner.run_all_validations(config, _quiet_reporter())

        failing = [f"{r.name}: {r.message}" for r in report.results if r.status != CheckStatus.PASS]
        assert failing == []
