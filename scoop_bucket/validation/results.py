"""Check results and the aggregated validation report."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class CheckStatus(Enum):
    """Status of a single validation check."""
    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"
    INFO = "INFO"


@dataclass
class CheckResult:
    """Result of a single validation check."""
    name: str
    status: CheckStatus
    message: str
    details: Optional[List[str]] = None
    path: Optional[Path] = None

    @classmethod
    def ok(cls, name: str, message: str, **kwargs) -> "CheckResult":
        return cls(name=name, status=CheckStatus.PASS, message=message, **kwargs)

    @classmethod
    def fail(cls, name: str, message: str, **kwargs) -> "CheckResult":
        return cls(name=name, status=CheckStatus.FAIL, message=message, **kwargs)

    @classmethod
    def warn(cls, name: str, message: str, **kwargs) -> "CheckResult":
        return cls(name=name, status=CheckStatus.WARN, message=message, **kwargs)


@dataclass
class PassResult:
    """All check results produced by one validation pass."""
    title: str
    results: List[CheckResult] = field(default_factory=list)

    @property
    def failures(self) -> List[CheckResult]:
        return [r for r in self.results if r.status == CheckStatus.FAIL]

    @property
    def warnings(self) -> List[CheckResult]:
        return [r for r in self.results if r.status == CheckStatus.WARN]

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def passed(self) -> bool:
        return self.error_count == 0


@dataclass
class ValidationReport:
    """
    Aggregated outcome of a validation run.

    The error count is the number of FAIL results across every pass.
    In strict mode warnings are counted as errors too.
    """
    passes: List[PassResult] = field(default_factory=list)
    strict: bool = False

    @property
    def results(self) -> List[CheckResult]:
        return [r for p in self.passes for r in p.results]

    @property
    def warning_count(self) -> int:
        return sum(p.warning_count for p in self.passes)

    @property
    def error_count(self) -> int:
        errors = sum(p.error_count for p in self.passes)
        if self.strict:
            errors += self.warning_count
        return errors

    @property
    def exit_code(self) -> int:
        return 1 if self.error_count else 0
