"""
Custom Exceptions for the Bucket Validator.

Design Principles:
- Every exception provides actionable guidance
- Error messages include context (which file, which line)
- Exceptions are hierarchical for flexible catching

Validation findings are never raised; passes report them as FAIL results.
Exceptions are reserved for inputs the validator cannot work with at all.
"""

from pathlib import Path
from typing import Any, Dict, Optional


class BucketValidationError(Exception):
    """
    Base exception for all bucket validator errors.

    Attributes:
        message: Human-readable error description
        context: Additional context as key-value pairs
        suggestion: Actionable suggestion to fix the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message."""
        parts = [self.message]

        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for machine-readable reporting."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "suggestion": self.suggestion,
        }


class ConfigLoadError(BucketValidationError):
    """
    Raised when the validator configuration cannot be loaded.

    Covers a missing repository root, an unreadable or malformed
    .scoop-bucket.yaml and values rejected by the config model.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        suggestion: Optional[str] = None,
    ):
        self.file_path = file_path
        self.line = line
        self.column = column

        context = {}
        if file_path:
            context["file"] = str(file_path)
        if line is not None:
            context["line"] = line
        if column is not None:
            context["column"] = column

        if suggestion is None and line:
            suggestion = f"Check line {line} for syntax errors"

        super().__init__(message, context=context, suggestion=suggestion)


class ManifestLoadError(BucketValidationError):
    """
    Raised when the Scoop manifest cannot be read or parsed.

    Provides line number and column for JSON syntax errors.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.file_path = file_path
        self.line = line
        self.column = column

        context = {}
        if file_path:
            context["file"] = str(file_path)
        if line is not None:
            context["line"] = line
        if column is not None:
            context["column"] = column

        suggestion = "Check JSON syntax: commas, quotes, brackets"
        if line:
            suggestion = f"Check line {line} for syntax errors"

        super().__init__(message, context=context, suggestion=suggestion)


__all__ = [
    "BucketValidationError",
    "ConfigLoadError",
    "ManifestLoadError",
]
