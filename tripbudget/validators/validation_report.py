"""Validation report for collecting input problems before raising."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List

from tripbudget.exceptions import ValidationError


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """A single validation problem.

    Attributes:
        severity: How serious the problem is
        field: Name of the offending field
        message: Human-readable description
        value: The value that caused the problem
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.field}: {self.message}"


class ValidationReport:
    """Collects validation issues for one request.

    Errors make the request invalid; warnings are informational and are
    logged by the caller.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("lodging_name", "Lodging name is required", None)
        >>> report.is_valid()
        False
        >>> report.raise_if_invalid("Invalid lodging booking")
        Traceback (most recent call last):
        ...
        tripbudget.exceptions.ValidationError: Invalid lodging booking: ...
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    @property
    def error_count(self) -> int:
        return len(self.get_errors())

    @property
    def warning_count(self) -> int:
        return len(self.get_warnings())

    def is_valid(self) -> bool:
        """True when the report holds no errors."""
        return self.error_count == 0

    def add_error(self, field: str, message: str, value: Any = None) -> None:
        self.issues.append(
            ValidationIssue(ValidationSeverity.ERROR, field, message, value)
        )

    def add_warning(self, field: str, message: str, value: Any = None) -> None:
        self.issues.append(
            ValidationIssue(ValidationSeverity.WARNING, field, message, value)
        )

    def get_errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    def get_warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def merge(self, other: "ValidationReport") -> None:
        """Append another report's issues to this one."""
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Counts of errors and warnings, e.g. ``"2 error(s), 1 warning(s)"``."""
        parts = []
        if self.error_count:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count:
            parts.append(f"{self.warning_count} warning(s)")
        return ", ".join(parts) if parts else "No issues found"

    def format(self) -> str:
        """Multi-line listing of every issue, errors first."""
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}"]
        for issue in self.get_errors() + self.get_warnings():
            lines.append(f"  - {issue}")
        return "\n".join(lines)

    def raise_if_invalid(self, message: str) -> None:
        """Raise ValidationError carrying this report if it has errors.

        Args:
            message: Leading message for the exception

        Raises:
            ValidationError: If any error-level issue was recorded
        """
        if self.is_valid():
            return
        details = "; ".join(i.message for i in self.get_errors())
        raise ValidationError(f"{message}: {details}", report=self)
