"""Input validation for the trip budget core."""

from tripbudget.validators.lodging_validator import LodgingRequestValidator
from tripbudget.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "LodgingRequestValidator",
    "ValidationIssue",
    "ValidationReport",
    "ValidationSeverity",
]
