"""Exception hierarchy for the trip budget core.

All errors raised by the core derive from TripBudgetError so that callers
(the CLI, a web layer) can map them to user-facing messages in one place.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tripbudget.validators.validation_report import ValidationReport


class TripBudgetError(Exception):
    """Base class for all trip budget errors."""

    pass


class ValidationError(TripBudgetError):
    """Raised when required input is missing or contradictory.

    Attributes:
        message: Human-readable description of the problem
        report: Optional ValidationReport with the individual issues
    """

    def __init__(self, message: str, report: Optional["ValidationReport"] = None):
        self.message = message
        self.report = report
        super().__init__(message)


class InvalidRangeError(ValidationError):
    """Raised when a check-out date is not after its check-in date."""

    pass


class TripNotFoundError(TripBudgetError):
    """Raised when a trip id does not resolve to a stored trip."""

    pass


class AuthorizationError(TripBudgetError):
    """Raised when the caller does not own the trip."""

    pass


class StorageError(TripBudgetError):
    """Raised when a persistence call fails."""

    pass
