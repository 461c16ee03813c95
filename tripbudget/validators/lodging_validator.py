"""Validation of bulk lodging requests.

Which fields are required depends on the trip:

- Dated trips (start date set) need check-in and check-out dates
- Undated trips need a starting day number and either a night count or a
  check-in/check-out pair to derive it from

Both modes need a lodging name and a non-negative total cost.
"""

import logging

from tripbudget.models.lodging import BulkLodgingRequest
from tripbudget.models.trip import Trip
from tripbudget.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)


class LodgingRequestValidator:
    """Checks a BulkLodgingRequest against the trip it targets."""

    def validate(self, trip: Trip, request: BulkLodgingRequest) -> ValidationReport:
        """Collect every problem with the request.

        Args:
            trip: Trip the booking belongs to
            request: The booking request

        Returns:
            ValidationReport with errors and warnings
        """
        report = ValidationReport()

        if not request.lodging_name:
            report.add_error("lodging_name", "Lodging name is required")

        if request.total_cost is None:
            report.add_error("total_cost", "Total cost is required")
        elif request.total_cost < 0:
            report.add_error(
                "total_cost", "Total cost cannot be negative", request.total_cost
            )

        if trip.is_dated:
            self._validate_dated(request, report)
        else:
            self._validate_undated(request, report)

        bad_days = [d for d in request.day_numbers_to_delete if d < 1]
        if bad_days:
            report.add_error(
                "day_numbers_to_delete", "Day numbers must be 1 or greater", bad_days
            )

        if report.issues:
            logger.debug(f"Lodging request for trip {trip.id}: {report.summary()}")

        return report

    def _validate_dated(
        self, request: BulkLodgingRequest, report: ValidationReport
    ) -> None:
        if request.check_in_date is None:
            report.add_error("check_in_date", "Check-in date is required")
        if request.check_out_date is None:
            report.add_error("check_out_date", "Check-out date is required")
        if request.nights is not None:
            report.add_warning(
                "nights",
                "Night count is ignored for dated trips; it is derived from the dates",
                request.nights,
            )

    def _validate_undated(
        self, request: BulkLodgingRequest, report: ValidationReport
    ) -> None:
        if request.start_day_number is None:
            report.add_error(
                "start_day_number",
                "Starting day number is required for trips without a start date",
            )
        elif request.start_day_number < 1:
            report.add_error(
                "start_day_number",
                "Starting day number must be 1 or greater",
                request.start_day_number,
            )

        has_dates = (
            request.check_in_date is not None and request.check_out_date is not None
        )
        if request.nights is None:
            if not has_dates:
                report.add_error(
                    "nights",
                    "Night count (or check-in and check-out dates) is required",
                )
        elif request.nights < 1:
            report.add_error("nights", "Night count must be at least 1", request.nights)
