"""Bulk lodging reconciliation.

Expands one multi-night booking (check-in/check-out, or night count and
starting day) into one accommodation expense per night at a uniform nightly
rate, replacing the rows of the same booking that it supersedes.

Rows are deleted and re-inserted rather than patched in place so that every
night always carries the rate derived from the current total and night count.
The delete and insert steps run in a single store transaction.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Union

from tripbudget.calculators.date_utils import (
    day_number_to_date,
    day_offset,
    nights_between,
)
from tripbudget.calculators.lodging_calculator import (
    LodgingBlock,
    list_lodging_blocks,
    resolve_lodging_block,
)
from tripbudget.models.expense import Expense, ExpenseCategory
from tripbudget.models.lodging import BulkLodgingRequest
from tripbudget.models.trip import Trip
from tripbudget.services.trip_store import TripStore, storage_errors
from tripbudget.services.trip_service import get_owned_trip
from tripbudget.utils.logging_utils import LogContext, log_function_call
from tripbudget.validators.lodging_validator import LodgingRequestValidator

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class LodgingNight:
    """One night of a booking before it is written as an expense."""

    day_number: int
    date: Optional[dt.date]


@dataclass
class BulkLodgingResult:
    """Outcome of a bulk lodging reconciliation.

    Attributes:
        nights: Night count of the booking as requested
        nightly_rate: Cost of each night
        expenses: Accommodation expenses that were created
        deleted_expense_ids: Ids of the rows that were replaced
        dropped_day_numbers: Nights skipped for falling outside the trip
    """

    nights: int
    nightly_rate: Decimal
    expenses: List[Expense] = field(default_factory=list)
    deleted_expense_ids: List[str] = field(default_factory=list)
    dropped_day_numbers: List[int] = field(default_factory=list)


def nightly_rate(total_cost: Decimal, nights: int) -> Decimal:
    """Total cost split evenly across nights, rounded to cents.

    Example:
        >>> nightly_rate(Decimal("100"), 3)
        Decimal('33.33')
    """
    return (total_cost / nights).quantize(CENTS, rounding=ROUND_HALF_UP)


def plan_nights(
    trip: Trip, request: BulkLodgingRequest, nights: int
) -> List[LodgingNight]:
    """Day number and date of every night in the booking.

    Dated trips count nights from the check-in date; undated trips count
    from the requested starting day and carry no date.

    Args:
        trip: Target trip
        request: Validated booking request
        nights: Number of nights

    Returns:
        One LodgingNight per night, including nights outside the trip
    """
    planned: List[LodgingNight] = []
    for i in range(nights):
        if trip.is_dated:
            night_date = day_number_to_date(request.check_in_date, i + 1)
            planned.append(
                LodgingNight(
                    day_number=day_offset(trip.start_date, night_date),
                    date=night_date,
                )
            )
        else:
            planned.append(
                LodgingNight(day_number=request.start_day_number + i, date=None)
            )
    return planned


class LodgingService:
    """Creates, edits and inspects multi-night lodging bookings.

    Example:
        >>> service = LodgingService(store)
        >>> result = service.reconcile(trip.id, {
        ...     "checkInDate": "2024-06-01",
        ...     "checkOutDate": "2024-06-04",
        ...     "lodgingName": "Hotel Lisboa",
        ...     "totalCost": "300",
        ... })
        >>> [e.day_number for e in result.expenses], result.nightly_rate
        ([1, 2, 3], Decimal('100.00'))
    """

    def __init__(
        self, store: TripStore, validator: Optional[LodgingRequestValidator] = None
    ):
        self.store = store
        self.validator = validator or LodgingRequestValidator()

    @log_function_call(level="DEBUG")
    def reconcile(
        self,
        trip_id: str,
        request: Union[BulkLodgingRequest, Dict[str, Any]],
        user_id: Optional[str] = None,
    ) -> BulkLodgingResult:
        """Replace a booking's nightly accommodation rows.

        Args:
            trip_id: Trip the booking belongs to
            request: Booking request, or its raw payload dictionary
            user_id: Caller; when given the caller must own the trip

        Returns:
            BulkLodgingResult with the created rows, night count and rate

        Raises:
            TripNotFoundError: If the trip does not exist
            AuthorizationError: If the caller does not own the trip
            ValidationError: If required fields are missing for the trip's mode
            InvalidRangeError: If check-out is not after check-in
            StorageError: If persistence fails; no changes are kept
        """
        if not isinstance(request, BulkLodgingRequest):
            request = BulkLodgingRequest.from_payload(request)

        with LogContext(trip_id=trip_id, lodging_name=request.lodging_name):
            trip = get_owned_trip(self.store, trip_id, user_id)

            report = self.validator.validate(trip, request)
            report.raise_if_invalid("Invalid lodging booking")
            for warning in report.get_warnings():
                logger.warning(f"Lodging request: {warning}")

            if trip.is_dated or request.nights is None:
                nights = nights_between(request.check_in_date, request.check_out_date)
            else:
                nights = request.nights

            rate = nightly_rate(request.total_cost, nights)

            planned = plan_nights(trip, request, nights)
            kept = [n for n in planned if trip.contains_day(n.day_number)]
            dropped = [
                n.day_number for n in planned if not trip.contains_day(n.day_number)
            ]
            if dropped:
                logger.info(
                    f"Dropping nights outside the trip duration: days {dropped}"
                )

            with storage_errors("save lodging booking"), self.store.transaction():
                deleted_ids = self._delete_superseded(trip, request, kept)
                created = [
                    self.store.create_expense(
                        {
                            "trip_id": trip.id,
                            "category": ExpenseCategory.ACCOMMODATION,
                            "description": request.lodging_name,
                            "cost": rate,
                            "url": request.url,
                            "date": night.date,
                            "day_number": night.day_number,
                        }
                    )
                    for night in kept
                ]

            logger.info(
                f"Booked '{request.lodging_name}': {len(created)} of {nights} "
                f"night(s) at {rate}, replaced {len(deleted_ids)} row(s)"
            )

            return BulkLodgingResult(
                nights=nights,
                nightly_rate=rate,
                expenses=created,
                deleted_expense_ids=deleted_ids,
                dropped_day_numbers=dropped,
            )

    def _delete_superseded(
        self, trip: Trip, request: BulkLodgingRequest, kept: List[LodgingNight]
    ) -> List[str]:
        # Editing: exactly the original block's days. Creating: overlap with new range.
        if request.day_numbers_to_delete:
            target_days = set(request.day_numbers_to_delete)
        else:
            target_days = {n.day_number for n in kept}

        to_delete = [
            e
            for e in self.store.list_expenses(trip.id)
            if e.is_accommodation
            and e.description == request.lodging_name
            and e.day_number is not None
            and e.day_number in target_days
        ]

        for expense in to_delete:
            self.store.delete_expense(expense.id)

        if to_delete:
            logger.debug(
                f"Deleted {len(to_delete)} existing night(s) on days "
                f"{sorted(e.day_number for e in to_delete)}"
            )
        return [e.id for e in to_delete]

    def get_lodging_block(
        self, trip_id: str, day_number: int, user_id: Optional[str] = None
    ) -> Optional[LodgingBlock]:
        """Multi-night booking covering a day, if any.

        Args:
            trip_id: Trip to inspect
            day_number: Day of interest
            user_id: Caller; when given the caller must own the trip

        Returns:
            LodgingBlock or None
        """
        trip = get_owned_trip(self.store, trip_id, user_id)
        return resolve_lodging_block(self.store.list_expenses(trip.id), day_number)

    def list_bookings(
        self, trip_id: str, user_id: Optional[str] = None
    ) -> List[LodgingBlock]:
        """Every lodging booking on a trip, in day order."""
        trip = get_owned_trip(self.store, trip_id, user_id)
        return list_lodging_blocks(self.store.list_expenses(trip.id))
