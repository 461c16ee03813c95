"""Trip creation and updates.

Updating a trip's start date re-derives the day number of every dated
expense so that dates and day numbers stay in agreement.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from tripbudget.calculators.budget_calculator import trip_total_cost
from tripbudget.calculators.date_utils import day_number_to_date, parse_calendar_date
from tripbudget.exceptions import AuthorizationError, TripNotFoundError
from tripbudget.models.expense import Expense
from tripbudget.models.trip import Trip
from tripbudget.services.day_number_service import recalculate_day_numbers
from tripbudget.services.trip_store import TripStore
from tripbudget.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)


def get_owned_trip(store: TripStore, trip_id: str, user_id: Optional[str]) -> Trip:
    """Load a trip and check that the caller owns it.

    Args:
        store: Persistence collaborator
        trip_id: Trip to load
        user_id: Caller; None skips the ownership check (trusted callers)

    Returns:
        The trip

    Raises:
        TripNotFoundError: If the trip does not exist
        AuthorizationError: If another user owns the trip
    """
    trip = store.get_trip(trip_id)
    if trip is None:
        raise TripNotFoundError(f"Trip {trip_id} not found")
    if user_id is not None and trip.user_id != user_id:
        raise AuthorizationError(f"Trip {trip_id} belongs to another user")
    return trip


def derive_end_date(
    start_date: Optional[dt.date], days: Optional[int]
) -> Optional[dt.date]:
    """Last day of a trip that starts on ``start_date`` and lasts ``days``."""
    if start_date is None or not days:
        return None
    return day_number_to_date(start_date, days)


@dataclass
class TripUpdateResult:
    """Updated trip plus the side effects of the update.

    Attributes:
        trip: The trip after the update
        total_cost: Sum of all expense rows on the trip
        recalculated: Expenses whose day number was re-derived
    """

    trip: Trip
    total_cost: Decimal
    recalculated: List[Expense] = field(default_factory=list)


class TripService:
    """Creates and updates trips.

    Example:
        >>> service = TripService(store)
        >>> trip = service.create_trip("u1", "Portugal", "2024-06-01", days=10)
        >>> trip.end_date
        datetime.date(2024, 6, 10)
    """

    def __init__(self, store: TripStore):
        self.store = store

    def create_trip(
        self,
        user_id: str,
        name: str,
        start_date: Optional[Any] = None,
        days: Optional[int] = None,
        end_date: Optional[Any] = None,
        budget: Optional[Any] = None,
    ) -> Trip:
        """Create a trip, deriving the end date from start date and days.

        Raises:
            ValidationError: If the trip fields are invalid
        """
        fields: Dict[str, Any] = {
            "user_id": user_id,
            "name": name,
            "start_date": start_date,
            "days": days,
            "end_date": end_date,
        }
        if budget is not None:
            fields["budget"] = budget

        with self.store.transaction():
            trip = self.store.create_trip(fields)
            derived = derive_end_date(trip.start_date, trip.days)
            if derived is not None and derived != trip.end_date:
                trip = self.store.update_trip(trip.id, {"end_date": derived})

        logger.info(f"Created trip {trip.id} '{trip.name}'")
        return trip

    def get_owned_trip(self, trip_id: str, user_id: Optional[str] = None) -> Trip:
        return get_owned_trip(self.store, trip_id, user_id)

    def update_trip(
        self, trip_id: str, updates: Dict[str, Any], user_id: Optional[str] = None
    ) -> TripUpdateResult:
        """Apply a partial update to a trip.

        When the start date changes to a new value, the day number of every
        dated expense is recalculated. The end date is re-derived whenever
        both start date and day count are known.

        Args:
            trip_id: Trip to update
            updates: Fields to change
            user_id: Caller; when given the caller must own the trip

        Returns:
            TripUpdateResult with the trip, its total cost and the
            recalculated expenses

        Raises:
            TripNotFoundError: If the trip does not exist
            AuthorizationError: If the caller does not own the trip
            ValidationError: If the updated trip is invalid
            StorageError: If persistence fails; the trip is left unchanged
        """
        existing = get_owned_trip(self.store, trip_id, user_id)

        with LogContext(trip_id=trip_id):
            with self.store.transaction():
                changes = dict(updates)
                if "end_date" not in changes:
                    # Move the end date along so the update validates
                    new_start = changes.get("start_date", existing.start_date)
                    days = changes.get("days", existing.days)
                    if new_start is None:
                        changes["end_date"] = None
                    elif isinstance(days, int) and days >= 1:
                        changes["end_date"] = derive_end_date(
                            parse_calendar_date(new_start), days
                        )
                    elif existing.start_date and existing.end_date:
                        # No day count: keep the stored span
                        span = existing.end_date - existing.start_date
                        changes["end_date"] = parse_calendar_date(new_start) + span

                trip = self.store.update_trip(trip_id, changes)

                derived = derive_end_date(trip.start_date, trip.days)
                if derived is not None and derived != trip.end_date:
                    trip = self.store.update_trip(trip_id, {"end_date": derived})

                recalculated: List[Expense] = []
                start_changed = (
                    "start_date" in updates
                    and trip.start_date is not None
                    and trip.start_date != existing.start_date
                )
                if start_changed:
                    logger.info(
                        f"Start date changed {existing.start_date} -> "
                        f"{trip.start_date}, recalculating day numbers"
                    )
                    recalculated = recalculate_day_numbers(
                        self.store, trip_id, trip.start_date
                    )

            total = trip_total_cost(self.store.list_expenses(trip_id))
            return TripUpdateResult(
                trip=trip, total_cost=total, recalculated=recalculated
            )
