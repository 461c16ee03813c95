"""Saving a single day of the itinerary.

A day's plan is spread over one DayDetail row and a handful of expenses:

- at most one lodging (accommodation) row
- at most one local transport row
- at most one intercity transport row
- any number of activity rows

Rows are created lazily when the user fills a slot in and deleted when the
slot is cleared. Lodging that belongs to a multi-night booking is owned by
the bulk lodging flow and is never touched here.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from tripbudget.calculators.date_utils import day_number_to_date
from tripbudget.calculators.lodging_calculator import resolve_lodging_block
from tripbudget.exceptions import ValidationError
from tripbudget.models.base import BaseDataModel
from tripbudget.models.day_detail import Coordinates, DayDetail
from tripbudget.models.expense import Expense, ExpenseCategory
from tripbudget.models.trip import Trip
from tripbudget.services.geocoding_service import Geocoder
from tripbudget.services.trip_service import get_owned_trip
from tripbudget.services.trip_store import TripStore
from tripbudget.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)

DAY_DETAIL_FIELDS = {
    "destination",
    "latitude",
    "longitude",
    "local_transport_notes",
    "food_budget_adjustment",
    "staying_in_same_city",
    "intercity_transport_type",
    "notes",
}


class ExpenseSlot(BaseDataModel):
    """User input for one priced item of the day.

    A slot is filled when it has both a name and a cost.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    cost: Optional[Decimal] = None
    url: Optional[str] = None

    @property
    def is_filled(self) -> bool:
        return bool(self.name and self.name.strip()) and self.cost is not None


class DayPlan(BaseDataModel):
    """Everything the user entered for one day."""

    destination: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    local_transport_notes: Optional[str] = None
    food_budget_adjustment: Optional[Decimal] = None
    staying_in_same_city: bool = False
    intercity_transport_type: Optional[str] = None
    notes: Optional[str] = None
    lodging: Optional[ExpenseSlot] = None
    local_transport: Optional[ExpenseSlot] = None
    intercity: Optional[ExpenseSlot] = None
    activities: List[ExpenseSlot] = Field(default_factory=list)


@dataclass
class DayPlanResult:
    """Saved state of the day.

    Attributes:
        day_detail: The upserted day detail
        expenses: The day's expenses after the save
        deleted_expense_ids: Rows removed because their slot was cleared
    """

    day_detail: DayDetail
    expenses: List[Expense] = field(default_factory=list)
    deleted_expense_ids: List[str] = field(default_factory=list)


class DayPlanService:
    """Saves day details and the day's single-row expenses.

    Example:
        >>> service = DayPlanService(store, geocoder=GeocodingService())
        >>> detail = service.save_day_detail(trip.id, 2, {"destination": "Porto"})
        >>> detail.has_coordinates
        True
    """

    def __init__(self, store: TripStore, geocoder: Optional[Geocoder] = None):
        self.store = store
        self.geocoder = geocoder

    def save_day_detail(
        self,
        trip_id: str,
        day_number: int,
        fields: Dict[str, Any],
        user_id: Optional[str] = None,
    ) -> DayDetail:
        """Upsert a day's details, geocoding the destination when needed.

        Geocoding is best-effort: when it fails the destination is saved
        without coordinates.

        Args:
            trip_id: Trip of the day
            day_number: 1-based day
            fields: Day detail fields to set
            user_id: Caller; when given the caller must own the trip

        Returns:
            The saved DayDetail

        Raises:
            TripNotFoundError: If the trip does not exist
            AuthorizationError: If the caller does not own the trip
            ValidationError: If the day or a field is invalid
        """
        trip = get_owned_trip(self.store, trip_id, user_id)
        self._check_day(trip, day_number)

        with LogContext(trip_id=trip_id, day_number=day_number):
            values = self._detail_values(trip_id, day_number, fields)
            return self._write_detail(trip_id, day_number, values)

    def _detail_values(
        self, trip_id: str, day_number: int, fields: Dict[str, Any]
    ) -> Dict[str, Any]:
        # Runs outside any store transaction: geocoding may block on the network
        unknown = set(fields) - DAY_DETAIL_FIELDS
        if unknown:
            raise ValidationError(f"Unknown day detail fields: {sorted(unknown)}")

        values = dict(fields)

        if "destination" in values:
            destination = (values.get("destination") or "").strip()
            if not destination:
                values["latitude"] = None
                values["longitude"] = None
            elif values.get("latitude") is None or values.get("longitude") is None:
                existing = self.store.get_day_detail(trip_id, day_number)
                if (
                    existing is not None
                    and existing.destination == destination
                    and existing.has_coordinates
                ):
                    coordinates = Coordinates(
                        lat=existing.latitude, lon=existing.longitude
                    )
                else:
                    coordinates = self._geocode(destination)
                values["latitude"] = coordinates.lat if coordinates else None
                values["longitude"] = coordinates.lon if coordinates else None

        if values.get("staying_in_same_city"):
            values["intercity_transport_type"] = None
        return values

    def _write_detail(
        self, trip_id: str, day_number: int, values: Dict[str, Any]
    ) -> DayDetail:
        detail = self.store.upsert_day_detail(
            {**values, "trip_id": trip_id, "day_number": day_number}
        )
        logger.debug(f"Saved day {day_number} details")
        return detail

    def _geocode(self, destination: str) -> Optional[Coordinates]:
        if self.geocoder is None:
            return None
        try:
            return self.geocoder.geocode(destination)
        except Exception as e:
            logger.warning(f"Geocoding '{destination}' failed: {e}")
            return None

    def save_day_plan(
        self,
        trip_id: str,
        day_number: int,
        plan: DayPlan,
        user_id: Optional[str] = None,
    ) -> DayPlanResult:
        """Save the whole plan of one day.

        Args:
            trip_id: Trip of the day
            day_number: 1-based day
            plan: What the user entered
            user_id: Caller; when given the caller must own the trip

        Returns:
            DayPlanResult with the day detail and the day's expenses

        Raises:
            TripNotFoundError: If the trip does not exist
            AuthorizationError: If the caller does not own the trip
            ValidationError: If the day or a field is invalid
            StorageError: If persistence fails; nothing is saved
        """
        trip = get_owned_trip(self.store, trip_id, user_id)
        self._check_day(trip, day_number)

        detail_fields = plan.model_dump(include=DAY_DETAIL_FIELDS)
        if detail_fields.get("food_budget_adjustment") is None:
            detail_fields["food_budget_adjustment"] = Decimal("0")

        deleted: List[str] = []
        with LogContext(trip_id=trip_id, day_number=day_number):
            values = self._detail_values(trip_id, day_number, detail_fields)

            with self.store.transaction():
                detail = self._write_detail(trip_id, day_number, values)

                all_expenses = self.store.list_expenses(trip_id)
                day_expenses = [e for e in all_expenses if e.day_number == day_number]
                day_date = (
                    day_number_to_date(trip.start_date, day_number)
                    if trip.is_dated
                    else None
                )

                if resolve_lodging_block(all_expenses, day_number) is None:
                    deleted += self._save_single(
                        trip, day_number, day_date, day_expenses,
                        ExpenseCategory.ACCOMMODATION, plan.lodging,
                    )
                else:
                    logger.debug("Lodging is part of a multi-night booking, skipped")

                deleted += self._save_single(
                    trip, day_number, day_date, day_expenses,
                    ExpenseCategory.LOCAL, plan.local_transport,
                )
                intercity = None if plan.staying_in_same_city else plan.intercity
                deleted += self._save_single(
                    trip, day_number, day_date, day_expenses,
                    ExpenseCategory.INTERCITY, intercity,
                )
                deleted += self._save_activities(
                    trip, day_number, day_date, day_expenses, plan.activities
                )

                saved = [
                    e
                    for e in self.store.list_expenses(trip_id)
                    if e.day_number == day_number
                ]

        logger.info(
            f"Saved plan for day {day_number} of trip {trip_id}: "
            f"{len(saved)} expense(s), {len(deleted)} removed"
        )
        return DayPlanResult(
            day_detail=detail, expenses=saved, deleted_expense_ids=deleted
        )

    @staticmethod
    def _check_day(trip: Trip, day_number: int) -> None:
        if not trip.contains_day(day_number):
            raise ValidationError(
                f"Day {day_number} is outside trip {trip.id} "
                f"(days: {trip.days if trip.days is not None else 'unbounded'})"
            )

    def _expense_fields(
        self,
        trip: Trip,
        day_number: int,
        day_date: Optional[dt.date],
        category: ExpenseCategory,
        slot: ExpenseSlot,
    ) -> Dict[str, Any]:
        return {
            "trip_id": trip.id,
            "category": category,
            "description": slot.name,
            "cost": slot.cost,
            "url": slot.url,
            "date": day_date,
            "day_number": day_number,
        }

    def _save_single(
        self,
        trip: Trip,
        day_number: int,
        day_date: Optional[dt.date],
        day_expenses: List[Expense],
        category: ExpenseCategory,
        slot: Optional[ExpenseSlot],
    ) -> List[str]:
        existing = next((e for e in day_expenses if e.category == category), None)

        if slot is not None and slot.is_filled:
            fields = self._expense_fields(trip, day_number, day_date, category, slot)
            if existing is not None:
                self.store.update_expense(existing.id, fields)
            else:
                self.store.create_expense(fields)
            return []

        if existing is not None:
            self.store.delete_expense(existing.id)
            logger.debug(f"Cleared {category.value} for day {day_number}")
            return [existing.id]
        return []

    def _save_activities(
        self,
        trip: Trip,
        day_number: int,
        day_date: Optional[dt.date],
        day_expenses: List[Expense],
        activities: List[ExpenseSlot],
    ) -> List[str]:
        existing = {
            e.id: e for e in day_expenses if e.category == ExpenseCategory.ACTIVITIES
        }
        kept_ids = set()

        for activity in activities:
            if activity.id is not None:
                kept_ids.add(activity.id)
            if not activity.is_filled:
                continue
            fields = self._expense_fields(
                trip, day_number, day_date, ExpenseCategory.ACTIVITIES, activity
            )
            if activity.id is not None and activity.id in existing:
                self.store.update_expense(activity.id, fields)
            else:
                self.store.create_expense(fields)

        removed = [expense_id for expense_id in existing if expense_id not in kept_ids]
        for expense_id in removed:
            self.store.delete_expense(expense_id)
        return removed
