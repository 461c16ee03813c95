"""Itinerary aggregator for the day-by-day trip overview.

Combines a trip's expenses and day details into one entry per trip day and
builds the per-day cost summary as a pandas DataFrame.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import pandas as pd

from tripbudget.calculators.budget_calculator import (
    daily_food_budget,
    food_budget_for_day,
)
from tripbudget.calculators.date_utils import day_number_to_date
from tripbudget.calculators.lodging_calculator import (
    LodgingBlock,
    resolve_lodging_block,
)
from tripbudget.models.day_detail import DayDetail
from tripbudget.models.expense import Expense, ExpenseCategory
from tripbudget.models.trip import Trip

logger = logging.getLogger(__name__)

UNASSIGNED_LABEL = "Unassigned"
DAY_COLUMN = "Day"
TOTAL_COLUMN = "Total"


@dataclass
class ItineraryDay:
    """One day of the itinerary.

    Attributes:
        day_number: 1-based trip day
        date: Calendar date, when the trip has a start date
        destination: Where the traveller is that day
        expenses: Expenses assigned to the day
        lodging_block: Multi-night booking covering the day, if any
        food_budget: Daily food budget plus the day's adjustment
    """

    day_number: int
    date: Optional[dt.date] = None
    destination: Optional[str] = None
    expenses: List[Expense] = field(default_factory=list)
    lodging_block: Optional[LodgingBlock] = None
    food_budget: Decimal = Decimal("0")

    @property
    def total_cost(self) -> Decimal:
        return sum((e.cost for e in self.expenses), Decimal("0"))


@dataclass
class MapLocation:
    """A day with known coordinates, for plotting the route."""

    day_number: int
    date: Optional[dt.date]
    destination: Optional[str]
    latitude: Decimal
    longitude: Decimal


class ItineraryAggregator:
    """Builds the day-by-day itinerary and its cost summary.

    Example:
        >>> aggregator = ItineraryAggregator()
        >>> days = aggregator.build_itinerary(trip, expenses, day_details)
        >>> [d.day_number for d in days]
        [1, 2, 3]
        >>> aggregator.cost_pivot(expenses).loc[1, "Total"]
        250.0
    """

    def build_itinerary(
        self,
        trip: Trip,
        expenses: List[Expense],
        day_details: Iterable[DayDetail],
    ) -> List[ItineraryDay]:
        """One ItineraryDay per trip day.

        Trips without a day count span up to the highest day that has an
        expense or day detail.

        Args:
            trip: The trip
            expenses: All expenses of the trip
            day_details: All day details of the trip

        Returns:
            Itinerary days in day order
        """
        details: Dict[int, DayDetail] = {d.day_number: d for d in day_details}

        if trip.days:
            last_day = trip.days
        else:
            used = [e.day_number for e in expenses if e.day_number is not None]
            used += list(details)
            last_day = max(used, default=0)

        daily_food = daily_food_budget(trip, expenses)

        by_day: Dict[int, List[Expense]] = {}
        for expense in expenses:
            if expense.day_number is not None:
                by_day.setdefault(expense.day_number, []).append(expense)

        itinerary = []
        for day_number in range(1, last_day + 1):
            detail = details.get(day_number)
            itinerary.append(
                ItineraryDay(
                    day_number=day_number,
                    date=(
                        day_number_to_date(trip.start_date, day_number)
                        if trip.is_dated
                        else None
                    ),
                    destination=detail.destination if detail else None,
                    expenses=by_day.get(day_number, []),
                    lodging_block=resolve_lodging_block(expenses, day_number),
                    food_budget=food_budget_for_day(daily_food, detail),
                )
            )

        logger.debug(f"Built itinerary for trip {trip.id}: {len(itinerary)} day(s)")
        return itinerary

    def cost_pivot(self, expenses: List[Expense]) -> pd.DataFrame:
        """Cost per day and category.

        Rows are day numbers, columns are category values plus a Total
        column. Expenses without a day number are collected in row 0,
        labelled "Unassigned" in the Day column.

        Args:
            expenses: Expenses of one trip

        Returns:
            DataFrame indexed by day number
        """
        columns = [DAY_COLUMN] + [c.value for c in ExpenseCategory] + [TOTAL_COLUMN]

        if not expenses:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame(
            [
                {
                    "day_number": e.day_number if e.day_number is not None else 0,
                    "category": e.category.value,
                    "cost": float(e.cost),
                }
                for e in expenses
            ]
        )

        pivot = df.pivot_table(
            index="day_number",
            columns="category",
            values="cost",
            aggfunc="sum",
            fill_value=0.0,
        )
        categories = [c.value for c in ExpenseCategory]
        pivot = pivot.reindex(columns=categories, fill_value=0.0)
        pivot[TOTAL_COLUMN] = pivot.sum(axis=1)
        pivot.insert(
            0,
            DAY_COLUMN,
            [UNASSIGNED_LABEL if day == 0 else str(day) for day in pivot.index],
        )
        pivot.columns.name = None
        return pivot.sort_index()

    def map_locations(
        self, trip: Trip, day_details: Iterable[DayDetail]
    ) -> List[MapLocation]:
        """Days that have coordinates, in day order."""
        return [
            MapLocation(
                day_number=d.day_number,
                date=(
                    day_number_to_date(trip.start_date, d.day_number)
                    if trip.is_dated
                    else None
                ),
                destination=d.destination,
                latitude=d.latitude,
                longitude=d.longitude,
            )
            for d in sorted(day_details, key=lambda d: d.day_number)
            if d.has_coordinates
        ]
