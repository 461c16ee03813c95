"""Day number recalculation after a trip's start date changes.

Dated expenses store both a calendar date and a day number. When the start
date moves, the date stays authoritative and the day number is derived
again. Expenses without a date (entered while the trip had no start date)
only have their day number and are left alone.
"""

import datetime as dt
import logging
from typing import List

from tripbudget.calculators.date_utils import (
    DateLike,
    date_to_day_number,
    parse_calendar_date,
)
from tripbudget.exceptions import StorageError
from tripbudget.models.expense import Expense
from tripbudget.services.trip_store import TripStore, storage_errors
from tripbudget.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)


def recalculate_day_numbers(
    store: TripStore, trip_id: str, new_start: DateLike
) -> List[Expense]:
    """Recompute the day number of every dated expense of a trip.

    Dates before the new start map to day 1. All updates are applied in one
    store transaction.

    Args:
        store: Persistence collaborator
        trip_id: Trip whose start date changed
        new_start: The new start date

    Returns:
        The expenses whose day number changed, after the update

    Raises:
        StorageError: If an update fails; no expense is changed

    Example:
        >>> # Expense dated 2024-06-05, start moves from 2024-06-01 to 2024-06-03
        >>> changed = recalculate_day_numbers(store, trip.id, "2024-06-03")
        >>> [e.day_number for e in changed]
        [3]
    """
    start: dt.date = parse_calendar_date(new_start)

    with LogContext(trip_id=trip_id):
        updated: List[Expense] = []
        with storage_errors("recalculate day numbers"), store.transaction():
            for expense in store.list_expenses(trip_id):
                if expense.date is None:
                    continue

                day_number = date_to_day_number(start, expense.date)
                if day_number == expense.day_number:
                    continue

                result = store.update_expense(expense.id, {"day_number": day_number})
                if result is None:
                    raise StorageError(
                        f"Expense {expense.id} disappeared during update"
                    )
                logger.debug(
                    f"Expense {expense.id} ({expense.description}): "
                    f"day {expense.day_number} -> {day_number}"
                )
                updated.append(result)

        logger.info(
            f"Recalculated day numbers from new start {start}: "
            f"{len(updated)} expense(s) updated"
        )
        return updated
