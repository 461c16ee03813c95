"""Budget calculations over trip expenses.

Budget totals always sum every expense row, so a multi-night booking
contributes each of its nights individually.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

from tripbudget.models.day_detail import DayDetail
from tripbudget.models.expense import Expense, ExpenseCategory
from tripbudget.models.trip import Trip


def trip_total_cost(expenses: Iterable[Expense]) -> Decimal:
    """Sum of every expense row on a trip.

    Example:
        >>> trip_total_cost([])
        Decimal('0')
    """
    return sum((e.cost for e in expenses), Decimal("0"))


def category_totals(expenses: Iterable[Expense]) -> Dict[ExpenseCategory, Decimal]:
    """Total cost per category, with every category present.

    Args:
        expenses: Expenses of one trip

    Returns:
        Mapping of category to total cost (zero for unused categories)
    """
    totals: Dict[ExpenseCategory, Decimal] = {c: Decimal("0") for c in ExpenseCategory}
    for expense in expenses:
        totals[expense.category] += expense.cost
    return totals


def daily_food_budget(trip: Trip, expenses: Iterable[Expense]) -> int:
    """Trip-wide food budget spread evenly over the trip's days.

    The result is rounded to whole currency units.

    Args:
        trip: The trip
        expenses: Expenses of the trip

    Returns:
        Food budget per day, or 0 when the trip has no day count

    Example:
        >>> # 700 of food over a 7 day trip
        >>> daily_food_budget(trip, expenses)
        100
    """
    if not trip.days:
        return 0
    food_total = category_totals(expenses)[ExpenseCategory.FOOD]
    return int((food_total / trip.days).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def food_budget_for_day(
    daily_budget: int, day_detail: Optional[DayDetail] = None
) -> Decimal:
    """Food budget of a single day including its adjustment.

    Args:
        daily_budget: Trip-wide daily food budget
        day_detail: The day's details, if any were saved

    Returns:
        Daily budget plus the day's food budget adjustment
    """
    adjustment = day_detail.food_budget_adjustment if day_detail else Decimal("0")
    return Decimal(daily_budget) + adjustment
