"""Calculator modules for the trip budget core."""

from tripbudget.calculators.budget_calculator import (
    category_totals,
    daily_food_budget,
    food_budget_for_day,
    trip_total_cost,
)
from tripbudget.calculators.date_utils import (
    date_to_day_number,
    day_number_to_date,
    day_offset,
    format_calendar_date,
    nights_between,
    parse_calendar_date,
    trip_dates,
)
from tripbudget.calculators.lodging_calculator import (
    LodgingBlock,
    find_consecutive_blocks,
    list_lodging_blocks,
    resolve_lodging_block,
)

__all__ = [
    # budget_calculator
    "category_totals",
    "daily_food_budget",
    "food_budget_for_day",
    "trip_total_cost",
    # date_utils
    "date_to_day_number",
    "day_number_to_date",
    "day_offset",
    "format_calendar_date",
    "nights_between",
    "parse_calendar_date",
    "trip_dates",
    # lodging_calculator
    "LodgingBlock",
    "find_consecutive_blocks",
    "list_lodging_blocks",
    "resolve_lodging_block",
]
