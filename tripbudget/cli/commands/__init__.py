"""CLI commands."""

from tripbudget.cli.commands.dates import day_date, day_number, nights
from tripbudget.cli.commands.days import save_day
from tripbudget.cli.commands.lodging import book_lodging, show_lodging
from tripbudget.cli.commands.trips import create_trip, itinerary, set_start_date

__all__ = [
    "book_lodging",
    "create_trip",
    "day_date",
    "day_number",
    "itinerary",
    "nights",
    "save_day",
    "set_start_date",
    "show_lodging",
]
