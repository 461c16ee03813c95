"""Date mapping commands: day-number, day-date and nights."""

from typing import Optional

import click

from tripbudget.calculators.date_utils import (
    date_to_day_number,
    day_number_to_date,
    format_calendar_date,
    nights_between,
)
from tripbudget.cli.context import data_file_option, is_debug, open_store
from tripbudget.cli.error_handlers import with_error_handling
from tripbudget.exceptions import ValidationError
from tripbudget.services.trip_service import get_owned_trip


def _resolve_start(
    start: Optional[str], trip_id: Optional[str], data_file: Optional[str]
):
    if start and trip_id:
        raise ValidationError("Use either --start or --trip-id, not both")
    if start:
        return start
    if not trip_id:
        raise ValidationError("Either --start or --trip-id is required")

    trip = get_owned_trip(open_store(data_file), trip_id, None)
    if not trip.is_dated:
        raise ValidationError(f"Trip {trip_id} has no start date")
    return trip.start_date


_start_option = click.option(
    "--start", type=str, default=None, help="Trip start date (YYYY-MM-DD)"
)
_trip_option = click.option(
    "--trip-id", type=str, default=None, help="Read the start date from this trip"
)


@click.command(name="day-number")
@click.argument("date", type=str)
@_start_option
@_trip_option
@data_file_option
@click.pass_context
def day_number(
    ctx: click.Context,
    date: str,
    start: Optional[str],
    trip_id: Optional[str],
    data_file: Optional[str],
):
    """Print the trip day number of a calendar DATE.

    Dates before the start map to day 1.

    Example:
        tripbudget day-number 2024-06-05 --start 2024-06-01
    """
    with with_error_handling(is_debug(ctx)):
        start_date = _resolve_start(start, trip_id, data_file)
        click.echo(date_to_day_number(start_date, date))


@click.command(name="day-date")
@click.argument("day", type=click.IntRange(min=1))
@_start_option
@_trip_option
@data_file_option
@click.pass_context
def day_date(
    ctx: click.Context,
    day: int,
    start: Optional[str],
    trip_id: Optional[str],
    data_file: Optional[str],
):
    """Print the calendar date of trip DAY.

    Example:
        tripbudget day-date 5 --start 2024-06-01
    """
    with with_error_handling(is_debug(ctx)):
        start_date = _resolve_start(start, trip_id, data_file)
        click.echo(format_calendar_date(day_number_to_date(start_date, day)))


@click.command(name="nights")
@click.argument("check_in", type=str)
@click.argument("check_out", type=str)
@click.pass_context
def nights(ctx: click.Context, check_in: str, check_out: str):
    """Print the number of nights between CHECK_IN and CHECK_OUT."""
    with with_error_handling(is_debug(ctx)):
        click.echo(nights_between(check_in, check_out))
