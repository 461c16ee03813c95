"""Lodging commands: book-lodging and show-lodging."""

from typing import Any, Dict, Optional

import click

from tripbudget.calculators.date_utils import format_calendar_date
from tripbudget.calculators.lodging_calculator import LodgingBlock
from tripbudget.cli.context import data_file_option, is_debug, open_store, user_option
from tripbudget.cli.error_handlers import with_error_handling
from tripbudget.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
    format_warning,
)
from tripbudget.exceptions import ValidationError
from tripbudget.services.lodging_service import LodgingService


def _parse_day_list(value: Optional[str]) -> list:
    if not value:
        return []
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise ValidationError(f"Invalid day list: {value!r} (expected e.g. 2,3,4)")


def _date_or_dash(value) -> str:
    return format_calendar_date(value) if value else "-"


@click.command(name="book-lodging")
@click.argument("trip_id", type=str)
@click.option("--name", "lodging_name", type=str, required=True, help="Lodging name")
@click.option("--total-cost", type=str, required=True, help="Cost of the whole stay")
@click.option("--check-in", type=str, default=None, help="Check-in date (YYYY-MM-DD)")
@click.option(
    "--check-out", type=str, default=None, help="Check-out date (YYYY-MM-DD)"
)
@click.option(
    "--nights", type=int, default=None, help="Number of nights (undated trips)"
)
@click.option(
    "--start-day", type=int, default=None, help="Day of the first night (undated trips)"
)
@click.option("--url", type=str, default=None, help="Booking link")
@click.option(
    "--replace-days",
    type=str,
    default=None,
    help="Days of the booking being edited, e.g. 2,3,4",
)
@user_option
@data_file_option
@click.pass_context
def book_lodging(
    ctx: click.Context,
    trip_id: str,
    lodging_name: str,
    total_cost: str,
    check_in: Optional[str],
    check_out: Optional[str],
    nights: Optional[int],
    start_day: Optional[int],
    url: Optional[str],
    replace_days: Optional[str],
    user_id: Optional[str],
    data_file: Optional[str],
):
    """Book a multi-night stay as one accommodation expense per night.

    Example:
        tripbudget book-lodging 0b6c... --name "Hotel Lisboa" --total-cost 300 \\
            --check-in 2024-06-01 --check-out 2024-06-04
    """
    with with_error_handling(is_debug(ctx)):
        payload: Dict[str, Any] = {
            "checkInDate": check_in,
            "checkOutDate": check_out,
            "nights": nights,
            "lodgingName": lodging_name,
            "totalCost": total_cost,
            "url": url,
            "startDayNumber": start_day,
            "dayNumbersToDelete": _parse_day_list(replace_days),
        }
        service = LodgingService(open_store(data_file))
        result = service.reconcile(trip_id, payload, user_id)

        click.echo(
            format_success(
                f"Booked '{lodging_name}': {len(result.expenses)} night(s) "
                f"at {format_money(result.nightly_rate)} per night"
            )
        )
        if result.dropped_day_numbers:
            click.echo(
                format_warning(
                    "Skipped nights outside the trip: days "
                    + ", ".join(str(d) for d in result.dropped_day_numbers)
                )
            )
        if result.deleted_expense_ids:
            click.echo(
                format_info(f"Replaced {len(result.deleted_expense_ids)} night(s)")
            )


@click.command(name="show-lodging")
@click.argument("trip_id", type=str)
@click.argument("day", type=click.IntRange(min=1), required=False)
@user_option
@data_file_option
@click.pass_context
def show_lodging(
    ctx: click.Context,
    trip_id: str,
    day: Optional[int],
    user_id: Optional[str],
    data_file: Optional[str],
):
    """Show the multi-night booking covering DAY, or every booking.

    Example:
        tripbudget show-lodging 0b6c... 2
    """
    with with_error_handling(is_debug(ctx)):
        service = LodgingService(open_store(data_file))

        if day is None:
            blocks = service.list_bookings(trip_id, user_id)
            if not blocks:
                click.echo(format_info("No lodging booked"))
                return
        else:
            block = service.get_lodging_block(trip_id, day, user_id)
            if block is None:
                click.echo(format_info(f"No multi-night booking covers day {day}"))
                return
            blocks = [block]

        click.echo(format_table(_BLOCK_HEADERS, [_block_row(b) for b in blocks]))


_BLOCK_HEADERS = ["Lodging", "Days", "Check-in", "Check-out", "Nightly", "Total"]


def _block_row(block: LodgingBlock) -> list:
    return [
        block.lodging_name,
        f"{block.day_numbers[0]}-{block.day_numbers[-1]}",
        _date_or_dash(block.check_in_date),
        _date_or_dash(block.check_out_date),
        format_money(block.nightly_rate),
        format_money(block.total_cost),
    ]
