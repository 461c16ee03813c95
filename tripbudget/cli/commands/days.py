"""Day command: save-day."""

from typing import Any, Dict, Optional

import click

from tripbudget.cli.context import data_file_option, is_debug, open_store, user_option
from tripbudget.cli.error_handlers import with_error_handling
from tripbudget.cli.utils.formatters import format_info, format_success
from tripbudget.services.day_plan_service import DayPlanService
from tripbudget.services.geocoding_service import GeocodingService


@click.command(name="save-day")
@click.argument("trip_id", type=str)
@click.argument("day", type=click.IntRange(min=1))
@click.option("--destination", type=str, default=None, help="City or place")
@click.option("--lat", "latitude", type=float, default=None, help="Latitude")
@click.option("--lon", "longitude", type=float, default=None, help="Longitude")
@click.option(
    "--same-city/--new-city",
    "staying_in_same_city",
    default=None,
    help="Whether the day involves no intercity travel",
)
@click.option("--intercity-type", type=str, default=None, help="e.g. train, bus")
@click.option("--local-notes", type=str, default=None, help="Local transport notes")
@click.option(
    "--food-adjustment", type=str, default=None, help="Change to the food budget"
)
@click.option("--notes", type=str, default=None, help="Free-text notes")
@user_option
@data_file_option
@click.pass_context
def save_day(
    ctx: click.Context,
    trip_id: str,
    day: int,
    destination: Optional[str],
    latitude: Optional[float],
    longitude: Optional[float],
    staying_in_same_city: Optional[bool],
    intercity_type: Optional[str],
    local_notes: Optional[str],
    food_adjustment: Optional[str],
    notes: Optional[str],
    user_id: Optional[str],
    data_file: Optional[str],
):
    """Save details of trip DAY, geocoding the destination when possible.

    Only the options given are changed. Pass an empty --destination to
    clear it together with its coordinates.

    Example:
        tripbudget save-day 0b6c... 2 --destination "Porto, Portugal"
    """
    with with_error_handling(is_debug(ctx)):
        options = {
            "destination": destination,
            "latitude": latitude,
            "longitude": longitude,
            "staying_in_same_city": staying_in_same_city,
            "intercity_transport_type": intercity_type,
            "local_transport_notes": local_notes,
            "food_budget_adjustment": food_adjustment,
            "notes": notes,
        }
        fields: Dict[str, Any] = {k: v for k, v in options.items() if v is not None}

        service = DayPlanService(open_store(data_file), geocoder=GeocodingService())
        detail = service.save_day_detail(trip_id, day, fields, user_id)

        click.echo(format_success(f"Saved day {detail.day_number}"))
        if detail.destination:
            if detail.has_coordinates:
                click.echo(
                    f"{detail.destination}: {detail.latitude}, {detail.longitude}"
                )
            else:
                click.echo(format_info(f"{detail.destination}: no coordinates"))
