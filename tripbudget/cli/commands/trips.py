"""Trip commands: create-trip, set-start-date and itinerary."""

from typing import Optional

import click
import pandas as pd

from tripbudget.aggregators.itinerary_aggregator import ItineraryAggregator
from tripbudget.calculators.budget_calculator import category_totals, trip_total_cost
from tripbudget.calculators.date_utils import format_calendar_date
from tripbudget.cli.context import data_file_option, is_debug, open_store, user_option
from tripbudget.cli.error_handlers import with_error_handling
from tripbudget.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
)
from tripbudget.services.trip_service import TripService, get_owned_trip


@click.command(name="create-trip")
@click.argument("name", type=str)
@click.option("--start-date", type=str, default=None, help="First day (YYYY-MM-DD)")
@click.option(
    "--days", type=click.IntRange(min=1), default=None, help="Trip length in days"
)
@click.option("--end-date", type=str, default=None, help="Last day (YYYY-MM-DD)")
@click.option("--budget", type=str, default=None, help="Overall budget")
@click.option(
    "--user-id", type=str, default="local", show_default=True, help="Trip owner"
)
@data_file_option
@click.pass_context
def create_trip(
    ctx: click.Context,
    name: str,
    start_date: Optional[str],
    days: Optional[int],
    end_date: Optional[str],
    budget: Optional[str],
    user_id: str,
    data_file: Optional[str],
):
    """Create a trip and print its id.

    Leave out --start-date to plan by day numbers only.

    Example:
        tripbudget create-trip "Portugal" --start-date 2024-06-01 --days 10
    """
    with with_error_handling(is_debug(ctx)):
        service = TripService(open_store(data_file))
        trip = service.create_trip(
            user_id,
            name,
            start_date=start_date,
            days=days,
            end_date=end_date,
            budget=budget,
        )
        click.echo(format_success(f"Created trip '{trip.name}'"))
        click.echo(trip.id)


@click.command(name="set-start-date")
@click.argument("trip_id", type=str)
@click.argument("start_date", type=str)
@user_option
@data_file_option
@click.pass_context
def set_start_date(
    ctx: click.Context,
    trip_id: str,
    start_date: str,
    user_id: Optional[str],
    data_file: Optional[str],
):
    """Move a trip to START_DATE and renumber its dated expenses.

    Example:
        tripbudget set-start-date 0b6c... 2024-06-03
    """
    with with_error_handling(is_debug(ctx)):
        service = TripService(open_store(data_file))
        result = service.update_trip(trip_id, {"start_date": start_date}, user_id)

        click.echo(
            format_success(
                f"Trip '{result.trip.name}' now starts "
                f"{format_calendar_date(result.trip.start_date)}"
            )
        )
        if result.recalculated:
            rows = [
                [e.description, format_calendar_date(e.date), e.day_number]
                for e in result.recalculated
            ]
            click.echo(format_table(["Expense", "Date", "New day"], rows))
        else:
            click.echo(format_info("No day numbers changed"))
        click.echo(f"Total cost: {format_money(result.total_cost)}")


@click.command(name="itinerary")
@click.argument("trip_id", type=str)
@click.option(
    "--pivot", is_flag=True, help="Show the cost per day and category instead"
)
@user_option
@data_file_option
@click.pass_context
def itinerary(
    ctx: click.Context,
    trip_id: str,
    pivot: bool,
    user_id: Optional[str],
    data_file: Optional[str],
):
    """Show a trip day by day.

    Example:
        tripbudget itinerary 0b6c... --pivot
    """
    with with_error_handling(is_debug(ctx)):
        store = open_store(data_file)
        trip = get_owned_trip(store, trip_id, user_id)
        expenses = store.list_expenses(trip.id)
        aggregator = ItineraryAggregator()

        if pivot:
            table = aggregator.cost_pivot(expenses)
            if table.empty:
                click.echo(format_info("No expenses yet"))
                return
            with pd.option_context("display.width", 200, "display.max_columns", 20):
                click.echo(table.to_string(index=False))
            return

        days = aggregator.build_itinerary(
            trip, expenses, store.list_day_details(trip.id)
        )
        rows = []
        for day in days:
            lodging = day.lodging_block.lodging_name if day.lodging_block else ""
            rows.append(
                [
                    day.day_number,
                    format_calendar_date(day.date) if day.date else "-",
                    day.destination or "",
                    lodging,
                    format_money(day.food_budget),
                    format_money(day.total_cost),
                ]
            )

        click.echo(format_info(f"Trip '{trip.name}'"))
        click.echo(
            format_table(
                ["Day", "Date", "Destination", "Lodging", "Food", "Cost"], rows
            )
        )
        for category, total in category_totals(expenses).items():
            if total:
                click.echo(f"{category.value}: {format_money(total)}")
        click.echo(f"Total cost: {format_money(trip_total_cost(expenses))}")
