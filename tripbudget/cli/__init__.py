"""Trip Budget CLI.

Command-line interface for planning trips: day numbering, lodging bookings,
day details and itinerary summaries, stored in a local JSON file.
"""

import click

from tripbudget import __version__
from tripbudget.cli.commands.dates import day_date, day_number, nights
from tripbudget.cli.commands.days import save_day
from tripbudget.cli.commands.lodging import book_lodging, show_lodging
from tripbudget.cli.commands.trips import create_trip, itinerary, set_start_date
from tripbudget.config.logging_config import LoggingConfig, configure_logging
from tripbudget.config.settings import get_config


@click.group(help="Trip Budget CLI - Plan trip days, lodging and budgets")
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Debug logging and full stack traces")
@click.option(
    "--log-format",
    type=click.Choice(["standard", "json"]),
    default="standard",
    help="Log line format",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_format: str):
    """Trip Budget CLI main entry point."""
    settings = get_config()
    logging_config = LoggingConfig.from_settings(settings, log_format=log_format)
    if debug:
        logging_config.log_level = "DEBUG"
    configure_logging(logging_config)

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug or settings.debug


# Register commands
cli.add_command(day_number)
cli.add_command(day_date)
cli.add_command(nights)
cli.add_command(create_trip)
cli.add_command(set_start_date)
cli.add_command(itinerary)
cli.add_command(book_lodging)
cli.add_command(show_lodging)
cli.add_command(save_day)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
