"""Shared options and helpers for CLI commands."""

from typing import Callable, Optional

import click

from tripbudget.config.settings import get_config
from tripbudget.services.trip_store import JsonFileTripStore


def data_file_option(func: Callable) -> Callable:
    """Add the --data-file option to a command."""
    return click.option(
        "--data-file",
        type=click.Path(dir_okay=False),
        default=None,
        help="Trip data JSON file (optional, uses TRIP_DATA_FILE from config)",
    )(func)


def user_option(func: Callable) -> Callable:
    """Add the --user-id option; when given, trip ownership is enforced."""
    return click.option(
        "--user-id",
        type=str,
        default=None,
        help="Acting user (optional, skips the ownership check when omitted)",
    )(func)


def open_store(data_file: Optional[str]) -> JsonFileTripStore:
    """Open the JSON trip store, falling back to the configured path."""
    return JsonFileTripStore(data_file or get_config().trip_data_file)


def is_debug(ctx: click.Context) -> bool:
    return bool((ctx.obj or {}).get("debug"))
