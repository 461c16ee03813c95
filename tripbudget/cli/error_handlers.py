"""Error handling for CLI commands."""

import logging
import sys
import traceback

import click

from tripbudget.cli.utils.formatters import format_error, format_warning
from tripbudget.exceptions import (
    AuthorizationError,
    StorageError,
    TripNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

EXIT_VALIDATION = 3
EXIT_STORAGE = 4
EXIT_AUTHORIZATION = 6
EXIT_NOT_FOUND = 7
EXIT_CANCELLED = 130
EXIT_UNEXPECTED = 255


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error and pick the exit code.

    Args:
        error: The exception that occurred
        debug: Whether to show the full stack trace for unexpected errors

    Returns:
        Exit code for the error type
    """
    if isinstance(error, ValidationError):
        click.echo(format_error(f"Validation Error: {error.message}"), err=True)
        if error.report is not None:
            for issue in error.report.get_errors():
                click.echo(f"  {issue.field}: {issue.message}", err=True)
            for issue in error.report.get_warnings():
                click.echo(format_warning(str(issue)), err=True)
        return EXIT_VALIDATION

    elif isinstance(error, TripNotFoundError):
        click.echo(format_error(f"Not Found: {error}"), err=True)
        click.echo(
            format_warning("Hint: Check the trip id and the --data-file path"),
            err=True,
        )
        return EXIT_NOT_FOUND

    elif isinstance(error, AuthorizationError):
        click.echo(format_error(f"Permission Denied: {error}"), err=True)
        return EXIT_AUTHORIZATION

    elif isinstance(error, StorageError):
        click.echo(format_error(f"Storage Error: {error}"), err=True)
        click.echo(
            format_warning("Hint: No changes were saved. Check the data file."),
            err=True,
        )
        return EXIT_STORAGE

    elif isinstance(error, click.Abort):
        click.echo(format_warning("Operation cancelled by user"), err=True)
        return EXIT_CANCELLED

    click.echo(format_error(f"Unexpected Error: {type(error).__name__}"), err=True)
    click.echo(str(error), err=True)
    if debug:
        click.echo("\nFull stack trace:", err=True)
        click.echo(traceback.format_exc(), err=True)
    else:
        click.echo(
            format_warning("Run with --debug flag for full stack trace"), err=True
        )
    logger.debug("Unexpected CLI error", exc_info=error)
    return EXIT_UNEXPECTED


class ErrorHandler:
    """Context manager that turns exceptions into exit codes."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is None or isinstance(exc_val, click.exceptions.Exit):
            return False
        sys.exit(handle_cli_error(exc_val, self.debug))


def with_error_handling(debug: bool = False) -> ErrorHandler:
    """
    Standard error handling for a command body.

    Example:
        with with_error_handling(ctx.obj.debug):
            ...
    """
    return ErrorHandler(debug)
