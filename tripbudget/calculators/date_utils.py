"""Calendar date utilities for trip day numbering.

This module converts between calendar dates and trip-relative day numbers
(day 1 = trip start). All arithmetic is done on ``dt.date`` values, which are
plain calendar triples with no time or timezone component, so results never
shift by a day around midnight. String input is split into its year, month
and day parts rather than handed to a datetime parser.
"""

import datetime as dt
from typing import List, Union

from tripbudget.exceptions import InvalidRangeError, ValidationError

DateLike = Union[dt.date, str]


def parse_calendar_date(value: DateLike) -> dt.date:
    """Parse a ``YYYY-MM-DD`` string into a calendar date.

    Args:
        value: Date string, or a date which is returned unchanged

    Returns:
        The calendar date

    Raises:
        ValidationError: If the value is not a valid ``YYYY-MM-DD`` date

    Example:
        >>> parse_calendar_date("2024-02-29")
        datetime.date(2024, 2, 29)
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    parts = str(value).strip().split("-")
    if len(parts) != 3:
        raise ValidationError(f"Invalid date '{value}': expected YYYY-MM-DD")
    try:
        year, month, day = (int(p) for p in parts)
        return dt.date(year, month, day)
    except ValueError as e:
        raise ValidationError(f"Invalid date '{value}': {e}") from e


def format_calendar_date(value: dt.date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``.

    Example:
        >>> format_calendar_date(dt.date(2024, 6, 1))
        '2024-06-01'
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def day_offset(trip_start: DateLike, date: DateLike) -> int:
    """Unclamped day number of ``date`` relative to ``trip_start``.

    Dates before the trip start give zero or negative values.

    Example:
        >>> day_offset(dt.date(2024, 6, 3), dt.date(2024, 6, 1))
        -1
    """
    start = parse_calendar_date(trip_start)
    target = parse_calendar_date(date)
    return (target - start).days + 1


def date_to_day_number(trip_start: DateLike, date: DateLike) -> int:
    """Convert a calendar date into a 1-based trip day number.

    Dates before the trip start map to day 1.

    Args:
        trip_start: First day of the trip
        date: Date to convert

    Returns:
        Day number, never less than 1

    Example:
        >>> date_to_day_number(dt.date(2024, 6, 1), dt.date(2024, 6, 5))
        5
        >>> date_to_day_number(dt.date(2024, 6, 1), dt.date(2024, 5, 20))
        1
    """
    return max(1, day_offset(trip_start, date))


def day_number_to_date(trip_start: DateLike, day_number: int) -> dt.date:
    """Convert a 1-based trip day number into its calendar date.

    Month and year boundaries roll over naturally.

    Example:
        >>> day_number_to_date(dt.date(2024, 12, 30), 4)
        datetime.date(2025, 1, 2)
    """
    start = parse_calendar_date(trip_start)
    return start + dt.timedelta(days=day_number - 1)


def nights_between(check_in: DateLike, check_out: DateLike) -> int:
    """Number of nights between check-in and check-out.

    Args:
        check_in: Date of the first night
        check_out: Departure date (not itself a night)

    Returns:
        Number of nights, at least 1

    Raises:
        InvalidRangeError: If check-out is not after check-in

    Example:
        >>> nights_between(dt.date(2024, 6, 1), dt.date(2024, 6, 4))
        3
    """
    start = parse_calendar_date(check_in)
    end = parse_calendar_date(check_out)
    nights = (end - start).days
    if nights <= 0:
        raise InvalidRangeError(
            f"Check-out date ({format_calendar_date(end)}) must be after "
            f"check-in date ({format_calendar_date(start)})"
        )
    return nights


def trip_dates(trip_start: DateLike, days: int) -> List[dt.date]:
    """Calendar dates of every day in a trip.

    Example:
        >>> [d.isoformat() for d in trip_dates(dt.date(2024, 2, 28), 3)]
        ['2024-02-28', '2024-02-29', '2024-03-01']
    """
    return [day_number_to_date(trip_start, n) for n in range(1, days + 1)]
