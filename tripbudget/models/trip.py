"""Trip data model.

A trip owns its expenses and day details. Days are referenced by a 1-based
day number; when a start date is known, day N falls on start_date + N - 1.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator, model_validator

from tripbudget.models.base import BaseDataModel


class Trip(BaseDataModel):
    """Represents a planned or completed trip.

    Attributes:
        id: Trip identifier
        user_id: Identifier of the owning user
        name: Display name of the trip
        start_date: First calendar day of the trip (inclusive), if known
        end_date: Last calendar day of the trip (inclusive), if known
        days: Number of days in the trip, if known
        budget: Overall budget the user set for the trip

    Example:
        >>> trip = Trip(
        ...     id="t1",
        ...     user_id="u1",
        ...     name="Portugal",
        ...     start_date=dt.date(2024, 6, 1),
        ...     days=10,
        ... )
        >>> trip.is_dated
        True
    """

    id: str = Field(..., min_length=1, description="Trip identifier")
    user_id: str = Field(..., min_length=1, description="Owning user")
    name: str = Field(..., min_length=1, description="Trip name")
    start_date: Optional[dt.date] = Field(None, description="First day of trip")
    end_date: Optional[dt.date] = Field(None, description="Last day of trip")
    days: Optional[int] = Field(None, ge=1, description="Number of days")
    budget: Decimal = Field(Decimal("0"), ge=0, description="Planned budget")

    @field_validator("name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Reject names that are only whitespace."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator("budget", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal, None]) -> Decimal:
        """Convert numeric input to Decimal; empty input means no budget."""
        if v is None or v == "":
            return Decimal("0")
        if isinstance(v, Decimal):
            return v
        try:
            return Decimal(str(v))
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ValueError(f"Cannot convert {v} to Decimal: {e}")

    @model_validator(mode="after")
    def validate_dates(self) -> "Trip":
        """Validate that end_date is not before start_date."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) cannot be before "
                f"start_date ({self.start_date})"
            )
        return self

    @property
    def is_dated(self) -> bool:
        """Whether day numbers map to calendar dates for this trip."""
        return self.start_date is not None

    def contains_day(self, day_number: int) -> bool:
        """Check whether a day number falls inside the trip.

        Trips without a day count have no upper bound.

        Args:
            day_number: 1-based day number

        Returns:
            True if the day is within ``[1, days]``
        """
        if day_number < 1:
            return False
        return self.days is None or day_number <= self.days
