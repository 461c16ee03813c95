"""Expense data model.

An expense is one priced line item on a trip. Multi-night lodging is not a
separate entity: it is a run of accommodation expenses sharing the same
description, one row per night.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import Field, field_validator

from tripbudget.models.base import BaseDataModel


class ExpenseCategory(str, Enum):
    """Fixed set of expense categories."""

    FLIGHTS = "flights"
    INTERCITY = "intercity"
    LOCAL = "local"
    ACCOMMODATION = "accommodation"
    FOOD = "food"
    ACTIVITIES = "activities"
    OTHER = "other"


class Expense(BaseDataModel):
    """Represents a single expense row.

    Attributes:
        id: Expense identifier
        trip_id: Owning trip
        category: Expense category
        description: Free text; for lodging this is the booking name
        cost: Cost in currency units (non-negative)
        url: Optional booking link
        date: Calendar date the expense applies to, if any
        day_number: 1-based trip day the expense applies to, if any
        purchased: Whether the item has already been paid for

    Example:
        >>> night = Expense(
        ...     id="e1",
        ...     trip_id="t1",
        ...     category=ExpenseCategory.ACCOMMODATION,
        ...     description="Hotel Lisboa",
        ...     cost="100.00",
        ...     day_number=1,
        ... )
        >>> night.is_accommodation
        True
    """

    id: str = Field(..., min_length=1, description="Expense identifier")
    trip_id: str = Field(..., min_length=1, description="Owning trip")
    category: ExpenseCategory = Field(..., description="Expense category")
    description: str = Field(..., min_length=1, description="Description")
    cost: Decimal = Field(..., ge=0, description="Cost")
    url: Optional[str] = Field(None, description="Optional link")
    date: Optional[dt.date] = Field(None, description="Calendar date")
    day_number: Optional[int] = Field(None, ge=1, description="Trip day number")
    purchased: bool = Field(False, description="Already paid for")

    @field_validator("description")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator("url", mode="before")
    @classmethod
    def blank_url_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cost", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert numeric values to Decimal for precision.

        Raises:
            ValueError: If the value cannot be converted to Decimal
        """
        if isinstance(v, Decimal):
            return v
        try:
            return Decimal(str(v))
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ValueError(f"Cannot convert {v} to Decimal: {e}")

    @property
    def is_accommodation(self) -> bool:
        return self.category == ExpenseCategory.ACCOMMODATION
