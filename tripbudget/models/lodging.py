"""Input model for bulk lodging bookings.

The request accepts both snake_case and the camelCase keys used by the web
client (``checkInDate``, ``totalCost`` ...). All fields are optional at the
model level; which ones are required depends on whether the trip is dated,
and that is decided by the lodging validator.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from tripbudget.exceptions import ValidationError
from tripbudget.models.base import BaseDataModel


class BulkLodgingRequest(BaseDataModel):
    """A multi-night lodging booking to be expanded into nightly rows.

    Attributes:
        check_in_date: First night (dated trips)
        check_out_date: Morning of departure, exclusive (dated trips)
        nights: Explicit night count (undated trips)
        lodging_name: Booking name, stored as each row's description
        total_cost: Cost of the whole stay
        url: Optional booking link
        start_day_number: Day number of the first night (undated trips)
        day_numbers_to_delete: Days of the booking being edited, if any

    Example:
        >>> req = BulkLodgingRequest.from_payload({
        ...     "checkInDate": "2024-06-01",
        ...     "checkOutDate": "2024-06-04",
        ...     "lodgingName": "Hotel Lisboa",
        ...     "totalCost": "300",
        ... })
        >>> req.total_cost
        Decimal('300')
    """

    model_config = ConfigDict(populate_by_name=True)

    check_in_date: Optional[dt.date] = Field(None, alias="checkInDate")
    check_out_date: Optional[dt.date] = Field(None, alias="checkOutDate")
    nights: Optional[int] = Field(None, alias="nights")
    lodging_name: Optional[str] = Field(None, alias="lodgingName")
    total_cost: Optional[Decimal] = Field(None, alias="totalCost")
    url: Optional[str] = Field(None, alias="url")
    start_day_number: Optional[int] = Field(None, alias="startDayNumber")
    day_numbers_to_delete: List[int] = Field(
        default_factory=list, alias="dayNumbersToDelete"
    )

    @field_validator(
        "check_in_date",
        "check_out_date",
        "nights",
        "lodging_name",
        "total_cost",
        "url",
        "start_day_number",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("lodging_name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("day_numbers_to_delete", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "BulkLodgingRequest":
        """Build a request from a raw payload dictionary.

        Args:
            payload: Request body using snake_case or camelCase keys

        Returns:
            Parsed request

        Raises:
            ValidationError: If a field has the wrong type or format
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ValidationError(f"Invalid lodging request: {problems}") from e
