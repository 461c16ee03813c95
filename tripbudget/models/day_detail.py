"""Day detail data model.

A day detail holds the per-day itinerary information that is not itself an
expense: where the traveller is, how they get around, and how much the
day's food budget deviates from the trip-wide daily amount.
"""

from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator

from tripbudget.models.base import BaseDataModel


def _to_optional_decimal(v: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    if isinstance(v, Decimal):
        return v
    try:
        return Decimal(str(v))
    except (ValueError, TypeError, ArithmeticError) as e:
        raise ValueError(f"Cannot convert {v} to Decimal: {e}")


class Coordinates(BaseDataModel):
    """Latitude/longitude pair returned by the geocoder."""

    lat: Decimal = Field(..., ge=-90, le=90)
    lon: Decimal = Field(..., ge=-180, le=180)
    display_name: Optional[str] = None

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_optional_decimal(v)


class DayDetail(BaseDataModel):
    """Itinerary details for one day of a trip.

    Unique per (trip_id, day_number).

    Attributes:
        id: Day detail identifier
        trip_id: Owning trip
        day_number: 1-based trip day
        destination: City or place the traveller is in
        latitude: Destination latitude, if known
        longitude: Destination longitude, if known
        local_transport_notes: Free-text notes about getting around
        food_budget_adjustment: Added to the trip's daily food budget for this day
        staying_in_same_city: Suppresses intercity travel for the day
        intercity_transport_type: Mode of intercity travel, if any
        notes: Free-text notes
    """

    id: str = Field(..., min_length=1)
    trip_id: str = Field(..., min_length=1)
    day_number: int = Field(..., ge=1)
    destination: Optional[str] = None
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    local_transport_notes: Optional[str] = None
    food_budget_adjustment: Decimal = Decimal("0")
    staying_in_same_city: bool = False
    intercity_transport_type: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("destination", "intercity_transport_type", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def convert_coordinate(cls, v):
        return _to_optional_decimal(v)

    @field_validator("food_budget_adjustment", mode="before")
    @classmethod
    def convert_adjustment(cls, v):
        converted = _to_optional_decimal(v)
        return Decimal("0") if converted is None else converted

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
