"""
Services for the trip budget core.

This package provides:
- Trip stores with transactional updates (in-memory and JSON file)
- Bulk lodging reconciliation and lodging block lookup
- Day number recalculation after a start date change
- Day plan saving with best-effort geocoding
- LocationIQ geocoding with retry and exponential backoff
"""

from .day_number_service import recalculate_day_numbers
from .day_plan_service import DayPlan, DayPlanResult, DayPlanService, ExpenseSlot
from .geocoding_service import Geocoder, GeocodingService
from .lodging_service import BulkLodgingResult, LodgingService
from .retry_handler import RetryExhaustedException, RetryHandler
from .trip_service import TripService, TripUpdateResult, get_owned_trip
from .trip_store import InMemoryTripStore, JsonFileTripStore, TripStore

__all__ = [
    "BulkLodgingResult",
    "DayPlan",
    "DayPlanResult",
    "DayPlanService",
    "ExpenseSlot",
    "Geocoder",
    "GeocodingService",
    "InMemoryTripStore",
    "JsonFileTripStore",
    "LodgingService",
    "RetryExhaustedException",
    "RetryHandler",
    "TripService",
    "TripStore",
    "TripUpdateResult",
    "get_owned_trip",
    "recalculate_day_numbers",
]
