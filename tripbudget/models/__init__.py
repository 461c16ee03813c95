"""Data models for the trip budget core.

This package contains Pydantic models for all business entities:
- BaseDataModel: Base class with common configuration
- Trip: A trip with optional calendar dates
- Expense / ExpenseCategory: Priced line items
- DayDetail / Coordinates: Per-day itinerary details
- BulkLodgingRequest: Multi-night lodging booking input
"""

from tripbudget.models.base import BaseDataModel
from tripbudget.models.day_detail import Coordinates, DayDetail
from tripbudget.models.expense import Expense, ExpenseCategory
from tripbudget.models.lodging import BulkLodgingRequest
from tripbudget.models.trip import Trip

__all__ = [
    "BaseDataModel",
    "BulkLodgingRequest",
    "Coordinates",
    "DayDetail",
    "Expense",
    "ExpenseCategory",
    "Trip",
]
