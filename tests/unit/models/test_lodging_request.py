"""
Unit tests for the bulk lodging request model.
"""

import datetime as dt
from decimal import Decimal

import pytest

from tripbudget.exceptions import ValidationError
from tripbudget.models import BulkLodgingRequest


class TestBulkLodgingRequest:
    """Test parsing of bulk lodging payloads."""

    def test_camel_case_payload(self):
        request = BulkLodgingRequest.from_payload(
            {
                "checkInDate": "2024-06-01",
                "checkOutDate": "2024-06-04",
                "lodgingName": " Hotel Lisboa ",
                "totalCost": "300",
                "dayNumbersToDelete": [2, 3],
            }
        )

        assert request.check_in_date == dt.date(2024, 6, 1)
        assert request.check_out_date == dt.date(2024, 6, 4)
        assert request.lodging_name == "Hotel Lisboa"
        assert request.total_cost == Decimal("300")
        assert request.day_numbers_to_delete == [2, 3]

    def test_snake_case_payload(self):
        request = BulkLodgingRequest.from_payload(
            {"lodging_name": "Hostel", "total_cost": 90, "nights": 3,
             "start_day_number": 2}
        )

        assert request.nights == 3
        assert request.start_day_number == 2

    def test_blank_strings_become_none(self):
        request = BulkLodgingRequest.from_payload(
            {"checkInDate": "", "lodgingName": "Hostel", "totalCost": "",
             "url": " ", "dayNumbersToDelete": None}
        )

        assert request.check_in_date is None
        assert request.total_cost is None
        assert request.url is None
        assert request.day_numbers_to_delete == []

    def test_bad_date_raises_package_error(self):
        with pytest.raises(ValidationError) as exc_info:
            BulkLodgingRequest.from_payload({"checkInDate": "not-a-date"})

        assert "checkInDate" in exc_info.value.message

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            BulkLodgingRequest.from_payload({"lodgingName": "X", "rooms": 2})
