"""
Unit tests for bulk lodging reconciliation.
"""

import datetime as dt
from decimal import Decimal
from unittest.mock import patch

import pytest

from tripbudget.exceptions import (
    AuthorizationError,
    InvalidRangeError,
    StorageError,
    TripNotFoundError,
    ValidationError,
)
from tripbudget.models import BulkLodgingRequest, ExpenseCategory
from tripbudget.services.lodging_service import LodgingService, nightly_rate


def accommodation(store, trip):
    return sorted(
        (e for e in store.list_expenses(trip.id) if e.is_accommodation),
        key=lambda e: e.day_number,
    )


def booking(**fields):
    return {
        "checkInDate": "2024-06-01",
        "checkOutDate": "2024-06-04",
        "lodgingName": "Hotel Lisboa",
        "totalCost": "300",
        **fields,
    }


@pytest.fixture
def service(store):
    return LodgingService(store)


class TestNightlyRate:
    """Test splitting a total across nights."""

    def test_even_split(self):
        assert nightly_rate(Decimal("300"), 3) == Decimal("100.00")

    def test_rounds_half_up_to_cents(self):
        assert nightly_rate(Decimal("100"), 3) == Decimal("33.33")
        assert nightly_rate(Decimal("0.05"), 2) == Decimal("0.03")


class TestDatedReconcile:
    """Test bookings on trips with a start date."""

    def test_creates_one_row_per_night(self, service, store, dated_trip):
        result = service.reconcile(dated_trip.id, booking())

        rows = accommodation(store, dated_trip)
        assert [e.day_number for e in rows] == [1, 2, 3]
        assert [e.date for e in rows] == [
            dt.date(2024, 6, 1),
            dt.date(2024, 6, 2),
            dt.date(2024, 6, 3),
        ]
        assert all(e.cost == Decimal("100.00") for e in rows)
        assert all(e.description == "Hotel Lisboa" for e in rows)
        assert result.nights == 3
        assert result.nightly_rate == Decimal("100.00")
        assert result.expenses == rows

    def test_accepts_request_model(self, service, store, dated_trip):
        request = BulkLodgingRequest.from_payload(booking(url="https://h.test"))

        service.reconcile(dated_trip.id, request)

        assert {e.url for e in accommodation(store, dated_trip)} == {"https://h.test"}

    def test_nights_past_trip_end_are_dropped(self, service, store):
        trip = store.create_trip(
            {"user_id": "u1", "name": "Short", "start_date": "2024-06-01", "days": 2}
        )

        result = service.reconcile(trip.id, booking())

        assert [e.day_number for e in accommodation(store, trip)] == [1, 2]
        assert result.dropped_day_numbers == [3]
        assert result.nightly_rate == Decimal("100.00")

    def test_nights_before_trip_start_are_dropped(self, service, store, dated_trip):
        result = service.reconcile(
            dated_trip.id,
            booking(checkInDate="2024-05-30", checkOutDate="2024-06-03"),
        )

        assert [e.day_number for e in accommodation(store, dated_trip)] == [1, 2]
        assert result.dropped_day_numbers == [-1, 0]

    def test_rebooking_same_range_replaces_rows(self, service, store, dated_trip):
        first = service.reconcile(dated_trip.id, booking())

        second = service.reconcile(dated_trip.id, booking(totalCost="450"))

        rows = accommodation(store, dated_trip)
        assert len(rows) == 3
        assert all(e.cost == Decimal("150.00") for e in rows)
        assert sorted(second.deleted_expense_ids) == sorted(
            e.id for e in first.expenses
        )

    def test_other_lodging_is_untouched(self, service, store, dated_trip, make_expense):
        other = make_expense(
            dated_trip,
            category=ExpenseCategory.ACCOMMODATION,
            description="Porto Hostel",
            day_number=2,
        )

        service.reconcile(dated_trip.id, booking())

        assert store.get_expense(other.id) == other

    def test_explicit_delete_removes_exactly_those_days(
        self, service, store, dated_trip
    ):
        service.reconcile(
            dated_trip.id,
            booking(checkInDate="2024-06-02", checkOutDate="2024-06-05"),
        )

        result = service.reconcile(
            dated_trip.id,
            booking(
                checkInDate="2024-06-04",
                checkOutDate="2024-06-07",
                dayNumbersToDelete=[2, 3, 4],
            ),
        )

        assert [e.day_number for e in accommodation(store, dated_trip)] == [4, 5, 6]
        assert len(result.deleted_expense_ids) == 3

    def test_explicit_delete_leaves_overlap_outside_list(
        self, service, store, dated_trip
    ):
        service.reconcile(dated_trip.id, booking(totalCost="100"))
        service.reconcile(
            dated_trip.id,
            booking(checkInDate="2024-06-05", checkOutDate="2024-06-07"),
        )

        service.reconcile(
            dated_trip.id,
            booking(
                checkInDate="2024-06-02",
                checkOutDate="2024-06-04",
                dayNumbersToDelete=[5, 6],
            ),
        )

        days = [e.day_number for e in accommodation(store, dated_trip)]
        assert days == [1, 2, 2, 3, 3]

    def test_check_out_not_after_check_in(self, service, store, dated_trip):
        with pytest.raises(InvalidRangeError):
            service.reconcile(
                dated_trip.id,
                booking(checkInDate="2024-06-04", checkOutDate="2024-06-04"),
            )

        assert store.list_expenses(dated_trip.id) == []

    def test_missing_dates_rejected(self, service, dated_trip):
        with pytest.raises(ValidationError) as exc_info:
            service.reconcile(dated_trip.id, booking(checkOutDate=None))

        assert exc_info.value.report.error_count == 1


class TestUndatedReconcile:
    """Test bookings on trips planned by day number."""

    def test_uses_start_day_and_nights(self, service, store, undated_trip):
        payload = {
            "lodgingName": "Hostel",
            "totalCost": "90",
            "nights": 3,
            "startDayNumber": 2,
        }

        result = service.reconcile(undated_trip.id, payload)

        rows = accommodation(store, undated_trip)
        assert [e.day_number for e in rows] == [2, 3, 4]
        assert all(e.date is None for e in rows)
        assert result.nightly_rate == Decimal("30.00")

    def test_nights_derived_from_dates(self, service, store, undated_trip):
        payload = booking(startDayNumber=6)

        result = service.reconcile(undated_trip.id, payload)

        assert result.nights == 3
        assert [e.day_number for e in accommodation(store, undated_trip)] == [6, 7]
        assert result.dropped_day_numbers == [8]

    def test_start_day_required(self, service, undated_trip):
        with pytest.raises(ValidationError):
            service.reconcile(
                undated_trip.id, {"lodgingName": "Hostel", "totalCost": "90",
                                  "nights": 3}
            )


class TestAccessAndFailures:
    """Test ownership checks and rollback on failure."""

    def test_unknown_trip(self, service):
        with pytest.raises(TripNotFoundError):
            service.reconcile("missing", booking())

    def test_other_users_trip(self, service, dated_trip):
        with pytest.raises(AuthorizationError):
            service.reconcile(dated_trip.id, booking(), user_id="intruder")

    def test_owner_allowed(self, service, dated_trip):
        result = service.reconcile(dated_trip.id, booking(), user_id="user-1")

        assert len(result.expenses) == 3

    def test_failure_mid_way_rolls_back(self, service, store, dated_trip):
        original = service.reconcile(dated_trip.id, booking())
        real_create = store.create_expense
        calls = []

        def flaky_create(fields):
            calls.append(fields)
            if len(calls) == 2:
                raise RuntimeError("connection lost")
            return real_create(fields)

        with patch.object(store, "create_expense", side_effect=flaky_create):
            with pytest.raises(StorageError):
                service.reconcile(dated_trip.id, booking(totalCost="600"))

        assert accommodation(store, dated_trip) == sorted(
            original.expenses, key=lambda e: e.day_number
        )


class TestLodgingLookup:
    """Test block lookup through the service."""

    def test_get_lodging_block(self, service, dated_trip):
        service.reconcile(dated_trip.id, booking())

        block = service.get_lodging_block(dated_trip.id, 2)

        assert block.day_numbers == [1, 2, 3]
        assert block.check_out_date == dt.date(2024, 6, 4)
        assert block.total_cost == Decimal("300.00")

    def test_list_bookings(self, service, dated_trip):
        service.reconcile(dated_trip.id, booking())
        service.reconcile(
            dated_trip.id,
            booking(
                checkInDate="2024-06-05",
                checkOutDate="2024-06-06",
                lodgingName="Porto Hostel",
                totalCost="40",
            ),
        )

        blocks = service.list_bookings(dated_trip.id)

        assert [(b.lodging_name, b.nights) for b in blocks] == [
            ("Hotel Lisboa", 3),
            ("Porto Hostel", 1),
        ]
