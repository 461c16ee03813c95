"""
Unit tests for the in-memory and JSON file trip stores.
"""

import datetime as dt
import json
from decimal import Decimal
from unittest.mock import patch

import pytest

from tripbudget.exceptions import StorageError, TripNotFoundError, ValidationError
from tripbudget.models import ExpenseCategory
from tripbudget.services.trip_store import (
    InMemoryTripStore,
    JsonFileTripStore,
    storage_errors,
)


def expense_fields(trip_id, day=1, **fields):
    return {
        "trip_id": trip_id,
        "category": ExpenseCategory.FOOD,
        "description": "Lunch",
        "cost": "12.50",
        "day_number": day,
        **fields,
    }


class TestInMemoryTripStore:
    """Test CRUD operations of InMemoryTripStore."""

    def test_create_and_get_trip(self, store):
        trip = store.create_trip({"user_id": "u1", "name": "Portugal", "days": 3})

        assert trip.id
        assert store.get_trip(trip.id) == trip
        assert store.get_trip("missing") is None

    def test_invalid_trip_raises_validation_error(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.create_trip({"user_id": "u1", "name": " "})

        assert "Invalid Trip" in exc_info.value.message

    def test_update_trip_revalidates(self, store, dated_trip):
        updated = store.update_trip(dated_trip.id, {"name": "Spain"})

        assert updated.name == "Spain"
        assert updated.id == dated_trip.id
        assert store.update_trip("missing", {"name": "X"}) is None

    def test_expense_crud(self, store, dated_trip):
        expense = store.create_expense(expense_fields(dated_trip.id))

        assert expense.cost == Decimal("12.50")
        assert store.list_expenses(dated_trip.id) == [expense]

        updated = store.update_expense(expense.id, {"cost": "15"})
        assert updated.cost == Decimal("15")
        assert store.get_expense(expense.id) == updated

        assert store.delete_expense(expense.id) is True
        assert store.delete_expense(expense.id) is False
        assert store.list_expenses(dated_trip.id) == []

    def test_update_cannot_move_expense_to_other_trip(self, store, dated_trip):
        expense = store.create_expense(expense_fields(dated_trip.id))

        updated = store.update_expense(expense.id, {"trip_id": "other"})

        assert updated.trip_id == dated_trip.id

    def test_expense_for_unknown_trip(self, store):
        with pytest.raises(TripNotFoundError):
            store.create_expense(expense_fields("missing"))

    def test_upsert_day_detail_merges(self, store, dated_trip):
        first = store.upsert_day_detail(
            {"trip_id": dated_trip.id, "day_number": 2, "destination": "Porto"}
        )
        second = store.upsert_day_detail(
            {"trip_id": dated_trip.id, "day_number": 2, "notes": "Port tasting"}
        )

        assert second.id == first.id
        assert second.destination == "Porto"
        assert second.notes == "Port tasting"
        assert store.list_day_details(dated_trip.id) == [second]

    def test_delete_trip_cascades(self, store, dated_trip):
        store.create_expense(expense_fields(dated_trip.id))
        store.upsert_day_detail({"trip_id": dated_trip.id, "day_number": 1})

        assert store.delete_trip(dated_trip.id) is True

        assert store.list_expenses(dated_trip.id) == []
        assert store.list_day_details(dated_trip.id) == []
        assert store.delete_trip(dated_trip.id) is False


class TestTransactions:
    """Test transaction rollback semantics."""

    def test_rollback_on_exception(self, store, dated_trip):
        kept = store.create_expense(expense_fields(dated_trip.id, day=1))

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.delete_expense(kept.id)
                store.create_expense(expense_fields(dated_trip.id, day=2))
                raise RuntimeError("boom")

        assert store.list_expenses(dated_trip.id) == [kept]

    def test_nested_transaction_rolls_back_with_outer(self, store, dated_trip):
        with pytest.raises(ValueError):
            with store.transaction():
                with store.transaction():
                    store.create_expense(expense_fields(dated_trip.id))
                raise ValueError("outer failure")

        assert store.list_expenses(dated_trip.id) == []

    def test_commit_failure_rolls_back(self, store, dated_trip):
        with patch.object(store, "_commit", side_effect=OSError("disk full")):
            with pytest.raises(StorageError):
                store.create_expense(expense_fields(dated_trip.id))

        assert store.list_expenses(dated_trip.id) == []


class TestJsonFileTripStore:
    """Test persistence of JsonFileTripStore."""

    def test_missing_file_starts_empty(self, tmp_path):
        store = JsonFileTripStore(str(tmp_path / "trips.json"))

        assert store.get_trip("anything") is None
        assert not (tmp_path / "trips.json").exists()

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "data" / "trips.json"
        store = JsonFileTripStore(str(path))
        trip = store.create_trip(
            {"user_id": "u1", "name": "Portugal", "start_date": dt.date(2024, 6, 1)}
        )
        expense = store.create_expense(
            expense_fields(trip.id, date=dt.date(2024, 6, 1), url="https://x.test")
        )
        store.upsert_day_detail(
            {"trip_id": trip.id, "day_number": 1, "latitude": "38.7"}
        )

        reopened = JsonFileTripStore(str(path))

        assert reopened.get_trip(trip.id) == trip
        assert reopened.get_expense(expense.id) == expense
        assert reopened.get_day_detail(trip.id, 1).latitude == Decimal("38.7")
        assert json.loads(path.read_text())["version"] == "1.0"

    def test_file_only_written_on_outer_commit(self, tmp_path):
        path = tmp_path / "trips.json"
        store = JsonFileTripStore(str(path))

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.create_trip({"user_id": "u1", "name": "Portugal"})
                raise RuntimeError("abort")

        assert not path.exists()

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "trips.json"
        path.write_text("{not json")

        with pytest.raises(StorageError):
            JsonFileTripStore(str(path))

    def test_version_mismatch(self, tmp_path):
        path = tmp_path / "trips.json"
        path.write_text(json.dumps({"version": "0.1", "trips": []}))

        with pytest.raises(StorageError) as exc_info:
            JsonFileTripStore(str(path))

        assert "Unsupported data file version" in str(exc_info.value)

    def test_corrupted_record(self, tmp_path):
        path = tmp_path / "trips.json"
        path.write_text(
            json.dumps({"version": "1.0", "trips": [{"id": "t1", "name": "X"}]})
        )

        with pytest.raises(StorageError):
            JsonFileTripStore(str(path))


class TestStorageErrors:
    """Test wrapping of unexpected store failures."""

    def test_unexpected_error_becomes_storage_error(self):
        with pytest.raises(StorageError, match="Failed to save booking: disk full"):
            with storage_errors("save booking"):
                raise OSError("disk full")

    def test_package_errors_pass_through(self):
        with pytest.raises(ValidationError):
            with storage_errors("save booking"):
                raise ValidationError("bad input")

    def test_rolls_back_before_wrapping(self, store, dated_trip):
        with pytest.raises(StorageError):
            with storage_errors("save booking"), store.transaction():
                store.create_expense(expense_fields(dated_trip.id))
                raise KeyError("lost row")

        assert store.list_expenses(dated_trip.id) == []
