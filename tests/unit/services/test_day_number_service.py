"""
Unit tests for day number recalculation.
"""

import datetime as dt
from unittest.mock import patch

import pytest

from tripbudget.exceptions import StorageError
from tripbudget.services.day_number_service import recalculate_day_numbers


class TestRecalculateDayNumbers:
    """Test re-deriving day numbers from expense dates."""

    def test_start_moves_later(self, store, dated_trip, make_expense):
        expense = make_expense(dated_trip, date=dt.date(2024, 6, 5), day_number=5)

        updated = recalculate_day_numbers(store, dated_trip.id, "2024-06-03")

        assert [e.id for e in updated] == [expense.id]
        assert store.get_expense(expense.id).day_number == 3

    def test_dates_before_new_start_clamp_to_day_one(
        self, store, dated_trip, make_expense
    ):
        expense = make_expense(dated_trip, date=dt.date(2024, 6, 1), day_number=1)

        recalculate_day_numbers(store, dated_trip.id, dt.date(2024, 6, 4))

        assert store.get_expense(expense.id).day_number == 1

    def test_start_moves_earlier(self, store, dated_trip, make_expense):
        expense = make_expense(dated_trip, date=dt.date(2024, 6, 2), day_number=2)

        recalculate_day_numbers(store, dated_trip.id, "2024-05-30")

        assert store.get_expense(expense.id).day_number == 4

    def test_undated_expenses_untouched(self, store, dated_trip, make_expense):
        undated = make_expense(dated_trip, day_number=4)

        updated = recalculate_day_numbers(store, dated_trip.id, "2024-06-03")

        assert updated == []
        assert store.get_expense(undated.id).day_number == 4

    def test_unchanged_rows_not_written(self, store, dated_trip, make_expense):
        make_expense(dated_trip, date=dt.date(2024, 6, 5), day_number=5)

        with patch.object(store, "update_expense") as mock_update:
            updated = recalculate_day_numbers(store, dated_trip.id, "2024-06-01")

        assert updated == []
        mock_update.assert_not_called()

    def test_failure_rolls_back_every_update(self, store, dated_trip, make_expense):
        first = make_expense(dated_trip, date=dt.date(2024, 6, 5), day_number=5)
        second = make_expense(dated_trip, date=dt.date(2024, 6, 6), day_number=6)
        real_update = store.update_expense
        calls = []

        def flaky_update(expense_id, updates):
            calls.append(expense_id)
            if len(calls) == 2:
                raise RuntimeError("write failed")
            return real_update(expense_id, updates)

        with patch.object(store, "update_expense", side_effect=flaky_update):
            with pytest.raises(StorageError):
                recalculate_day_numbers(store, dated_trip.id, "2024-06-03")

        assert store.get_expense(first.id).day_number == 5
        assert store.get_expense(second.id).day_number == 6

    def test_vanished_expense_raises(self, store, dated_trip, make_expense):
        make_expense(dated_trip, date=dt.date(2024, 6, 5), day_number=5)

        with patch.object(store, "update_expense", return_value=None):
            with pytest.raises(StorageError) as exc_info:
                recalculate_day_numbers(store, dated_trip.id, "2024-06-03")

        assert "disappeared" in str(exc_info.value)
