"""Persistence layer for trips, expenses and day details.

TripStore is the interface the core talks to. Two implementations are
provided:

- InMemoryTripStore: dictionaries guarded by a re-entrant lock
- JsonFileTripStore: the in-memory store persisted to a JSON file

Both support ``transaction()``. The state is snapshotted when the outermost
transaction starts and restored if an exception escapes it, so a multi-step
reconciliation either applies completely or not at all.
"""

import json
import logging
import os
import tempfile
import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from tripbudget.exceptions import (
    StorageError,
    TripBudgetError,
    TripNotFoundError,
    ValidationError,
)
from tripbudget.models.base import BaseDataModel
from tripbudget.models.day_detail import DayDetail
from tripbudget.models.expense import Expense
from tripbudget.models.trip import Trip

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise unexpected failures of a store operation as StorageError.

    Package errors (validation, not found, storage) pass through unchanged.

    Example:
        >>> with storage_errors("save lodging booking"):
        ...     store.create_expense(fields)
    """
    try:
        yield
    except TripBudgetError:
        raise
    except Exception as e:
        raise StorageError(f"Failed to {action}: {e}") from e


ModelT = TypeVar("ModelT", bound=BaseDataModel)


def _build(model_cls: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate a model, converting pydantic errors to ValidationError."""
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"Invalid {model_cls.__name__}: {problems}") from e


class TripStore(ABC):
    """Persistence collaborator used by the core services."""

    @abstractmethod
    def get_trip(self, trip_id: str) -> Optional[Trip]:
        """Return the trip or None."""

    @abstractmethod
    def create_trip(self, fields: Dict[str, Any]) -> Trip:
        """Create a trip from fields (without id)."""

    @abstractmethod
    def update_trip(self, trip_id: str, updates: Dict[str, Any]) -> Optional[Trip]:
        """Apply a partial update; None if the trip does not exist."""

    @abstractmethod
    def delete_trip(self, trip_id: str) -> bool:
        """Delete a trip with its expenses and day details."""

    @abstractmethod
    def list_expenses(self, trip_id: str) -> List[Expense]:
        """All expenses of a trip, in creation order."""

    @abstractmethod
    def get_expense(self, expense_id: str) -> Optional[Expense]:
        """Return the expense or None."""

    @abstractmethod
    def create_expense(self, fields: Dict[str, Any]) -> Expense:
        """Create an expense from fields (without id)."""

    @abstractmethod
    def update_expense(
        self, expense_id: str, updates: Dict[str, Any]
    ) -> Optional[Expense]:
        """Apply a partial update; None if the expense does not exist."""

    @abstractmethod
    def delete_expense(self, expense_id: str) -> bool:
        """Delete an expense; False if it did not exist."""

    @abstractmethod
    def upsert_day_detail(self, fields: Dict[str, Any]) -> DayDetail:
        """Create or update the day detail keyed by (trip_id, day_number)."""

    @abstractmethod
    def get_day_detail(self, trip_id: str, day_number: int) -> Optional[DayDetail]:
        """Return the day detail or None."""

    @abstractmethod
    def list_day_details(self, trip_id: str) -> List[DayDetail]:
        """All day details of a trip, ordered by day number."""

    @abstractmethod
    def transaction(self) -> Any:
        """Context manager making the enclosed calls all-or-nothing."""


class InMemoryTripStore(TripStore):
    """Thread-safe in-memory TripStore.

    Example:
        >>> store = InMemoryTripStore()
        >>> trip = store.create_trip({"user_id": "u1", "name": "Japan", "days": 7})
        >>> with store.transaction():
        ...     store.create_expense({
        ...         "trip_id": trip.id, "category": "food",
        ...         "description": "Food Budget", "cost": "350",
        ...     })
    """

    def __init__(self) -> None:
        self._trips: Dict[str, Trip] = {}
        self._expenses: Dict[str, Expense] = {}
        self._day_details: Dict[Tuple[str, int], DayDetail] = {}

        self._lock = threading.RLock()
        self._transaction_depth = 0

    # Transactions

    @contextmanager
    def transaction(self) -> Iterator["InMemoryTripStore"]:
        with self._lock:
            outermost = self._transaction_depth == 0
            snapshot = self._snapshot() if outermost else None
            self._transaction_depth += 1
            try:
                yield self
            except BaseException:
                if outermost:
                    self._restore(snapshot)
                    logger.warning("Transaction rolled back")
                raise
            else:
                if outermost:
                    try:
                        self._commit()
                    except Exception as e:
                        self._restore(snapshot)
                        raise StorageError(f"Failed to commit transaction: {e}") from e
            finally:
                self._transaction_depth -= 1

    def _snapshot(self) -> Tuple[Dict, Dict, Dict]:
        # Models are replaced, never mutated, so shallow copies are enough
        return dict(self._trips), dict(self._expenses), dict(self._day_details)

    def _restore(self, snapshot: Optional[Tuple[Dict, Dict, Dict]]) -> None:
        if snapshot is None:
            return
        self._trips, self._expenses, self._day_details = snapshot

    def _commit(self) -> None:
        """Hook called when the outermost transaction succeeds."""
        pass

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # Trips

    def get_trip(self, trip_id: str) -> Optional[Trip]:
        with self._lock:
            return self._trips.get(trip_id)

    def create_trip(self, fields: Dict[str, Any]) -> Trip:
        with self.transaction():
            trip = _build(Trip, {**fields, "id": self._new_id()})
            self._trips[trip.id] = trip
            logger.debug(f"Created trip {trip.id} ({trip.name})")
            return trip

    def update_trip(self, trip_id: str, updates: Dict[str, Any]) -> Optional[Trip]:
        with self.transaction():
            trip = self._trips.get(trip_id)
            if trip is None:
                return None
            updated = _build(Trip, {**trip.model_dump(), **updates, "id": trip.id})
            self._trips[trip_id] = updated
            return updated

    def delete_trip(self, trip_id: str) -> bool:
        with self.transaction():
            if self._trips.pop(trip_id, None) is None:
                return False
            self._expenses = {
                k: e for k, e in self._expenses.items() if e.trip_id != trip_id
            }
            self._day_details = {
                k: d for k, d in self._day_details.items() if d.trip_id != trip_id
            }
            logger.debug(f"Deleted trip {trip_id} with its expenses and day details")
            return True

    # Expenses

    def list_expenses(self, trip_id: str) -> List[Expense]:
        with self._lock:
            return [e for e in self._expenses.values() if e.trip_id == trip_id]

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        with self._lock:
            return self._expenses.get(expense_id)

    def create_expense(self, fields: Dict[str, Any]) -> Expense:
        with self.transaction():
            trip_id = fields.get("trip_id")
            if trip_id not in self._trips:
                raise TripNotFoundError(f"Trip {trip_id} not found")
            expense = _build(Expense, {**fields, "id": self._new_id()})
            self._expenses[expense.id] = expense
            return expense

    def update_expense(
        self, expense_id: str, updates: Dict[str, Any]
    ) -> Optional[Expense]:
        with self.transaction():
            expense = self._expenses.get(expense_id)
            if expense is None:
                return None
            updated = _build(
                Expense,
                {
                    **expense.model_dump(),
                    **updates,
                    "id": expense.id,
                    "trip_id": expense.trip_id,
                },
            )
            self._expenses[expense_id] = updated
            return updated

    def delete_expense(self, expense_id: str) -> bool:
        with self.transaction():
            return self._expenses.pop(expense_id, None) is not None

    # Day details

    def upsert_day_detail(self, fields: Dict[str, Any]) -> DayDetail:
        with self.transaction():
            trip_id = fields.get("trip_id")
            if trip_id not in self._trips:
                raise TripNotFoundError(f"Trip {trip_id} not found")
            key = (trip_id, fields.get("day_number"))
            existing = self._day_details.get(key)
            if existing is not None:
                data = {**existing.model_dump(), **fields, "id": existing.id}
            else:
                data = {**fields, "id": self._new_id()}
            detail = _build(DayDetail, data)
            self._day_details[(detail.trip_id, detail.day_number)] = detail
            return detail

    def get_day_detail(self, trip_id: str, day_number: int) -> Optional[DayDetail]:
        with self._lock:
            return self._day_details.get((trip_id, day_number))

    def list_day_details(self, trip_id: str) -> List[DayDetail]:
        with self._lock:
            return sorted(
                (d for d in self._day_details.values() if d.trip_id == trip_id),
                key=lambda d: d.day_number,
            )


class JsonFileTripStore(InMemoryTripStore):
    """InMemoryTripStore persisted to a JSON file.

    The file is read once on construction and rewritten after every
    committed transaction using an atomic write (temp file + rename).
    """

    FILE_VERSION = "1.0"

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug(f"Data file not found, starting empty: {self.path}")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read data file {self.path}: {e}") from e

        version = data.get("version", "unknown")
        if version != self.FILE_VERSION:
            raise StorageError(
                f"Unsupported data file version {version} "
                f"(expected {self.FILE_VERSION})"
            )

        try:
            for raw in data.get("trips", []):
                trip = Trip.model_validate(raw)
                self._trips[trip.id] = trip
            for raw in data.get("expenses", []):
                expense = Expense.model_validate(raw)
                self._expenses[expense.id] = expense
            for raw in data.get("day_details", []):
                detail = DayDetail.model_validate(raw)
                self._day_details[(detail.trip_id, detail.day_number)] = detail
        except PydanticValidationError as e:
            raise StorageError(f"Corrupted data file {self.path}: {e}") from e

        logger.info(
            f"Loaded {len(self._trips)} trips and {len(self._expenses)} expenses "
            f"from {self.path}"
        )

    def _commit(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            "version": self.FILE_VERSION,
            "last_updated": datetime.now().isoformat(),
            "trips": [t.model_dump(mode="json") for t in self._trips.values()],
            "expenses": [e.model_dump(mode="json") for e in self._expenses.values()],
            "day_details": [
                d.model_dump(mode="json") for d in self._day_details.values()
            ],
        }

        temp_fd, temp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(temp_path, self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

        logger.debug(f"Saved data file {self.path}")
