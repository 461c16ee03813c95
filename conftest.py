"""
Global pytest configuration and fixtures.
"""
import datetime as dt
from decimal import Decimal
from typing import Dict

import pytest

from tripbudget.config import TripBudgetConfig, reload_config
from tripbudget.config.logging_config import reset_logging
from tripbudget.models import ExpenseCategory
from tripbudget.services.trip_store import InMemoryTripStore


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        "ENVIRONMENT": "testing",
        "DEBUG": "false",
        "LOG_LEVEL": "DEBUG",
        "LOCATIONIQ_API_KEY": "test-locationiq-key",
        "GEOCODE_BASE_URL": "https://geocode.test/v1/search",
        "GEOCODE_TIMEOUT": "5",
        "MAX_RETRIES": "2",
        "RETRY_DELAY": "0.01",
    }


@pytest.fixture
def mock_env(test_env_vars, tmp_path, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("TRIP_DATA_FILE", str(tmp_path / "trips.json"))

    # Clear the global config to force reload with test values
    import tripbudget.config.settings

    tripbudget.config.settings._config = None

    yield test_env_vars

    tripbudget.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> TripBudgetConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def store():
    """Empty in-memory trip store."""
    return InMemoryTripStore()


@pytest.fixture
def dated_trip(store):
    """Ten day trip starting 2024-06-01."""
    return store.create_trip(
        {
            "user_id": "user-1",
            "name": "Portugal",
            "start_date": dt.date(2024, 6, 1),
            "end_date": dt.date(2024, 6, 10),
            "days": 10,
        }
    )


@pytest.fixture
def undated_trip(store):
    """Seven day trip planned by day numbers only."""
    return store.create_trip({"user_id": "user-1", "name": "Someday", "days": 7})


@pytest.fixture
def make_expense(store):
    """Factory that stores an expense on a trip."""

    def _make(trip, category=ExpenseCategory.OTHER, cost="10", **fields):
        return store.create_expense(
            {
                "trip_id": trip.id,
                "category": category,
                "description": fields.pop("description", "Item"),
                "cost": Decimal(cost),
                **fields,
            }
        )

    return _make


@pytest.fixture(autouse=True)
def clean_logging():
    """Drop handlers installed by CLI runs."""
    yield
    reset_logging()


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
