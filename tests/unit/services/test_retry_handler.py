"""
Unit tests for retry handler with exponential backoff.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from tripbudget.services.retry_handler import RetryExhaustedException, RetryHandler


def http_error(status):
    return requests.exceptions.HTTPError(
        f"HTTP {status}", response=Mock(status_code=status)
    )


class TestRetryHandler:
    """Test cases for RetryHandler."""

    @pytest.fixture
    def retry_handler(self):
        """RetryHandler instance with test configuration."""
        return RetryHandler(
            max_retries=3,
            base_delay=0.1,
            max_delay=1.0,
            exponential_base=2,
            jitter_factor=0.1,
        )

    @pytest.fixture(autouse=True)
    def no_sleep(self):
        with patch("tripbudget.services.retry_handler.time.sleep") as mock_sleep:
            yield mock_sleep

    def test_initialization_with_defaults(self):
        """Test retry handler initializes with default values."""
        handler = RetryHandler()

        assert handler.max_retries == 3
        assert handler.base_delay == 1.0
        assert handler.max_delay == 30.0
        assert handler.exponential_base == 2
        assert handler.jitter_factor == 0.1

    def test_successful_execution_no_retry(self, retry_handler, no_sleep):
        """Test successful execution without retries."""
        mock_func = Mock(return_value="success")

        result = retry_handler.execute_with_retry(mock_func, "Lisbon", limit=1)

        assert result == "success"
        mock_func.assert_called_once_with("Lisbon", limit=1)
        no_sleep.assert_not_called()

    def test_retry_on_rate_limit_error(self, retry_handler, no_sleep):
        """Test retry behavior on rate limit (429) errors."""
        mock_func = Mock(side_effect=[http_error(429), http_error(503), "success"])

        result = retry_handler.execute_with_retry(mock_func)

        assert result == "success"
        assert mock_func.call_count == 3
        assert no_sleep.call_count == 2
        assert retry_handler.get_retry_statistics()["total_retries"] == 2

    def test_no_retry_on_client_error(self, retry_handler):
        """Test non-retryable errors are raised immediately."""
        mock_func = Mock(side_effect=http_error(403))

        with pytest.raises(requests.exceptions.HTTPError):
            retry_handler.execute_with_retry(mock_func)

        mock_func.assert_called_once()

    def test_retries_exhausted(self, retry_handler):
        """Test RetryExhaustedException after max retries."""
        mock_func = Mock(side_effect=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(RetryExhaustedException) as exc_info:
            retry_handler.execute_with_retry(mock_func)

        assert mock_func.call_count == 4
        assert "ConnectionError" in str(exc_info.value)
        assert retry_handler.get_retry_statistics() == {
            "total_calls": 1,
            "total_retries": 3,
            "total_failures": 1,
        }

    def test_custom_retry_condition(self, no_sleep):
        """Test a custom retry condition overrides classification."""
        handler = RetryHandler(
            max_retries=1, retry_condition=lambda e: isinstance(e, KeyError)
        )
        mock_func = Mock(side_effect=[KeyError("lat"), "ok"])

        assert handler.execute_with_retry(mock_func) == "ok"

    def test_delay_grows_and_is_capped(self, retry_handler):
        """Test exponential backoff stays within jitter bounds and the cap."""
        with patch(
            "tripbudget.services.retry_handler.random.uniform", return_value=0
        ):
            delays = [retry_handler._calculate_delay(a) for a in range(6)]

        assert delays[:4] == pytest.approx([0.1, 0.2, 0.4, 0.8])
        assert delays[4] == delays[5] == 1.0

    def test_reset_statistics(self, retry_handler):
        retry_handler.execute_with_retry(Mock(return_value=1))

        retry_handler.reset_statistics()

        assert retry_handler.get_retry_statistics()["total_calls"] == 0
