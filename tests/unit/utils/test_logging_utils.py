"""Tests for structured logging utilities."""

import logging
import uuid

import pytest

from tripbudget.utils.logging_utils import (
    LogContext,
    _ContextFilter,
    generate_correlation_id,
    get_correlation_id,
    get_log_context,
    log_function_call,
    sanitize_sensitive_data,
)


class TestGenerateCorrelationId:
    """Test correlation ID generation."""

    def test_is_uuid(self):
        uuid.UUID(generate_correlation_id())

    def test_unique(self):
        assert len({generate_correlation_id() for _ in range(50)}) == 50


class TestLogContext:
    """Test LogContext context manager."""

    def test_fields_set_and_restored(self):
        assert get_correlation_id() is None

        with LogContext(correlation_id="abc", trip_id="t1"):
            assert get_correlation_id() == "abc"
            assert get_log_context()["trip_id"] == "t1"

        assert get_log_context() == {}

    def test_nested_contexts_merge(self):
        with LogContext(trip_id="t1"):
            with LogContext(day_number=3):
                assert get_log_context() == {"trip_id": "t1", "day_number": 3}
            assert get_log_context() == {"trip_id": "t1"}

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with LogContext(trip_id="t1"):
                raise RuntimeError("boom")

        assert get_log_context() == {}

    def test_filter_copies_fields_onto_records(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        with LogContext(trip_id="t1"):
            assert _ContextFilter().filter(record) is True

        assert record.trip_id == "t1"


class TestSanitizeSensitiveData:
    """Test redaction of secrets."""

    def test_redacts_api_key(self):
        params = {"key": "secret-key", "q": "Lisbon", "format": "json"}

        assert sanitize_sensitive_data(params) == {
            "key": "***REDACTED***",
            "q": "Lisbon",
            "format": "json",
        }
        assert params["key"] == "secret-key"

    def test_nested_and_case_insensitive(self):
        data = {"auth": {"Authorization": "Bearer x", "user": "me"}, "API_TOKEN": None}

        assert sanitize_sensitive_data(data) == {
            "auth": {"Authorization": "***REDACTED***", "user": "me"},
            "API_TOKEN": None,
        }

    def test_non_dict_returned_unchanged(self):
        assert sanitize_sensitive_data(["key"]) == ["key"]


class TestLogFunctionCall:
    """Test the log_function_call decorator."""

    def test_logs_entry_and_exit(self, caplog):
        @log_function_call
        def add(a, b):
            return a + b

        with caplog.at_level(logging.DEBUG):
            assert add(1, 2) == 3

        assert "Entering add" in caplog.text
        assert "Exiting add" in caplog.text

    def test_include_args_and_level(self, caplog):
        @log_function_call(include_args=True, level="INFO")
        def greet(name, punctuation="!"):
            return f"Hello {name}{punctuation}"

        with caplog.at_level(logging.INFO):
            greet("Lisbon", punctuation="?")

        assert "Entering greet with args: 'Lisbon', punctuation='?'" in caplog.text

    def test_exceptions_logged_and_reraised(self, caplog):
        @log_function_call
        def fail():
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            fail()

        assert "Exception in fail: ValueError: bad input" in caplog.text

    def test_preserves_metadata(self):
        @log_function_call
        def documented():
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
