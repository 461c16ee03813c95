"""
Error classification for outbound HTTP calls (geocoding).
"""

import logging
import socket
from enum import Enum
from typing import Dict, Optional

import requests.exceptions

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Classification of error types."""

    RETRYABLE = "retryable"  # 429, 5xx, network errors
    FATAL = "fatal"  # other 4xx
    UNKNOWN = "unknown"


def _status_code(exception: Exception) -> Optional[int]:
    response = getattr(exception, "response", None)
    return getattr(response, "status_code", None)


class ErrorClassifier:
    """
    Classifies exceptions raised by ``requests`` into retryable and fatal.

    Keeps simple counters so callers can report how often each kind occurred.
    """

    def __init__(self):
        self._stats: Dict[str, int] = {
            "retryable": 0,
            "fatal": 0,
            "unknown": 0,
            "total": 0,
        }

    def classify(self, exception: Exception) -> ErrorType:
        """
        Classify an exception.

        Args:
            exception: The exception to classify

        Returns:
            ErrorType classification
        """
        self._stats["total"] += 1
        error_type = self._classify(exception)
        self._stats[error_type.value] += 1
        return error_type

    def _classify(self, exception: Exception) -> ErrorType:
        if isinstance(exception, requests.exceptions.HTTPError):
            status_code = _status_code(exception)
            if status_code is None:
                return ErrorType.UNKNOWN
            if status_code == 429 or 500 <= status_code < 600:
                return ErrorType.RETRYABLE
            if 400 <= status_code < 500:
                return ErrorType.FATAL

        if isinstance(
            exception,
            (
                socket.timeout,
                requests.exceptions.ConnectionError,
                requests.exceptions.Timeout,
            ),
        ):
            return ErrorType.RETRYABLE

        return ErrorType.UNKNOWN

    def is_retryable(self, exception: Exception) -> bool:
        return self.classify(exception) == ErrorType.RETRYABLE

    def get_error_description(self, exception: Exception) -> str:
        """
        Human-readable description of an exception for log messages.

        Args:
            exception: The exception to describe

        Returns:
            Description string
        """
        error_type = self.classify(exception)
        status_code = _status_code(exception)

        if status_code == 429:
            return f"Rate limit error (HTTP 429) - {error_type.value}"
        if status_code is not None and 500 <= status_code < 600:
            return f"Server error (HTTP {status_code}) - {error_type.value}"
        if status_code is not None and 400 <= status_code < 500:
            return f"Client error (HTTP {status_code}) - {error_type.value}"
        if isinstance(exception, requests.exceptions.Timeout):
            return f"Request timed out - {error_type.value}"
        if isinstance(exception, requests.exceptions.ConnectionError):
            return f"Connection error - {error_type.value}"

        return f"{type(exception).__name__}: {exception} - {error_type.value}"

    def get_statistics(self) -> Dict[str, int]:
        return dict(self._stats)
