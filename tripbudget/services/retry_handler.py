"""
Retry handler with exponential backoff and jitter for outbound HTTP calls.
"""

import logging
import random
import threading
import time
from typing import Any, Callable, Optional

from tripbudget.services.error_classifier import ErrorClassifier

logger = logging.getLogger(__name__)


class RetryExhaustedException(Exception):
    """Raised when all retry attempts have been exhausted."""

    pass


class RetryHandler:
    """
    Retries a callable on transient errors.

    Features:
    - Exponential backoff with a cap and random jitter
    - Retry decision delegated to ErrorClassifier (429, 5xx, network errors)
    - Thread-safe statistics
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2,
        jitter_factor: float = 0.1,
        retry_condition: Optional[Callable[[Exception], bool]] = None,
    ):
        """
        Initialize retry handler.

        Args:
            max_retries: Maximum number of retry attempts
            base_delay: Base delay for exponential backoff (seconds)
            max_delay: Maximum delay between retries (seconds)
            exponential_base: Base for exponential backoff calculation
            jitter_factor: Factor for random jitter (0.0 to 1.0)
            retry_condition: Custom function to decide whether to retry
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter_factor = jitter_factor
        self.error_classifier = ErrorClassifier()
        self.retry_condition = retry_condition or self.error_classifier.is_retryable

        self._total_calls = 0
        self._total_retries = 0
        self._total_failures = 0
        self._lock = threading.Lock()

    def _calculate_delay(self, attempt: int) -> float:
        """
        Delay before the next attempt.

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds
        """
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
        jitter = random.uniform(-self.jitter_factor, self.jitter_factor) * delay
        return max(0, delay + jitter)

    def execute_with_retry(self, func: Callable, *args, **kwargs) -> Any:
        """
        Execute function with retry logic.

        Args:
            func: Function to execute
            *args: Positional arguments for function
            **kwargs: Keyword arguments for function

        Returns:
            Result of function execution

        Raises:
            RetryExhaustedException: If all retries are exhausted
            Exception: Original exception if not retryable
        """
        with self._lock:
            self._total_calls += 1

        func_name = getattr(func, "__name__", repr(func))

        for attempt in range(self.max_retries + 1):
            try:
                result = func(*args, **kwargs)
                if attempt > 0:
                    logger.info(
                        f"Function {func_name} succeeded after {attempt} retries"
                    )
                    with self._lock:
                        self._total_retries += attempt
                return result

            except Exception as e:
                if not self.retry_condition(e):
                    logger.debug(
                        f"Not retrying - condition not met: {type(e).__name__}"
                    )
                    raise

                if attempt >= self.max_retries:
                    logger.warning(
                        f"Max retries ({self.max_retries}) exceeded for {func_name}"
                    )
                    with self._lock:
                        self._total_retries += attempt
                        self._total_failures += 1
                    raise RetryExhaustedException(
                        f"Max retries ({self.max_retries}) exceeded. "
                        f"Last error: {type(e).__name__}: {e}"
                    ) from e

                delay = self._calculate_delay(attempt)
                logger.debug(
                    f"Retrying {func_name} in {delay:.2f}s "
                    f"(attempt {attempt + 1}/{self.max_retries + 1}). "
                    f"Error: {self.error_classifier.get_error_description(e)}"
                )
                time.sleep(delay)

    def get_retry_statistics(self) -> dict:
        with self._lock:
            return {
                "total_calls": self._total_calls,
                "total_retries": self._total_retries,
                "total_failures": self._total_failures,
            }

    def reset_statistics(self):
        with self._lock:
            self._total_calls = 0
            self._total_retries = 0
            self._total_failures = 0
