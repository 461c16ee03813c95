"""Structured logging utilities with context support."""

import functools
import logging
import threading
import uuid
from typing import Any, Callable, Dict, Optional, cast

# Thread-local storage for log context
_thread_local = threading.local()

# Field names whose values must never reach the logs
SENSITIVE_FIELDS = {
    "password",
    "token",
    "key",
    "secret",
    "credentials",
    "authorization",
}


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for one request."""
    return str(uuid.uuid4())


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently attached to log records."""
    return dict(getattr(_thread_local, "context", {}))


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the current context, or None if not set."""
    return get_log_context().get("correlation_id")


class LogContext:
    """
    Context manager adding structured fields to every log record in scope.

    Fields live in thread-local storage and are attached to records by
    ``_ContextFilter``. Nested contexts merge with, and then restore, the
    enclosing one.

    Example:
        with LogContext(trip_id=trip.id, correlation_id=generate_correlation_id()):
            logger.info("Reconciling lodging")
    """

    def __init__(self, **kwargs):
        self.fields = kwargs
        self.previous_context: Optional[Dict[str, Any]] = None

    def __enter__(self):
        if not hasattr(_thread_local, "context"):
            _thread_local.context = {}

        self.previous_context = _thread_local.context.copy()
        _thread_local.context.update(self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.previous_context is not None:
            _thread_local.context = self.previous_context
        else:
            _thread_local.context = {}


class _ContextFilter(logging.Filter):
    """Logging filter that copies context fields onto log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_log_context().items():
            setattr(record, key, value)
        return True


def sanitize_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Redact sensitive values in a dictionary, recursing into nested dicts.

    Args:
        data: Dictionary to sanitize (e.g. outbound request parameters)

    Returns:
        Copy of the dictionary with sensitive values replaced

    Example:
        >>> sanitize_sensitive_data({"key": "abc123", "q": "Lisbon"})
        {'key': '***REDACTED***', 'q': 'Lisbon'}
    """
    if not isinstance(data, dict):
        return data

    sanitized: Dict[str, Any] = {}

    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_FIELDS):
            sanitized[key] = "***REDACTED***" if value is not None else None
        elif isinstance(value, dict):
            sanitized[key] = sanitize_sensitive_data(cast(Dict[str, Any], value))
        else:
            sanitized[key] = value

    return sanitized


def log_function_call(
    func: Optional[Callable] = None, *, include_args: bool = False, level: str = "DEBUG"
) -> Callable:
    """
    Decorator to log function entry, exit and exceptions.

    Args:
        func: Function to decorate (when used without arguments)
        include_args: Whether to include function arguments in logs
        level: Log level to use for entry/exit messages

    Returns:
        Decorated function

    Example:
        @log_function_call(level="INFO")
        def reconcile(self, trip_id, request):
            ...
    """

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(f.__module__)
            log_level = getattr(logging, level.upper())

            if include_args:
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                signature = ", ".join(args_repr + kwargs_repr)
                logger.log(log_level, f"Entering {f.__name__} with args: {signature}")
            else:
                logger.log(log_level, f"Entering {f.__name__}")

            try:
                result = f(*args, **kwargs)
                logger.log(log_level, f"Exiting {f.__name__}")
                return result
            except Exception as e:
                logger.error(
                    f"Exception in {f.__name__}: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise

        return wrapper

    if func is None:
        return decorator
    return decorator(func)
