"""
Retry with exponential backoff for transient database errors

Used for establishing connections only. Statements inside a run are never
retried: a failed run is fixed at the source and run again.

Usage:
    @retry_database_operation(max_retries=3, base_delay=1.0)
    def connect(config):
        return psycopg2.connect(**config)
"""

import logging
import random
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)

RETRYABLE_PATTERNS = (
    "connection refused",
    "connection reset",
    "connection timed out",
    "could not connect",
    "timeout expired",
    "server closed the connection",
    "the database system is starting up",
    "too many connections",
    "could not translate host name",
)

RETRYABLE_EXCEPTION_NAMES = (
    "operationalerror",
    "interfaceerror",
    "connectionerror",
    "timeouterror",
)


def is_retryable_db_exception(exception: Exception) -> bool:
    """
    Determine if a database exception is transient

    Args:
        exception: The exception to check

    Returns:
        True for connection and timeout style errors, False otherwise
    """
    exception_str = str(exception).lower()
    exception_type = type(exception).__name__.lower()

    if any(pattern in exception_str for pattern in RETRYABLE_PATTERNS):
        return True

    return exception_type in RETRYABLE_EXCEPTION_NAMES


def compute_delay(attempt: int, base_delay: float, max_delay: float = 60.0) -> float:
    """Exponential backoff with +/-25% jitter, never below 0.1s"""
    delay = min(base_delay * (2.0 ** attempt), max_delay)
    jitter_amount = delay * 0.25
    delay = delay + random.uniform(-jitter_amount, jitter_amount)
    return max(0.1, delay)


def retry_database_operation(
    max_retries: int = 3,
    base_delay: float = 1.0,
    on_retry: Callable[[int, Exception, float], None] | None = None,
):
    """
    Decorator retrying only transient database errors

    Non-retryable errors (bad credentials, unknown database) fail immediately.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        base_delay: Initial delay in seconds (default: 1.0)
        on_retry: Callback function(attempt, exception, delay) called on each retry
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            func_name = getattr(func, "__name__", "function")

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not is_retryable_db_exception(e):
                        logger.error(
                            f"Non-retryable database error in {func_name}: "
                            f"{type(e).__name__}: {e}"
                        )
                        raise

                    if attempt == max_retries:
                        logger.error(
                            f"Max retries ({max_retries}) exceeded for {func_name}: "
                            f"{type(e).__name__}: {e}"
                        )
                        raise

                    delay = compute_delay(attempt, base_delay)

                    logger.warning(
                        f"Retryable database error in {func_name} "
                        f"(attempt {attempt + 1}/{max_retries}): "
                        f"{type(e).__name__}: {e}. Retrying in {delay:.2f}s..."
                    )

                    if on_retry:
                        try:
                            on_retry(attempt + 1, e, delay)
                        except Exception as callback_error:
                            logger.error(f"Error in retry callback: {callback_error}")

                    time.sleep(delay)

            raise RuntimeError(f"Unexpected error in retry logic for {func_name}")

        return wrapper
    return decorator
