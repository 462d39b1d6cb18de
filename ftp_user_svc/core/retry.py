"""
Fixed-delay retry helper.

Used to open database connections: a bounded number of attempts with the
same pause between each, no exponential growth and no jitter.
"""

import functools
import logging
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)


def retry_with_fixed_delay(
    max_attempts: int,
    delay: float,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
):
    """
    Decorator for retrying a function with a fixed delay between attempts.

    Args:
        max_attempts: Total number of attempts, including the first one
        delay: Seconds to sleep between consecutive attempts
        exceptions: Exceptions that trigger another attempt. Anything else
            propagates immediately.

    Returns:
        Decorated function. When every attempt fails the exception from the
        last attempt is re-raised.

    Example:
        @retry_with_fixed_delay(max_attempts=10, delay=5.0)
        def open_engine():
            ...

    Note:
        - No sleep follows the final attempt
        - Each failed attempt is logged at WARNING level
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)

                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error(
                            f"{func.__name__} failed after {max_attempts} attempts: {e}"
                        )
                        raise

                    logger.warning(
                        f"{func.__name__} attempt {attempt}/{max_attempts} "
                        f"failed with {type(e).__name__}: {e}. "
                        f"Retrying in {delay:.2f}s..."
                    )
                    time.sleep(delay)

        return wrapper
    return decorator
