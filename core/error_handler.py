"""Decorators for consistent error handling and timing logs."""
from __future__ import annotations

import functools
import time
from typing import Callable, TypeVar

from loguru import logger

from core.result import Success, Failure, Result

T = TypeVar('T')


def as_result(func: Callable[..., T]) -> Callable[..., Result[T, Exception]]:
    """Decorator to convert function output to Result type.

    Success values are wrapped in Success, exceptions in Failure.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Result[T, Exception]:
        try:
            return Success(func(*args, **kwargs))
        except Exception as e:
            logger.error(f"{func.__name__} failed: {e}")
            return Failure(e)
    return wrapper


def log_execution_time(logger_instance=logger, level: str = "DEBUG"):
    """Decorator to log function execution time.

    Args:
        logger_instance: Logger to use
        level: Log level (DEBUG, INFO, etc.)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start_time
                log_func = getattr(logger_instance, level.lower(), logger_instance.debug)
                log_func(f"{func.__name__} executed in {elapsed:.3f}s")
        return wrapper
    return decorator


def retry_on_failure(max_retries: int = 3, delay: float = 1.0, exceptions: tuple = (Exception,)):
    """Decorator to retry function execution on failure.

    Only exceptions listed in ``exceptions`` are retried; anything else
    propagates immediately. After the last attempt the final error is re-raised.

    Args:
        max_retries: Maximum number of attempts (at least one is always made)
        delay: Delay in seconds between attempts
        exceptions: Tuple of exception types to catch and retry
    """
    attempts = max(1, max_retries)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None
            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt < attempts:
                        logger.warning(f"{func.__name__} failed (attempt {attempt}/{attempts}): {e}")
                        if delay > 0:
                            time.sleep(delay)
                    else:
                        logger.error(f"{func.__name__} failed after {attempts} attempts: {e}")
            raise last_exception
        return wrapper
    return decorator
