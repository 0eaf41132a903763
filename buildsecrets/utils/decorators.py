"""Reusable decorators for the application."""

import functools
import time
from typing import Callable

from buildsecrets.utils.logging import get_logger

logger = get_logger(__name__)


def log_time(func: Callable) -> Callable:
    """
    Log execution time of a function, whether it returns or raises.

    Usage:
        @log_time
        def slow_function():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            logger.info(f"{func.__name__} completed in {elapsed:.3f}s")

    return wrapper
