"""Retry utilities for analysis calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRIABLE_MARKERS = ("429", "rate limit", "timeout", "connection", "503", "502")


def is_retriable_error(error: Exception) -> bool:
    """Check whether an error looks transient (rate limit, timeout, gateway)."""
    error_str = str(error).lower()
    return any(marker in error_str for marker in RETRIABLE_MARKERS)


async def with_exponential_backoff(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_retries: int = 5,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    **kwargs: Any,
) -> T:
    """
    Execute a function with exponential backoff retry logic.

    Handles rate limiting (429) and transient errors from the model provider.

    Args:
        func: The async function to execute
        *args: Positional arguments to pass to func
        max_retries: Maximum number of attempts
        initial_delay: Initial delay in seconds before first retry
        max_delay: Maximum delay in seconds between retries
        **kwargs: Keyword arguments to pass to func

    Returns:
        The result of the function call

    Raises:
        The last exception if all retries are exhausted
    """
    last_exception: Exception | None = None

    for attempt in range(max_retries):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            last_exception = e

            if not is_retriable_error(e):
                logger.error(f"Non-retriable error: {e}")
                raise

            if attempt < max_retries - 1:
                delay = min(initial_delay * (2**attempt), max_delay)

                logger.warning(
                    f"Attempt {attempt + 1}/{max_retries} failed with {type(e).__name__}: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )

                await asyncio.sleep(delay)
            else:
                logger.error(
                    f"All {max_retries} retry attempts exhausted. Last error: {e}"
                )

    if last_exception is None:
        raise ValueError("max_retries must be at least 1")
    raise last_exception
