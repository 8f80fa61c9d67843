"""
Exponential backoff for outbound API calls that may be rate limited.
"""

import logging
from asyncio import sleep
from typing import Any, Awaitable, Callable, Optional

import openai

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 7
DEFAULT_DELAY = 1.5  # seconds


class RetryExhaustedError(Exception):
    """Raised when every attempt was rejected with a rate limit."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Rate limited on all {attempts} attempts: {last_error}")


def is_rate_limit_error(error: BaseException) -> bool:
    if isinstance(error, openai.RateLimitError):
        return True
    status_code = getattr(error, "status_code", None) or getattr(error, "status", None)
    return status_code == 429


async def with_exponential_backoff(
    fn: Callable[[], Awaitable[Any]],
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_DELAY,
    operation: Optional[str] = None,
) -> Any:
    """
    Await fn(), retrying on rate limit errors with a doubling delay.

    Args:
        fn: Zero-argument callable returning an awaitable
        retries: Maximum number of attempts
        delay: Seconds to wait after the first rate limited attempt
        operation: Label used in log messages

    Returns:
        The result of the first successful attempt

    Raises:
        RetryExhaustedError: every attempt was rate limited
        Exception: any non rate limit error, unchanged, on first occurrence
    """
    if retries < 1:
        raise ValueError("retries must be at least 1")

    label = operation or getattr(fn, "__name__", "operation")

    for attempt in range(retries):
        logger.debug(f"{label}: attempt {attempt + 1}/{retries}")
        try:
            return await fn()
        except Exception as e:
            if not is_rate_limit_error(e):
                logger.error(f"{label} failed on attempt {attempt + 1}: {e}")
                raise

            if attempt == retries - 1:
                logger.error(f"{label} still rate limited after {retries} attempts")
                raise RetryExhaustedError(retries, e) from e

            logger.warning(
                f"{label} rate limited (attempt {attempt + 1}/{retries}), "
                f"retrying in {delay:g}s"
            )
            await sleep(delay)
            delay *= 2


def bind_backoff(retries: int = DEFAULT_RETRIES, delay: float = DEFAULT_DELAY):
    """Return call(fn, operation) applying one fixed retry policy."""

    async def call(fn: Callable[[], Awaitable[Any]], operation: Optional[str] = None) -> Any:
        return await with_exponential_backoff(fn, retries=retries, delay=delay, operation=operation)

    return call
