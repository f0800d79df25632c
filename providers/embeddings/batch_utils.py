"""Batching and retry utilities for embedding providers."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from core.exceptions import ProviderError

T = TypeVar('T')

RETRYABLE_STATUS_CODES = frozenset({408, 409, 429, 500, 502, 503, 504})


def split_into_batches(items: list[T], batch_size: int) -> list[list[T]]:
    """Split items into consecutive groups of at most batch_size.

    Args:
        items: Items to split
        batch_size: Maximum group size (values below 1 are treated as 1)

    Returns:
        List of batches preserving input order
    """
    size = max(1, batch_size)
    return [items[i:i + size] for i in range(0, len(items), size)]


def is_retryable(error: Exception) -> bool:
    """Check if a provider error is worth re-issuing the same request for."""
    if isinstance(error, ProviderError):
        return error.status_code is None or error.status_code in RETRYABLE_STATUS_CODES
    return False


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int,
    retry_delay: float,
    sleep: Callable[[float], Awaitable[None]],
    description: str = "request",
) -> T:
    """Run an async operation with bounded linear backoff.

    Only retryable provider errors are re-issued; once retries are exhausted
    the last error propagates unchanged.

    Args:
        operation: Zero-argument coroutine factory
        max_retries: Extra attempts after the first (0 disables retry)
        retry_delay: Base delay, multiplied by the attempt number
        sleep: Awaitable sleep function
        description: Label for log messages

    Returns:
        The operation's result
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except ProviderError as e:
            if attempt >= max_retries or not is_retryable(e):
                raise
            attempt += 1
            delay = retry_delay * attempt
            logger.warning(
                f"{description} failed ({e.reason}), retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{max_retries + 1})"
            )
            await sleep(delay)
