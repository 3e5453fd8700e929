"""Retry configuration and logic for provider calls."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .errors import ProviderCallError, RetryableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Maximum number of retry attempts for transient errors.
        base_delay: Initial delay in seconds before first retry.
        max_delay: Maximum delay in seconds between retries.
        exponential_base: Base for exponential backoff calculation.
        enable_batch_fallback: Whether to reduce batch size on "too large" errors.
        min_batch_size: Minimum batch size when reducing due to provider limits.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    enable_batch_fallback: bool = True
    min_batch_size: int = 1

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be at least 0")
        if self.min_batch_size < 1:
            raise ValueError("min_batch_size must be at least 1")

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after the given zero-based failed attempt."""
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


async def with_retry(operation: Callable[[], Awaitable[T]], config: RetryConfig) -> T:
    """
    Execute an operation with exponential backoff retry.

    Only RetryableError is retried. NonRetryableError and BatchSizeError
    propagate on the first occurrence.

    Args:
        operation: Zero-argument async callable to execute
        config: Retry configuration

    Returns:
        Result of the operation

    Raises:
        ProviderCallError: If all retries are exhausted
    """
    last_error: Optional[Exception] = None

    for attempt in range(config.max_retries + 1):
        try:
            return await operation()
        except RetryableError as e:
            last_error = e

            if attempt == config.max_retries:
                logger.error(f"All {config.max_retries + 1} attempts failed. Last error: {e}")
                raise ProviderCallError(
                    f"Failed after {config.max_retries + 1} attempts: {e}"
                ) from e

            delay = config.delay_for(attempt)
            logger.warning(f"Attempt {attempt + 1} failed: {e}. Retrying in {delay:.1f}s...")

            await asyncio.sleep(delay)

    # Only reachable with a negative max_retries
    raise ProviderCallError(f"Unexpected retry loop exit: {last_error}")


class RetryingCaller:
    """
    Invokes remote operations under a shared retry policy.

    The embedding client depends on this object rather than on
    with_retry directly so that tests and callers can swap the policy.
    """

    def __init__(self, config: Optional[RetryConfig] = None):
        self._config = config or RetryConfig()

    @property
    def config(self) -> RetryConfig:
        return self._config

    async def call(self, operation: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Call ``operation(*args, **kwargs)`` and retry it on transient failure."""
        return await with_retry(lambda: operation(*args, **kwargs), self._config)
