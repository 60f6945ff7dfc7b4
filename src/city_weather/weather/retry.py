"""Bounded retry with linear backoff for async operations."""

import asyncio
import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    op: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 200,
    *,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
) -> T:
    """Await an operation, retrying on failure.

    After the n-th failed attempt the wrapper waits base_delay_ms * n before
    trying again. There is no wait after the final attempt.

    Args:
        op: Zero-argument coroutine function producing the result
        max_attempts: Total number of attempts
        base_delay_ms: Backoff step in milliseconds
        retry_on: Exception types that trigger another attempt
        sleep: Coroutine used to wait between attempts

    Returns:
        Result of the first successful attempt

    Raises:
        ValueError: If max_attempts is less than 1
        Exception: The last error once all attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    last_error = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await op()
        except retry_on as e:
            last_error = e
            logger.warning(f"Attempt {attempt}/{max_attempts} failed: {e}")
            if attempt < max_attempts:
                await sleep(base_delay_ms * attempt / 1000)

    raise last_error
