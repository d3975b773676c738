"""Bounded retry with a fixed delay between attempts."""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    stop_after_attempt,
    wait_fixed,
)

from rocketchat_webhook.core.exceptions import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry(
    operation: Callable[[], Awaitable[T]],
    retries: int,
    delay: float,
    on_retry: Optional[Callable[[BaseException], None]] = None,
) -> T:
    """Run an operation until it succeeds or the retry budget is spent.

    The operation runs once, then up to ``retries`` more times, sleeping
    ``delay`` seconds between attempts. The sleep only suspends the calling
    task.

    Args:
        operation: Zero-argument coroutine function; raising means failure
        retries: Attempts allowed after the first one
        delay: Seconds to wait before each retry
        on_retry: Optional callback invoked with the error before each retry

    Returns:
        Result of the first successful attempt

    Raises:
        RetryExhaustedError: With the retry count and the last error once
            all retries + 1 attempts failed
        ValueError: If retries is negative
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")

    def _before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        logger.warning(f"retrying after error: {error}")
        if on_retry is not None:
            on_retry(error)

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(retries + 1),
            wait=wait_fixed(delay),
            before_sleep=_before_sleep,
        ):
            with attempt:
                result = await operation()
    except RetryError as e:
        last_error = e.last_attempt.exception()
        raise RetryExhaustedError(retries, last_error) from last_error

    return result
