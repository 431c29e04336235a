"""
Retry policy for outbound calls.

Wraps tenacity's AsyncRetrying in a small policy object so attempt count,
backoff base and the sleep function are explicit and injectable in tests.

Backoff: the wait after failed attempt ``n`` is ``base_delay * 2 ** (n - 1)``.
After the last attempt the final exception is re-raised unchanged.

Dependencies: tenacity
System role: Reusable retry-with-backoff for the embedding provider
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential-backoff retry policy.

    Attributes:
        max_attempts: Total attempts, first try included
        base_delay: Backoff base in seconds
        retry_on: Exception types that trigger another attempt
        sleep: Coroutine used to wait between attempts
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    retry_on: tuple[type[BaseException], ...] = (Exception,)
    sleep: SleepFn = field(default=asyncio.sleep, compare=False)

    def delay_for(self, attempt: int) -> float:
        """Backoff delay after failed attempt number ``attempt`` (1-based)."""
        return self.base_delay * 2 ** (attempt - 1)

    def _log_before_sleep(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"Attempt {retry_state.attempt_number}/{self.max_attempts} failed, retrying",
            extra={
                "attempt": retry_state.attempt_number,
                "next_delay_s": retry_state.next_action.sleep if retry_state.next_action else None,
                "error_type": type(exc).__name__ if exc else None,
                "error_msg": str(exc) if exc else None,
            },
        )

    async def call(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``operation`` until it succeeds or attempts are exhausted.

        Args:
            operation: Zero-argument coroutine factory

        Returns:
            The operation's result

        Raises:
            The last exception raised by ``operation``
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=2, min=0),
            retry=retry_if_exception_type(self.retry_on),
            sleep=self.sleep,
            before_sleep=self._log_before_sleep,
            reraise=True,
        )
        return await retrying(operation)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: SleepFn = asyncio.sleep,
) -> T:
    """
    Run ``operation`` with exponential backoff.

    Usage:
        vector = await with_retry(lambda: provider.request(text), max_attempts=3)
    """
    policy = RetryPolicy(max_attempts=max_attempts, base_delay=base_delay, sleep=sleep)
    return await policy.call(operation)
