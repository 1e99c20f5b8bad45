"""
Retry Handler Module

Implements bounded retry with exponential backoff for the Claude flow.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from cache_proxy.common.errors import UpstreamConnectionError, UpstreamTimeoutError
from cache_proxy.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Upstream statuses considered transient
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class RetryHandler:
    """
    Retry Handler

    Implements the following retry logic:
    - Up to `max_attempts` attempts, strictly sequential
    - Before retry n (n >= 1): sleep min(initial_delay_ms * 2^(n-1), max_delay_ms)
    - Retry only failures carrying an upstream status in RETRYABLE_STATUS_CODES
    - Timeouts and connection errors carry no status; they are retried only
      when `retry_transport_errors` is enabled
    - Anything else propagates immediately
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay_ms: int = 1000,
        max_delay_ms: int = 10000,
        retry_transport_errors: bool = False,
    ):
        """
        Initialize Handler

        Args:
            max_attempts: Total attempts including the first (at least 1)
            initial_delay_ms: Delay before the first retry (ms)
            max_delay_ms: Delay ceiling (ms)
            retry_transport_errors: Also retry timeouts and connection errors
        """
        self.max_attempts = max(1, max_attempts)
        self.initial_delay_ms = initial_delay_ms
        self.max_delay_ms = max_delay_ms
        self.retry_transport_errors = retry_transport_errors

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryHandler":
        return cls(
            max_attempts=settings.RETRY_MAX,
            initial_delay_ms=settings.RETRY_DELAY,
            max_delay_ms=settings.RETRY_MAX_DELAY,
            retry_transport_errors=settings.RETRY_TRANSPORT_ERRORS,
        )

    def get_delay_ms(self, retry: int) -> int:
        """
        Backoff before the given retry (1-based)

        With initial=1000 and max=10000: 1000, 2000, 4000, 8000, 10000, 10000, ...
        """
        delay = self.initial_delay_ms * (2 ** (retry - 1))
        return min(delay, self.max_delay_ms)

    def is_retryable(self, exc: BaseException) -> bool:
        """Whether a failed attempt may be retried"""
        status: Optional[int] = getattr(exc, "upstream_status", None)
        if status is not None:
            return status in RETRYABLE_STATUS_CODES
        if isinstance(exc, (UpstreamTimeoutError, UpstreamConnectionError)):
            return self.retry_transport_errors
        return False

    async def execute(self, attempt_fn: Callable[[], Awaitable[T]]) -> T:
        """
        Execute with Retry

        Args:
            attempt_fn: Performs one attempt; raises on failure

        Returns:
            The first successful attempt's result

        Raises:
            The last attempt's exception once the budget is spent, or the
            first non-retryable exception
        """
        last_error: Optional[Exception] = None

        for attempt in range(self.max_attempts):
            if attempt > 0:
                delay_ms = self.get_delay_ms(attempt)
                logger.info("Retry %s/%s after %sms", attempt, self.max_attempts, delay_ms)
                await asyncio.sleep(delay_ms / 1000)

            try:
                return await attempt_fn()
            except Exception as e:
                last_error = e
                if not self.is_retryable(e) or attempt == self.max_attempts - 1:
                    raise
                logger.warning("Attempt %s/%s failed: %s", attempt + 1, self.max_attempts, e)

        # max_attempts >= 1, so the loop either returned or raised
        raise last_error  # type: ignore[misc]
