"""
Retry Handler Unit Tests
"""

from unittest.mock import AsyncMock, patch

import pytest

from cache_proxy.common.errors import (
    RequestParseError,
    UpstreamConnectionError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)
from cache_proxy.domain.response import ForwardResult
from cache_proxy.services.retry_handler import RetryHandler


def _status_error(status: int) -> UpstreamStatusError:
    return UpstreamStatusError(ForwardResult(status_code=status, body=b"{}"))


class TestBackoff:
    """Backoff Delay Tests"""

    def test_exponential_sequence_is_clamped(self):
        handler = RetryHandler(max_attempts=7, initial_delay_ms=1000, max_delay_ms=10000)
        delays = [handler.get_delay_ms(retry) for retry in range(1, 7)]
        assert delays == [1000, 2000, 4000, 8000, 10000, 10000]

    def test_ceiling_below_initial(self):
        handler = RetryHandler(initial_delay_ms=5000, max_delay_ms=100)
        assert handler.get_delay_ms(1) == 100

    def test_from_settings(self, settings_factory):
        settings = settings_factory(RETRY_MAX=5, RETRY_DELAY=200, RETRY_MAX_DELAY=700)
        handler = RetryHandler.from_settings(settings)
        assert handler.max_attempts == 5
        assert [handler.get_delay_ms(n) for n in (1, 2, 3)] == [200, 400, 700]


class TestRetryable:
    """Retry Predicate Tests"""

    @pytest.mark.parametrize("status", [408, 429, 500, 502, 503, 504])
    def test_transient_statuses(self, status):
        assert RetryHandler().is_retryable(_status_error(status)) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 413, 501])
    def test_other_statuses(self, status):
        assert RetryHandler().is_retryable(_status_error(status)) is False

    def test_transport_errors_not_retried_by_default(self):
        handler = RetryHandler()
        assert handler.is_retryable(UpstreamTimeoutError()) is False
        assert handler.is_retryable(UpstreamConnectionError()) is False

    def test_transport_errors_opt_in(self):
        handler = RetryHandler(retry_transport_errors=True)
        assert handler.is_retryable(UpstreamTimeoutError()) is True
        assert handler.is_retryable(UpstreamConnectionError()) is True
        assert handler.is_retryable(RequestParseError()) is False

    def test_unrelated_errors(self):
        assert RetryHandler().is_retryable(ValueError("boom")) is False


class TestExecute:
    """Retry Loop Tests"""

    def setup_method(self):
        """Setup before test"""
        self.handler = RetryHandler(max_attempts=3, initial_delay_ms=1000, max_delay_ms=10000)

    @pytest.mark.asyncio
    async def test_success_on_first_try(self):
        attempt_fn = AsyncMock(return_value="ok")
        with patch("cache_proxy.services.retry_handler.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await self.handler.execute(attempt_fn) == "ok"

        assert attempt_fn.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retry_then_success(self):
        attempt_fn = AsyncMock(side_effect=[_status_error(503), _status_error(429), "ok"])
        with patch("cache_proxy.services.retry_handler.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await self.handler.execute(attempt_fn) == "ok"

        assert attempt_fn.await_count == 3
        # Sleeps only before retries, in seconds
        assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_stops_after_max_attempts_and_raises_last(self):
        errors = [_status_error(500), _status_error(502), _status_error(504)]
        attempt_fn = AsyncMock(side_effect=errors)
        with patch("cache_proxy.services.retry_handler.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(UpstreamStatusError) as exc_info:
                await self.handler.execute(attempt_fn)

        assert exc_info.value is errors[-1]
        assert attempt_fn.await_count == 3

    @pytest.mark.asyncio
    async def test_non_retryable_status_raises_immediately(self):
        attempt_fn = AsyncMock(side_effect=[_status_error(401), "ok"])
        with patch("cache_proxy.services.retry_handler.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(UpstreamStatusError) as exc_info:
                await self.handler.execute(attempt_fn)

        assert exc_info.value.upstream_status == 401
        assert attempt_fn.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout_propagates_on_first_occurrence(self):
        attempt_fn = AsyncMock(side_effect=[UpstreamTimeoutError(), "ok"])
        with patch("cache_proxy.services.retry_handler.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(UpstreamTimeoutError):
                await self.handler.execute(attempt_fn)
        assert attempt_fn.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout_retried_when_enabled(self):
        handler = RetryHandler(max_attempts=2, initial_delay_ms=10, retry_transport_errors=True)
        attempt_fn = AsyncMock(side_effect=[UpstreamConnectionError(), "ok"])
        with patch("cache_proxy.services.retry_handler.asyncio.sleep", new=AsyncMock()):
            assert await handler.execute(attempt_fn) == "ok"
        assert attempt_fn.await_count == 2

    @pytest.mark.asyncio
    async def test_single_attempt_budget(self):
        handler = RetryHandler(max_attempts=1)
        attempt_fn = AsyncMock(side_effect=_status_error(503))
        with pytest.raises(UpstreamStatusError):
            await handler.execute(attempt_fn)
        assert attempt_fn.await_count == 1
