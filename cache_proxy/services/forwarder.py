"""
Upstream Forwarder

Sends the outbound request and hands the upstream body back without buffering.

Two modes:
- direct: a single attempt (Codex, Gemini, passthrough, GET)
- retrying: bounded exponential backoff on transient statuses (Claude)

Each attempt runs under the configured budget until the response headers
arrive; on expiry the outbound call is cancelled.
"""

import logging
from collections.abc import AsyncIterator
from functools import partial
from typing import Optional

import anyio
import httpx

from cache_proxy.common.errors import (
    UpstreamConnectionError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)
from cache_proxy.common.sanitizer import sanitize_headers
from cache_proxy.common.utils import truncate_text
from cache_proxy.config import Settings
from cache_proxy.domain.response import ForwardResult
from cache_proxy.services.retry_handler import RETRYABLE_STATUS_CODES, RetryHandler

logger = logging.getLogger(__name__)

# Upstream error bodies are logged up to this many bytes
ERROR_LOG_LIMIT = 500


class Forwarder:
    """
    Upstream Forwarder

    A fresh httpx.AsyncClient is opened per attempt and closed once the
    response body has been relayed (or read, for error statuses).
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_handler: Optional[RetryHandler] = None,
    ):
        """
        Initialize Forwarder

        Args:
            settings: Proxy configuration
            transport: Custom httpx transport (tests use httpx.MockTransport)
            retry_handler: Retry policy for the retrying mode
        """
        self.settings = settings
        self.timeout = settings.timeout_seconds
        self._transport = transport
        self.retry_handler = retry_handler or RetryHandler.from_settings(settings)

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    @staticmethod
    async def _close(response: Optional[httpx.Response], client: httpx.AsyncClient) -> None:
        """Close the upstream response and its client, even inside a cancelled scope"""
        with anyio.CancelScope(shield=True):
            if response is not None:
                await response.aclose()
            await client.aclose()

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        content: Optional[bytes] = None,
    ) -> ForwardResult:
        """
        Forward once (direct mode)

        Args:
            method: HTTP method
            url: Fully-qualified upstream URL
            headers: Outbound headers
            content: Request body bytes

        Returns:
            ForwardResult: Streamed body for success, fully read body for status >= 400

        Raises:
            UpstreamTimeoutError: The attempt exceeded the budget
            UpstreamConnectionError: The upstream could not be reached
        """
        logger.debug(
            "Upstream Request: method=%s url=%s headers=%s",
            method,
            url,
            sanitize_headers(headers),
        )

        client = self._create_client()
        request = client.build_request(method, url, headers=headers, content=content)
        try:
            with anyio.fail_after(self.timeout):
                response = await client.send(request, stream=True)
        except (TimeoutError, httpx.TimeoutException) as e:
            await self._close(None, client)
            logger.error("Upstream timeout after %ss: %s %s", self.timeout, method, url)
            raise UpstreamTimeoutError(details={"url": url, "timeout_ms": self.settings.TIMEOUT_MS}) from e
        except httpx.RequestError as e:
            await self._close(None, client)
            logger.error("Upstream request error: %s %s: %s", method, url, e)
            raise UpstreamConnectionError(
                message=f"Upstream request failed: {type(e).__name__}",
                details={"url": url, "error": str(e)},
            ) from e
        except BaseException:
            # includes cancellation of the inbound request
            await self._close(None, client)
            raise

        content_type = response.headers.get("content-type", "application/json")
        logger.info("Response %s from %s", response.status_code, url)

        if response.status_code >= 400:
            try:
                body = await response.aread()
            finally:
                await self._close(response, client)
            logger.warning("Error body: %s", truncate_text(body, ERROR_LOG_LIMIT))
            return ForwardResult(status_code=response.status_code, content_type=content_type, body=body)

        return ForwardResult(
            status_code=response.status_code,
            content_type=content_type,
            stream=self._relay(response, client),
            closer=partial(self._close, response, client),
        )

    async def send_with_retry(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        content: Optional[bytes] = None,
    ) -> ForwardResult:
        """
        Forward with retry (retrying mode)

        A transient upstream status is retried until the attempt budget is
        spent; the last upstream response is then relayed verbatim.
        """

        async def attempt() -> ForwardResult:
            result = await self.send(method, url, headers, content)
            if result.status_code in RETRYABLE_STATUS_CODES:
                raise UpstreamStatusError(result)
            return result

        try:
            return await self.retry_handler.execute(attempt)
        except UpstreamStatusError as e:
            logger.error(
                "Retries exhausted: url=%s status=%s attempts=%s",
                url,
                e.upstream_status,
                self.retry_handler.max_attempts,
            )
            return e.result

    async def _relay(self, response: httpx.Response, client: httpx.AsyncClient) -> AsyncIterator[bytes]:
        """
        Yield upstream chunks as they arrive

        Finishing the stream closes the upstream response and its client. A
        stream that is never started is released through ForwardResult.aclose().
        """
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        finally:
            await self._close(response, client)
