"""Proxy Core Service Module

Implements the request pipeline: classify, transform, resolve, forward."""

import logging
from collections.abc import Mapping
from typing import Any

from cache_proxy.common.errors import RequestParseError
from cache_proxy.common.utils import dump_json_body, parse_json_body
from cache_proxy.config import Settings
from cache_proxy.domain.request import ChannelType, TransformContext
from cache_proxy.domain.response import ForwardResult
from cache_proxy.services.channels import get_channel_handler
from cache_proxy.services.classifier import classify
from cache_proxy.services.forwarder import Forwarder
from cache_proxy.services.headers import GET_CORS_HEADERS, build_get_headers
from cache_proxy.services.resolver import resolve_get_target

logger = logging.getLogger(__name__)


class ProxyService:
    """
    Proxy Core Service

    Handles the complete flow of a POST:
    1. Parse the body as JSON (failure is fatal for the request)
    2. Classify the path into a channel family
    3. Apply the family's body transformer
    4. Resolve the upstream URL
    5. Forward, retrying for the Claude family only

    and of a GET: classify, resolve, forward with browser-like headers.
    """

    def __init__(self, settings: Settings, forwarder: Forwarder):
        """
        Initialize Service

        Args:
            settings: Proxy configuration
            forwarder: Upstream forwarder
        """
        self.settings = settings
        self.forwarder = forwarder

    async def process_post(
        self,
        path: str,
        query: str,
        headers: Mapping[str, str],
        raw_body: bytes,
    ) -> ForwardResult:
        """
        Process a POST request

        Args:
            path: Inbound path
            query: Raw query string (without "?")
            headers: Inbound headers
            raw_body: Inbound body bytes

        Returns:
            ForwardResult: Upstream result, with CORS allow-headers for the mode
        """
        body: Any = parse_json_body(raw_body)
        classified = classify(path, self.settings)
        handler = get_channel_handler(classified.type)

        if classified.is_known and not isinstance(body, dict):
            raise RequestParseError(
                "Request body must be a JSON object",
                details={"channel": classified.channel},
            )

        ctx = TransformContext(classified=classified, settings=self.settings, headers=headers)
        body = handler.transform(body, ctx)
        target_url = handler.resolve(classified, path, query, self.settings)
        content = raw_body if handler.raw_body else dump_json_body(body)
        outbound_headers = handler.build_headers(headers, self.settings)

        if classified.type is ChannelType.UNKNOWN:
            logger.info("[POST] Unknown channel %r, forwarding %s unchanged", classified.channel, path)
        logger.info("[POST] %s -> %s (%s)", path, target_url, classified.type.value)

        if handler.retrying:
            result = await self.forwarder.send_with_retry("POST", target_url, outbound_headers, content)
        else:
            result = await self.forwarder.send("POST", target_url, outbound_headers, content)
        result.cors_allow_headers = handler.cors_allow_headers
        return result

    async def process_get(
        self,
        path: str,
        query: str,
        headers: Mapping[str, str],
    ) -> ForwardResult:
        """
        Process a GET request (model listings and the like)

        Args:
            path: Inbound path
            query: Raw query string (without "?")
            headers: Inbound headers

        Returns:
            ForwardResult: Upstream result
        """
        classified = classify(path, self.settings)
        target_url = resolve_get_target(classified, path, query, self.settings)
        if path.startswith("/v1/"):
            logger.info("[GET] Standard API path detected, routing to %s", self.settings.default_claude_channel)
        logger.info("[GET] %s -> %s", path, target_url)

        result = await self.forwarder.send("GET", target_url, build_get_headers(headers))
        result.cors_allow_headers = GET_CORS_HEADERS
        return result
