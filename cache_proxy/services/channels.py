"""
Channel Capability Table

One ChannelHandler per ChannelType, selected once after classification.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from cache_proxy.config import Settings
from cache_proxy.domain.request import ChannelType, ClassifiedRequest, TransformContext
from cache_proxy.services import headers, resolver, transformers

BodyTransformer = Callable[[Any, TransformContext], Any]
TargetResolver = Callable[[ClassifiedRequest, str, str, Settings], str]
HeaderBuilder = Callable[[Mapping[str, str], Settings], dict[str, str]]


@dataclass(frozen=True)
class ChannelHandler:
    """
    Everything needed to forward a POST for one channel family
    """

    # Mutates the parsed body
    transform: BodyTransformer
    # Builds the upstream URL
    resolve: TargetResolver
    # Builds outbound headers from the inbound ones
    build_headers: HeaderBuilder
    # Retrying mode (True) or direct mode (False)
    retrying: bool
    # Access-Control-Allow-Headers on successful responses
    cors_allow_headers: str
    # Forward the original body bytes instead of the re-serialized body
    raw_body: bool = False


CHANNEL_HANDLERS: dict[ChannelType, ChannelHandler] = {
    ChannelType.CLAUDE: ChannelHandler(
        transform=transformers.inject_claude_metadata,
        resolve=resolver.resolve_claude_target,
        build_headers=headers.build_claude_headers,
        retrying=True,
        cors_allow_headers=headers.CLAUDE_CORS_HEADERS,
    ),
    ChannelType.CODEX: ChannelHandler(
        transform=transformers.normalize_codex_body,
        resolve=resolver.resolve_codex_target,
        build_headers=headers.build_direct_headers,
        retrying=False,
        cors_allow_headers=headers.DIRECT_CORS_HEADERS,
    ),
    ChannelType.GEMINI: ChannelHandler(
        transform=transformers.normalize_gemini_body,
        resolve=resolver.resolve_gemini_target,
        build_headers=headers.build_direct_headers,
        retrying=False,
        cors_allow_headers=headers.DIRECT_CORS_HEADERS,
    ),
    ChannelType.UNKNOWN: ChannelHandler(
        transform=transformers.passthrough_body,
        resolve=resolver.resolve_passthrough_target,
        build_headers=headers.build_direct_headers,
        retrying=False,
        cors_allow_headers=headers.DIRECT_CORS_HEADERS,
        raw_body=True,
    ),
}


def get_channel_handler(channel_type: ChannelType) -> ChannelHandler:
    return CHANNEL_HANDLERS[channel_type]
