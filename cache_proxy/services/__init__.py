"""
Service Layer Module Initialization
"""

from cache_proxy.services.channels import CHANNEL_HANDLERS, ChannelHandler, get_channel_handler
from cache_proxy.services.classifier import classify
from cache_proxy.services.forwarder import Forwarder
from cache_proxy.services.proxy_service import ProxyService
from cache_proxy.services.retry_handler import RETRYABLE_STATUS_CODES, RetryHandler

__all__ = [
    "CHANNEL_HANDLERS",
    "ChannelHandler",
    "get_channel_handler",
    "classify",
    "Forwarder",
    "ProxyService",
    "RetryHandler",
    "RETRYABLE_STATUS_CODES",
]
