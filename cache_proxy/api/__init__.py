"""
API Router Module Initialization
"""

from cache_proxy.api.deps import get_forwarder, get_proxy_service

__all__ = [
    "get_forwarder",
    "get_proxy_service",
]
