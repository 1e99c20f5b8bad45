"""
Proxy API Module Initialization
"""

from cache_proxy.api.proxy.routes import router as proxy_router

__all__ = [
    "proxy_router",
]
