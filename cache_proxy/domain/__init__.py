"""
领域模型模块初始化
"""

from cache_proxy.domain.request import ChannelType, ClassifiedRequest, TransformContext
from cache_proxy.domain.response import ForwardResult

__all__ = [
    "ChannelType",
    "ClassifiedRequest",
    "TransformContext",
    "ForwardResult",
]
