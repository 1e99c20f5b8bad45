"""
API 依赖注入模块

提供 FastAPI 路由所需的依赖项。测试通过 dependency_overrides 替换上游传输层。
"""

from typing import Annotated

from fastapi import Depends

from cache_proxy.config import Settings, get_settings
from cache_proxy.services import Forwarder, ProxyService


# 配置依赖类型
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_forwarder(settings: SettingsDep) -> Forwarder:
    """
    获取上游转发器

    每个请求创建新的转发器，不在请求之间共享状态。
    """
    return Forwarder(settings)


ForwarderDep = Annotated[Forwarder, Depends(get_forwarder)]


def get_proxy_service(settings: SettingsDep, forwarder: ForwarderDep) -> ProxyService:
    """获取代理服务"""
    return ProxyService(settings, forwarder)


# 代理服务依赖类型
ProxyServiceDep = Annotated[ProxyService, Depends(get_proxy_service)]
