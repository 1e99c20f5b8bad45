"""
统一代理接口

所有路径的 catch-all 路由：
- OPTIONS: CORS 预检
- GET: 模型列表等查询，按渠道改写路径后转发
- POST: 按渠道转换请求体后转发（Claude 带重试）
- 其他方法: 由路由抛出 405，main 中统一渲染为 {"error": "Method Not Allowed"}
"""

from fastapi import APIRouter, Request
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from cache_proxy.api.deps import ProxyServiceDep
from cache_proxy.domain.response import ForwardResult
from cache_proxy.services.headers import cors_headers, preflight_headers

router = APIRouter(tags=["Proxy"])


def _inbound_path(request: Request) -> str:
    """原始（未解码）请求路径，保证转发时路径逐字节不变"""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        # 部分 ASGI 实现的 raw_path 含查询字符串
        return raw_path.split(b"?", 1)[0].decode("latin-1")
    return request.url.path


def build_response(result: ForwardResult) -> Response:
    """
    将上游结果转换为响应

    错误响应（>= 400）原样返回状态码、内容类型与已读取的响应体；
    成功响应直接以流的方式返回，不做缓冲，并附带 CORS 头；
    响应结束后（包括客户端提前断开、流未被读取）关闭上游连接。
    """
    if result.stream is None:
        return Response(
            content=result.body or b"",
            status_code=result.status_code,
            headers={"Content-Type": result.content_type},
        )

    headers = {"Content-Type": result.content_type}
    if result.cors_allow_headers:
        headers.update(cors_headers(result.cors_allow_headers))
    return StreamingResponse(
        result.stream,
        status_code=result.status_code,
        headers=headers,
        background=BackgroundTask(result.aclose),
    )


@router.options("/{path:path}")
async def preflight(path: str) -> Response:
    """CORS 预检，与路径无关"""
    return Response(status_code=204, headers=preflight_headers())


@router.get("/{path:path}")
async def forward_get(request: Request, path: str, proxy_service: ProxyServiceDep) -> Response:
    """GET 转发（/health 由 main 中的健康检查优先匹配）"""
    result = await proxy_service.process_get(
        path=_inbound_path(request),
        query=request.url.query,
        headers=request.headers,
    )
    return build_response(result)


@router.post("/{path:path}")
async def forward_post(request: Request, path: str, proxy_service: ProxyServiceDep) -> Response:
    """POST 转发：Claude / Codex / Gemini 按渠道处理，未知渠道原样透传"""
    raw_body = await request.body()
    result = await proxy_service.process_post(
        path=_inbound_path(request),
        query=request.url.query,
        headers=request.headers,
        raw_body=raw_body,
    )
    return build_response(result)

