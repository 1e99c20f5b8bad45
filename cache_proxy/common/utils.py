"""
工具函数模块

提供通用的工具函数，如请求头读取、JSON 解析与序列化等。
"""

import json
from collections.abc import Mapping
from typing import Any, Optional

from cache_proxy.common.errors import RequestParseError


def get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """
    读取请求头（大小写不敏感）

    Starlette 的 Headers 本身大小写不敏感，普通 dict 则逐个比较。
    空字符串视为不存在。

    Args:
        headers: 请求头映射
        name: 请求头名称（小写）

    Returns:
        Optional[str]: 请求头的值，不存在时返回 None
    """
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    return value or None


def parse_json_body(raw: bytes) -> Any:
    """
    解析请求体

    解析失败时抛出 RequestParseError，错误信息原样返回给调用方。

    Args:
        raw: 原始请求体字节

    Returns:
        Any: 解析后的 JSON 值
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RequestParseError(str(e)) from e


def dump_json_body(body: Any) -> bytes:
    """
    序列化请求体

    使用紧凑格式并保留非 ASCII 字符，与上游期望的 JSON 一致。
    """
    return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def truncate_text(data: bytes, limit: int = 500) -> str:
    """
    截断响应内容用于日志

    Example:
        >>> truncate_text(b"abcdef", limit=3)
        'abc'
    """
    return data[:limit].decode("utf-8", errors="replace")
