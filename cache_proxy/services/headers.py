"""
Outbound Header Builders

Only an explicit allow-list of inbound headers is forwarded upstream; everything
else (host, cookies, hop-by-hop headers) is dropped.
"""

from collections.abc import Mapping

from cache_proxy.common.utils import get_header
from cache_proxy.config import Settings

CORS_ALLOW_METHODS = "GET, POST, OPTIONS"

# Access-Control-Allow-Headers per forwarding mode
CLAUDE_CORS_HEADERS = "Content-Type, Authorization, x-api-key, anthropic-version, anthropic-beta"
DIRECT_CORS_HEADERS = "Content-Type, Authorization, x-api-key, x-goog-api-key"
GET_CORS_HEADERS = "Content-Type, Authorization, x-api-key, anthropic-version"
PREFLIGHT_CORS_HEADERS = (
    "Content-Type, Authorization, x-api-key, anthropic-version, anthropic-beta, x-goog-api-key"
)
PREFLIGHT_MAX_AGE = "86400"

# Sent on GET requests so the upstream edge treats us like a browser
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)
BROWSER_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "cross-site",
}

# (inbound name, outbound name) pairs copied verbatim when present
GET_PASSTHROUGH = (
    ("authorization", "Authorization"),
    ("x-api-key", "x-api-key"),
    ("x-goog-api-key", "x-goog-api-key"),
    ("anthropic-version", "anthropic-version"),
    ("referer", "Referer"),
    ("origin", "Origin"),
)
DIRECT_PASSTHROUGH = (
    ("authorization", "Authorization"),
    ("x-api-key", "x-api-key"),
    ("x-goog-api-key", "x-goog-api-key"),
)
CLAUDE_PASSTHROUGH = (
    ("authorization", "Authorization"),
    ("x-api-key", "x-api-key"),
)


def _copy_present(
    headers: Mapping[str, str],
    pairs: tuple[tuple[str, str], ...],
    target: dict[str, str],
) -> dict[str, str]:
    for inbound, outbound in pairs:
        value = get_header(headers, inbound)
        if value:
            target[outbound] = value
    return target


def cors_headers(allow_headers: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Allow-Headers": allow_headers,
    }


def preflight_headers() -> dict[str, str]:
    headers = cors_headers(PREFLIGHT_CORS_HEADERS)
    headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
    return headers


def build_claude_headers(headers: Mapping[str, str], settings: Settings) -> dict[str, str]:
    """
    Headers for the Claude flow

    anthropic-version / anthropic-beta fall back to the configured defaults;
    a header that would be empty is omitted.
    """
    outbound = _copy_present(headers, CLAUDE_PASSTHROUGH, {"Content-Type": "application/json"})
    version = get_header(headers, "anthropic-version") or settings.ANTHROPIC_VERSION
    beta = get_header(headers, "anthropic-beta") or settings.ANTHROPIC_BETA
    if version:
        outbound["anthropic-version"] = version
    if beta:
        outbound["anthropic-beta"] = beta
    return outbound


def build_direct_headers(headers: Mapping[str, str], settings: Settings) -> dict[str, str]:
    """Headers for Codex, Gemini and passthrough POSTs"""
    return _copy_present(headers, DIRECT_PASSTHROUGH, {"Content-Type": "application/json"})


def build_get_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Browser-like headers plus credentials and referer/origin when present"""
    outbound = {"User-Agent": get_header(headers, "user-agent") or BROWSER_USER_AGENT}
    outbound.update(BROWSER_HEADERS)
    return _copy_present(headers, GET_PASSTHROUGH, outbound)
