"""
Target Resolver

Builds the outbound URL on the configured target host for a classified request.
"""

from cache_proxy.config import Settings
from cache_proxy.domain.request import ChannelType, ClassifiedRequest

CLAUDE_MESSAGES_SUFFIX = "/v1/messages"
CLAUDE_MODELS_SUFFIX = "/v1/models"
CODEX_RESPONSES_PATH = "/codex/v1/responses"
GEMINI_VERSION = "/v1beta"


def build_url(settings: Settings, path: str, query: str = "") -> str:
    """
    Join host, path and raw query string

    Args:
        settings: Proxy configuration
        path: Absolute path on the target host
        query: Raw query string without the leading "?"
    """
    url = f"https://{settings.TARGET_HOST}{path}"
    if query:
        url = f"{url}?{query}"
    return url


def _strip_first_segment(path: str) -> str:
    """'/droid/v1/models' -> '/v1/models'"""
    if not path.startswith("/"):
        return path
    slash = path.find("/", 1)
    return path[slash:] if slash != -1 else ""


def gemini_path(path: str) -> str:
    """
    Insert the API version after the channel segment

    The channel segment itself is kept, so every configured Gemini channel
    keeps its own upstream prefix.

    Examples:
        >>> gemini_path("/gemini/models/foo:generateContent")
        '/gemini/v1beta/models/foo:generateContent'
        >>> gemini_path("/gem/models")
        '/gem/v1beta/models'
    """
    if not path.startswith("/"):
        return path
    slash = path.find("/", 1)
    if slash == -1:
        return f"{path}{GEMINI_VERSION}"
    return f"{path[:slash]}{GEMINI_VERSION}{path[slash:]}"


def claude_path(channel: str, path: str) -> str:
    """
    Rewrite '/{channel}/...' to '/claude/{channel}/...'

    Falls back to the models listing when the result has no version segment.
    """
    target = f"/claude/{channel}{_strip_first_segment(path)}"
    if "/v1/" not in target:
        target = f"/claude/{channel}{CLAUDE_MODELS_SUFFIX}"
    return target


def resolve_claude_target(classified: ClassifiedRequest, path: str, query: str, settings: Settings) -> str:
    return build_url(settings, f"/claude/{classified.channel}{CLAUDE_MESSAGES_SUFFIX}")


def resolve_codex_target(classified: ClassifiedRequest, path: str, query: str, settings: Settings) -> str:
    # Every Codex channel collapses to the single Responses route
    return build_url(settings, CODEX_RESPONSES_PATH)


def resolve_gemini_target(classified: ClassifiedRequest, path: str, query: str, settings: Settings) -> str:
    return build_url(settings, gemini_path(path), query)


def resolve_passthrough_target(classified: ClassifiedRequest, path: str, query: str, settings: Settings) -> str:
    return build_url(settings, path, query)


def resolve_get_target(classified: ClassifiedRequest, path: str, query: str, settings: Settings) -> str:
    """
    Resolve the upstream URL for a GET request (model listings and the like)

    - /v1/*: standard Claude API path, routed to the default Claude channel
    - Gemini channel: /v1beta inserted after the channel segment
    - Claude channel: rewritten under /claude/{channel}
    - anything else: forwarded unchanged
    """
    if path.startswith("/v1/"):
        target_path = f"/claude/{settings.default_claude_channel}{path}"
    elif classified.type is ChannelType.GEMINI:
        target_path = gemini_path(path)
    elif classified.type is ChannelType.CLAUDE:
        target_path = claude_path(classified.channel, path)
    else:
        target_path = path
    return build_url(settings, target_path, query)
