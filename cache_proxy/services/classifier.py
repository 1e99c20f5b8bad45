"""
Request Classifier

Maps an inbound path to a channel family using the configured channel names.
"""

from cache_proxy.config import Settings
from cache_proxy.domain.request import ChannelType, ClassifiedRequest


def first_segment(path: str) -> str | None:
    """Return the first `/`-delimited segment of `path`, or None if there is none"""
    segment = path[1:].split("/", 1)[0] if path.startswith("/") else ""
    return segment or None


def classify(path: str, settings: Settings) -> ClassifiedRequest:
    """
    Classify a request path

    Claude channels are checked first, then Codex, then Gemini. A path whose
    first segment matches none of them is UNKNOWN; this is a valid outcome,
    not a failure.

    Args:
        path: Request path (e.g., /droid/v1/messages)
        settings: Proxy configuration holding the channel names

    Returns:
        ClassifiedRequest: Channel family and channel name
    """
    channel = first_segment(path)
    if channel is None:
        return ClassifiedRequest(type=ChannelType.UNKNOWN, channel=None)

    lookup = (
        (ChannelType.CLAUDE, settings.claude_channels),
        (ChannelType.CODEX, settings.codex_channels),
        (ChannelType.GEMINI, settings.gemini_channels),
    )
    for channel_type, names in lookup:
        if channel in names:
            return ClassifiedRequest(type=channel_type, channel=channel)

    return ClassifiedRequest(type=ChannelType.UNKNOWN, channel=channel)
