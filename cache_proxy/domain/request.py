"""
Request Domain Model

Defines data structures describing an inbound proxy request after classification.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from cache_proxy.common.utils import get_header
from cache_proxy.config import Settings


class ChannelType(str, Enum):
    """Upstream API family a request is routed to"""

    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedRequest:
    """
    Classification Result

    Derived solely from the first path segment. `channel` is None only when
    the path has no segment at all.
    """

    # Channel family
    type: ChannelType
    # First path segment (e.g., "droid", "codex")
    channel: Optional[str]

    @property
    def is_known(self) -> bool:
        return self.type is not ChannelType.UNKNOWN


@dataclass(frozen=True)
class TransformContext:
    """
    Everything a body transformer may read besides the body itself
    """

    classified: ClassifiedRequest
    settings: Settings
    # Inbound request headers (case-insensitive mapping from Starlette, or a plain dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup returning None for empty values"""
        return get_header(self.headers, name)
