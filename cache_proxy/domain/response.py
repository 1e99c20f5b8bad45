"""
Response Domain Model

Defines the result of forwarding a request upstream.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Optional


@dataclass
class ForwardResult:
    """
    Forward Result Data Class

    Exactly one of `body` and `stream` is set:
    - upstream status >= 400: the body has been read in full (for logging) and is re-emitted
    - otherwise: `stream` is the lazy upstream byte stream, consumed exactly once
    """

    # Upstream HTTP status code
    status_code: int
    # Upstream content type
    content_type: str = "application/json"
    # Fully read body (error responses only)
    body: Optional[bytes] = None
    # Unbuffered upstream body
    stream: Optional[AsyncIterator[bytes]] = None
    # Access-Control-Allow-Headers for the forwarding mode (success responses only)
    cors_allow_headers: Optional[str] = None
    # Releases the upstream response and its client (success responses only)
    closer: Optional[Callable[[], Awaitable[None]]] = None

    @property
    def is_error(self) -> bool:
        """Whether the upstream answered with an error status (>= 400)"""
        return self.status_code >= 400

    async def aclose(self) -> None:
        """Release the upstream connection, whether or not `stream` was consumed"""
        if self.closer is not None:
            await self.closer()
