"""
Error Definitions

Defines custom exception classes used by the proxy for unified error handling.

Every local failure is an AppError carrying an HTTP status, a kind and a message
written by the proxy itself. Upstream error responses are not errors here: they
are relayed to the caller verbatim.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Application Base Exception

    Base class for all custom exceptions, containing error message, type, and status.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "app_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message returned to the caller
            error_type: Error kind
            details: Extra error details (only returned in debug mode)
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self, include_details: bool = False) -> dict[str, Any]:
        """
        Convert to dictionary format (for API response)

        Args:
            include_details: Whether to include the details mapping

        Returns:
            dict: Error information dictionary
        """
        result: dict[str, Any] = {
            "error": self.message,
            "type": self.error_type,
        }
        if include_details and self.details:
            result["details"] = self.details
        return result


class RequestParseError(AppError):
    """
    Request Parse Error

    Raised when the inbound body is not valid JSON or not a JSON object.
    Fatal for the request; the parse message is returned as-is.
    """

    def __init__(
        self,
        message: str = "Invalid JSON body",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="parse_error",
            details=details,
            status_code=500,
        )


class MethodNotAllowedError(AppError):
    """Raised for HTTP methods the proxy does not forward."""

    def __init__(self, method: str = ""):
        super().__init__(
            message="Method Not Allowed",
            error_type="method_not_allowed",
            details={"method": method} if method else None,
            status_code=405,
        )


class UpstreamConnectionError(AppError):
    """
    Upstream Connection Error

    Raised when the upstream could not be reached (DNS, connect, protocol errors).
    Carries no upstream status.
    """

    def __init__(
        self,
        message: str = "Upstream request failed",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="upstream_connection_error",
            details=details,
            status_code=502,
        )


class UpstreamTimeoutError(AppError):
    """
    Upstream Timeout Error

    Raised when an attempt exceeded the configured budget and was cancelled.
    Carries no upstream status.
    """

    def __init__(
        self,
        message: str = "Upstream request timed out",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="upstream_timeout",
            details=details,
            status_code=504,
        )


class UpstreamStatusError(Exception):
    """
    Upstream answered with a transient status

    Used inside the retry loop only. Holds the already-read upstream result so
    it can be relayed verbatim once the attempt budget is spent.
    """

    def __init__(self, result: Any):
        super().__init__(f"Upstream responded with status {result.status_code}")
        self.result = result
        self.upstream_status = result.status_code
