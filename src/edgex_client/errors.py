"""Exceptions raised by the edgeX client."""

from typing import Any, Optional


class EdgeXError(Exception):
    """Base exception for edgeX client errors."""
    pass


class FormatError(EdgeXError, ValueError):
    """Raised when a key or hash is not valid hex, or is out of range."""
    pass


class AuthConfigurationError(EdgeXError):
    """Raised when a private call is made without a usable credential."""
    pass


class NotConnectedError(EdgeXError):
    """Raised when a stream operation is issued before the matching connect call."""
    pass


class TransportError(EdgeXError):
    """
    Socket or HTTP transport failure.

    For WebSocket closes, ``code`` and ``reason`` hold the close frame values.
    """

    def __init__(self, message: str, code: Optional[int] = None, reason: str = ""):
        super().__init__(message)
        self.code = code
        self.reason = reason


class DomainError(EdgeXError):
    """Raised when the API answers with a non-success code or HTTP status."""

    def __init__(
        self,
        code: Any,
        message: str = "",
        operation: Optional[str] = None,
        data: Any = None,
    ):
        self.code = code
        self.message = message or "Unknown API error"
        self.operation = operation
        self.data = data
        prefix = f"{operation} failed" if operation else "Request failed"
        super().__init__(f"{prefix} with code {code}: {self.message}")


class RateLimitError(DomainError):
    """Raised when the API rate limit is exceeded (HTTP 429)."""
    pass
