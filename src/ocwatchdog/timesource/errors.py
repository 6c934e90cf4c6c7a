"""Exception classes for time API interactions.

This module defines a hierarchy of exception classes for handling
the ways a remote wall-clock request can fail.
"""

from __future__ import annotations

from typing import Any


class TimeAPIError(Exception):
    """Error during a time API request or response parsing.

    Raised when the request fails due to network issues, an HTTP error
    status, or a response that carries no usable timestamp.
    """

    def __init__(self, code: int, message: str, response: dict[str, Any] | None = None) -> None:
        """Initialize the exception.

        Args:
            code: HTTP status code or custom error code
            message: Human-readable error message
            response: Optional raw API response for debugging
        """
        super().__init__(f"[{code}] {message}")
        self.code: int = code
        self.message: str = message
        self.response: dict[str, Any] | None = response

    @property
    def is_client_error(self) -> bool:
        """Check if this is a client-side error (4xx)."""
        return 400 <= self.code < 500

    @property
    def is_server_error(self) -> bool:
        """Check if this is a server-side error (5xx)."""
        return self.code >= 500

    @classmethod
    def from_response(cls, response: dict[str, Any], status_code: int = 0) -> TimeAPIError:
        """Create an error from an API response.

        Args:
            response: API response dictionary
            status_code: HTTP status code

        Returns:
            Appropriate TimeAPIError subclass
        """
        message = response.get("error") or response.get("message")
        if 400 <= status_code < 500:
            if status_code == 404:
                return NotFoundError(status_code, message or "Unknown time zone", response)
            if status_code == 429:
                return RateLimitError(status_code, message or "Rate limit exceeded", response)
            return ClientError(status_code, message or "Client error", response)
        if status_code >= 500:
            return ServerError(status_code, message or "Server error", response)

        return cls(status_code, message or "Unknown error", response)


class NetworkError(TimeAPIError):
    """Raised when a network issue prevents API communication."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(0, message)
        self.original_error = original_error


class NotFoundError(TimeAPIError):
    """Raised when the requested time zone doesn't exist."""


class RateLimitError(TimeAPIError):
    """Raised when rate limits are exceeded."""


class ClientError(TimeAPIError):
    """Raised for general 4xx client errors."""


class ServerError(TimeAPIError):
    """Raised for 5xx server errors."""


class ParseError(TimeAPIError):
    """Raised when the response carries no usable timestamp."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(0, message)
        self.original_error = original_error
