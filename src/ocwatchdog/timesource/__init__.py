"""Time source package - remote clock client and custom errors."""

from .api import TimeSource, UnixTimeProvider, WorldTimeAPI
from .errors import (
    ClientError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    ServerError,
    TimeAPIError,
)

__all__ = [
    "ClientError",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "RateLimitError",
    "ServerError",
    "TimeAPIError",
    "TimeSource",
    "UnixTimeProvider",
    "WorldTimeAPI",
]
