"""Remote wall-clock client."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Final, Protocol, runtime_checkable

import requests
from typing_extensions import TypedDict

from ocwatchdog.utils.time import TimeUtils

from .errors import NetworkError, ParseError, TimeAPIError

logger: Final = logging.getLogger(__name__)

# Human-readable explanations for common HTTP errors
HTTP_ERROR_MAP: Final = {
    400: "Bad request - check the time zone in the URL",
    404: "Unknown time zone",
    429: "Rate limit exceeded",
    500: "Time API internal error",
    502: "Bad gateway at time API",
    503: "Service unavailable (maintenance)",
    504: "Gateway timeout",
}


class TimeResponse(TypedDict, total=False):
    """Subset of the worldtimeapi.org response that is used."""

    unixtime: int
    utc_datetime: str
    timezone: str


@runtime_checkable
class UnixTimeProvider(Protocol):
    """Protocol for anything that can report the current POSIX time."""

    def fetch_unix_time(self) -> int:
        """Return the current POSIX timestamp.

        Raises:
            TimeAPIError: If the time could not be obtained
        """
        ...


class WorldTimeAPI:
    """Client for worldtimeapi.org style endpoints.

    Any endpoint returning a JSON object with an integer ``unixtime`` field
    works. The request is bounded by ``timeout`` so a hung server cannot stall
    the poll loop indefinitely.
    """

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        """Initialize the client.

        Args:
            url: Endpoint URL
            timeout: Timeout for API requests in seconds

        Raises:
            ValueError: If the URL is not an absolute http(s) URL
        """
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid URL: {url}")

        self.url = url
        self.timeout = timeout

    def fetch_unix_time(self) -> int:
        """Retrieve the current POSIX time.

        Returns:
            Seconds since the epoch (UTC)

        Raises:
            NetworkError: When network connectivity issues occur
            ParseError: When the body has no integer ``unixtime``
            TimeAPIError: For HTTP error statuses
        """
        try:
            resp = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.debug("Time API network error: %s", exc)
            raise NetworkError(f"Network error: {exc}", exc) from exc

        if resp.status_code != 200:
            try:
                body: dict[str, Any] = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            body.setdefault("message", HTTP_ERROR_MAP.get(resp.status_code, resp.text))
            raise TimeAPIError.from_response(body, resp.status_code)

        try:
            data: TimeResponse = resp.json()
        except ValueError as exc:
            raise ParseError(f"Response is not JSON: {exc}", exc) from exc

        unixtime = data.get("unixtime") if isinstance(data, dict) else None
        # bool is an int subclass
        if isinstance(unixtime, bool) or not isinstance(unixtime, int):
            raise ParseError(f"Response has no integer unixtime: {unixtime!r}")
        try:
            TimeUtils.to_civil(unixtime)
        except (OverflowError, ValueError, OSError) as exc:
            raise ParseError(f"unixtime {unixtime} is out of range", exc) from exc
        return unixtime


class TimeSource:
    """Current time adjusted by the configured UTC offset.

    Wraps a ``UnixTimeProvider`` and converts failures into ``None`` so the
    caller can treat an unavailable clock as a no-op cycle.
    """

    def __init__(self, provider: UnixTimeProvider, offset_hours: int = 0) -> None:
        self.provider = provider
        self.offset_hours = offset_hours

    def now(self) -> int | None:
        """Return offset-adjusted epoch seconds, or None if unavailable."""
        try:
            unix_time = self.provider.fetch_unix_time()
        except TimeAPIError as err:
            logger.warning("Failed to get real-world time (%s): %s", err.code, err.message)
            return None
        adjusted = TimeUtils.apply_offset(unix_time, self.offset_hours)
        try:
            TimeUtils.to_civil(adjusted)
        except (OverflowError, ValueError, OSError) as exc:
            logger.warning("Unusable timestamp %d from time source: %s", unix_time, exc)
            return None
        return adjusted
