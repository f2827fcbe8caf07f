"""Error types raised by the refresh pipeline."""

from typing import Optional


class UptimeCheckerError(Exception):
    """Base class for all uptime checker errors."""


class ConfigError(UptimeCheckerError):
    """No access token could be resolved."""


class FetchError(UptimeCheckerError):
    """The getMonitors call did not produce a monitor list."""


class TransportError(FetchError):
    """Network unreachable, DNS failure or timeout."""


class ApiError(FetchError):
    """Non-success HTTP status or an API-level failure in the response body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CacheUnavailable(UptimeCheckerError):
    """No persisted dataset exists to fall back to."""


class PersistenceError(UptimeCheckerError):
    """Writing the cache or credential file failed."""
