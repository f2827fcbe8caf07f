"""Data models for the uptime checker application."""

import datetime as dt
from enum import Enum, IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import CacheUnavailable


class MonitorStatus(IntEnum):
    """Monitor status codes reported by UptimeRobot."""

    PAUSED = 0
    PENDING = 1
    UP = 2
    SEEMS_DOWN = 8
    DOWN = 9


class MonitorType(IntEnum):
    """Kinds of check a monitor performs."""

    HTTP = 1
    KEYWORD = 2
    PING = 3
    PORT = 4
    HEARTBEAT = 5


class LogType(IntEnum):
    """Event types found in a monitor's log."""

    DOWN = 1
    UP = 2
    STARTED = 98
    PAUSED = 99


class LogEntry(BaseModel):
    """One historical status-change event for a monitor."""

    model_config = ConfigDict(frozen=True)

    type: LogType = Field(..., description="Event type")
    datetime: int = Field(..., description="Event time in epoch seconds")
    duration: int = Field(default=0, description="How long the state lasted, in seconds")


class ResponseTimeSample(BaseModel):
    """One response time measurement."""

    model_config = ConfigDict(frozen=True)

    datetime: int = Field(..., description="Sample time in epoch seconds")
    value: int = Field(..., description="Response time in milliseconds")


def _latest(entries: list[LogEntry]) -> Optional[LogEntry]:
    # max() keeps the first of equal keys, so ties resolve to API order
    if not entries:
        return None
    return max(entries, key=lambda entry: entry.datetime)


class Monitor(BaseModel):
    """Snapshot of one monitored endpoint as returned by getMonitors."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: int = Field(..., description="Unique monitor identifier")
    status: MonitorStatus = Field(..., description="Current monitor status")
    friendly_name: str = Field(..., description="Display name")
    url: str = Field(default="", description="Monitored URL or host")
    average_response_time: Optional[float] = Field(default=None, description="Average response time in ms")
    custom_uptime_ratio: Optional[str] = Field(default=None, description="Uptime percentage over the last 30 days")
    type: MonitorType = Field(..., description="Monitor type")
    interval: int = Field(..., description="Polling interval in seconds")
    logs: list[LogEntry] = Field(default_factory=list, description="Most recent log entries")
    response_times: list[ResponseTimeSample] = Field(default_factory=list, description="Recent response times")

    @field_validator("average_response_time", "custom_uptime_ratio", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def most_recent_outage(self) -> Optional[LogEntry]:
        """Return the latest DOWN log entry, if any."""
        return _latest([entry for entry in self.logs if entry.type == LogType.DOWN])

    def most_recent_recovery(self) -> Optional[LogEntry]:
        """Return the latest UP log entry, if any."""
        return _latest([entry for entry in self.logs if entry.type == LogType.UP])


class CacheRecord(BaseModel):
    """State persisted in cache.json between invocations."""

    data: Optional[list[Monitor]] = Field(default=None, description="Last known good monitor list")
    timestamps: list[int] = Field(default_factory=list, description="Request times in epoch milliseconds")


class RefreshOutcome(str, Enum):
    """How a refresh cycle ended."""

    FETCHED = "fetched"
    CACHE_SERVED = "cache_served"
    ERROR = "error"


class RefreshResult(BaseModel):
    """Data handed to the presentation layer after each refresh cycle."""

    outcome: RefreshOutcome = Field(..., description="How the cycle ended")
    monitors: Optional[list[Monitor]] = Field(default=None, description="Monitors to display")
    error: Optional[str] = Field(default=None, description="User-facing error message")
    using_cache: bool = Field(default=False, description="Whether monitors came from the cache")
    refreshed_at: int = Field(..., description="Cycle time in epoch milliseconds")

    def require_monitors(self) -> list[Monitor]:
        """Return the monitors or raise CacheUnavailable for an error result."""
        if self.monitors is None:
            raise CacheUnavailable(self.error or "No monitor data available.")
        return self.monitors


class HealthResponse(BaseModel):
    """Model for health check responses."""

    status: str = Field(..., description="Health status")
    timestamp: dt.datetime = Field(..., description="Response timestamp")
    uptime_seconds: float = Field(..., description="Service uptime in seconds")
    token_configured: bool = Field(..., description="Whether an access token was resolved")
    last_outcome: Optional[RefreshOutcome] = Field(default=None, description="Outcome of the latest refresh cycle")
