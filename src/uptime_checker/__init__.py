"""Uptime Checker - UptimeRobot monitor status in the terminal.

This package polls the UptimeRobot getMonitors API and renders monitor status
as a text dashboard. Requests are rate limited with a sliding window kept in a
local cache file, and the last good response is served when the limit is hit
or the API cannot be reached.

Key Features:
- Token resolution from flag, token file or environment
- Sliding-window request accounting persisted across runs
- Fallback to cached monitors on rate limit or fetch failure
- Terminal dashboard with optional watch mode
- FastAPI service variant refreshing on a timer

Example:
    Running a single refresh cycle:

    ```python
    import asyncio
    from uptime_checker import AppConfig, CacheStore, MonitorFetcher, RefreshOrchestrator

    config = AppConfig.from_env()
    orchestrator = RefreshOrchestrator(CacheStore(config.cache_file), MonitorFetcher(config.api_url))
    result = asyncio.run(orchestrator.run_cycle("ur123-readonly"))
    ```
"""

__version__ = "0.1.0"

from .config import AppConfig
from .credentials import CredentialResolver, TokenManager
from .fetcher import MonitorFetcher
from .models import CacheRecord, LogEntry, Monitor, MonitorStatus, MonitorType, RefreshOutcome, RefreshResult
from .refresh import RefreshOrchestrator
from .storage import CacheStore

__all__ = [
    "AppConfig",
    "CacheRecord",
    "CacheStore",
    "CredentialResolver",
    "LogEntry",
    "Monitor",
    "MonitorFetcher",
    "MonitorStatus",
    "MonitorType",
    "RefreshOrchestrator",
    "RefreshOutcome",
    "RefreshResult",
    "TokenManager",
]
