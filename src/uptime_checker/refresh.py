"""Refresh cycle: rate limiting, fetching and cache fallback."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from .exceptions import FetchError, PersistenceError
from .fetcher import MonitorFetcher
from .models import CacheRecord, RefreshOutcome, RefreshResult
from .storage import CacheStore, is_rate_limited, prune_timestamps, record_request

logger = logging.getLogger(__name__)

RATE_LIMITED_NO_CACHE = "Rate limit exceeded and no cached data available."
FETCH_FAILED_NO_CACHE = "Error fetching data and no cached data available."


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class RefreshOrchestrator:
    """Runs refresh cycles against the cache store and the fetcher."""

    def __init__(
        self,
        store: CacheStore,
        fetcher: MonitorFetcher,
        window_ms: int = 60_000,
        max_requests: int = 10,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Cache store for request timestamps and the last dataset
            fetcher: Remote fetcher
            window_ms: Request accounting window in milliseconds
            max_requests: Requests allowed within the window
            clock: Returns the current time in epoch milliseconds
        """
        self.store = store
        self.fetcher = fetcher
        self.window_ms = window_ms
        self.max_requests = max_requests
        self.clock = clock
        self._cycle_lock = asyncio.Lock()

    def _persist(self, record: CacheRecord) -> None:
        try:
            self.store.save(record)
        except PersistenceError as e:
            logger.error(f"Cache persistence failed - error: {e}")

    def _serve_cache(self, record: CacheRecord, now: int, reason: str, error_message: str) -> RefreshResult:
        if record.data is not None:
            logger.info(f"Serving cached monitors - reason: {reason}, count: {len(record.data)}")
            return RefreshResult(
                outcome=RefreshOutcome.CACHE_SERVED,
                monitors=record.data,
                using_cache=True,
                refreshed_at=now,
            )

        logger.warning(f"No cached monitors to fall back to - reason: {reason}")
        return RefreshResult(outcome=RefreshOutcome.ERROR, error=error_message, refreshed_at=now)

    async def run_cycle(self, token: str) -> RefreshResult:
        """Run one refresh cycle.

        Loads and prunes the cache record, then either serves the cache (rate
        limited or fetch failed) or fetches and stores fresh monitors. The cache
        file is written once per cycle. Cycles on one orchestrator never overlap.

        Args:
            token: Access token for the API

        Returns:
            RefreshResult for the presentation layer
        """
        async with self._cycle_lock:
            return await self._run_cycle_locked(token)

    async def _run_cycle_locked(self, token: str) -> RefreshResult:
        now = self.clock()
        record = prune_timestamps(self.store.load(), now, self.window_ms)

        if is_rate_limited(record, self.max_requests):
            logger.warning(
                f"Rate limit reached - requests_in_window: {len(record.timestamps)}, max: {self.max_requests}"
            )
            self._persist(record)
            return self._serve_cache(record, now, "rate_limited", RATE_LIMITED_NO_CACHE)

        try:
            monitors = await self.fetcher.fetch(token)
        except FetchError as e:
            logger.error(f"Error fetching data: {e}")
            self._persist(record)
            return self._serve_cache(record, now, "fetch_failed", FETCH_FAILED_NO_CACHE)

        self._persist(record_request(record, now, monitors))
        return RefreshResult(outcome=RefreshOutcome.FETCHED, monitors=monitors, using_cache=False, refreshed_at=now)

    async def run_forever(
        self,
        token: str,
        interval_seconds: float,
        on_result: Callable[[RefreshResult], Optional[Awaitable[None]]],
    ) -> None:
        """Run refresh cycles on a fixed timer until cancelled.

        Args:
            token: Access token for the API
            interval_seconds: Delay between cycles
            on_result: Callback receiving each result; may be a coroutine function
        """
        logger.info(f"Starting refresh loop - interval: {interval_seconds}s")

        while True:
            try:
                result = await self.run_cycle(token)
                outcome = on_result(result)
                if asyncio.iscoroutine(outcome):
                    await outcome
            except asyncio.CancelledError:
                logger.info("Refresh loop cancelled")
                raise
            except Exception as e:
                logger.error(f"Error in refresh loop: {e}", exc_info=True)

            await asyncio.sleep(interval_seconds)
