"""FastAPI service that keeps refreshing monitors on a timer."""

import asyncio
import contextlib
import logging
import time
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, status

from .config import AppConfig
from .credentials import CredentialResolver, TokenManager
from .exceptions import ConfigError
from .fetcher import MonitorFetcher
from .models import HealthResponse, RefreshResult
from .refresh import RefreshOrchestrator
from .storage import CacheStore

logger = logging.getLogger(__name__)

config = AppConfig.from_env()


class DashboardState:
    """Latest refresh result and the collaborators that produce it."""

    def __init__(self, app_config: AppConfig, explicit_token: Optional[str] = None) -> None:
        self.config = app_config
        self.fetcher = MonitorFetcher(app_config.api_url, app_config.request_timeout_seconds)
        self.orchestrator = RefreshOrchestrator(
            store=CacheStore(app_config.cache_file),
            fetcher=self.fetcher,
            window_ms=app_config.window_ms,
            max_requests=app_config.max_requests,
        )
        self.resolver = CredentialResolver(TokenManager(app_config.config_dir), app_config.env_token)
        self.explicit_token = explicit_token
        self.token: Optional[str] = None
        self.latest_result: Optional[RefreshResult] = None

    def resolve_token(self) -> str:
        """Resolve and remember the access token.

        Raises:
            ConfigError: If no token is available
        """
        if self.token is None:
            self.token = self.resolver.resolve(self.explicit_token)
        return self.token

    def store_result(self, result: RefreshResult) -> None:
        self.latest_result = result
        logger.info(
            f"Refresh completed - outcome: {result.outcome.value}, using_cache: {result.using_cache}, "
            f"monitors: {len(result.monitors) if result.monitors is not None else 0}"
        )


state = DashboardState(config)
app_start_time = time.time()


def reset_state(app_config: Optional[AppConfig] = None, explicit_token: Optional[str] = None) -> DashboardState:
    """Replace the dashboard state, used by the server launcher and tests."""
    global state
    state = DashboardState(app_config or config, explicit_token)
    return state


@contextlib.asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Start the refresh loop on startup and stop it on shutdown."""
    refresh_task: Optional[asyncio.Task] = None

    try:
        token = state.resolve_token()
    except ConfigError as e:
        logger.error(f"Refresh loop not started - {e}")
    else:
        refresh_task = asyncio.create_task(
            state.orchestrator.run_forever(token, state.config.refresh_interval_seconds, state.store_result)
        )
        logger.info("Started background refresh loop")

    yield

    logger.info("Uptime checker service shutting down")
    if refresh_task:
        refresh_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresh_task
    await state.fetcher.close()


app = FastAPI(
    title="Uptime Checker",
    description="Latest UptimeRobot monitor status, refreshed on a timer",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for the service itself."""
    latest = state.latest_result
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=time.time() - app_start_time,
        token_configured=state.token is not None,
        last_outcome=latest.outcome if latest else None,
    )


@app.get("/monitors", response_model=RefreshResult)
async def get_monitors() -> RefreshResult:
    """Return the result of the most recent refresh cycle."""
    if state.latest_result is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No refresh has completed yet",
        )
    return state.latest_result


@app.post("/refresh", response_model=RefreshResult)
async def refresh_now() -> RefreshResult:
    """Run a refresh cycle immediately and return its result."""
    try:
        token = state.resolve_token()
    except ConfigError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e

    result = await state.orchestrator.run_cycle(token)
    state.store_result(result)
    return result
