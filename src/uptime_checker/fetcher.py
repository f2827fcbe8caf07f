"""Client for the UptimeRobot getMonitors endpoint."""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from .config import DEFAULT_API_URL
from .exceptions import ApiError, TransportError
from .models import Monitor

logger = logging.getLogger(__name__)

LOGS_LIMIT = 10
RESPONSE_TIMES_LIMIT = 10
CUSTOM_UPTIME_RATIO_DAYS = 30


class GetMonitorsResponse(BaseModel):
    """Body of a getMonitors response."""

    stat: str = Field(default="ok", description="'ok' or 'fail'")
    error: Optional[dict] = Field(default=None, description="Error details when stat is 'fail'")
    monitors: list[Monitor] = Field(default_factory=list, description="Monitors on the account")


def build_request_params(token: str) -> dict[str, str]:
    """Form parameters for a getMonitors call."""
    return {
        "api_key": token,
        "logs": "1",
        "logs_limit": str(LOGS_LIMIT),
        "response_times": "1",
        "response_times_limit": str(RESPONSE_TIMES_LIMIT),
        "custom_uptime_ratios": str(CUSTOM_UPTIME_RATIO_DAYS),
    }


class MonitorFetcher:
    """Performs a single getMonitors call per fetch, without retries."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            api_url: getMonitors endpoint
            timeout_seconds: Request timeout in seconds
            client: Optional preconfigured HTTP client
        """
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, token: str) -> list[Monitor]:
        """Fetch all monitors for the account.

        Args:
            token: Readonly API key

        Returns:
            Monitors in API order

        Raises:
            TransportError: Network, DNS or timeout failure
            ApiError: Non-success status or an API-level failure
        """
        client = await self.get_client()
        logger.debug(f"Requesting monitors - url: {self.api_url}")

        try:
            response = await client.post(
                self.api_url,
                data=build_request_params(token),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            logger.error(f"getMonitors timed out after {self.timeout_seconds}s")
            raise TransportError(f"Request timed out after {self.timeout_seconds}s") from e
        except httpx.RequestError as e:
            logger.error(f"Request error calling getMonitors: {e}")
            raise TransportError(f"Request to {self.api_url} failed: {e}") from e

        if not response.is_success:
            logger.error(f"getMonitors request failed - status: {response.status_code}")
            raise ApiError(f"HTTP error! status: {response.status_code}", status_code=response.status_code)

        try:
            body = GetMonitorsResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Unexpected getMonitors response body - errors: {e.error_count()}")
            raise ApiError("Malformed getMonitors response", status_code=response.status_code) from e

        if body.stat != "ok":
            message = (body.error or {}).get("message", "unknown error")
            logger.error(f"getMonitors returned stat={body.stat} - error: {body.error}")
            raise ApiError(f"API error: {message}", status_code=response.status_code)

        logger.info(f"Monitors fetched - count: {len(body.monitors)}")
        return body.monitors
