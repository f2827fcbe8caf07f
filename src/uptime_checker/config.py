"""Configuration management for the uptime checker."""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.uptimerobot.com/v2/getMonitors"
CACHE_FILE_NAME = "cache.json"
TOKEN_FILE_NAME = "uptime_robot_token"


def default_config_dir() -> Path:
    """Return the per-user configuration directory."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "uptime-checker"


class AppConfig(BaseModel):
    """Main configuration for the uptime checker."""

    config_dir: Path = Field(default_factory=default_config_dir, description="Directory holding cache and token files")
    api_url: str = Field(default=DEFAULT_API_URL, description="UptimeRobot getMonitors endpoint")
    env_token: Optional[str] = Field(default=None, description="Token fallback taken from the environment")
    window_ms: int = Field(default=60_000, gt=0, description="Length of the request accounting window in milliseconds")
    max_requests: int = Field(default=10, gt=0, description="Maximum API requests allowed within the window")
    request_timeout_seconds: float = Field(default=10.0, gt=0, description="HTTP timeout for the getMonitors call")
    refresh_interval_seconds: int = Field(default=60, gt=0, description="Delay between refresh cycles in watch mode")
    log_level: str = Field(default="WARNING", description="Logging level")

    @property
    def cache_file(self) -> Path:
        return self.config_dir / CACHE_FILE_NAME

    @property
    def token_file(self) -> Path:
        return self.config_dir / TOKEN_FILE_NAME

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        config_dir = os.getenv("UPTIME_CHECKER_CONFIG_DIR")

        config = cls(
            config_dir=Path(config_dir) if config_dir else default_config_dir(),
            api_url=os.getenv("UPTIME_ROBOT_API_URL", DEFAULT_API_URL),
            env_token=os.getenv("UPTIME_ROBOT_TOKEN") or None,
            window_ms=int(os.getenv("UPTIME_CHECKER_WINDOW_MS", "60000")),
            max_requests=int(os.getenv("UPTIME_CHECKER_MAX_REQUESTS", "10")),
            request_timeout_seconds=float(os.getenv("UPTIME_CHECKER_TIMEOUT", "10")),
            refresh_interval_seconds=int(os.getenv("UPTIME_CHECKER_REFRESH_INTERVAL", "60")),
            log_level=os.getenv("LOG_LEVEL", "WARNING"),
        )

        logger.info(
            f"Configuration loaded - config_dir: {config.config_dir}, window_ms: {config.window_ms}, "
            f"max_requests: {config.max_requests}, env_token_set: {config.env_token is not None}"
        )

        return config
