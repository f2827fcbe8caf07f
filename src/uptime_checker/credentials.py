"""Access token storage and resolution."""

import logging
from pathlib import Path
from typing import Optional

from .config import TOKEN_FILE_NAME
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Please provide a readonly UptimeRobot access token using the --token flag."


class TokenManager:
    """Reads and writes the persisted access token."""

    def __init__(self, config_dir: Path) -> None:
        self.config_dir = Path(config_dir)
        self.token_file = self.config_dir / TOKEN_FILE_NAME

    def get_token(self) -> Optional[str]:
        """Return the stored token, or None if there is none."""
        try:
            token = self.token_file.read_text(encoding="utf-8").strip()
        except OSError as e:
            logger.debug(f"No stored token - path: {self.token_file}, reason: {e}")
            return None
        return token or None

    def save_token(self, token: str) -> bool:
        """Persist a token, logging instead of raising on failure.

        Returns:
            True if the token was written
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.token_file.write_text(token, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save token - path: {self.token_file}, error: {e}")
            return False

        logger.info(f"Token saved - path: {self.token_file}")
        return True


class CredentialResolver:
    """Chooses the access token from CLI input, the token file or the environment."""

    def __init__(self, token_manager: TokenManager, env_token: Optional[str] = None) -> None:
        self.token_manager = token_manager
        self.env_token = env_token

    def resolve(self, explicit_token: Optional[str] = None) -> str:
        """Resolve the token to use for this run.

        An explicit token that differs from the stored one replaces it on disk.

        Args:
            explicit_token: Token given on the command line, if any

        Returns:
            The resolved token

        Raises:
            ConfigError: If no source provides a token
        """
        stored_token = self.token_manager.get_token()

        if explicit_token:
            if explicit_token != stored_token:
                self.token_manager.save_token(explicit_token)
            logger.debug("Token resolved - source: explicit")
            return explicit_token

        if stored_token:
            logger.debug("Token resolved - source: file")
            return stored_token

        if self.env_token:
            logger.debug("Token resolved - source: environment")
            return self.env_token

        logger.warning("No access token available from flag, token file or environment")
        raise ConfigError(MISSING_TOKEN_MESSAGE)
