"""Server startup script for the uptime checker service."""

import argparse
import logging
import sys
from typing import Optional

import uvicorn

from . import main as service

logger = logging.getLogger(__name__)


def start_server(
    host: str = "127.0.0.1", port: int = 8000, log_level: str = "info", token: Optional[str] = None
) -> None:
    """Start the uptime checker service.

    Args:
        host: Host to bind the server to
        port: Port to bind the server to
        log_level: Logging level (debug, info, warning, error, critical)
        token: Access token overriding the stored one
    """
    logger.info(f"Starting Uptime Checker server - host: {host}, port: {port}, log_level: {log_level}")

    if token:
        service.reset_state(service.config, explicit_token=token)

    try:
        uvicorn.run(service.app, host=host, port=port, log_level=log_level)
    except Exception as e:
        logger.error(f"Failed to start server - error: {str(e)}", exc_info=True)
        sys.exit(1)


def main() -> None:
    """Main entry point for the uptime checker server."""
    parser = argparse.ArgumentParser(description="Uptime Checker Server")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind the server to (default: 8000)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default="info",
        help="Logging level (default: info)",
    )
    parser.add_argument(
        "--token",
        help="UptimeRobot readonly access token (saved for later runs)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    )

    start_server(host=args.host, port=args.port, log_level=args.log_level, token=args.token)


if __name__ == "__main__":
    main()
