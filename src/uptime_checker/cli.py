"""Terminal dashboard entry point."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .config import AppConfig
from .credentials import CredentialResolver, TokenManager
from .display import render_result
from .exceptions import ConfigError
from .fetcher import MonitorFetcher
from .models import RefreshOutcome, RefreshResult
from .refresh import RefreshOrchestrator
from .storage import CacheStore

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"

EXAMPLES = """\
examples:
  uptime-checker --token=xxxxxx
  uptime-checker --watch 60
"""


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uptime-checker",
        description="Show UptimeRobot monitor status in the terminal",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--token",
        help="Your UptimeRobot readonly access token (saved for later runs)",
    )
    parser.add_argument(
        "--watch",
        type=non_negative_int,
        metavar="SECONDS",
        nargs="?",
        const=0,
        help="Keep refreshing; optional interval overrides UPTIME_CHECKER_REFRESH_INTERVAL",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level (default: LOG_LEVEL or warning)",
    )
    return parser


def build_orchestrator(config: AppConfig, fetcher: MonitorFetcher) -> RefreshOrchestrator:
    return RefreshOrchestrator(
        store=CacheStore(config.cache_file),
        fetcher=fetcher,
        window_ms=config.window_ms,
        max_requests=config.max_requests,
    )


async def run_once(config: AppConfig, token: str) -> RefreshResult:
    """Run a single refresh cycle and print the dashboard."""
    fetcher = MonitorFetcher(config.api_url, config.request_timeout_seconds)
    try:
        result = await build_orchestrator(config, fetcher).run_cycle(token)
    finally:
        await fetcher.close()

    print(render_result(result))
    return result


async def run_watch(config: AppConfig, token: str, interval_seconds: int) -> None:
    """Refresh on a timer, redrawing the dashboard each time."""
    fetcher = MonitorFetcher(config.api_url, config.request_timeout_seconds)

    def show(result: RefreshResult) -> None:
        sys.stdout.write(CLEAR_SCREEN)
        print(render_result(result), flush=True)

    try:
        await build_orchestrator(config, fetcher).run_forever(token, interval_seconds, show)
    finally:
        await fetcher.close()


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the terminal dashboard."""
    args = build_parser().parse_args(argv)
    config = AppConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        stream=sys.stderr,
    )

    resolver = CredentialResolver(TokenManager(config.config_dir), config.env_token)
    try:
        token = resolver.resolve(args.token)
    except ConfigError as e:
        print(str(e))
        return 1

    if args.watch is None:
        result = asyncio.run(run_once(config, token))
        return 1 if result.outcome == RefreshOutcome.ERROR else 0

    interval = args.watch or config.refresh_interval_seconds
    try:
        asyncio.run(run_watch(config, token, interval))
    except KeyboardInterrupt:
        logger.info("Watch mode interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
