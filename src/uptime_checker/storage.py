"""Response cache and sliding-window request accounting."""

import logging
from pathlib import Path

from pydantic import ValidationError

from .exceptions import PersistenceError
from .models import CacheRecord, Monitor

logger = logging.getLogger(__name__)


def prune_timestamps(record: CacheRecord, now: int, window_ms: int) -> CacheRecord:
    """Drop request timestamps that fall outside the trailing window.

    Args:
        record: Cache record to prune
        now: Current time in epoch milliseconds
        window_ms: Window length in milliseconds

    Returns:
        A new record keeping only timestamps newer than now - window_ms
    """
    cutoff = now - window_ms
    kept = [timestamp for timestamp in record.timestamps if timestamp > cutoff]
    if len(kept) != len(record.timestamps):
        logger.debug(f"Pruned request timestamps - dropped: {len(record.timestamps) - len(kept)}, kept: {len(kept)}")
    return record.model_copy(update={"timestamps": kept})


def is_rate_limited(record: CacheRecord, max_requests: int) -> bool:
    """Return True when the window already holds max_requests calls."""
    return len(record.timestamps) >= max_requests


def record_request(record: CacheRecord, now: int, monitors: list[Monitor]) -> CacheRecord:
    """Return a record with now appended and the dataset replaced."""
    return record.model_copy(update={"data": list(monitors), "timestamps": [*record.timestamps, now]})


class CacheStore:
    """File-backed storage for the cache record."""

    def __init__(self, cache_file: Path) -> None:
        """Initialize the cache store.

        Args:
            cache_file: Path to cache.json
        """
        self.cache_file = Path(cache_file)
        logger.debug(f"CacheStore initialized - cache_file: {self.cache_file}")

    def load(self) -> CacheRecord:
        """Read the cache record.

        A missing, unreadable or invalid file yields an empty record.
        """
        try:
            content = self.cache_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.info(f"No cache file available - path: {self.cache_file}, reason: {e}")
            return CacheRecord()

        try:
            record = CacheRecord.model_validate_json(content)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid cache file - path: {self.cache_file}, errors: {e.error_count()}")
            return CacheRecord()

        logger.debug(
            f"Cache loaded - monitors: {len(record.data) if record.data is not None else None}, "
            f"timestamps: {len(record.timestamps)}"
        )
        return record

    def save(self, record: CacheRecord) -> None:
        """Write the cache record, creating the directory if needed.

        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file.write_text(record.model_dump_json(), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write cache file {self.cache_file}: {e}") from e

        logger.debug(f"Cache saved - path: {self.cache_file}, timestamps: {len(record.timestamps)}")
