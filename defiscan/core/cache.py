"""
Freshness cache for the external protocol dataset.

Holds the last successful fetch as a single slot and serves it while it is
younger than the validity window. Expiry is checked lazily on read.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from defiscan.config.settings import DEFILLAMA_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    captured_at: float


class FreshnessCache:
    """
    Single-slot cache with get-or-refresh semantics.

    The clock is injectable so tests can move time forward without sleeping.
    Concurrent callers on a cold cache may each run the refresh; the last
    successful write wins.
    """

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.time):
        if ttl_seconds is None:
            ttl_seconds = DEFILLAMA_CONFIG["cache_duration_seconds"]
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    def is_fresh(self) -> bool:
        """True if a slot exists and is still inside the validity window."""
        if self._entry is None:
            return False
        return self._clock() - self._entry.captured_at < self.ttl_seconds

    def get_or_refresh(self, refresh: Callable[[], Any]) -> Any:
        """
        Return cached data, or call refresh() and store its result.

        Args:
            refresh: Zero-argument callable producing fresh data

        Returns:
            Cached or freshly fetched data

        Raises:
            Whatever refresh() raises. The existing slot is left untouched.
        """
        now = self._clock()
        if self._entry is not None and now - self._entry.captured_at < self.ttl_seconds:
            logger.debug("Cache hit (age %.1fs)", now - self._entry.captured_at)
            return self._entry.data

        logger.debug("Cache miss, refreshing")
        data = refresh()
        self._entry = CacheEntry(data=data, captured_at=now)
        return data
