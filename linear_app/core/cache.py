"""Explicit expiring cache for per-team issue snapshots and catalogs."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from .config import ISSUE_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


class TimedCache:
    """In-memory cache: ``{key: (expires_at, value)}``.

    Entries past their expiry are evicted on read. The clock is injectable so
    expiry can be exercised without sleeping.
    """

    def __init__(self, ttl: float = ISSUE_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl = float(ttl)
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for %s", key)
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            logger.debug("Cache entry for %s expired", key)
            del self._entries[key]
            return None
        logger.debug("Cache hit for %s", key)
        return value

    def put(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl, value)

    def expires_at(self, key: str) -> float | None:
        entry = self._entries.get(key)
        return entry[0] if entry else None

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Reset the cache."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
