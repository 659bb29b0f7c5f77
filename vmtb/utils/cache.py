"""
Per-user object cache for the VMTB core.
Keeps long-lived per-user services in memory with idle expiry and a size cap.
"""

import time
from threading import Lock
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class KeyedCache(Generic[T]):
    """Thread-safe in-memory cache with idle TTL and least-recently-used eviction."""

    def __init__(
        self,
        ttl: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._lock = Lock()
        self._ttl = ttl if ttl is not None else settings.meeting_feed_ttl_seconds
        self._max_entries = max_entries if max_entries is not None else settings.max_meeting_feeds
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _is_expired(self, entry: Dict[str, Any], now: float) -> bool:
        return now - entry["last_access"] > self._ttl

    def get_or_create(self, key: str, factory: Callable[[], T]) -> T:
        """Return the cached value for ``key``, building it on a miss or after expiry."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not self._is_expired(entry, now):
                entry["last_access"] = now
                return entry["value"]

            value = factory()
            self._entries[key] = {"value": value, "last_access": now}
            self._evict(now)
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]

        overflow = len(self._entries) - self._max_entries
        if overflow > 0:
            oldest = sorted(self._entries, key=lambda key: self._entries[key]["last_access"])
            for key in oldest[:overflow]:
                del self._entries[key]

        if expired or overflow > 0:
            logger.debug(f"Evicted {len(expired) + max(overflow, 0)} cached entries")
