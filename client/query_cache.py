# client/query_cache.py

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

DEFAULT_STALE_TIME = 5 * 60


@dataclass
class CacheEntry:
    value: Any
    stored_at: float


class QueryCache:
    """
    Small keyed cache with a freshness window.

    Writes are last-write-wins; a lock keeps the health monitor thread
    and the caller from tearing an entry.
    """

    def __init__(
        self,
        stale_time: float = DEFAULT_STALE_TIME,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stale_time = stale_time
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        """Fresh value for key, or None when missing or stale."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at > self.stale_time:
                return None
            return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None
