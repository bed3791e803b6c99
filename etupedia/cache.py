"""In-process cache with lazy time-based expiry."""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class CacheEntry:
    data: Any
    timestamp: float


class TTLCache:
    """
    Map of string keys to values that go stale ``ttl`` seconds after writing.

    Expiry is checked on read only: stale entries are treated as misses and
    replaced by the next write. There is no locking; concurrent writers to
    the same key simply overwrite each other.
    """

    def __init__(self, ttl: float = 3600.0, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or ``None`` if missing or stale."""
        entry = self._entries.get(key)
        if entry is not None and self.clock() - entry.timestamp < self.ttl:
            return entry.data
        return None

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, timestamp=self.clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
