import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

log = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: Any
    expires_at: float


class ResponseCache:
    """
    Simple in-memory cache with a fixed time-to-live per entry.

    Stale entries are evicted when they are read (or listed), there is no
    background sweep and no size bound.
    """

    def __init__(self, ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() > entry.expires_at:
            log.debug(f"Cache entry '{key}' expired")
            del self._entries[key]
            return None

        return entry.data

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, expires_at=self._clock() + self.ttl_seconds)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> List[str]:
        """Keys of live entries, purging expired ones on the way."""
        now = self._clock()
        for key in [k for k, e in self._entries.items() if now > e.expires_at]:
            del self._entries[key]
        return list(self._entries)

    def info(self) -> Dict[str, Any]:
        keys = self.keys()
        return {"size": len(keys), "keys": keys}

    def __len__(self) -> int:
        return len(self.keys())
