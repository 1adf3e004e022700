"""Short-lived in-memory cache of ETAs keyed by (stop, route).

Entries are never purged; an entry older than the TTL is simply ignored at
read time and overwritten by the next store.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, NamedTuple, Optional

from bustracker.config import settings
from bustracker.locks import hold


class CacheKey(NamedTuple):
    stop: str
    route: str


@dataclass(frozen=True)
class CacheEntry:
    eta_minutes: int
    recorded_at_ms: int


def monotonic_ms() -> int:
    """Milliseconds from a clock that never goes backwards."""
    return time.monotonic_ns() // 1_000_000


class EtaCache:
    """Lock-guarded TTL cache of ETAs.

    Each public method takes the lock for a single dict read or write and
    releases it before returning, so it is safe to call between ``await``
    points of concurrent queries.
    """

    def __init__(
        self,
        ttl_ms: Optional[int] = None,
        clock: Callable[[], int] = monotonic_ms,
        lock_timeout: Optional[float] = None,
    ) -> None:
        self.ttl_ms = settings.cache_ttl_ms if ttl_ms is None else ttl_ms
        self._clock = clock
        self._lock_timeout = settings.lock_timeout if lock_timeout is None else lock_timeout
        self._lock = threading.Lock()
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def lookup(self, key: CacheKey) -> Optional[int]:
        """Return the cached ETA for *key* if it is younger than the TTL."""
        with hold(self._lock, self._lock_timeout, "cache"):
            entry = self._entries.get(key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry.eta_minutes

    def store(self, key: CacheKey, eta_minutes: int) -> None:
        """Replace the entry for *key* with a freshly stamped one."""
        entry = CacheEntry(eta_minutes=eta_minutes, recorded_at_ms=self._clock())
        with hold(self._lock, self._lock_timeout, "cache"):
            self._entries[key] = entry

    def entry(self, key: CacheKey) -> Optional[CacheEntry]:
        """Return the raw entry for *key*, fresh or not."""
        with hold(self._lock, self._lock_timeout, "cache"):
            return self._entries.get(key)

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.recorded_at_ms < self.ttl_ms

    def __contains__(self, key: object) -> bool:
        with hold(self._lock, self._lock_timeout, "cache"):
            return key in self._entries

    def __len__(self) -> int:
        with hold(self._lock, self._lock_timeout, "cache"):
            return len(self._entries)
