# erp_console/cache.py
"""
Query cache with stale/GC timers and prefix invalidation.

Keys are tuples, e.g. ("production-orders", "detail", 12, "wastage").
invalidate(("production-orders", "detail", 12)) marks the detail and the
wastage entry stale; the next fetch reloads them. A load that is still
in flight when its key is invalidated is stored already stale.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Key = Tuple[Hashable, ...]
NEVER_STALE = math.inf


def freeze(params: Optional[Dict[str, Any]]) -> Tuple[Tuple[str, Any], ...]:
    """Turn a params dict into an order-independent hashable key part."""
    if not params:
        return ()
    items = []
    for k, v in params.items():
        if v is None:
            continue
        if isinstance(v, dict):
            v = freeze(v)
        elif isinstance(v, (list, set)):
            v = tuple(sorted(v, key=repr)) if isinstance(v, set) else tuple(v)
        items.append((str(k), v))
    return tuple(sorted(items, key=lambda kv: kv[0]))


@dataclass
class Entry:
    data: Any
    fetched_at: float
    used_at: float
    stale: bool = False


class QueryCache:
    def __init__(
        self,
        stale_time: float = 300.0,
        gc_time: float = 600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stale_time = stale_time
        self.gc_time = gc_time
        self._clock = clock
        self._entries: Dict[Key, Entry] = {}
        # key -> [generation, loads in flight]
        self._loading: Dict[Key, List[int]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, entry: Entry, stale_time: float, now: float) -> bool:
        if entry.stale:
            return False
        return (now - entry.fetched_at) < stale_time

    def fetch(self, key: Key, loader: Callable[[], Any], stale_time: Optional[float] = None) -> Any:
        """Return cached data while fresh, otherwise call loader() and store its result."""
        ttl = self.stale_time if stale_time is None else stale_time
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry, ttl, now):
                entry.used_at = now
                return entry.data
            slot = self._loading.setdefault(key, [0, 0])
            slot[1] += 1
            generation = slot[0]
        # load outside the lock; a loader error leaves the old entry in place
        try:
            data = loader()
        finally:
            with self._lock:
                slot[1] -= 1
                invalidated = slot[0] != generation
                if slot[1] == 0 and self._loading.get(key) is slot:
                    del self._loading[key]
        now = self._clock()
        with self._lock:
            self._entries[key] = Entry(data=data, fetched_at=now, used_at=now, stale=invalidated)
        if invalidated:
            logger.debug("cache %r invalidated during load, stored stale", key)
        return data

    def peek(self, key: Key) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            return entry.data if entry is not None else None

    def set(self, key: Key, data: Any) -> None:
        now = self._clock()
        with self._lock:
            self._entries[key] = Entry(data=data, fetched_at=now, used_at=now)

    def invalidate(self, prefix: Key) -> int:
        """Mark every key starting with prefix stale. Returns how many entries were touched."""
        n = len(prefix)
        touched = 0
        with self._lock:
            for key, entry in self._entries.items():
                if key[:n] == tuple(prefix):
                    entry.stale = True
                    touched += 1
            for key, slot in self._loading.items():
                if key[:n] == tuple(prefix):
                    slot[0] += 1
        if touched:
            logger.debug("cache invalidate %r -> %d entries", prefix, touched)
        return touched

    def gc(self) -> int:
        """Drop entries unused for longer than gc_time."""
        now = self._clock()
        with self._lock:
            dead = [k for k, e in self._entries.items() if now - e.used_at >= self.gc_time]
            for k in dead:
                del self._entries[k]
        return len(dead)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for slot in self._loading.values():
                slot[0] += 1

    def stats(self) -> Dict[str, int]:
        with self._lock:
            stale = sum(1 for e in self._entries.values() if e.stale)
            return {"entries": len(self._entries), "stale": stale}
