"""Bounded, TTL-limited cache for loaded packs.

Entries are keyed by pack path and stay valid while they are younger than
the TTL and the manifest's modification time is unchanged. When the cache
is full, the oldest insertions are evicted first.
"""
import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, List, NamedTuple, Optional, Tuple

from stylepack.models import Pack

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0
DEFAULT_MAX_ENTRIES = 20


class CacheEntry(NamedTuple):
    pack: Pack
    errors: List[str]
    cached_at: float
    manifest_mtime: int


class PackCache:
    """Thread-safe pack cache with get/set/invalidate."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str, manifest_mtime: int) -> Optional[Tuple[Pack, List[str]]]:
        """Return (pack, errors) for a fresh entry, dropping stale ones."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            age = self._clock() - entry.cached_at
            if age >= self.ttl_seconds or entry.manifest_mtime != manifest_mtime:
                logger.debug("Dropping stale cache entry for %s", key)
                del self._entries[key]
                return None

            return entry.pack, list(entry.errors)

    def set(self, key: str, pack: Pack, errors: List[str], manifest_mtime: int) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(pack, list(errors), self._clock(), manifest_mtime)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry for %s", evicted)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
