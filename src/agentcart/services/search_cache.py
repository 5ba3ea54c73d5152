from __future__ import annotations

import logging
import re
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Generic, TypeVar

from agentcart.core.metrics import CACHE_EVICTIONS, CACHE_HITS, CACHE_MISSES
from agentcart.domain.models import CacheStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

_WHITESPACE = re.compile(r"\s+")


@dataclass
class CacheEntry(Generic[T]):
    data: T
    timestamp: float
    hit_count: int = 1


class SearchCache(Generic[T]):
    """
    LRU-Cache für Suchergebnisse mit TTL und Hit-Zählung.

    Die Reihenfolge des OrderedDict ist die Zugriffsreihenfolge: der zuletzt
    verwendete Eintrag steht am Ende, verdrängt wird immer der erste.
    Abgelaufene Einträge werden erst beim nächsten Zugriff entfernt, `size`
    zählt sie bis dahin mit.
    """

    def __init__(self, max_size: int = 50, ttl_seconds: float = 300.0) -> None:
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @staticmethod
    def normalize_key(query: str) -> str:
        """Kleinschreibung, Trimmen, Whitespace-Folgen zu einem Leerzeichen."""
        return _WHITESPACE.sub(" ", query.lower().strip())

    def _is_valid(self, entry: CacheEntry[T], now: float) -> bool:
        return now - entry.timestamp < self._ttl

    def _lookup(self, key: str) -> CacheEntry[T] | None:
        # Caller must hold the lock.
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._is_valid(entry, time.time()):
            del self._entries[key]
            return None
        return entry

    def get(self, query: str) -> T | None:
        """Liefert die gecachten Daten oder None (Miss oder abgelaufen)."""
        key = self.normalize_key(query)
        with self._lock:
            entry = self._lookup(key)
            if entry is None:
                CACHE_MISSES.inc()
                return None
            entry.hit_count += 1
            self._entries.move_to_end(key)
        CACHE_HITS.inc()
        return entry.data

    def set(self, query: str, data: T) -> None:
        """Speichert Daten als frischen Eintrag (hit_count=1) am MRU-Ende."""
        key = self.normalize_key(query)
        with self._lock:
            if len(self._entries) >= self._max_size and key not in self._entries:
                evicted_key, _ = self._entries.popitem(last=False)
                CACHE_EVICTIONS.inc()
                logger.debug("search_cache evict key=%r", evicted_key)
            self._entries[key] = CacheEntry(data=data, timestamp=time.time())
            self._entries.move_to_end(key)

    def has(self, query: str) -> bool:
        with self._lock:
            return self._lookup(self.normalize_key(query)) is not None

    def _valid_items(self) -> list[tuple[str, CacheEntry[T]]]:
        now = time.time()
        with self._lock:
            return [(k, e) for k, e in self._entries.items() if self._is_valid(e, now)]

    def get_frequent_queries(self, limit: int = 5) -> list[str]:
        items = sorted(self._valid_items(), key=lambda item: item[1].hit_count, reverse=True)
        return [key for key, _ in items[:limit]]

    def get_recent_queries(self, limit: int = 10) -> list[str]:
        items = sorted(self._valid_items(), key=lambda item: item[1].timestamp, reverse=True)
        return [key for key, _ in items[:limit]]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, query: object) -> bool:
        return isinstance(query, str) and self.has(query)

    def stats(self, frequent_limit: int = 5, recent_limit: int = 10) -> CacheStats:
        return CacheStats(
            size=self.size,
            max_size=self._max_size,
            ttl_seconds=self._ttl,
            frequent_queries=self.get_frequent_queries(frequent_limit),
            recent_queries=self.get_recent_queries(recent_limit),
        )
