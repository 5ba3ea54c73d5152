from __future__ import annotations

import threading
from dataclasses import dataclass, field

from agentcart.domain.models import RawSearchProduct
from agentcart.services.search_cache import SearchCache
from agentcart.services.search_history import SearchHistory


@dataclass
class SearchSession:
    """Such-Kontext eines Tenants: eigener Ergebnis-Cache und eigener Verlauf."""

    tenant_id: str
    cache: SearchCache[list[RawSearchProduct]] = field(default_factory=SearchCache)
    history: SearchHistory = field(default_factory=SearchHistory)


class SearchSessionRegistry:
    """
    Legt Sessions beim ersten Zugriff an.
    Tenants teilen sich weder Cache noch Verlauf.
    """

    def __init__(
        self,
        cache_max_size: int = 50,
        cache_ttl_seconds: float = 300.0,
        history_max_size: int = 30,
    ) -> None:
        self._cache_max_size = cache_max_size
        self._cache_ttl_seconds = cache_ttl_seconds
        self._history_max_size = history_max_size
        self._sessions: dict[str, SearchSession] = {}
        self._lock = threading.Lock()

    def get(self, tenant_id: str) -> SearchSession:
        with self._lock:
            session = self._sessions.get(tenant_id)
            if session is None:
                session = SearchSession(
                    tenant_id=tenant_id,
                    cache=SearchCache(
                        max_size=self._cache_max_size, ttl_seconds=self._cache_ttl_seconds
                    ),
                    history=SearchHistory(max_size=self._history_max_size),
                )
                self._sessions[tenant_id] = session
            return session

    def __len__(self) -> int:
        return len(self._sessions)
