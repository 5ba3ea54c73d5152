from __future__ import annotations

import time

from agentcart.domain.models import SearchHistoryEntry


class SearchHistory:
    """
    Verlauf der Suchbegriffe, neueste zuerst.
    Nur für die Anzeige gedacht; speichert keine Ergebnisse.
    """

    def __init__(self, max_size: int = 30) -> None:
        self._max_size = max_size
        self._entries: list[SearchHistoryEntry] = []

    def add(self, query: str) -> None:
        normalized = query.lower().strip()
        if not normalized:
            return
        self._entries = [e for e in self._entries if e.query != normalized]
        self._entries.insert(0, SearchHistoryEntry(query=normalized, timestamp=time.time()))
        del self._entries[self._max_size :]

    def get_recent(self, limit: int = 8) -> list[str]:
        return [e.query for e in self._entries[:limit]]

    def entries(self) -> list[SearchHistoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)
