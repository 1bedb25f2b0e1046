from __future__ import annotations

import threading

from app.schemas.quote import CacheEntry, QuoteData

DEFAULT_TTL_MS = 60_000


class QuoteCache:
    """Process-local TTL store keyed by normalized symbol.

    Entries are never evicted; an expired entry stays readable as the
    last-known-good value until the next successful fetch replaces it.
    """

    def __init__(self, ttl_ms: int = DEFAULT_TTL_MS) -> None:
        if ttl_ms < 1:
            raise ValueError("ttl_ms must be >= 1")
        self.ttl_ms = ttl_ms
        self._lock = threading.Lock()
        self._rows: dict[str, CacheEntry] = {}

    def get(self, symbol: str) -> CacheEntry | None:
        return self._rows.get(symbol)

    def put(self, symbol: str, data: QuoteData, now: int) -> CacheEntry:
        entry = CacheEntry(data=data, fetched_at=now, expires_at=now + self.ttl_ms)
        with self._lock:
            self._rows[symbol] = entry
        return entry

    def is_fresh(self, symbol: str, now: int) -> bool:
        entry = self.get(symbol)
        return entry is not None and now < entry.expires_at

    def size(self) -> int:
        return len(self._rows)

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()
