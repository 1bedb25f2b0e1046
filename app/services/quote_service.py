from __future__ import annotations

import threading
import time
from typing import Callable, Iterable

from app.errors import InvalidRequestError, QuoteProviderError
from app.integrations.quote_provider import QuoteProvider
from app.schemas.quote import FetchResult, QuoteData, SingleQuote, normalize_symbol, normalize_symbols
from app.services.quote_cache import QuoteCache
from app.services.quote_refresh import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_FALLBACK_CONCURRENCY,
    BatchRefreshOrchestrator,
)


def epoch_ms() -> int:
    return int(time.time() * 1000)


class QuoteService:
    """Cache-first quote lookup for a symbol set with batch refresh of stale rows."""

    def __init__(
        self,
        *,
        quote_cache: QuoteCache,
        provider: QuoteProvider,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        fallback_concurrency: int = DEFAULT_FALLBACK_CONCURRENCY,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.quote_cache = quote_cache
        self.refresher = BatchRefreshOrchestrator(
            cache=quote_cache,
            provider=provider,
            chunk_size=chunk_size,
            fallback_concurrency=fallback_concurrency,
        )
        self.clock = clock or epoch_ms

        self.requests = 0
        self.last_requested = 0
        self.last_fresh = 0
        self.last_stale = 0
        self.last_errors = 0
        self._metrics_lock = threading.Lock()

    @property
    def provider(self) -> QuoteProvider:
        return self.refresher.provider

    @provider.setter
    def provider(self, value: QuoteProvider) -> None:
        self.refresher.provider = value

    def get_quotes(self, symbols: Iterable[str]) -> dict[str, FetchResult]:
        requested = normalize_symbols(symbols)
        if not requested:
            raise InvalidRequestError("No symbols provided")

        now = self.clock()
        fresh: dict[str, FetchResult] = {}
        stale: list[str] = []
        for symbol in requested:
            entry = self.quote_cache.get(symbol) if self.quote_cache.is_fresh(symbol, now) else None
            if entry is not None:
                fresh[symbol] = FetchResult.fresh(symbol, entry.data, entry.fetched_at, cached=True)
            else:
                stale.append(symbol)

        refreshed = self.refresher.refresh(stale, now)

        out: dict[str, FetchResult] = {}
        for symbol in requested:
            # provider-keyed extras stay cached but are not echoed back
            row = fresh.get(symbol) or refreshed.get(symbol)
            out[symbol] = row if row is not None else FetchResult.failed(symbol)

        errors = sum(1 for r in out.values() if r.error)
        with self._metrics_lock:
            self.requests += 1
            self.last_requested = len(requested)
            self.last_fresh = len(fresh)
            self.last_stale = len(stale)
            self.last_errors = errors

        print(
            "[QUOTE][batch_resolve] "
            f"requested={len(requested)} fresh={len(fresh)} stale={len(stale)} "
            f"resolved={len(stale) - errors} errors={errors}",
            flush=True,
        )
        return out

    def get_quote(self, symbol: str) -> SingleQuote:
        value = normalize_symbol(symbol)
        if not value:
            raise InvalidRequestError("No symbol provided")
        try:
            raw = self.provider.fetch_one(value)
        except QuoteProviderError as exc:
            print(f"[QUOTE][single_error] symbol={value} error={exc}", flush=True)
            raise
        except Exception as exc:
            print(f"[QUOTE][single_error] symbol={value} error={exc}", flush=True)
            raise QuoteProviderError(str(exc), [value]) from exc
        data = QuoteData.from_raw(raw)
        return SingleQuote(symbol=value, cmp=data.cmp, pe_ratio=data.pe_ratio, earnings=data.earnings)

    def metrics(self) -> dict[str, int]:
        with self._metrics_lock:
            out = {
                "cached_symbols": self.quote_cache.size(),
                "ttl_ms": self.quote_cache.ttl_ms,
                "requests": self.requests,
                "last_requested": self.last_requested,
                "last_fresh": self.last_fresh,
                "last_stale": self.last_stale,
                "last_errors": self.last_errors,
            }
        out.update(self.refresher.metrics())
        return out
