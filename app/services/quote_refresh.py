from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from app.errors import ProviderBatchFailure, ProviderSymbolFailure
from app.integrations.quote_provider import QuoteProvider
from app.schemas.quote import FetchResult, QuoteData, normalize_symbol
from app.services.admission_gate import AdmissionGate
from app.services.quote_cache import QuoteCache

DEFAULT_CHUNK_SIZE = 20
DEFAULT_FALLBACK_CONCURRENCY = 3


def chunked(symbols: list[str], size: int) -> list[list[str]]:
    return [symbols[i : i + size] for i in range(0, len(symbols), size)]


class BatchRefreshOrchestrator:
    """Batch-first refresh of stale symbols with a per-symbol fallback.

    Stale symbols are sent to the provider in chunks. Anything a chunk did
    not resolve (omitted by the provider, or the whole chunk failed) is
    retried one symbol at a time, with at most ``fallback_concurrency``
    calls in flight.
    """

    def __init__(
        self,
        *,
        cache: QuoteCache,
        provider: QuoteProvider,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        fallback_concurrency: int = DEFAULT_FALLBACK_CONCURRENCY,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self.cache = cache
        self.provider = provider
        self.chunk_size = chunk_size
        self.gate = AdmissionGate(fallback_concurrency)

        self.batch_calls = 0
        self.batch_failures = 0
        self.fallback_calls = 0
        self.fallback_failures = 0
        self._metrics_lock = threading.Lock()

    def _count(self, name: str, amount: int = 1) -> None:
        with self._metrics_lock:
            setattr(self, name, getattr(self, name) + amount)

    def _fetch_chunk(self, chunk: list[str], now: int) -> dict[str, FetchResult]:
        self._count("batch_calls")
        try:
            items = self.provider.fetch_many(chunk)
        except Exception as exc:
            raise ProviderBatchFailure(str(exc), chunk) from exc

        out: dict[str, FetchResult] = {}
        for raw in items or []:
            symbol = normalize_symbol(raw.get("symbol")) if isinstance(raw, dict) else ""
            if not symbol:
                continue
            # keyed by the provider's own symbol, even if it was not requested
            data = QuoteData.from_raw(raw)
            self.cache.put(symbol, data, now)
            out[symbol] = FetchResult.fresh(symbol, data, now, cached=False)
        return out

    def _fetch_symbol(self, symbol: str, now: int) -> FetchResult:
        with self.gate:
            try:
                raw = self.provider.fetch_one(symbol)
            except Exception as exc:
                failure = ProviderSymbolFailure(str(exc), [symbol])
                print(f"[QUOTE][fallback_error] symbol={symbol} error={failure}", flush=True)
                return FetchResult.failed(symbol)
        data = QuoteData.from_raw(raw)
        self.cache.put(symbol, data, now)
        return FetchResult.fresh(symbol, data, now, cached=False)

    def _fetch_fallback(self, symbols: list[str], now: int) -> list[FetchResult]:
        if not symbols:
            return []
        self._count("fallback_calls", len(symbols))
        workers = min(self.gate.limit, len(symbols))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="quote-fallback") as executor:
            results = list(executor.map(lambda s: self._fetch_symbol(s, now), symbols))
        self._count("fallback_failures", sum(1 for r in results if r.error))
        return results

    def refresh(self, stale_symbols: list[str], now: int) -> dict[str, FetchResult]:
        results: dict[str, FetchResult] = {}
        if not stale_symbols:
            return results

        for chunk in chunked(stale_symbols, self.chunk_size):
            try:
                results.update(self._fetch_chunk(chunk, now))
            except ProviderBatchFailure as exc:
                self._count("batch_failures")
                print(
                    f"[QUOTE][batch_chunk_error] chunk_size={len(chunk)} "
                    f"symbols={','.join(exc.symbols)} error={exc}",
                    flush=True,
                )

        missing = [s for s in stale_symbols if s not in results]
        for result in self._fetch_fallback(missing, now):
            results[result.symbol] = result
        return results

    def metrics(self) -> dict[str, int]:
        with self._metrics_lock:
            return {
                "batch_calls": self.batch_calls,
                "batch_failures": self.batch_failures,
                "fallback_calls": self.fallback_calls,
                "fallback_failures": self.fallback_failures,
                "fallback_peak_in_flight": self.gate.peak_in_flight,
            }
