from __future__ import annotations

import hashlib
from typing import Any, Dict, List, Protocol

from app.errors import QuoteProviderError
from app.schemas.quote import normalize_symbol


class QuoteProvider(Protocol):
    """Upstream quote source. Both calls may raise on network/provider errors."""

    def fetch_one(self, symbol: str) -> Dict[str, Any]:
        ...

    def fetch_many(self, symbols: List[str]) -> List[Dict[str, Any]]:
        ...


class DemoQuoteClient:
    """Offline provider with deterministic prices, for local runs."""

    def _quote(self, symbol: str) -> Dict[str, Any]:
        digest = int(hashlib.sha1(symbol.encode("utf-8")).hexdigest()[:8], 16)
        price = round(100.0 + (digest % 400000) / 100.0, 2)
        eps = round(price / (10 + digest % 30), 2)
        return {
            "symbol": symbol,
            "regularMarketPrice": price,
            "trailingPE": round(price / eps, 2),
            "epsTrailingTwelveMonths": eps,
        }

    def fetch_one(self, symbol: str) -> Dict[str, Any]:
        value = normalize_symbol(symbol)
        if not value:
            raise QuoteProviderError("empty symbol", [symbol])
        return self._quote(value)

    def fetch_many(self, symbols: List[str]) -> List[Dict[str, Any]]:
        return [self._quote(s) for s in (normalize_symbol(x) for x in symbols) if s]
