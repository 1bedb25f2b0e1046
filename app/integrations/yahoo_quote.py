from __future__ import annotations

from typing import Any, Dict, List, Optional

import yfinance as yf

from app.errors import QuoteProviderError
from app.schemas.quote import normalize_symbol


class YahooQuoteClient:
    """Yahoo Finance quotes through yfinance, for single and multi-symbol lookups."""

    def __init__(self, yf_module: Optional[Any] = None) -> None:
        self.yf = yf_module or yf

    @staticmethod
    def _to_raw(symbol: str, info: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(info, dict):
            return None
        price = info.get("regularMarketPrice")
        if price is None:
            price = info.get("currentPrice")
        # unknown tickers come back as a near-empty info dict without a price
        if price is None:
            return None
        eps = info.get("epsTrailingTwelveMonths")
        if eps is None:
            eps = info.get("trailingEps")
        return {
            "symbol": info.get("symbol") or symbol,
            "regularMarketPrice": price,
            "trailingPE": info.get("trailingPE"),
            "epsTrailingTwelveMonths": eps,
        }

    def fetch_one(self, symbol: str) -> Dict[str, Any]:
        value = normalize_symbol(symbol)
        try:
            info = self.yf.Ticker(value).info
        except Exception as exc:
            raise QuoteProviderError(f"quote request failed: {exc}", [value]) from exc
        row = self._to_raw(value, info)
        if row is None:
            raise QuoteProviderError(f"symbol not found: {value}", [value])
        return row

    def fetch_many(self, symbols: List[str]) -> List[Dict[str, Any]]:
        if not symbols:
            return []
        try:
            tickers = self.yf.Tickers(" ".join(symbols)).tickers
        except Exception as exc:
            raise QuoteProviderError(f"quote request failed: {exc}", symbols) from exc

        out: List[Dict[str, Any]] = []
        for symbol in symbols:
            ticker = tickers.get(symbol) or tickers.get(normalize_symbol(symbol))
            if ticker is None:
                continue
            try:
                info = ticker.info
            except Exception as exc:
                # left out of the batch result; the per-symbol fallback retries it
                print(f"[QUOTE][batch_symbol_skip] symbol={symbol} error={exc}", flush=True)
                continue
            row = self._to_raw(symbol, info)
            if row is not None:
                out.append(row)
        return out
