from __future__ import annotations

import math
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field


def normalize_symbol(raw: Any) -> str:
    return str(raw if raw is not None else "").strip().upper()


def normalize_symbols(raws: Iterable[Any]) -> list[str]:
    """Uppercase, trim, drop blanks and dedupe, keeping first-seen order."""
    out: list[str] = []
    seen: set[str] = set()
    for raw in raws:
        value = normalize_symbol(raw)
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def parse_symbols_param(value: str | None) -> list[str]:
    return normalize_symbols((value or "").split(","))


def _to_optional_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class QuoteData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cmp: float | None = None
    pe_ratio: float | None = Field(default=None, alias="peRatio")
    earnings: float | None = None

    @classmethod
    def from_raw(cls, raw: dict[str, Any] | None) -> "QuoteData":
        if not isinstance(raw, dict):
            raw = {}
        return cls(
            cmp=_to_optional_float(raw.get("regularMarketPrice")),
            pe_ratio=_to_optional_float(raw.get("trailingPE")),
            earnings=_to_optional_float(raw.get("epsTrailingTwelveMonths")),
        )


class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: QuoteData
    fetched_at: int
    expires_at: int


class FetchResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    cmp: float | None = None
    pe_ratio: float | None = Field(default=None, alias="peRatio")
    earnings: float | None = None
    cached: bool = False
    fetched_at: int | None = Field(default=None, alias="fetchedAt")
    error: bool = False

    @classmethod
    def fresh(cls, symbol: str, data: QuoteData, fetched_at: int, *, cached: bool) -> "FetchResult":
        return cls(
            symbol=symbol,
            cmp=data.cmp,
            pe_ratio=data.pe_ratio,
            earnings=data.earnings,
            cached=cached,
            fetched_at=fetched_at,
        )

    @classmethod
    def failed(cls, symbol: str) -> "FetchResult":
        return cls(symbol=symbol, cached=False, error=True)


class QuotesResponse(BaseModel):
    results: dict[str, FetchResult]


class SingleQuote(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    cmp: float | None = None
    pe_ratio: float | None = Field(default=None, alias="peRatio")
    earnings: float | None = None
