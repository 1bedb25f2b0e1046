from __future__ import annotations


class InvalidRequestError(ValueError):
    """Raised when a quote request carries no usable symbols."""


class QuoteProviderError(Exception):
    def __init__(self, message: str, symbols: list[str] | None = None) -> None:
        super().__init__(message)
        self.symbols = list(symbols or [])


class ProviderBatchFailure(QuoteProviderError):
    """A chunk-level batch call failed; its symbols go to the fallback path."""


class ProviderSymbolFailure(QuoteProviderError):
    """An individual fallback fetch failed."""
