from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import router
from app.config.settings import Settings, get_settings
from app.integrations.quote_provider import DemoQuoteClient, QuoteProvider
from app.integrations.yahoo_quote import YahooQuoteClient
from app.services.quote_cache import QuoteCache
from app.services.quote_service import QuoteService


def build_provider(settings: Settings) -> QuoteProvider:
    if settings.QUOTE_PROVIDER == "demo":
        return DemoQuoteClient()
    return YahooQuoteClient()


def build_quote_service(settings: Settings) -> QuoteService:
    # one cache per process, shared by every request
    return QuoteService(
        quote_cache=QuoteCache(ttl_ms=settings.QUOTE_TTL_MS),
        provider=build_provider(settings),
        chunk_size=settings.QUOTE_BATCH_CHUNK_SIZE,
        fallback_concurrency=settings.QUOTE_FALLBACK_CONCURRENCY,
    )


app = FastAPI(title="Portfolio Quote Gateway", version="0.1.0")
app.include_router(router, prefix="/v1")

app.state.get_settings = get_settings
app.state.quote_service = build_quote_service(get_settings())
