import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field


class Settings(BaseModel):
    QUOTE_TTL_MS: int = Field(default=60_000, ge=1)
    QUOTE_BATCH_CHUNK_SIZE: int = Field(default=20, ge=1)
    QUOTE_FALLBACK_CONCURRENCY: int = Field(default=3, ge=1)
    QUOTE_POLL_INTERVAL_SEC: int = Field(default=15, ge=1)
    QUOTE_PROVIDER: Literal["yahoo", "demo"] = "yahoo"

    @classmethod
    def from_env(cls) -> "Settings":
        keys = (
            "QUOTE_TTL_MS",
            "QUOTE_BATCH_CHUNK_SIZE",
            "QUOTE_FALLBACK_CONCURRENCY",
            "QUOTE_POLL_INTERVAL_SEC",
            "QUOTE_PROVIDER",
        )
        # unset vars fall through to the field defaults
        raw = {key: os.getenv(key) for key in keys}
        return cls.model_validate({k: v.strip() for k, v in raw.items() if v is not None and v.strip()})


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
