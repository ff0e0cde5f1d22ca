# app/config.py
from __future__ import annotations

import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.errors import ConfigurationError


class Settings(BaseSettings):
    # Mongo
    mongodb_uri: str = os.getenv("MONGODB_URI", "")
    # only used when the URI does not name a database
    mongo_db: str = os.getenv("MONGO_DB", "perfume_catalog")
    perfumes_collection: str = os.getenv("PERFUMES_COLLECTION", "perfumes")

    # Apify (top-notes enrichment)
    apify_token: str = os.getenv("APIFY_TOKEN", "")
    apify_base_url: str = os.getenv("APIFY_BASE_URL", "https://api.apify.com")
    apify_notes_task: str = os.getenv("APIFY_NOTES_TASK", "apify/fragrantica-scraper")

    # HTTP client
    http_client_timeout_seconds: float = float(
        os.getenv("HTTP_CLIENT_TIMEOUT_SECONDS", "30")
    )

    # Identity
    service_name: str = os.getenv("SERVICE_NAME", "perfume-service")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    def ensure_required(self) -> None:
        """
        Raise ConfigurationError naming the first absent required setting.
        Checked per request, before any store access.
        """
        if not self.mongodb_uri:
            raise ConfigurationError("Missing MongoDB URI")
        if not self.apify_token:
            raise ConfigurationError("Missing Apify Token")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
