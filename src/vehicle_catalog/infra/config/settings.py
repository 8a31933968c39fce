"""Application settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    page_size: int = 12
    catalog_source: str = "in_memory"  # in_memory or postgres
    sample_catalog_size: int = 60  # Listings generated for the in_memory source
    catalog_cache_ttl_seconds: int = 300  # 5 minutes
    llm_enabled: bool = False
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 10
    log_level: str = "INFO"
    database_url: str = ""  # Required when catalog_source=postgres

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


def get_settings() -> Settings:
    return Settings()


def database_url(settings: Settings | None = None) -> str:
    url = (settings or get_settings()).database_url

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url
