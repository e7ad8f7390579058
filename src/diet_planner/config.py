"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    optimization_url: str
    optimization_timeout_seconds: float = 180.0
    optimization_retry_attempts: int = 2
    optimization_retry_base_delay_seconds: float = 1.0
    product_cache_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
