# src/agentcart/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "AgentCart Search API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API Keys: Mapping von API-Key zu Tenant-ID (JSON-String als Env-Var)
    # Format: '{"key_abc123": "tenant_alice", "key_xyz789": "tenant_bob"}'
    api_keys: dict[str, str] = Field(default_factory=dict)

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    # Search Cache (pro Tenant)
    search_cache_max_size: int = Field(default=50, ge=1)
    search_cache_ttl_seconds: float = Field(default=300.0, gt=0)
    search_history_max_size: int = Field(default=30, ge=1)
    max_queries_per_search: int = Field(default=4, ge=1)

    # Product Search Function (leer = Offline-Katalog)
    product_search_url: str = ""
    product_search_api_key: str = ""
    product_search_timeout_seconds: float = 30.0

    # Offline-Katalog: JSON-Liste von Rohtreffern (camelCase oder snake_case)
    static_catalog_path: str = ""

    default_country: str = "us"
    default_currency: str = "USD"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
