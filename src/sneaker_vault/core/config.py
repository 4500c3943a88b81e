# src/sneaker_vault/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Sneaker Vault API"
    app_version: str = "1.0.0"
    debug: bool = False

    # API Keys: Mapping von API-Key zu User-ID (JSON-String als Env-Var)
    # Format: '{"key_abc123": "user_alice", "key_xyz789": "user_bob"}'
    api_keys: dict[str, str] = Field(default_factory=dict)

    # Upstream Sneaker-Datenquelle (Sneaks-API kompatibel)
    sneaks_api_base_url: str = "http://localhost:4000"
    upstream_timeout_seconds: float = 15.0

    # Row-Store
    database_url: str = "sqlite+aiosqlite:///./sneaker_vault.db"

    # Client-Koordination
    backend_base_url: str = "http://localhost:8000/api/v1"
    client_timeout_seconds: float = 10.0
    # Persistenter Client-Cache (sync SQLAlchemy-URL, z.B. "sqlite:///./client_cache.db").
    # Ohne Angabe lebt der Cache nur im Speicher.
    client_cache_url: str | None = None
    cache_namespace: str = "sneaker_vault_"
    content_cache_ttl_seconds: int = 24 * 60 * 60
    status_cache_ttl_seconds: int = 5 * 60
    search_debounce_seconds: float = 0.5
    search_min_query_length: int = 2
    search_result_limit: int = 10

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
