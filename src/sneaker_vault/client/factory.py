# src/sneaker_vault/client/factory.py
from __future__ import annotations

import httpx

from sneaker_vault.client.catalog_client import CatalogClient
from sneaker_vault.client.detail import DetailCoordinator
from sneaker_vault.client.search import SearchCoordinator
from sneaker_vault.client.session_client import SessionClient
from sneaker_vault.core.config import Settings
from sneaker_vault.repositories.kv_storage import (
    KeyValueStorage,
    MemoryKeyValueStorage,
    SqlKeyValueStorage,
)
from sneaker_vault.services.ephemeral_cache import EphemeralCache


def create_http_client(settings: Settings, api_key: str | None = None) -> httpx.AsyncClient:
    headers = {"User-Agent": f"SneakerVault/{settings.app_version}"}
    if api_key:
        headers["X-API-Key"] = api_key
    return httpx.AsyncClient(
        base_url=settings.backend_base_url,
        headers=headers,
        timeout=settings.client_timeout_seconds,
        follow_redirects=True,
    )


def create_cache_storage(settings: Settings) -> KeyValueStorage:
    if settings.client_cache_url:
        return SqlKeyValueStorage(settings.client_cache_url)
    return MemoryKeyValueStorage()


def create_content_cache(settings: Settings, storage: KeyValueStorage) -> EphemeralCache:
    return EphemeralCache(
        storage, namespace=settings.cache_namespace, ttl_seconds=settings.content_cache_ttl_seconds
    )


def create_status_cache(settings: Settings, storage: KeyValueStorage) -> EphemeralCache:
    return EphemeralCache(
        storage, namespace=settings.cache_namespace, ttl_seconds=settings.status_cache_ttl_seconds
    )


def create_search_coordinator(
    settings: Settings, http_client: httpx.AsyncClient, storage: KeyValueStorage | None = None
) -> SearchCoordinator:
    if storage is None:
        storage = create_cache_storage(settings)
    return SearchCoordinator(
        source=CatalogClient(http_client, timeout=settings.client_timeout_seconds),
        cache=create_content_cache(settings, storage),
        debounce_seconds=settings.search_debounce_seconds,
        min_query_length=settings.search_min_query_length,
        result_limit=settings.search_result_limit,
    )


def create_detail_coordinator(
    settings: Settings, http_client: httpx.AsyncClient, storage: KeyValueStorage | None = None
) -> DetailCoordinator:
    if storage is None:
        storage = create_cache_storage(settings)
    session = SessionClient(http_client, timeout=settings.client_timeout_seconds)
    return DetailCoordinator(
        source=CatalogClient(http_client, timeout=settings.client_timeout_seconds),
        content_cache=create_content_cache(settings, storage),
        status_cache=create_status_cache(settings, storage),
        identity=session,
        vault=session,
    )
