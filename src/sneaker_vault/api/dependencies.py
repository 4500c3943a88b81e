# src/sneaker_vault/api/dependencies.py
from functools import lru_cache

import httpx
from fastapi import Depends

from sneaker_vault.adapters.sneaks_api import SneaksApiAdapter
from sneaker_vault.core.config import Settings, get_settings
from sneaker_vault.domain.ports import SneakerSourcePort
from sneaker_vault.repositories.base import AbstractCollectionRepository, AbstractVaultRepository
from sneaker_vault.repositories.kv_storage import MemoryKeyValueStorage
from sneaker_vault.repositories.sqlite_collection_repository import SQLiteCollectionRepository
from sneaker_vault.repositories.sqlite_vault_repository import SQLiteVaultRepository
from sneaker_vault.services.catalog_service import CatalogService
from sneaker_vault.services.collection_service import CollectionService
from sneaker_vault.services.ephemeral_cache import EphemeralCache
from sneaker_vault.services.vault_service import VaultService


# Shared HTTP Client (Connection Pooling)
@lru_cache
def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": "SneakerVault/1.0"},
        follow_redirects=True,
    )


def get_sneaker_source(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> SneakerSourcePort:
    return SneaksApiAdapter(
        http_client=client,
        base_url=settings.sneaks_api_base_url,
        timeout=settings.upstream_timeout_seconds,
    )


# Singleton Catalog Cache
_catalog_cache: EphemeralCache | None = None


def get_catalog_cache(settings: Settings = Depends(get_settings)) -> EphemeralCache:
    global _catalog_cache
    if _catalog_cache is None:
        _catalog_cache = EphemeralCache(
            MemoryKeyValueStorage(),
            namespace=f"{settings.cache_namespace}catalog_",
            ttl_seconds=settings.content_cache_ttl_seconds,
        )
    return _catalog_cache


def get_catalog_service(
    source: SneakerSourcePort = Depends(get_sneaker_source),
    cache: EphemeralCache = Depends(get_catalog_cache),
) -> CatalogService:
    return CatalogService(source=source, cache=cache)


# Singleton Repositories (Initialisiert beim ersten Zugriff)
_vault_repository: AbstractVaultRepository | None = None
_collection_repository: AbstractCollectionRepository | None = None


async def get_vault_repository(
    settings: Settings = Depends(get_settings),
) -> AbstractVaultRepository:
    global _vault_repository
    if _vault_repository is None:
        repo = SQLiteVaultRepository(database_url=settings.database_url)
        await repo.initialize()
        _vault_repository = repo
    return _vault_repository


async def get_collection_repository(
    settings: Settings = Depends(get_settings),
) -> AbstractCollectionRepository:
    global _collection_repository
    if _collection_repository is None:
        repo = SQLiteCollectionRepository(database_url=settings.database_url)
        await repo.initialize()
        _collection_repository = repo
    return _collection_repository


def get_vault_service(
    repository: AbstractVaultRepository = Depends(get_vault_repository),
) -> VaultService:
    return VaultService(repository=repository)


def get_collection_service(
    repository: AbstractCollectionRepository = Depends(get_collection_repository),
) -> CollectionService:
    return CollectionService(repository=repository)
