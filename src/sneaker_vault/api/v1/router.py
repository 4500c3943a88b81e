# src/sneaker_vault/api/v1/router.py
from fastapi import APIRouter

from sneaker_vault.api.v1 import catalog, collections, session, vault

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(catalog.router)
api_router.include_router(session.router)
api_router.include_router(vault.router)
api_router.include_router(collections.router)
