from __future__ import annotations

import logging

from sneaker_vault.domain.models import SavedSneakerCreate, VaultItem
from sneaker_vault.domain.ports import ItemNotFoundError
from sneaker_vault.repositories.base import AbstractVaultRepository

logger = logging.getLogger(__name__)


class VaultService:
    def __init__(self, repository: AbstractVaultRepository) -> None:
        self._repo = repository

    async def add(self, user_id: str, payload: SavedSneakerCreate) -> VaultItem:
        """
        Legt einen Sneaker im Vault des Users ab.

        Raises:
            DuplicateItemError: Wenn der Sneaker bereits im Vault liegt.
        """
        item = VaultItem(
            user_id=user_id,
            sneaker_id=payload.sneaker_id,
            name=payload.name,
            brand=payload.brand,
            thumbnail=payload.thumbnail,
            retail_price=payload.retail_price,
        )
        saved = await self._repo.add(item)
        logger.info("User '%s' saved sneaker '%s'", user_id, payload.sneaker_id)
        return saved

    async def list_items(self, user_id: str) -> list[VaultItem]:
        return await self._repo.list_for_user(user_id)

    async def is_saved(self, user_id: str, sneaker_id: str) -> bool:
        return await self._repo.exists(user_id, sneaker_id)

    async def remove(self, user_id: str, sneaker_id: str) -> None:
        if not await self._repo.remove(user_id, sneaker_id):
            raise ItemNotFoundError("vault_item", sneaker_id)
