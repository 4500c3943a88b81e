from __future__ import annotations

from sneaker_vault.domain.models import (
    Collection,
    CollectionCreate,
    CollectionItem,
    SavedSneakerCreate,
)
from sneaker_vault.domain.ports import ItemNotFoundError
from sneaker_vault.repositories.base import AbstractCollectionRepository


class CollectionService:
    """
    Benannte Collections eines Users und deren Sneaker.
    Fremde Collections verhalten sich wie nicht existierende.
    """

    def __init__(self, repository: AbstractCollectionRepository) -> None:
        self._repo = repository

    async def create(self, user_id: str, payload: CollectionCreate) -> Collection:
        collection = Collection(
            user_id=user_id, name=payload.name, description=payload.description
        )
        return await self._repo.create(collection)

    async def list_collections(self, user_id: str) -> list[Collection]:
        return await self._repo.list_for_user(user_id)

    async def delete(self, user_id: str, collection_id: str) -> None:
        if not await self._repo.delete(user_id, collection_id):
            raise ItemNotFoundError("collection", collection_id)

    async def add_item(
        self, user_id: str, collection_id: str, payload: SavedSneakerCreate
    ) -> CollectionItem:
        """
        Raises:
            ItemNotFoundError: Collection existiert nicht oder gehört einem anderen User.
            DuplicateItemError: Sneaker liegt bereits in der Collection.
        """
        await self._require_collection(user_id, collection_id)
        item = CollectionItem(
            collection_id=collection_id,
            sneaker_id=payload.sneaker_id,
            name=payload.name,
            brand=payload.brand,
            thumbnail=payload.thumbnail,
        )
        return await self._repo.add_item(item)

    async def list_items(self, user_id: str, collection_id: str) -> list[CollectionItem]:
        await self._require_collection(user_id, collection_id)
        return await self._repo.list_items(collection_id)

    async def remove_item(self, user_id: str, collection_id: str, sneaker_id: str) -> None:
        await self._require_collection(user_id, collection_id)
        if not await self._repo.remove_item(collection_id, sneaker_id):
            raise ItemNotFoundError("collection_item", sneaker_id)

    async def _require_collection(self, user_id: str, collection_id: str) -> Collection:
        collection = await self._repo.find_by_id(user_id, collection_id)
        if collection is None:
            raise ItemNotFoundError("collection", collection_id)
        return collection
