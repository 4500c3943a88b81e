from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sneaker_vault.domain.models import Collection, CollectionItem, VaultItem


class AbstractVaultRepository(ABC):
    @abstractmethod
    async def add(self, item: VaultItem) -> VaultItem:
        """Saves a vault item. Raises DuplicateItemError if (user, sneaker) exists."""
        ...

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[VaultItem]:
        """Returns all vault items of a user, newest first."""
        ...

    @abstractmethod
    async def exists(self, user_id: str, sneaker_id: str) -> bool: ...

    @abstractmethod
    async def remove(self, user_id: str, sneaker_id: str) -> bool:
        """Removes a vault item. Returns True if deleted."""
        ...


class AbstractCollectionRepository(ABC):
    @abstractmethod
    async def create(self, collection: Collection) -> Collection: ...

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[Collection]:
        """Returns all collections of a user, newest first."""
        ...

    @abstractmethod
    async def find_by_id(self, user_id: str, collection_id: str) -> Collection | None:
        """Finds a collection by ID, scoped to its owner."""
        ...

    @abstractmethod
    async def delete(self, user_id: str, collection_id: str) -> bool:
        """Deletes a collection and its items. Returns True if deleted."""
        ...

    @abstractmethod
    async def add_item(self, item: CollectionItem) -> CollectionItem:
        """Raises DuplicateItemError if (collection, sneaker) exists."""
        ...

    @abstractmethod
    async def list_items(self, collection_id: str) -> list[CollectionItem]: ...

    @abstractmethod
    async def remove_item(self, collection_id: str, sneaker_id: str) -> bool: ...
