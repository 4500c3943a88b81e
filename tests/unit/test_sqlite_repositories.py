import asyncio

import pytest
import pytest_asyncio

from sneaker_vault.domain.models import Collection, CollectionItem, VaultItem
from sneaker_vault.domain.ports import DuplicateItemError
from sneaker_vault.repositories.sqlite_collection_repository import SQLiteCollectionRepository
from sneaker_vault.repositories.sqlite_vault_repository import SQLiteVaultRepository


@pytest_asyncio.fixture  # type: ignore[misc]
async def vault_repo() -> SQLiteVaultRepository:
    repo = SQLiteVaultRepository("sqlite+aiosqlite:///:memory:")
    await repo.initialize()
    return repo


@pytest_asyncio.fixture  # type: ignore[misc]
async def collection_repo() -> SQLiteCollectionRepository:
    repo = SQLiteCollectionRepository("sqlite+aiosqlite:///:memory:")
    await repo.initialize()
    return repo


def create_vault_item(user_id: str, sneaker_id: str = "DD1391-100") -> VaultItem:
    return VaultItem(
        user_id=user_id,
        sneaker_id=sneaker_id,
        name="Nike Dunk Low Panda",
        brand="Nike",
        retail_price=110.0,
    )


@pytest.mark.asyncio  # type: ignore[misc]
async def test_vault_add_and_exists(vault_repo: SQLiteVaultRepository) -> None:
    saved = await vault_repo.add(create_vault_item("alice"))

    assert saved.sneaker_id == "DD1391-100"
    assert await vault_repo.exists("alice", "DD1391-100") is True
    assert await vault_repo.exists("bob", "DD1391-100") is False
    assert await vault_repo.exists("alice", "555088-134") is False


@pytest.mark.asyncio  # type: ignore[misc]
async def test_vault_duplicate_raises(vault_repo: SQLiteVaultRepository) -> None:
    await vault_repo.add(create_vault_item("alice"))

    with pytest.raises(DuplicateItemError):
        await vault_repo.add(create_vault_item("alice"))

    # Ein anderer User darf denselben Sneaker speichern
    await vault_repo.add(create_vault_item("bob"))


@pytest.mark.asyncio  # type: ignore[misc]
async def test_vault_list_is_user_scoped(vault_repo: SQLiteVaultRepository) -> None:
    await vault_repo.add(create_vault_item("alice", "DD1391-100"))
    await asyncio.sleep(0.01)
    await vault_repo.add(create_vault_item("alice", "555088-134"))
    await vault_repo.add(create_vault_item("bob", "CT8012-116"))

    items = await vault_repo.list_for_user("alice")

    assert [i.sneaker_id for i in items] == ["555088-134", "DD1391-100"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_vault_remove(vault_repo: SQLiteVaultRepository) -> None:
    await vault_repo.add(create_vault_item("alice"))

    assert await vault_repo.remove("bob", "DD1391-100") is False
    assert await vault_repo.remove("alice", "DD1391-100") is True
    assert await vault_repo.remove("alice", "DD1391-100") is False


@pytest.mark.asyncio  # type: ignore[misc]
async def test_collection_scoped_to_owner(collection_repo: SQLiteCollectionRepository) -> None:
    collection = await collection_repo.create(Collection(user_id="alice", name="Grails"))

    assert await collection_repo.find_by_id("alice", collection.id) is not None
    assert await collection_repo.find_by_id("bob", collection.id) is None
    assert await collection_repo.delete("bob", collection.id) is False
    assert [c.name for c in await collection_repo.list_for_user("alice")] == ["Grails"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_collection_items_duplicate_and_remove(
    collection_repo: SQLiteCollectionRepository,
) -> None:
    collection = await collection_repo.create(Collection(user_id="alice", name="Grails"))
    item = CollectionItem(collection_id=collection.id, sneaker_id="DD1391-100", name="Dunk")

    await collection_repo.add_item(item)
    with pytest.raises(DuplicateItemError):
        await collection_repo.add_item(
            CollectionItem(collection_id=collection.id, sneaker_id="DD1391-100", name="Dunk")
        )

    assert [i.sneaker_id for i in await collection_repo.list_items(collection.id)] == [
        "DD1391-100"
    ]
    assert await collection_repo.remove_item(collection.id, "DD1391-100") is True
    assert await collection_repo.list_items(collection.id) == []


@pytest.mark.asyncio  # type: ignore[misc]
async def test_delete_collection_removes_items(
    collection_repo: SQLiteCollectionRepository,
) -> None:
    collection = await collection_repo.create(Collection(user_id="alice", name="Grails"))
    await collection_repo.add_item(
        CollectionItem(collection_id=collection.id, sneaker_id="DD1391-100", name="Dunk")
    )

    assert await collection_repo.delete("alice", collection.id) is True
    assert await collection_repo.find_by_id("alice", collection.id) is None
    assert await collection_repo.list_items(collection.id) == []
