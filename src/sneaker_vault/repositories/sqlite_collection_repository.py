from __future__ import annotations

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from sneaker_vault.domain.models import Collection, CollectionItem
from sneaker_vault.domain.ports import DuplicateItemError
from sneaker_vault.repositories.base import AbstractCollectionRepository
from sneaker_vault.repositories.orm import Base, CollectionItemORM, CollectionORM


class SQLiteCollectionRepository(AbstractCollectionRepository):
    def __init__(self, database_url: str) -> None:
        self.engine = create_async_engine(database_url)
        self.async_session_maker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def create(self, collection: Collection) -> Collection:
        async with self.async_session_maker() as session, session.begin():
            session.add(
                CollectionORM(
                    id=collection.id,
                    user_id=collection.user_id,
                    name=collection.name,
                    description=collection.description,
                    created_at=collection.created_at,
                )
            )
        return collection

    async def list_for_user(self, user_id: str) -> list[Collection]:
        async with self.async_session_maker() as session:
            result = await session.execute(
                select(CollectionORM)
                .where(CollectionORM.user_id == user_id)
                .order_by(CollectionORM.created_at.desc())
            )
            return [
                Collection(
                    id=row.id,
                    user_id=row.user_id,
                    name=row.name,
                    description=row.description,
                    created_at=row.created_at,
                )
                for row in result.scalars()
            ]

    async def find_by_id(self, user_id: str, collection_id: str) -> Collection | None:
        async with self.async_session_maker() as session:
            result = await session.execute(
                select(CollectionORM).where(
                    CollectionORM.id == collection_id, CollectionORM.user_id == user_id
                )
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None
            return Collection(
                id=row.id,
                user_id=row.user_id,
                name=row.name,
                description=row.description,
                created_at=row.created_at,
            )

    async def delete(self, user_id: str, collection_id: str) -> bool:
        async with self.async_session_maker() as session, session.begin():
            result = await session.execute(
                delete(CollectionORM).where(
                    CollectionORM.id == collection_id, CollectionORM.user_id == user_id
                )
            )
            deleted = isinstance(result, CursorResult) and result.rowcount > 0
            if deleted:
                # SQLite erzwingt ON DELETE CASCADE nur mit PRAGMA foreign_keys
                await session.execute(
                    delete(CollectionItemORM).where(
                        CollectionItemORM.collection_id == collection_id
                    )
                )
            return deleted

    async def add_item(self, item: CollectionItem) -> CollectionItem:
        try:
            async with self.async_session_maker() as session, session.begin():
                session.add(
                    CollectionItemORM(
                        id=item.id,
                        collection_id=item.collection_id,
                        sneaker_id=item.sneaker_id,
                        name=item.name,
                        brand=item.brand,
                        thumbnail=item.thumbnail,
                        created_at=item.created_at,
                    )
                )
        except IntegrityError as e:
            raise DuplicateItemError("collection_item", item.sneaker_id) from e
        return item

    async def list_items(self, collection_id: str) -> list[CollectionItem]:
        async with self.async_session_maker() as session:
            result = await session.execute(
                select(CollectionItemORM)
                .where(CollectionItemORM.collection_id == collection_id)
                .order_by(CollectionItemORM.created_at.desc())
            )
            return [
                CollectionItem(
                    id=row.id,
                    collection_id=row.collection_id,
                    sneaker_id=row.sneaker_id,
                    name=row.name,
                    brand=row.brand,
                    thumbnail=row.thumbnail,
                    created_at=row.created_at,
                )
                for row in result.scalars()
            ]

    async def remove_item(self, collection_id: str, sneaker_id: str) -> bool:
        async with self.async_session_maker() as session, session.begin():
            result = await session.execute(
                delete(CollectionItemORM).where(
                    CollectionItemORM.collection_id == collection_id,
                    CollectionItemORM.sneaker_id == sneaker_id,
                )
            )
            if isinstance(result, CursorResult):
                return bool(result.rowcount > 0)
            return False
