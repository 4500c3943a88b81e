from __future__ import annotations

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from sneaker_vault.domain.models import VaultItem
from sneaker_vault.domain.ports import DuplicateItemError
from sneaker_vault.repositories.base import AbstractVaultRepository
from sneaker_vault.repositories.orm import Base, VaultItemORM


def _to_domain(row: VaultItemORM) -> VaultItem:
    return VaultItem(
        id=row.id,
        user_id=row.user_id,
        sneaker_id=row.sneaker_id,
        name=row.name,
        brand=row.brand,
        thumbnail=row.thumbnail,
        retail_price=row.retail_price,
        created_at=row.created_at,
    )


class SQLiteVaultRepository(AbstractVaultRepository):
    def __init__(self, database_url: str) -> None:
        self.engine = create_async_engine(database_url)
        self.async_session_maker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def add(self, item: VaultItem) -> VaultItem:
        try:
            async with self.async_session_maker() as session, session.begin():
                session.add(
                    VaultItemORM(
                        id=item.id,
                        user_id=item.user_id,
                        sneaker_id=item.sneaker_id,
                        name=item.name,
                        brand=item.brand,
                        thumbnail=item.thumbnail,
                        retail_price=item.retail_price,
                        created_at=item.created_at,
                    )
                )
        except IntegrityError as e:
            raise DuplicateItemError("vault_item", item.sneaker_id) from e
        return item

    async def list_for_user(self, user_id: str) -> list[VaultItem]:
        async with self.async_session_maker() as session:
            result = await session.execute(
                select(VaultItemORM)
                .where(VaultItemORM.user_id == user_id)
                .order_by(VaultItemORM.created_at.desc())
            )
            return [_to_domain(row) for row in result.scalars()]

    async def exists(self, user_id: str, sneaker_id: str) -> bool:
        async with self.async_session_maker() as session:
            result = await session.execute(
                select(VaultItemORM.id).where(
                    VaultItemORM.user_id == user_id, VaultItemORM.sneaker_id == sneaker_id
                )
            )
            return result.scalar_one_or_none() is not None

    async def remove(self, user_id: str, sneaker_id: str) -> bool:
        async with self.async_session_maker() as session, session.begin():
            result = await session.execute(
                delete(VaultItemORM).where(
                    VaultItemORM.user_id == user_id, VaultItemORM.sneaker_id == sneaker_id
                )
            )
            if isinstance(result, CursorResult):
                return bool(result.rowcount > 0)
            return False
