from __future__ import annotations

from abc import ABC, abstractmethod

from sqlalchemy import String, Text, create_engine, delete, make_url, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Mapped, Session, mapped_column

from sneaker_vault.domain.ports import StorageError, StorageQuotaExceededError
from sneaker_vault.repositories.orm import Base


class KeyValueStorage(ABC):
    """
    String-to-string storage shared by every cache namespace, modelled on a
    browser's local storage. Implementations raise StorageError on failure.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...

    @abstractmethod
    def keys(self) -> list[str]: ...


class MemoryKeyValueStorage(KeyValueStorage):
    def __init__(self, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota is not None:
            used = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
            if used + len(key) + len(value) > self._quota:
                raise StorageQuotaExceededError(self._quota)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class KeyValueItemORM(Base):
    __tablename__ = "kv_items"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)


class SqlKeyValueStorage(KeyValueStorage):
    """Persistent storage so that cached payloads survive a restart."""

    def __init__(self, database_url: str) -> None:
        if make_url(database_url).get_dialect().is_async:
            raise ValueError(f"Key-value storage needs a synchronous driver, got '{database_url}'")
        self.engine = create_engine(database_url)
        Base.metadata.create_all(self.engine, tables=[KeyValueItemORM.__table__])

    def get_item(self, key: str) -> str | None:
        try:
            with Session(self.engine) as session:
                row = session.get(KeyValueItemORM, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def set_item(self, key: str, value: str) -> None:
        try:
            with Session(self.engine) as session, session.begin():
                row = session.get(KeyValueItemORM, key)
                if row:
                    row.value = value
                else:
                    session.add(KeyValueItemORM(key=key, value=value))
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def remove_item(self, key: str) -> None:
        try:
            with Session(self.engine) as session, session.begin():
                session.execute(delete(KeyValueItemORM).where(KeyValueItemORM.key == key))
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def keys(self) -> list[str]:
        try:
            with Session(self.engine) as session:
                return list(session.scalars(select(KeyValueItemORM.key)))
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
