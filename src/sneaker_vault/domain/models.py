# src/sneaker_vault/domain/models.py
from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


class DataSource(StrEnum):
    SNEAKS_API = "sneaks_api"
    BACKEND = "backend"


class FetchStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


RESELL_PLATFORMS = ("stockX", "goat", "flightClub", "stadiumGoods")


# ---------------------------------------------------------------------------
# Katalog: normalisierte Sneaker-Daten des Providers
# JSON nutzt camelCase (styleID, releaseDate, ...), Python snake_case.
# ---------------------------------------------------------------------------


class SneakerSummary(BaseModel):
    """Ein Treffer der Produktsuche."""

    style_id: str = Field(alias="styleID", min_length=1)
    name: str
    brand: str | None = None
    thumbnail: str | None = None
    colorway: str | None = None
    release_date: str | None = Field(default=None, alias="releaseDate")
    retail_price: float | None = Field(default=None, alias="retailPrice", ge=0)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SneakerDetail(SneakerSummary):
    """Detailansicht inkl. Bildern und Resell-Preisen je Plattform."""

    description: str | None = None
    image_links: list[str] = Field(default_factory=list, alias="imageLinks")
    resell_prices: dict[str, float | None] = Field(default_factory=dict, alias="resellPrices")
    resell_links: dict[str, str | None] = Field(default_factory=dict, alias="resellLinks")


# ---------------------------------------------------------------------------
# Row-Store Entities
# ---------------------------------------------------------------------------


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class VaultItem(BaseModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    sneaker_id: str = Field(min_length=1)
    name: str
    brand: str | None = None
    thumbnail: str | None = None
    retail_price: float | None = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=_now)


class Collection(BaseModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    name: str = Field(min_length=1, max_length=128)
    description: str | None = Field(default=None, max_length=1024)
    created_at: datetime = Field(default_factory=_now)


class CollectionItem(BaseModel):
    id: str = Field(default_factory=_new_id)
    collection_id: str
    sneaker_id: str = Field(min_length=1)
    name: str
    brand: str | None = None
    thumbnail: str | None = None
    created_at: datetime = Field(default_factory=_now)


# ---------------------------------------------------------------------------
# API Request/Response Schemas
# ---------------------------------------------------------------------------


class SavedSneakerCreate(BaseModel):
    """Payload, um einen Sneaker im Vault oder in einer Collection abzulegen."""

    sneaker_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=512)
    brand: str | None = None
    thumbnail: str | None = None
    retail_price: float | None = Field(default=None, ge=0)

    model_config = {"frozen": True}

    @classmethod
    def from_sneaker(cls, sneaker: SneakerSummary) -> SavedSneakerCreate:
        return cls(
            sneaker_id=sneaker.style_id,
            name=sneaker.name,
            brand=sneaker.brand,
            thumbnail=sneaker.thumbnail,
            retail_price=sneaker.retail_price,
        )


class CollectionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    description: str | None = Field(default=None, max_length=1024)


class VaultStatus(BaseModel):
    sneaker_id: str
    saved: bool


class SessionInfo(BaseModel):
    user_id: str
