# src/sneaker_vault/adapters/sneaks_api.py
from __future__ import annotations

import logging
import time
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field

from sneaker_vault.client.cancellation import CancellationToken
from sneaker_vault.core.metrics import EXTERNAL_API_COUNT, EXTERNAL_API_DURATION
from sneaker_vault.domain.models import (
    RESELL_PLATFORMS,
    DataSource,
    SneakerDetail,
    SneakerSummary,
)
from sneaker_vault.domain.ports import ExternalApiError, SneakerNotFoundError, SneakerSourcePort

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Interne Rohdaten-Schemas (für typisiertes Parsing der Sneaks-API-Response)
# ---------------------------------------------------------------------------


class _SneaksPlatformValues(BaseModel):
    """Preise bzw. Links je Resell-Plattform. Alle optional, Sneaks liefert lückenhaft."""

    stock_x: float | str | None = Field(default=None, alias="stockX")
    goat: float | str | None = None
    flight_club: float | str | None = Field(default=None, alias="flightClub")
    stadium_goods: float | str | None = Field(default=None, alias="stadiumGoods")

    model_config = {"populate_by_name": True}

    def by_platform(self) -> dict[str, float | str | None]:
        return self.model_dump(by_alias=True)


class _SneaksProduct(BaseModel):
    style_id: str | None = Field(default=None, alias="styleID")
    shoe_name: str | None = Field(default=None, alias="shoeName")
    brand: str | None = None
    thumbnail: str | None = None
    colorway: str | None = None
    release_date: str | None = Field(default=None, alias="releaseDate")
    retail_price: float | str | None = Field(default=None, alias="retailPrice")
    description: str | None = None
    image_links: list[str] = Field(default_factory=list, alias="imageLinks")
    lowest_resell_price: _SneaksPlatformValues = Field(
        default_factory=_SneaksPlatformValues, alias="lowestResellPrice"
    )
    resell_links: _SneaksPlatformValues = Field(
        default_factory=_SneaksPlatformValues, alias="resellLinks"
    )

    model_config = {"populate_by_name": True}


def _price_or_none(value: float | str | None) -> float | None:
    # Sneaks liefert 0 für "kein Angebot"
    if value in (None, "", 0):
        return None
    try:
        price = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return price if price > 0 else None


def _link_or_none(value: float | str | None) -> str | None:
    return value if isinstance(value, str) and value else None


def _path_segment(value: str) -> str:
    # "/", "?" und "#" gehören zum Wert, nicht zur URL-Struktur
    return quote(value, safe="")


class SneaksApiAdapter(SneakerSourcePort):
    """
    Adapter für einen Sneaks-API-Server (``/search/<q>`` und ``/id/<id>/prices``).
    Normalisiert die Rohdaten in SneakerSummary / SneakerDetail.
    """

    def __init__(
        self, http_client: httpx.AsyncClient, base_url: str, timeout: float = 15.0
    ) -> None:
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def search(
        self,
        query: str,
        limit: int = 10,
        cancel_token: CancellationToken | None = None,
    ) -> list[SneakerSummary]:
        url = f"{self._base_url}/search/{_path_segment(query)}"
        response = await self._get(url, params={"count": limit}, timeout=self._timeout)

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        data = response.json()
        if not isinstance(data, list):
            raise ExternalApiError(DataSource.SNEAKS_API, "Unexpected search payload")

        products = []
        for raw_product in data[:limit]:
            try:
                product = _SneaksProduct.model_validate(raw_product)
                if product.style_id:
                    products.append(self._normalize_summary(product))
            except Exception:
                logger.warning("Skipping malformed product in Sneaks search results", exc_info=True)

        return products

    async def fetch_by_id(
        self,
        style_id: str,
        cancel_token: CancellationToken | None = None,
    ) -> SneakerDetail:
        url = f"{self._base_url}/id/{_path_segment(style_id)}/prices"
        response = await self._get(url, timeout=self._timeout, not_found_id=style_id)

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        data = response.json()
        if not data or not isinstance(data, dict):
            raise SneakerNotFoundError(style_id, DataSource.SNEAKS_API)

        product = _SneaksProduct.model_validate(data)
        if not product.style_id:
            raise SneakerNotFoundError(style_id, DataSource.SNEAKS_API)

        return self._normalize_detail(product)

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, int] | None = None,
        timeout: float,
        not_found_id: str | None = None,
    ) -> httpx.Response:
        started = time.perf_counter()
        try:
            response = await self._client.get(url, params=params, timeout=timeout)
            if response.status_code == 404 and not_found_id is not None:
                EXTERNAL_API_COUNT.labels(source=DataSource.SNEAKS_API, status="not_found").inc()
                raise SneakerNotFoundError(not_found_id, DataSource.SNEAKS_API)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            EXTERNAL_API_COUNT.labels(source=DataSource.SNEAKS_API, status="error").inc()
            raise ExternalApiError(DataSource.SNEAKS_API, str(e)) from e
        except httpx.RequestError as e:
            EXTERNAL_API_COUNT.labels(source=DataSource.SNEAKS_API, status="error").inc()
            raise ExternalApiError(DataSource.SNEAKS_API, f"Connection error: {e}") from e
        finally:
            EXTERNAL_API_DURATION.labels(source=DataSource.SNEAKS_API).observe(
                time.perf_counter() - started
            )

        EXTERNAL_API_COUNT.labels(source=DataSource.SNEAKS_API, status="ok").inc()
        return response

    # ------------------------------------------------------------------
    # Private Normalisierungslogik
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize_summary(raw: _SneaksProduct) -> SneakerSummary:
        return SneakerSummary(
            style_id=raw.style_id or "",
            name=raw.shoe_name or "Unknown Sneaker",
            brand=raw.brand,
            thumbnail=raw.thumbnail,
            colorway=raw.colorway,
            release_date=raw.release_date or None,
            retail_price=_price_or_none(raw.retail_price),
        )

    @staticmethod
    def _normalize_detail(raw: _SneaksProduct) -> SneakerDetail:
        prices = raw.lowest_resell_price.by_platform()
        links = raw.resell_links.by_platform()
        return SneakerDetail(
            style_id=raw.style_id or "",
            name=raw.shoe_name or "Unknown Sneaker",
            brand=raw.brand,
            thumbnail=raw.thumbnail,
            colorway=raw.colorway,
            release_date=raw.release_date or None,
            retail_price=_price_or_none(raw.retail_price),
            description=raw.description or None,
            image_links=[link for link in raw.image_links if link],
            resell_prices={p: _price_or_none(prices.get(p)) for p in RESELL_PLATFORMS},
            resell_links={p: _link_or_none(links.get(p)) for p in RESELL_PLATFORMS},
        )
