from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from sneaker_vault.client.cancellation import CancellationToken
from sneaker_vault.domain.models import DataSource, SneakerDetail, SneakerSummary
from sneaker_vault.domain.ports import ExternalApiError, SneakerNotFoundError, SneakerSourcePort

logger = logging.getLogger(__name__)


class CatalogClient(SneakerSourcePort):
    """
    HTTP-Client für die Katalog-Endpunkte des Backends
    (``GET /search?q=`` und ``GET /items/<id>``).
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout: float = 10.0) -> None:
        self._client = http_client
        self._timeout = timeout

    async def search(
        self,
        query: str,
        limit: int = 10,
        cancel_token: CancellationToken | None = None,
    ) -> list[SneakerSummary]:
        try:
            response = await self._client.get(
                "/search", params={"q": query, "limit": limit}, timeout=self._timeout
            )
            response.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            raise ExternalApiError(DataSource.BACKEND, str(e)) from e

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        results = []
        for raw in response.json():
            try:
                results.append(SneakerSummary.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed search result", exc_info=True)
        return results

    async def fetch_by_id(
        self,
        style_id: str,
        cancel_token: CancellationToken | None = None,
    ) -> SneakerDetail:
        try:
            url = "/items/" + quote(style_id, safe="")
            response = await self._client.get(url, timeout=self._timeout)
            if response.status_code == 404:
                raise SneakerNotFoundError(style_id, DataSource.BACKEND)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalApiError(DataSource.BACKEND, str(e)) from e
        except httpx.RequestError as e:
            raise ExternalApiError(DataSource.BACKEND, f"Connection error: {e}") from e

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        try:
            return SneakerDetail.model_validate(response.json())
        except ValidationError as e:
            raise ExternalApiError(DataSource.BACKEND, f"Malformed sneaker detail: {e}") from e
