from __future__ import annotations

from urllib.parse import quote

import httpx

from sneaker_vault.client.cancellation import CancellationToken
from sneaker_vault.domain.models import DataSource, SavedSneakerCreate, SneakerSummary
from sneaker_vault.domain.ports import (
    DuplicateItemError,
    ExternalApiError,
    IdentityPort,
    VaultStatusPort,
)

_UNAUTHENTICATED = frozenset({401, 403})


class SessionClient(IdentityPort, VaultStatusPort):
    """
    Identity lookup and vault status against the backend. The API key sent
    in the ``X-API-Key`` header of the shared client is the session.
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout: float = 10.0) -> None:
        self._client = http_client
        self._timeout = timeout

    async def current_identity(self) -> str | None:
        if "X-API-Key" not in self._client.headers:
            return None
        try:
            response = await self._client.get("/session", timeout=self._timeout)
            if response.status_code in _UNAUTHENTICATED:
                return None
            response.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            raise ExternalApiError(DataSource.BACKEND, str(e)) from e
        return response.json()["user_id"]

    async def is_saved(
        self,
        style_id: str,
        cancel_token: CancellationToken | None = None,
    ) -> bool:
        try:
            url = "/vault/" + quote(style_id, safe="")
            response = await self._client.get(url, timeout=self._timeout)
            response.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            raise ExternalApiError(DataSource.BACKEND, str(e)) from e

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return bool(response.json()["saved"])

    async def save(self, sneaker: SneakerSummary) -> None:
        payload = SavedSneakerCreate.from_sneaker(sneaker)
        try:
            response = await self._client.post(
                "/vault", json=payload.model_dump(mode="json"), timeout=self._timeout
            )
            if response.status_code == 409:
                raise DuplicateItemError("vault_item", sneaker.style_id)
            response.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            raise ExternalApiError(DataSource.BACKEND, str(e)) from e
