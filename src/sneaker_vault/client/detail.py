from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from sneaker_vault.client.cancellation import CancellationToken, InFlightRequest
from sneaker_vault.client.state import (
    DETAIL_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    SIGN_IN_REQUIRED_MESSAGE,
    VAULT_ADD_FAILED_MESSAGE,
    VAULT_ADDED_MESSAGE,
    DetailViewState,
)
from sneaker_vault.domain.models import FetchStatus, SneakerDetail
from sneaker_vault.domain.ports import (
    DuplicateItemError,
    IdentityPort,
    RequestCancelledError,
    SneakerNotFoundError,
    SneakerSourcePort,
    VaultStatusPort,
)
from sneaker_vault.services.ephemeral_cache import EphemeralCache

logger = logging.getLogger(__name__)

StateListener = Callable[[DetailViewState], None]


def detail_cache_key(style_id: str) -> str:
    return f"sneaker_{style_id}"


def vault_status_cache_key(identity: str, style_id: str) -> str:
    return f"vault_status_{identity}_{style_id}"


class DetailCoordinator:
    """
    Lädt die Details eines Sneakers und unabhängig davon, ob er bereits im
    Vault der aktuellen Identität liegt.

    Beide Flows laufen durch ``idle -> loading -> {success, not_found, error}``.
    Der Detail-Payload wird im Content-Cache (24h) gehalten, der Vault-Status
    im Status-Cache (5min) pro (Identität, Sneaker).
    """

    def __init__(
        self,
        source: SneakerSourcePort,
        content_cache: EphemeralCache,
        status_cache: EphemeralCache,
        identity: IdentityPort,
        vault: VaultStatusPort,
    ) -> None:
        self._source = source
        self._content_cache = content_cache
        self._status_cache = status_cache
        self._identity = identity
        self._vault = vault
        self._detail_request = InFlightRequest("detail")
        self._status_request = InFlightRequest("vault_status")
        self._listeners: list[StateListener] = []
        self.state = DetailViewState()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def open(self, style_id: str) -> None:
        """Initial page load: details and vault status."""
        if await self.load(style_id):
            await self.check_saved(style_id)

    async def load(self, style_id: str) -> bool:
        """Returns False when the load was superseded or cancelled."""
        if self.state.style_id != style_id:
            # Vault-Status der vorherigen Seite verwerfen
            self._status_request.cancel()
        self._render(style_id=style_id, status=FetchStatus.LOADING, sneaker=None, message=None)

        key = detail_cache_key(style_id)
        cached = self._content_cache.get(key)
        if cached is not None:
            try:
                sneaker = SneakerDetail.model_validate(cached)
            except ValidationError:
                logger.warning("Discarding unreadable cached detail for '%s'", key)
                self._content_cache.delete(key)
            else:
                self._detail_request.cancel()
                self._render(status=FetchStatus.SUCCESS, sneaker=sneaker)
                return True

        try:
            sneaker = await self._detail_request.run(
                lambda token: self._source.fetch_by_id(style_id, cancel_token=token)
            )
        except RequestCancelledError:
            return False
        except SneakerNotFoundError:
            self._render(status=FetchStatus.NOT_FOUND, sneaker=None, message=NOT_FOUND_MESSAGE)
            return True
        except Exception:
            logger.warning("Loading sneaker '%s' failed", style_id, exc_info=True)
            self._render(status=FetchStatus.ERROR, sneaker=None, message=DETAIL_ERROR_MESSAGE)
            return True

        self._content_cache.set(key, sneaker.model_dump(mode="json", by_alias=True))
        self._render(status=FetchStatus.SUCCESS, sneaker=sneaker)
        return True

    async def check_saved(self, style_id: str) -> None:
        self._render(saved_status=FetchStatus.LOADING)
        # Identität und Existenzprüfung laufen unter demselben Token
        try:
            saved = await self._status_request.run(
                lambda token: self._lookup_saved(style_id, token)
            )
        except RequestCancelledError:
            return
        except Exception:
            logger.warning("Vault status check for '%s' failed", style_id, exc_info=True)
            self._render(saved_status=FetchStatus.ERROR, is_saved=False)
            return

        self._render(saved_status=FetchStatus.SUCCESS, is_saved=saved)

    async def _lookup_saved(self, style_id: str, token: CancellationToken) -> bool:
        identity = await self._identity.current_identity()
        token.raise_if_cancelled()
        if identity is None:
            return False

        key = vault_status_cache_key(identity, style_id)
        cached = self._status_cache.get(key)
        if isinstance(cached, bool):
            return cached

        saved = await self._vault.is_saved(style_id, cancel_token=token)
        token.raise_if_cancelled()
        self._status_cache.set(key, saved)
        return saved

    async def add_to_vault(self) -> bool:
        sneaker = self.state.sneaker
        if sneaker is None or self.state.saving:
            return False

        self._render(saving=True, notice=None)
        try:
            identity = await self._identity.current_identity()
            if identity is None:
                self._render(saving=False, notice=SIGN_IN_REQUIRED_MESSAGE)
                return False
            await self._vault.save(sneaker)
        except DuplicateItemError:
            logger.info("Sneaker '%s' already in vault", sneaker.style_id)
        except Exception:
            logger.warning("Adding '%s' to vault failed", sneaker.style_id, exc_info=True)
            self._render(saving=False, notice=VAULT_ADD_FAILED_MESSAGE)
            return False

        self._status_cache.set(vault_status_cache_key(identity, sneaker.style_id), True)
        self._render(
            saving=False,
            is_saved=True,
            saved_status=FetchStatus.SUCCESS,
            notice=VAULT_ADDED_MESSAGE,
        )
        return True

    def cancel(self) -> None:
        """Navigation weg von der Seite: laufende Requests verwerfen, zurück auf idle."""
        if self._detail_request.active:
            self._detail_request.cancel()
            self._render(status=FetchStatus.IDLE)
        if self._status_request.active:
            self._status_request.cancel()
            self._render(saved_status=FetchStatus.IDLE)

    def _render(self, **changes: object) -> None:
        for field, value in changes.items():
            setattr(self.state, field, value)
        for listener in list(self._listeners):
            listener(self.state)
