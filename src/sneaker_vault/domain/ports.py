# src/sneaker_vault/domain/ports.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from sneaker_vault.domain.models import SneakerDetail, SneakerSummary

if TYPE_CHECKING:
    from sneaker_vault.client.cancellation import CancellationToken


class SneakerSourcePort(ABC):
    """
    Abstrakte Schnittstelle für Sneaker-Datenquellen.
    Implementiert vom Upstream-Adapter (Backend) und vom HTTP-Katalog-Client
    (Client-Seite). Koordinatoren kennen ausschließlich dieses Interface.
    """

    @abstractmethod
    async def search(
        self,
        query: str,
        limit: int = 10,
        cancel_token: CancellationToken | None = None,
    ) -> list[SneakerSummary]:
        """Sucht nach Sneakern anhand eines Suchbegriffs."""
        ...

    @abstractmethod
    async def fetch_by_id(
        self,
        style_id: str,
        cancel_token: CancellationToken | None = None,
    ) -> SneakerDetail:
        """
        Ruft die Details eines Sneakers anhand seiner styleID ab.

        Raises:
            SneakerNotFoundError: Wenn der Sneaker nicht gefunden wurde.
            ExternalApiError: Bei Kommunikationsproblemen mit der Quelle.
            RequestCancelledError: Wenn das Token vor der Auflösung abgebrochen wurde.
        """
        ...


class IdentityPort(ABC):
    """Liefert die aktuelle Identität oder None, falls niemand angemeldet ist."""

    @abstractmethod
    async def current_identity(self) -> str | None: ...


class VaultStatusPort(ABC):
    """Existenzprüfung und Speichern von Vault-Einträgen für eine Identität."""

    @abstractmethod
    async def is_saved(
        self,
        style_id: str,
        cancel_token: CancellationToken | None = None,
    ) -> bool: ...

    @abstractmethod
    async def save(self, sneaker: SneakerSummary) -> None:
        """
        Raises:
            DuplicateItemError: Wenn der Sneaker bereits im Vault liegt.
        """
        ...


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class SneakerNotFoundError(Exception):
    def __init__(self, style_id: str, source: str):
        super().__init__(f"Sneaker '{style_id}' not found in source '{source}'")
        self.style_id = style_id
        self.source = source


class ExternalApiError(Exception):
    def __init__(self, source: str, detail: str):
        super().__init__(f"External API error from '{source}': {detail}")
        self.source = source
        self.detail = detail


class RequestCancelledError(Exception):
    """Ein Request wurde durch einen neueren Request abgelöst."""


class DuplicateItemError(Exception):
    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} '{key}' already exists")
        self.kind = kind
        self.key = key


class ItemNotFoundError(Exception):
    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} '{key}' not found")
        self.kind = kind
        self.key = key


class StorageError(Exception):
    """Fehler des Key-Value-Speichers hinter dem Cache."""


class StorageQuotaExceededError(StorageError):
    def __init__(self, quota_bytes: int):
        super().__init__(f"Storage quota of {quota_bytes} bytes exceeded")
        self.quota_bytes = quota_bytes
