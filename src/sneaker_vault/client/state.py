from __future__ import annotations

from pydantic import BaseModel, Field

from sneaker_vault.domain.models import FetchStatus, SneakerDetail, SneakerSummary

SEARCH_ERROR_MESSAGE = "Search failed. Please try again."
NOT_FOUND_MESSAGE = "Sneaker not found"
DETAIL_ERROR_MESSAGE = "Failed to load sneaker details"
SIGN_IN_REQUIRED_MESSAGE = "Please sign in to add sneakers to your vault"
VAULT_ADD_FAILED_MESSAGE = "Failed to add to vault"
VAULT_ADDED_MESSAGE = "Added to vault!"


class SearchViewState(BaseModel):
    """Was die Suchseite anzeigt: Eingabetext, Treffer, Lade- und Fehlerzustand."""

    query: str = ""
    results: list[SneakerSummary] = Field(default_factory=list)
    loading: bool = False
    error: str | None = None


class DetailViewState(BaseModel):
    """Detailseite: Sneaker-Payload und Vault-Status mit je eigener Zustandsmaschine."""

    style_id: str | None = None
    status: FetchStatus = FetchStatus.IDLE
    sneaker: SneakerDetail | None = None
    message: str | None = None

    saved_status: FetchStatus = FetchStatus.IDLE
    is_saved: bool = False
    saving: bool = False
    notice: str | None = None
