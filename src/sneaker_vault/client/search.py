from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from sneaker_vault.client.cancellation import InFlightRequest
from sneaker_vault.client.debounce import Debouncer
from sneaker_vault.client.state import SEARCH_ERROR_MESSAGE, SearchViewState
from sneaker_vault.domain.models import SneakerSummary
from sneaker_vault.domain.ports import RequestCancelledError, SneakerSourcePort
from sneaker_vault.services.ephemeral_cache import EphemeralCache

logger = logging.getLogger(__name__)

SEARCH_CACHE_PREFIX = "search_"

StateListener = Callable[[SearchViewState], None]


def search_cache_key(query: str) -> str:
    return f"{SEARCH_CACHE_PREFIX}{query.lower()}"


class SearchCoordinator:
    """
    Search-as-you-type für die Produktsuche.

    Tastatureingaben aktualisieren sofort den sichtbaren Suchtext und laufen
    dann durch den Debouncer. Pro Debounce-Fenster wird höchstens ein Request
    abgesetzt; ein neuer Request bricht den laufenden ab, und nur das Ergebnis
    des zuletzt gestarteten Requests wird gerendert. Treffer werden (auch leer)
    im Content-Cache abgelegt, damit identische Suchen ohne Netzwerk auskommen.
    """

    def __init__(
        self,
        source: SneakerSourcePort,
        cache: EphemeralCache,
        debounce_seconds: float = 0.5,
        min_query_length: int = 2,
        result_limit: int = 10,
    ) -> None:
        self._source = source
        self._cache = cache
        self._min_length = min_query_length
        self._limit = result_limit
        self._request = InFlightRequest("search")
        self._debouncer = Debouncer(self.search, debounce_seconds)
        self._listeners: list[StateListener] = []
        self.state = SearchViewState()

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def on_input(self, text: str) -> None:
        self._render(query=text)
        self._debouncer(text)

    async def submit(self) -> None:
        """Enter / Button: umgeht den Debouncer, gleiche Cache- und Abbruchregeln."""
        self._debouncer.cancel()
        await self.search(self.state.query)

    async def search(self, raw_query: str) -> None:
        query = raw_query.strip()
        if len(query) < self._min_length:
            self._request.cancel()
            self._render(results=[], loading=False, error=None)
            return

        key = search_cache_key(query)
        cached = self._cache.get(key)
        if cached is not None:
            try:
                results = [SneakerSummary.model_validate(item) for item in cached]
            except (TypeError, ValidationError):
                logger.warning("Discarding unreadable cached results for '%s'", key)
                self._cache.delete(key)
            else:
                self._request.cancel()
                self._render(results=results, loading=False, error=None)
                return

        self._render(loading=True, error=None)
        try:
            results = await self._request.run(
                lambda token: self._source.search(query, self._limit, cancel_token=token)
            )
        except RequestCancelledError:
            return
        except Exception:
            logger.warning("Search for '%s' failed", query, exc_info=True)
            self._render(results=[], loading=False, error=SEARCH_ERROR_MESSAGE)
            return

        self._cache.set(key, [r.model_dump(mode="json", by_alias=True) for r in results])
        self._render(results=results, loading=False, error=None)

    def cancel(self) -> None:
        """Verwirft ausstehende Eingaben und den laufenden Request."""
        self._debouncer.cancel()
        if self._request.active:
            self._request.cancel()
            self._render(loading=False)

    def _render(self, **changes: object) -> None:
        for field, value in changes.items():
            setattr(self.state, field, value)
        for listener in list(self._listeners):
            listener(self.state)
