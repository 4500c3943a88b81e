# src/sneaker_vault/services/catalog_service.py
from __future__ import annotations

import logging

from pydantic import ValidationError

from sneaker_vault.domain.models import SneakerDetail, SneakerSummary
from sneaker_vault.domain.ports import SneakerSourcePort
from sneaker_vault.services.ephemeral_cache import EphemeralCache

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Serverseitiger Proxy vor der Sneaker-Datenquelle.
    Such- und Detailantworten werden im Content-Cache gehalten, damit wiederholte
    Anfragen die Upstream-API nicht erneut treffen. Not-Found wird nicht gecacht.
    """

    def __init__(self, source: SneakerSourcePort, cache: EphemeralCache) -> None:
        self._source = source
        self._cache = cache

    async def search(self, query: str, limit: int = 10) -> list[SneakerSummary]:
        query = query.strip()
        key = f"search_{query.lower()}_{limit}"

        # 1. Check cache
        cached = self._cache.get(key)
        if cached is not None:
            try:
                return [SneakerSummary.model_validate(item) for item in cached]
            except (TypeError, ValidationError):
                logger.warning("Discarding unreadable cached search '%s'", key)

        # 2. If miss, fetch from upstream and update cache
        results = await self._source.search(query, limit)
        self._cache.set(key, [r.model_dump(mode="json", by_alias=True) for r in results])
        return results

    async def get_sneaker(self, style_id: str) -> SneakerDetail:
        key = f"sneaker_{style_id}"
        cached = self._cache.get(key)
        if cached is not None:
            try:
                return SneakerDetail.model_validate(cached)
            except ValidationError:
                logger.warning("Discarding unreadable cached sneaker '%s'", key)

        sneaker = await self._source.fetch_by_id(style_id)
        self._cache.set(key, sneaker.model_dump(mode="json", by_alias=True))
        return sneaker
