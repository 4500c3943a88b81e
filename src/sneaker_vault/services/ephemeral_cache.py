from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from sneaker_vault.core.metrics import CACHE_ERRORS, CACHE_HITS, CACHE_MISSES
from sneaker_vault.repositories.kv_storage import KeyValueStorage

logger = logging.getLogger(__name__)


class EphemeralCache:
    """
    TTL-basierter Key-Value-Cache über einem namespaced KeyValueStorage.

    Jeder Eintrag wird als JSON-Envelope ``{"value": ..., "storedAt": ...}``
    unter ``<namespace><key>`` abgelegt. Abgelaufene Einträge gelten als nicht
    vorhanden und werden beim nächsten Lesen entfernt. Speicherfehler werden
    geloggt und wie ein Cache-Miss behandelt, niemals an den Aufrufer
    weitergereicht.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        namespace: str,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._namespace = namespace
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _storage_key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def get(self, key: str) -> Any | None:
        """Holt einen Wert, sofern vorhanden und nicht abgelaufen."""
        storage_key = self._storage_key(key)
        try:
            raw = self._storage.get_item(storage_key)
            if raw is None:
                CACHE_MISSES.labels(namespace=self._namespace).inc()
                return None

            envelope = json.loads(raw)
            stored_at = float(envelope["storedAt"])
            if (self._clock() - stored_at) > self._ttl:
                self._storage.remove_item(storage_key)
                CACHE_MISSES.labels(namespace=self._namespace).inc()
                return None

            CACHE_HITS.labels(namespace=self._namespace).inc()
            return envelope["value"]
        except Exception:
            logger.warning("Cache read error for key '%s'", storage_key, exc_info=True)
            CACHE_ERRORS.labels(namespace=self._namespace, operation="get").inc()
            CACHE_MISSES.labels(namespace=self._namespace).inc()
            return None

    def set(self, key: str, value: Any) -> None:
        """Speichert einen Wert mit aktuellem Zeitstempel und überschreibt ältere Einträge."""
        storage_key = self._storage_key(key)
        try:
            raw = json.dumps({"value": value, "storedAt": self._clock()})
            self._storage.set_item(storage_key, raw)
        except Exception:
            logger.warning("Cache write error for key '%s'", storage_key, exc_info=True)
            CACHE_ERRORS.labels(namespace=self._namespace, operation="set").inc()

    def delete(self, key: str) -> None:
        storage_key = self._storage_key(key)
        try:
            self._storage.remove_item(storage_key)
        except Exception:
            logger.warning("Cache delete error for key '%s'", storage_key, exc_info=True)
            CACHE_ERRORS.labels(namespace=self._namespace, operation="delete").inc()

    def clear(self) -> None:
        """Entfernt alle Einträge dieses Namespace, fremde Keys bleiben unberührt."""
        try:
            for storage_key in self._storage.keys():
                if storage_key.startswith(self._namespace):
                    self._storage.remove_item(storage_key)
        except Exception:
            logger.warning("Cache clear error for namespace '%s'", self._namespace, exc_info=True)
            CACHE_ERRORS.labels(namespace=self._namespace, operation="clear").inc()
