# tests/conftest.py
from collections.abc import Callable, Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import sneaker_vault.api.dependencies as _deps
from sneaker_vault.core.config import Settings, get_settings
from sneaker_vault.core.rate_limit import limiter
from sneaker_vault.domain.models import SneakerDetail, SneakerSummary
from sneaker_vault.main import app
from sneaker_vault.repositories.kv_storage import MemoryKeyValueStorage
from sneaker_vault.services.ephemeral_cache import EphemeralCache


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        api_keys={"test-key-alice": "user_alice", "test-key-bob": "user_bob"},
        database_url="sqlite+aiosqlite:///:memory:",
    )


def _reset_singletons() -> None:
    limiter.reset()
    _deps._vault_repository = None
    _deps._collection_repository = None
    _deps._catalog_cache = None


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    # Jeder Test startet mit leeren In-Memory-Datenbanken und leerem Katalog-Cache.
    _reset_singletons()
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        with patch(
            "sneaker_vault.core.config.get_settings", return_value=test_settings
        ), TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        _reset_singletons()


@pytest.fixture
def alice_headers() -> dict:
    return {"X-API-Key": "test-key-alice"}


@pytest.fixture
def bob_headers() -> dict:
    return {"X-API-Key": "test-key-bob"}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture
def content_cache(storage: MemoryKeyValueStorage, clock: FakeClock) -> EphemeralCache:
    return EphemeralCache(storage, namespace="sneaker_vault_", ttl_seconds=86400, clock=clock)


@pytest.fixture
def status_cache(storage: MemoryKeyValueStorage, clock: FakeClock) -> EphemeralCache:
    return EphemeralCache(storage, namespace="sneaker_vault_", ttl_seconds=300, clock=clock)


@pytest.fixture
def make_summary() -> Callable[..., SneakerSummary]:
    def _make(style_id: str = "DD1391-100", name: str = "Nike Dunk Low Panda") -> SneakerSummary:
        return SneakerSummary(
            style_id=style_id,
            name=name,
            brand="Nike",
            thumbnail=f"https://images.example.com/{style_id}.png",
            colorway="White/Black",
            release_date="2021-03-10",
            retail_price=110.0,
        )

    return _make


@pytest.fixture
def make_detail() -> Callable[..., SneakerDetail]:
    def _make(style_id: str = "DD1391-100", name: str = "Nike Dunk Low Panda") -> SneakerDetail:
        return SneakerDetail(
            style_id=style_id,
            name=name,
            brand="Nike",
            thumbnail=f"https://images.example.com/{style_id}.png",
            colorway="White/Black",
            release_date="2021-03-10",
            retail_price=110.0,
            description="The Nike Dunk Low in black and white.",
            image_links=[f"https://images.example.com/{style_id}-1.png"],
            resell_prices={
                "stockX": 125.0,
                "goat": 131.0,
                "flightClub": None,
                "stadiumGoods": None,
            },
            resell_links={
                "stockX": "https://stockx.com/nike-dunk-low-retro-white-black-2021",
                "goat": None,
                "flightClub": None,
                "stadiumGoods": None,
            },
        )

    return _make
