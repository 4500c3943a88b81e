from collections.abc import AsyncGenerator, Callable
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

import sneaker_vault.api.dependencies as _deps
from sneaker_vault.api.dependencies import get_sneaker_source
from sneaker_vault.client.factory import create_detail_coordinator, create_search_coordinator
from sneaker_vault.core.config import Settings, get_settings
from sneaker_vault.domain.models import FetchStatus, SneakerDetail
from sneaker_vault.domain.ports import SneakerNotFoundError, SneakerSourcePort
from sneaker_vault.main import app
from sneaker_vault.repositories.kv_storage import MemoryKeyValueStorage


@pytest.fixture
def upstream() -> AsyncMock:
    return AsyncMock(spec=SneakerSourcePort)


@pytest_asyncio.fixture  # type: ignore[misc]
async def backend(
    test_settings: Settings, upstream: AsyncMock
) -> AsyncGenerator[Callable[[str | None], httpx.AsyncClient], None]:
    """Client-Seite spricht über ASGITransport direkt mit der App."""
    _deps._vault_repository = None
    _deps._collection_repository = None
    _deps._catalog_cache = None
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_sneaker_source] = lambda: upstream

    clients: list[httpx.AsyncClient] = []

    def _make(api_key: str | None) -> httpx.AsyncClient:
        headers = {"X-API-Key": api_key} if api_key else {}
        http_client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test/api/v1",
            headers=headers,
        )
        clients.append(http_client)
        return http_client

    yield _make

    for http_client in clients:
        await http_client.aclose()
    app.dependency_overrides.clear()
    _deps._vault_repository = None
    _deps._collection_repository = None
    _deps._catalog_cache = None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_search_through_backend(
    backend, upstream: AsyncMock, test_settings: Settings, make_summary
) -> None:
    upstream.search.return_value = [
        make_summary(),
        make_summary("555088-134", "Jordan 1 Chicago"),
    ]
    coordinator = create_search_coordinator(
        test_settings, backend(None), MemoryKeyValueStorage()
    )

    await coordinator.search("Dunk")
    await coordinator.search("dunk")

    assert [r.style_id for r in coordinator.state.results] == ["DD1391-100", "555088-134"]
    assert coordinator.state.loading is False
    assert coordinator.state.error is None
    assert upstream.search.await_count == 1


@pytest.mark.asyncio  # type: ignore[misc]
async def test_detail_and_vault_flow(
    backend, upstream: AsyncMock, test_settings: Settings, make_detail
) -> None:
    detail: SneakerDetail = make_detail()
    upstream.fetch_by_id.return_value = detail
    coordinator = create_detail_coordinator(
        test_settings, backend("test-key-alice"), MemoryKeyValueStorage()
    )

    await coordinator.open("DD1391-100")

    assert coordinator.state.status == FetchStatus.SUCCESS
    assert coordinator.state.sneaker == detail
    assert coordinator.state.saved_status == FetchStatus.SUCCESS
    assert coordinator.state.is_saved is False

    assert await coordinator.add_to_vault() is True
    assert coordinator.state.is_saved is True

    # Zweiter Besuch mit frischem Client-Cache sieht den gespeicherten Status
    revisit = create_detail_coordinator(
        test_settings, backend("test-key-alice"), MemoryKeyValueStorage()
    )
    await revisit.check_saved("DD1391-100")
    assert revisit.state.is_saved is True


@pytest.mark.asyncio  # type: ignore[misc]
async def test_anonymous_detail_is_not_saved(
    backend, upstream: AsyncMock, test_settings: Settings, make_detail
) -> None:
    upstream.fetch_by_id.return_value = make_detail()
    coordinator = create_detail_coordinator(test_settings, backend(None), MemoryKeyValueStorage())

    await coordinator.open("DD1391-100")

    assert coordinator.state.status == FetchStatus.SUCCESS
    assert coordinator.state.saved_status == FetchStatus.SUCCESS
    assert coordinator.state.is_saved is False
    assert await coordinator.add_to_vault() is False


@pytest.mark.asyncio  # type: ignore[misc]
async def test_unknown_sneaker_renders_not_found(
    backend, upstream: AsyncMock, test_settings: Settings
) -> None:
    upstream.fetch_by_id.side_effect = SneakerNotFoundError("NOPE-000", "sneaks_api")
    coordinator = create_detail_coordinator(test_settings, backend(None), MemoryKeyValueStorage())

    await coordinator.load("NOPE-000")

    assert coordinator.state.status == FetchStatus.NOT_FOUND
    assert coordinator.state.sneaker is None
