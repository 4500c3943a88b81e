import asyncio

import pytest

from sneaker_vault.client.cancellation import CancellationToken, InFlightRequest
from sneaker_vault.domain.ports import RequestCancelledError


def test_token_raises_once_cancelled() -> None:
    token = CancellationToken()
    token.raise_if_cancelled()

    token.cancel()

    assert token.cancelled is True
    with pytest.raises(RequestCancelledError):
        token.raise_if_cancelled()


@pytest.mark.asyncio  # type: ignore[misc]
async def test_run_returns_result() -> None:
    request = InFlightRequest("test")

    async def operation(token: CancellationToken) -> str:
        return "ok"

    assert await request.run(operation) == "ok"
    assert request.active is False


@pytest.mark.asyncio  # type: ignore[misc]
async def test_new_request_cancels_previous() -> None:
    request = InFlightRequest("test")
    started = asyncio.Event()
    tokens: list[CancellationToken] = []

    async def slow(token: CancellationToken) -> str:
        tokens.append(token)
        started.set()
        await asyncio.sleep(10)
        return "stale"

    async def fast(token: CancellationToken) -> str:
        return "fresh"

    first = asyncio.create_task(request.run(slow))
    await started.wait()

    assert await request.run(fast) == "fresh"
    with pytest.raises(RequestCancelledError):
        await first
    assert tokens[0].cancelled is True


@pytest.mark.asyncio  # type: ignore[misc]
async def test_late_result_of_superseded_request_is_discarded() -> None:
    request = InFlightRequest("test")
    started = asyncio.Event()

    async def ignores_cancellation(token: CancellationToken) -> str:
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            # Transport, der den Abbruch nicht respektiert
            pass
        return "late"

    async def fresh(token: CancellationToken) -> str:
        return "fresh"

    first = asyncio.create_task(request.run(ignores_cancellation))
    await started.wait()
    await request.run(fresh)

    with pytest.raises(RequestCancelledError):
        await first


@pytest.mark.asyncio  # type: ignore[misc]
async def test_cancelling_the_caller_propagates() -> None:
    request = InFlightRequest("test")
    started = asyncio.Event()

    async def slow(token: CancellationToken) -> None:
        started.set()
        await asyncio.sleep(10)

    caller = asyncio.create_task(request.run(slow))
    await started.wait()
    caller.cancel()

    with pytest.raises(asyncio.CancelledError):
        await caller
