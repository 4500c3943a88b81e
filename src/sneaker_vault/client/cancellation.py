from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sneaker_vault.domain.ports import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Kooperatives Abbruchsignal, das in jede asynchrone Operation gereicht wird."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RequestCancelledError()


class InFlightRequest:
    """
    Slot for the single active request of a coordinator flow.

    Starting a request cancels the token and the task of the previous one.
    Results are checked against their own token when they resolve, so a
    superseded request surfaces as RequestCancelledError even if its task
    finished before the cancellation reached it.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._token: CancellationToken | None = None
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def run(self, operation: Callable[[CancellationToken], Awaitable[T]]) -> T:
        self.cancel()
        token = CancellationToken()
        task = asyncio.ensure_future(operation(token))
        self._token = token
        self._task = task
        try:
            result = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if token.cancelled and not (current and current.cancelling()):
                logger.debug("%s request superseded", self._name)
                raise RequestCancelledError() from None
            # the awaiting flow itself was cancelled
            raise
        finally:
            if self._task is task:
                self._task = None

        token.raise_if_cancelled()
        return result
