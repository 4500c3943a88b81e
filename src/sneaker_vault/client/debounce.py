from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class Debouncer:
    """
    Trailing-edge debounce for an async callable.

    Calls within ``wait_seconds`` of each other collapse into one invocation
    with the arguments of the last call. Every call resets the timer; there is
    never more than one pending invocation and no leading-edge call.
    Must be called from within a running event loop.
    """

    def __init__(self, func: Callable[..., Awaitable[Any]], wait_seconds: float = 0.5) -> None:
        self._func = func
        self._wait = wait_seconds
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}
        self.last_task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.cancel()
        self._args = args
        self._kwargs = kwargs
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._wait, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> asyncio.Task | None:
        """Fires the pending invocation now. Returns its task, if any."""
        if self._handle is None:
            return None
        self._handle.cancel()
        self._fire()
        return self.last_task

    def _fire(self) -> None:
        self._handle = None
        args, kwargs = self._args, self._kwargs
        self._args, self._kwargs = (), {}
        self.last_task = asyncio.ensure_future(self._func(*args, **kwargs))
