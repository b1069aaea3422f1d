"""Trailing-edge debouncer driven by the running event loop."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger(__name__)


class Debouncer:
    """Collapse a burst of calls into one trailing call.

    Every call cancels the pending timer and reschedules *func* with the
    latest arguments *delay* seconds later. If *func* returns an
    awaitable it is run as a task; the debouncer does not wait for it
    before accepting the next call.

    Must be called from a coroutine or callback running on an event loop.
    """

    def __init__(self, func: Callable[..., Any], delay: float) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._func = func
        self._delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Whether a call is scheduled and has not fired yet."""
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._args = args
        self._kwargs = kwargs
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> bool:
        """Drop the pending call, if any."""
        handle, self._handle = self._handle, None
        if handle is None:
            return False
        handle.cancel()
        self._args, self._kwargs = (), {}
        return True

    def flush(self) -> asyncio.Task[Any] | None:
        """Fire the pending call now instead of waiting for the timer.

        Returns the task running the call when *func* is asynchronous.
        """
        if self._handle is None:
            return None
        self._handle.cancel()
        return self._fire()

    async def wait(self) -> None:
        """Wait for every task started by this debouncer to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire(self) -> asyncio.Task[Any] | None:
        args, kwargs = self._args, self._kwargs
        self._handle = None
        self._args, self._kwargs = (), {}

        result = self._func(*args, **kwargs)
        if not inspect.isawaitable(result):
            return None
        task = asyncio.ensure_future(result)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.warning("Debounced call failed: %s", exc, exc_info=exc)
