"""Cancellation tokens for superseded provider requests.

A :class:`RequestCanceller` keeps at most one live
:class:`CancellationToken`. Issuing a new token cancels the previous
one; the transport observes the token and aborts the underlying HTTP
request, and the engine checks it again when the request resolves so a
late result can never reach the state store.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pyweatherfetch.exceptions import WeatherRequestAbortedError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation signal for one provider request."""

    __slots__ = ("serial", "_cancelled", "_callbacks")

    def __init__(self, serial: int = 0) -> None:
        self.serial = serial
        self._cancelled = False
        self._callbacks: list[Callable[[], object]] = []

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "live"
        return f"<CancellationToken #{self.serial} {state}>"

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Signal cancellation. Returns ``False`` if already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                _logger.debug("Cancel callback failed for %r", self, exc_info=True)
        return True

    def add_callback(self, callback: Callable[[], object]) -> None:
        """Run *callback* on cancellation (immediately if already cancelled)."""
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[], object]) -> None:
        with contextlib.suppress(ValueError):
            self._callbacks.remove(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise WeatherRequestAbortedError(f"request #{self.serial} was superseded")

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable* as a task that is cancelled together with this token.

        Raises :class:`WeatherRequestAbortedError` when the token was
        cancelled before dispatch, while waiting, or before the result
        could be handed back.
        """
        if self._cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        self.add_callback(task.cancel)
        try:
            result = await task
        except asyncio.CancelledError:
            if self._cancelled:
                raise WeatherRequestAbortedError(f"request #{self.serial} was superseded") from None
            raise
        finally:
            self.remove_callback(task.cancel)

        self.raise_if_cancelled()
        return result


class RequestCanceller:
    """Owns the single in-flight :class:`CancellationToken`."""

    def __init__(self) -> None:
        self._serials = itertools.count(1)
        self._current: CancellationToken | None = None

    @property
    def current(self) -> CancellationToken | None:
        return self._current

    def begin(self) -> CancellationToken:
        """Cancel the live token, if any, and issue a fresh one."""
        previous = self._current
        token = CancellationToken(next(self._serials))
        self._current = token
        if previous is not None and previous.cancel():
            _logger.debug("Request #%d superseded by #%d", previous.serial, token.serial)
        return token

    def cancel(self) -> bool:
        """Cancel and drop the live token. Returns ``True`` if one was live."""
        token, self._current = self._current, None
        return token is not None and token.cancel()

    def release(self, token: CancellationToken) -> None:
        """Forget *token* once its request has terminated."""
        if token is self._current:
            self._current = None

    def is_current(self, token: CancellationToken) -> bool:
        return token is self._current and not token.cancelled
