"""Fetch state, its reducer, and the store that owns it.

:func:`reduce` is pure and total: every event type has a transition from
every state and anything else returns the state unchanged.
:class:`StateStore` holds the current state, applies events one at a
time and notifies listeners.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from pyweatherfetch.state.events import FetchEventType

_logger = logging.getLogger(__name__)

Listener = Callable[["FetchState"], None]


class FetchState(BaseModel):
    """Externally observable fetch state."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: Any = None
    loading: bool = False
    error: str | None = None
    fallback: bool = False


def _on_start(state: FetchState, _event: Any) -> FetchState:
    return state.model_copy(update={"loading": True, "error": None, "fallback": False})


def _on_success(state: FetchState, event: Any) -> FetchState:
    return state.model_copy(
        update={"data": event.payload, "loading": False, "error": None, "fallback": False}
    )


def _on_error(state: FetchState, event: Any) -> FetchState:
    # data is kept so the last good record can stay on screen
    return state.model_copy(update={"loading": False, "error": event.message, "fallback": False})


def _on_fallback(state: FetchState, _event: Any) -> FetchState:
    return state.model_copy(update={"loading": False, "error": None, "fallback": True})


_REDUCERS: dict[FetchEventType, Callable[[FetchState, Any], FetchState]] = {
    FetchEventType.FETCH_START: _on_start,
    FetchEventType.FETCH_SUCCESS: _on_success,
    FetchEventType.FETCH_ERROR: _on_error,
    FetchEventType.FETCH_FALLBACK: _on_fallback,
}


def reduce(state: FetchState, event: Any) -> FetchState:
    """Return the state that results from applying *event* to *state*."""
    event_type = getattr(event, "type", None)
    try:
        handler = _REDUCERS.get(FetchEventType(event_type))
    except ValueError:
        handler = None
    if handler is None:
        return state
    return handler(state, event)


class StateStore:
    """Owner of the current :class:`FetchState`."""

    def __init__(self, initial: FetchState | None = None) -> None:
        self._state = initial if initial is not None else FetchState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> FetchState:
        return self._state

    def dispatch(self, event: Any) -> FetchState:
        """Apply *event* and notify listeners if the state changed."""
        previous = self._state
        self._state = reduce(previous, event)
        if self._state is previous:
            _logger.debug("Ignored event %r", getattr(event, "type", event))
            return self._state

        _logger.debug(
            "%s -> loading=%s error=%r fallback=%s",
            getattr(event, "type", event),
            self._state.loading,
            self._state.error,
            self._state.fallback,
        )
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                _logger.warning("State listener %r failed", listener, exc_info=True)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
