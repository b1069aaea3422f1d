"""Fetch engine: cache lookup, cancellation, network call and failure policy.

The engine is the only writer of the record cache and the failure
counter, and it talks to the state store exclusively through
:class:`~pyweatherfetch.state.FetchEvent`s. All methods run on a single
event loop; no locking is involved.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from pyweatherfetch._cache import WeatherCache, normalize_location
from pyweatherfetch._cancel import CancellationToken, RequestCanceller
from pyweatherfetch._constants import DEBOUNCE_DELAY, FAILURE_THRESHOLD, GENERIC_FETCH_ERROR
from pyweatherfetch._debounce import Debouncer
from pyweatherfetch._transport import Transport
from pyweatherfetch.exceptions import WeatherError, WeatherTransportError
from pyweatherfetch.state import FetchEvent, FetchEventType, FetchState, StateStore

_logger = logging.getLogger(__name__)


class FetchPhase(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"
    FALLBACK = "fallback"


_PHASE_BY_EVENT: dict[FetchEventType, FetchPhase] = {
    FetchEventType.FETCH_START: FetchPhase.LOADING,
    FetchEventType.FETCH_SUCCESS: FetchPhase.SUCCESS,
    FetchEventType.FETCH_ERROR: FetchPhase.FAILED,
    FetchEventType.FETCH_FALLBACK: FetchPhase.FALLBACK,
}


class FetchEngine:
    """Orchestrates weather fetches for a single consumer.

    Parameters
    ----------
    transport
        Network layer; see :class:`~pyweatherfetch._transport.Transport`.
    cache
        Record cache. Pass a shared instance to share records between
        engines; by default each engine owns its own.
    store
        State store receiving transitions.
    debounce_delay
        Quiet period in seconds used by :meth:`set_location`.
    failure_threshold
        Consecutive failures surfaced as errors before escalating to
        the fallback state.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        cache: WeatherCache | None = None,
        store: StateStore | None = None,
        debounce_delay: float = DEBOUNCE_DELAY,
        failure_threshold: int = FAILURE_THRESHOLD,
        initial_location: str = "",
    ) -> None:
        self._transport = transport
        self._cache = cache if cache is not None else WeatherCache()
        self._store = store if store is not None else StateStore()
        self._canceller = RequestCanceller()
        self._debounced_fetch = Debouncer(self.fetch_weather, debounce_delay)
        self._failure_threshold = failure_threshold
        self._failure_count = 0
        self._location = initial_location
        self._phase = FetchPhase.IDLE

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def state(self) -> FetchState:
        return self._store.state

    @property
    def phase(self) -> FetchPhase:
        return self._phase

    @property
    def location(self) -> str:
        return self._location

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def cache(self) -> WeatherCache:
        return self._cache

    @property
    def debouncer(self) -> Debouncer:
        return self._debounced_fetch

    def subscribe(self, listener: Callable[[FetchState], None]) -> Callable[[], None]:
        return self._store.subscribe(listener)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def fetch_weather(self, location: str) -> None:
        """Fetch current weather for *location* and publish the outcome.

        Empty or whitespace-only locations are ignored. A fresh cache
        entry is published directly without a loading transition.
        Results of requests superseded by a newer call are dropped.
        """
        if not location or not location.strip():
            return

        query = location.strip()
        key = normalize_location(query)

        entry = self._cache.get_fresh(key)
        if entry is not None:
            # An older request still in flight must not overwrite this result.
            if self._canceller.cancel():
                _logger.debug("Cache hit for %r aborted the in-flight request", query)
            _logger.debug("Using cached weather for %r (age %.1fs)", query, entry.age(self._cache.now()))
            self._failure_count = 0
            self._dispatch(FetchEvent.success(entry.data))
            return

        token = self._canceller.begin()
        self._dispatch(FetchEvent.start())
        _logger.debug("Fetching weather for %r (request #%d)", query, token.serial)

        try:
            payload = await self._transport.fetch_current(query, token)
        except Exception as exc:
            if token.cancelled:
                _logger.debug("Request #%d for %r aborted", token.serial, query)
                return
            self._canceller.release(token)
            self._record_failure(query, exc)
            return

        if not self._is_live(token):
            _logger.debug("Dropping late result of request #%d for %r", token.serial, query)
            return
        self._canceller.release(token)

        self._cache.set(key, payload)
        self._failure_count = 0
        self._dispatch(FetchEvent.success(payload))

    async def refresh(self) -> None:
        """Reset the failure streak and fetch the tracked location now."""
        self._failure_count = 0
        self._debounced_fetch.cancel()
        await self.fetch_weather(self._location)

    def set_location(self, location: str) -> None:
        """Track *location* and schedule a debounced fetch for it."""
        self._location = location
        self._debounced_fetch(location)

    def clear_cache(self) -> None:
        """Invalidate every cached record."""
        _logger.debug("Clearing %d cached records", len(self._cache))
        self._cache.clear()

    async def aclose(self) -> None:
        """Drop the pending debounced fetch and abort the in-flight request."""
        self._debounced_fetch.cancel()
        self._canceller.cancel()
        await self._debounced_fetch.wait()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _is_live(self, token: CancellationToken) -> bool:
        return self._canceller.is_current(token)

    def _record_failure(self, query: str, exc: Exception) -> None:
        self._failure_count += 1

        if isinstance(exc, WeatherTransportError):
            message = str(exc)
            if exc.detail:
                _logger.warning("Weather fetch for %r failed: %s (%s)", query, message, exc.detail)
            else:
                _logger.warning("Weather fetch for %r failed: %s", query, message)
        elif isinstance(exc, WeatherError):
            message = str(exc) or GENERIC_FETCH_ERROR
            _logger.warning("Weather fetch for %r failed: %s", query, message)
        else:
            message = GENERIC_FETCH_ERROR
            _logger.warning("Unexpected error fetching weather for %r", query, exc_info=exc)

        if self._failure_count > self._failure_threshold:
            _logger.warning(
                "%d consecutive failures, switching to fallback",
                self._failure_count,
            )
            self._dispatch(FetchEvent.fallback())
        else:
            self._dispatch(FetchEvent.error(message))

    def _dispatch(self, event: FetchEvent) -> None:
        self._store.dispatch(event)
        self._phase = _PHASE_BY_EVENT.get(event.type, self._phase)
