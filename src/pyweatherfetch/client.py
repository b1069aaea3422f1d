"""High-level async client exposing the consumer-facing weather contract."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp
from pydantic import ValidationError

from pyweatherfetch._cache import WeatherCache
from pyweatherfetch._transport import HttpTransport, Transport
from pyweatherfetch.config import WeatherConfig
from pyweatherfetch.engine import FetchEngine, FetchPhase
from pyweatherfetch.exceptions import WeatherError
from pyweatherfetch.models.weather import WeatherSummary
from pyweatherfetch.state import FetchState

_logger = logging.getLogger(__name__)


class WeatherClient:
    """Async client for current weather by location name.

    Usage::

        async with WeatherClient(config, initial_location="Berlin") as client:
            client.set_location("Paris")      # debounced
            await client.refresh()            # immediate
            print(client.data, client.error, client.fallback)

    Parameters
    ----------
    config
        Client configuration.
    session
        Optional externally managed ``aiohttp.ClientSession``.
    transport
        Optional transport replacing the HTTP one (tests, proxies).
    cache
        Optional record cache shared with other clients.
    initial_location
        Location fetched (debounced) when the client is entered.
    """

    def __init__(
        self,
        config: WeatherConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        cache: WeatherCache | None = None,
        initial_location: str = "",
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._custom_transport = transport
        self._cache = cache
        self._initial_location = initial_location
        self._engine: FetchEngine | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> WeatherClient:
        transport = self._custom_transport
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(self._config, self._http_session)
        self._engine = FetchEngine(
            transport,
            cache=self._cache,
            debounce_delay=self._config.debounce_delay,
            initial_location=self._initial_location,
        )
        if self._initial_location:
            self._engine.set_location(self._initial_location)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._engine is not None:
            await self._engine.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_engine(self) -> FetchEngine:
        if self._engine is None:
            raise WeatherError("Client not initialized. Use 'async with WeatherClient(...) as client:'")
        return self._engine

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def engine(self) -> FetchEngine:
        return self._require_engine()

    @property
    def state(self) -> FetchState:
        return self._require_engine().state

    @property
    def data(self) -> Any:
        return self.state.data

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> str | None:
        return self.state.error

    @property
    def fallback(self) -> bool:
        return self.state.fallback

    @property
    def phase(self) -> FetchPhase:
        return self._require_engine().phase

    @property
    def location(self) -> str:
        return self._require_engine().location

    @property
    def summary(self) -> WeatherSummary | None:
        """Display fields of the current record, or ``None`` if unavailable."""
        record = self.state.data
        if record is None:
            return None
        try:
            return WeatherSummary.from_record(record)
        except ValidationError:
            _logger.debug("Current record lacks display fields", exc_info=True)
            return None

    def subscribe(self, listener: Callable[[FetchState], None]) -> Callable[[], None]:
        """Call *listener* with the new state after every transition."""
        return self._require_engine().subscribe(listener)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def set_location(self, location: str) -> None:
        """Track *location*; the fetch fires after the debounce delay."""
        self._require_engine().set_location(location)

    async def fetch_weather(self, location: str) -> None:
        """Fetch *location* immediately, bypassing the debounce."""
        await self._require_engine().fetch_weather(location)

    async def refresh(self) -> None:
        """Refetch the tracked location now and reset the failure streak."""
        await self._require_engine().refresh()

    def clear_cache(self) -> None:
        self._require_engine().clear_cache()
