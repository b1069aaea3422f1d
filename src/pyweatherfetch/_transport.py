"""HTTP transport for the provider's current-weather endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pyweatherfetch._cancel import CancellationToken
from pyweatherfetch._constants import GENERIC_FETCH_ERROR, STATUS_MESSAGES, WEATHER_ENDPOINT
from pyweatherfetch.config import WeatherConfig
from pyweatherfetch.exceptions import (
    WeatherAuthenticationError,
    WeatherHttpError,
    WeatherLocationNotFoundError,
    WeatherParseError,
    WeatherRateLimitError,
    WeatherServerError,
    WeatherTransportError,
)

_logger = logging.getLogger(__name__)

_SECRET_PARAMS = frozenset({"appid"})

_STATUS_ERRORS: dict[int, type[WeatherHttpError]] = {
    401: WeatherAuthenticationError,
    404: WeatherLocationNotFoundError,
    429: WeatherRateLimitError,
    500: WeatherServerError,
}


class Transport(Protocol):
    """Structural transport interface used by the fetch engine.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def fetch_current(self, location: str, token: CancellationToken) -> Any:
        ...


def raise_for_status(status: int, *, endpoint: str = WEATHER_ENDPOINT, body: str = "") -> None:
    """Map a non-2xx HTTP status to the matching exception."""
    if 200 <= status < 300:
        return
    error_cls = _STATUS_ERRORS.get(status, WeatherHttpError)
    raise error_cls(
        STATUS_MESSAGES.get(status, GENERIC_FETCH_ERROR),
        status_code=status,
        endpoint=endpoint,
        detail=f"HTTP {status} from {endpoint}: {body[:200]}",
    )


def redact_params(params: dict[str, str]) -> dict[str, str]:
    """Return *params* with the API key masked, for debug logs."""
    return {key: "<redacted>" if key in _SECRET_PARAMS else value for key, value in params.items()}


def parse_body(body: bytes, *, endpoint: str = WEATHER_ENDPOINT) -> Any:
    """Decode a UTF-8 JSON response body."""
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise WeatherParseError(
            endpoint=endpoint,
            detail=f"Invalid JSON from {endpoint}: {body[:200]!r}",
        ) from exc


class HttpTransport:
    """aiohttp transport for ``GET /data/2.5/weather``.

    The request runs under the caller's :class:`CancellationToken`;
    cancelling the token aborts the in-flight HTTP request.
    """

    def __init__(self, config: WeatherConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def build_params(self, location: str) -> dict[str, str]:
        return {
            "q": location,
            "appid": self._config.api_key,
            "units": self._config.units,
        }

    async def fetch_current(self, location: str, token: CancellationToken) -> Any:
        token.raise_if_cancelled()
        body = await token.run(self._get(WEATHER_ENDPOINT, self.build_params(location)))
        return parse_body(body)

    async def _get(self, endpoint: str, params: dict[str, str]) -> bytes:
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("GET %s params=%s", url, redact_params(params))

        try:
            async with self._http.get(url, params=params, headers=headers, timeout=timeout) as resp:
                body = await resp.read()
                _logger.debug("HTTP %d from %s (%d bytes)", resp.status, endpoint, len(body))
                raise_for_status(resp.status, endpoint=endpoint, body=body.decode("utf-8", "replace"))
        except WeatherTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise WeatherTransportError(
                endpoint=endpoint,
                detail=f"Request to {endpoint} failed: {exc!r}",
            ) from exc
        return body
