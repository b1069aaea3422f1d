"""Custom exception hierarchy for pyweatherfetch.

The message of every HTTP/transport exception is the text shown to the
user; diagnostic detail lives in ``detail`` and in the logs.
"""

from __future__ import annotations

from pyweatherfetch._constants import GENERIC_FETCH_ERROR


class WeatherError(Exception):
    """Base exception for all pyweatherfetch errors."""


class WeatherConfigError(WeatherError):
    """Invalid or missing configuration."""


class WeatherRequestAbortedError(WeatherError):
    """The request was superseded by a newer one and aborted.

    Never surfaced to the state store; the engine discards it.
    """


class WeatherTransportError(WeatherError):
    """HTTP-level failure (network error, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str = GENERIC_FETCH_ERROR,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        detail: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(message)


class WeatherHttpError(WeatherTransportError):
    """Provider answered with a non-2xx status."""


class WeatherAuthenticationError(WeatherHttpError):
    """API key rejected (HTTP 401)."""


class WeatherLocationNotFoundError(WeatherHttpError):
    """Provider does not know the location (HTTP 404)."""


class WeatherRateLimitError(WeatherHttpError):
    """Rate limited by the provider (HTTP 429)."""


class WeatherServerError(WeatherHttpError):
    """Provider-side failure (HTTP 500)."""


class WeatherParseError(WeatherTransportError):
    """Response body was not valid JSON."""
