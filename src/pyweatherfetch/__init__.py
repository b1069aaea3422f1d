"""pyweatherfetch - Async current-weather fetching with caching, debouncing and cancellation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyweatherfetch")
except PackageNotFoundError:
    __version__ = "0+local"
from pyweatherfetch._cache import CacheEntry, WeatherCache, normalize_location
from pyweatherfetch._cancel import CancellationToken, RequestCanceller
from pyweatherfetch._debounce import Debouncer
from pyweatherfetch._transport import HttpTransport, Transport
from pyweatherfetch.client import WeatherClient
from pyweatherfetch.config import WeatherConfig
from pyweatherfetch.engine import FetchEngine, FetchPhase
from pyweatherfetch.exceptions import (
    WeatherAuthenticationError,
    WeatherConfigError,
    WeatherError,
    WeatherHttpError,
    WeatherLocationNotFoundError,
    WeatherParseError,
    WeatherRateLimitError,
    WeatherRequestAbortedError,
    WeatherServerError,
    WeatherTransportError,
)
from pyweatherfetch.models import WeatherSummary
from pyweatherfetch.state import FetchEvent, FetchEventType, FetchState, StateStore, reduce

__all__ = [
    "__version__",
    "CacheEntry",
    "CancellationToken",
    "Debouncer",
    "FetchEngine",
    "FetchEvent",
    "FetchEventType",
    "FetchPhase",
    "FetchState",
    "HttpTransport",
    "RequestCanceller",
    "StateStore",
    "Transport",
    "WeatherAuthenticationError",
    "WeatherCache",
    "WeatherClient",
    "WeatherConfig",
    "WeatherConfigError",
    "WeatherError",
    "WeatherHttpError",
    "WeatherLocationNotFoundError",
    "WeatherParseError",
    "WeatherRateLimitError",
    "WeatherRequestAbortedError",
    "WeatherServerError",
    "WeatherSummary",
    "WeatherTransportError",
    "normalize_location",
    "reduce",
]
