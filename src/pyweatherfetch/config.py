"""Client configuration for pyweatherfetch."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyweatherfetch._constants import BASE_URL, DEBOUNCE_DELAY, USER_AGENT
from pyweatherfetch.exceptions import WeatherConfigError


@dataclasses.dataclass(frozen=True)
class WeatherConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str
        Static provider API key, sent as ``appid``.
    base_url : str
        Provider base URL. Defaults to OpenWeatherMap.
    units : str
        Unit system requested from the provider (``"metric"``,
        ``"imperial"`` or ``"standard"``).
    debounce_delay : float
        Quiet period in seconds before a location change is fetched.
    request_timeout : float
        Total timeout in seconds for one provider request.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    api_key: str
    base_url: str = BASE_URL
    units: str = "metric"
    debounce_delay: float = DEBOUNCE_DELAY
    request_timeout: float = 10.0
    user_agent: str = USER_AGENT

    @classmethod
    def from_env(cls, **overrides: Any) -> WeatherConfig:
        """Create configuration from environment variables.

        Reads ``OPENWEATHER_API_KEY`` and the optional ``WEATHER_*``
        variables. Explicit keyword arguments override environment values.

        Raises
        ------
        WeatherConfigError
            If no API key is available or a numeric variable is malformed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "OPENWEATHER_API_KEY": "api_key",
            "WEATHER_BASE_URL": "base_url",
            "WEATHER_UNITS": "units",
            "WEATHER_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric settings, handled separately
        for env_key, field_name in (
            ("WEATHER_DEBOUNCE_DELAY", "debounce_delay"),
            ("WEATHER_REQUEST_TIMEOUT", "request_timeout"),
        ):
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise WeatherConfigError(f"{env_key} must be a number, got {val!r}") from exc

        config_kwargs.update(overrides)

        api_key = str(config_kwargs.get("api_key") or "").strip()
        if not api_key:
            raise WeatherConfigError("OPENWEATHER_API_KEY is not set")
        config_kwargs["api_key"] = api_key

        return cls(**config_kwargs)
